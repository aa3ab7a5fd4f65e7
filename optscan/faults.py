"""
Optscan faults (the two scanning errors) and their rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for the two user-facing faults.
- OptionError: sealed base with exactly two final cases,
  • UnknownOptionError: an unregistered short code point, long name, or ambiguous long prefix.
  • MissingArgumentError: a required-argument option with nothing left to consume.
- render(): build a rich renderable for a fault (boundary helper).
- trigger(): raise a fault, or print it and exit when running as a shell tool.
- getdoc(): optional description lookup for a code from the host application.

Payload
- `option` is an int (the code point) for short-form faults and a str (the name
  as typed, without dashes) for long-form faults. Nothing else is carried, and
  equality/hashing only look at the class and the payload, so faults compare
  like values:

      >>> UnknownOptionError(ord("X")) == UnknownOptionError(88)
      True
      >>> UnknownOptionError("c") == UnknownOptionError(ord("c"))
      False

Integration
- The scanner only ever builds these objects; it never prints nor exits.
- CLI code decides how to surface them via trigger(fault, shell=..., **options).
- Hosts may tune rendering from __main__: __prog__, __styles__, __codes__, __docs__.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from pathlib import Path

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .tables import iscodepoint
from .utils import *

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes for the scanner (stable identifiers).

    the numbers follow the Seralix Fault Codes convention used across our tools:
    11xxx for errors, the switch domain being 1111x. hosts may relabel them via
    a __codes__ mapping in __main__ (see normalize()).
    """
    UNKNOWN_OPTION              = 11112
    MISSING_ARGUMENT            = 11117

    def normalize(self):
        """
        return a host-normalized string for this code.

        when __main__ provides no __codes__ mapping (or no entry for this code),
        the numeric value is returned as a string.
        """
        return str(getattr(sys.modules["__main__"], "__codes__", {}).get(self, self.value))


class OptionError(Exception):
    """
    base of the two scanning faults; not instantiable for other kinds.

    subclassing is restricted to this module so that `match` statements over
    UnknownOptionError/MissingArgumentError are exhaustive.
    """
    __match_args__ = ("option",)

    code = None
    title = None
    template = None

    def __init_subclass__(cls, **options):
        if cls.__module__ != __name__:
            raise TypeError(f"type {cls.__base__.__name__!r} is not an acceptable base type")
        super().__init_subclass__(**options)

    def __init__(self, option, /):
        if type(self) is OptionError:
            raise TypeError("OptionError cannot be instantiated directly")
        if isinstance(option, bool) or not isinstance(option, int | str):
            raise TypeError(f"{type(self).__name__}() argument must be a code point or a long option name")
        super().__init__(option)
        self.option = option

    @property
    def short(self):
        """
        True for short-form faults (code point payload).
        """
        return isinstance(self.option, int)

    @property
    def spelling(self):
        """
        the option as the user would have typed it: '-c' or '--change'.
        """
        if not self.short:
            return "--" + self.option
        if iscodepoint(self.option):
            return "-" + chr(self.option)
        return "-#%d" % self.option

    def hint(self):
        raise NotImplementedError

    def __str__(self):
        return self.template % self.spelling

    def __repr__(self):
        return f"{type(self).__name__}({self.option!r})"

    def __eq__(self, other):
        if not isinstance(other, OptionError):
            return NotImplemented
        return type(self) is type(other) and type(self.option) is type(other.option) and self.option == other.option

    def __hash__(self):
        return hash((type(self), type(self.option), self.option))


class UnknownOptionError(OptionError):
    """
    the user supplied an option nobody registered (or an ambiguous long prefix).
    """
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"
    template = "unknown option ‘%s’"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnknownOptionError' is not an acceptable base type")

    def hint(self):
        if self.short:
            return "check the spelling of %r or pass it after '--' to use it as an argument" % self.spelling
        return "spell out more of %r: it must prefix exactly one long option" % self.spelling


class MissingArgumentError(OptionError):
    """
    a required-argument option was the last thing on the command line.
    """
    code = FaultCode.MISSING_ARGUMENT
    title = "missing argument"
    template = "expected argument for option ‘%s’"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'MissingArgumentError' is not an acceptable base type")

    def hint(self):
        if self.short:
            return "provide a value (e.g., %s VALUE or %sVALUE)" % (self.spelling, self.spelling)
        return "provide a value (e.g., %s VALUE or %s=VALUE)" % (self.spelling, self.spelling)


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode members and values are short documentation strings. when
    not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(sys.modules["__main__"], "__docs__", {}).get(code)


def render(fault, /, *, prog=Unset, colorful=True, fancy=False, width=Unset):
    """
    build a rich renderable for a fault.

    layout
    - header: "[ prog — code | Title ]"
    - body: the terse message, then an arrow hint, then the host docs (when any).
    - fancy=True wraps the body in a Panel titled by the header.

    styles come from the defaults below, overridden by __main__.__styles__.
    """
    if not isinstance(fault, OptionError):
        raise TypeError("render() argument must be an option-error")

    main = sys.modules["__main__"]

    styles = defaultdict(str, {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "error-title": "bold #FF4DA6",  # friendly pinky title

        # body
        "error-message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
        "docs": "dim",
    } | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        return Text(str(fragment), styles[style] if colorful else "")

    prog = coalesce(prog, getattr(main, "__prog__", Path(sys.argv[0]).name or "optscan"))

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(fault.code.normalize(), "code"),
        " | ",
        text(fault.title.title(), "error-title"),
        " ]"
    )
    lines = [
        text(fault, "error-message"),
        Text.assemble(text(" → ", "hint-arrow"), text(fault.hint(), "hint")),
    ]
    if docs := getdoc(fault.code):
        lines.append(text(docs, "docs"))

    if fancy:
        return Panel(Group(*lines), title=header, title_align="left", width=coalesce(width))

    return Group(header, *lines)


def trigger(fault, /, *, shell=False, deferred=False, output=Unset, **options):
    """
    surface a fault.

    contract
    - shell=False: the fault is raised as-is (library use).
    - shell=True: the fault is rendered (see render(); remaining options are
      forwarded to it) on stderr, then the process exits with status 1 unless
      deferred=True, in which case trigger() returns and the caller carries on.
    """
    if not isinstance(fault, OptionError):
        raise TypeError("trigger() argument must be an option-error")
    if not shell:
        raise fault from None
    coalesce(output, console).print(render(fault, **options))
    if deferred:
        return
    sys.exit(1)


__all__ = (
    "FaultCode",
    "OptionError",
    "UnknownOptionError",
    "MissingArgumentError",
    "getdoc",
    "render",
    "trigger",
)
