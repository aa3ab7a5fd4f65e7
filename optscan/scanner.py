"""
Optscan scanner: one left-to-right pass over an argument vector.

What this module provides
- Flag: one parsed option, keyed by its short code point even when the long form was typed.
- Parsed: (flags, remaining, index), the successful outcome of a scan.
- scan(args, table): the engine; returns a Parsed or an OptionError value, never raises for user input.
- get(args, optstr): getopt(3)-style convenience wrapper; raises the OptionError.
- get_long(args, longopts): getopt_long(3)-style convenience wrapper; raises the OptionError.

Token classification (args[0] is the program name and is never inspected)
- ''            → stop; this token and the rest are remaining arguments.
- '-'           → stop (same as any token not starting with '-').
- '--'          → stop; only the tokens after it are remaining arguments.
- '--name[=v]'  → long option, resolved by unique prefix.
- '-xyz'        → short cluster, decoded flag by flag.

Argument attachment
- short: a value-taking flag that is not last in its cluster takes the rest of
  the token verbatim; if it is last, REQUIRED consumes the next element
  (whatever it looks like) and OPTIONAL takes nothing.
- long: an '=value' tail feeds REQUIRED/OPTIONAL options (NONE ignores it);
  without it REQUIRED consumes the next element and OPTIONAL takes nothing.

There is no permutation: scanning ends at the first positional token.

Quick start
    >>> from optscan import get, get_long, LongOpt, ArgMode
    >>> get(["foo", "-ab", "-c", "bar", "baz"], "abc:")
    Parsed(flags=(Flag(key='a', value=''), Flag(key='b', value=''), Flag(key='c', value='bar')), remaining=('baz',), index=4)
    >>> get_long(["foo", "--ch=bar"], [LongOpt("change", "c", ArgMode.REQUIRED)]).flags
    (Flag(key='c', value='bar'),)
"""
from collections import namedtuple
from collections.abc import Iterable, Mapping, Sequence

from .faults import OptionError, UnknownOptionError, MissingArgumentError
from .tables import ArgMode, ShortTable, LongTable, iscodepoint
from .utils import *


class Flag(namedtuple("Flag", ("key", "value"), defaults=("",))):
    """
    A parsed command-line flag.

    - key: int, the code point of the short form (or the caller's sentinel for
      long options registered without one).
    - value: str, the flag's argument; "" when none was given.
    """
    __slots__ = ()

    @property
    def char(self):
        """
        The key as a one-character string, or None for sentinel keys.
        """
        return chr(self.key) if iscodepoint(self.key) else None

    def __repr__(self):
        key = self.key if self.char is None else self.char
        return f"Flag(key={key!r}, value={self.value!r})"


class Parsed(namedtuple("Parsed", ("flags", "remaining", "index"))):
    """
    The outcome of a successful scan.

    - flags: tuple[Flag, ...] in the order they were found (repeats are kept).
    - remaining: tuple[str, ...], the unconsumed suffix of the input vector.
    - index: int, where that suffix starts in the input (getopt's optind).
    """
    __slots__ = ()


class _Scan:
    """
    Internal: the state of one scan (result builder plus shared cursor).

    `index` is the single cursor into args used both by the outer loop and by
    value consumption, so a consumed value is never re-read as an option.
    Faults are returned, not raised; the flags gathered so far die with the
    instance.
    """
    __slots__ = ("args", "table", "flags", "index")

    def __init__(self, args, table):
        self.args = args
        self.table = table
        self.flags = []
        self.index = 1

    def take(self):
        """
        Consume the next element of args as a value (Unset when exhausted).
        """
        if self.index + 1 >= len(self.args):
            return Unset
        self.index += 1
        return self.args[self.index]

    def emit(self, key, value=""):
        self.flags.append(Flag(key, value))

    def decode(self, cluster):
        """
        Decode the code points of a '-xyz' token after its dash.
        """
        for position, char in enumerate(cluster):
            key = ord(char)
            match self.table.lookup(key):
                case None:
                    return UnknownOptionError(key)
                case ArgMode.NONE:
                    self.emit(key)
                case _ if position < len(cluster) - 1:
                    # the rest of the token is the value, never more flags
                    self.emit(key, cluster[position + 1:])
                    return None
                case ArgMode.REQUIRED:
                    if (value := self.take()) is Unset:
                        return MissingArgumentError(key)
                    self.emit(key, value)
                case ArgMode.OPTIONAL:
                    self.emit(key)
        return None

    def resolve(self, body):
        """
        Resolve a '--name[=value]' token after its dashes.
        """
        name, equals, inline = body.partition("=")
        inline = inline if equals else Unset

        match self.table.match(name):
            case [entry]:
                pass
            case _:
                # nothing or more than one long name starts with `name`
                return UnknownOptionError(name)

        match entry.arg:
            case ArgMode.NONE:
                self.emit(entry.short)
            case _ if inline is not Unset:
                self.emit(entry.short, inline)
            case ArgMode.REQUIRED:
                if (value := self.take()) is Unset:
                    return MissingArgumentError(name)
                self.emit(entry.short, value)
            case ArgMode.OPTIONAL:
                self.emit(entry.short)
        return None

    def run(self):
        while self.index < len(self.args):
            token = self.args[self.index]

            if token == "-" or not token.startswith("-"):
                break
            elif token == "--":
                self.index += 1
                break
            elif token.startswith("--"):
                fault = self.resolve(token[2:])
            else:
                fault = self.decode(token[1:])

            if fault is not None:
                return fault
            self.index += 1

        index = min(self.index, len(self.args))
        return Parsed(tuple(self.flags), tuple(self.args[index:]), index)


def _sanitize_args(args, /, caller):
    if isinstance(args, str) or not isinstance(args, Sequence):
        raise TypeError(f"{caller}() first argument must be a sequence of strings")
    for arg in args:
        if not isinstance(arg, str):
            raise TypeError(f"{caller}() first argument must only contain strings")
    return args


def scan(args, table, /):
    """
    Scan args against a ShortTable or a LongTable.

    Returns
    - Parsed on success.
    - UnknownOptionError or MissingArgumentError on failure; no partial result
      is kept.

    Raises
    - TypeError: args is not a sequence of strings, or table is not a table.
    """
    if not isinstance(table, ShortTable | LongTable):
        raise TypeError("scan() second argument must be a short-table or a long-table")
    return _Scan(_sanitize_args(args, "scan"), table).run()


def get(args, optstr, /):
    """
    Parse args getopt(3)-style.

    `optstr` is a compact option string ("abλc:dßĦ::"), a {key: ArgMode}
    mapping, or a ShortTable. Unlike getopt(3), nothing is ever printed: a
    failure raises UnknownOptionError or MissingArgumentError.
    """
    if isinstance(optstr, str):
        table = ShortTable.from_optstring(optstr)
    elif isinstance(optstr, Mapping):
        table = ShortTable.from_mapping(optstr)
    elif isinstance(optstr, ShortTable):
        table = optstr
    else:
        raise TypeError("get() second argument must be an option string, a mapping or a short-table")

    match outcome := _Scan(_sanitize_args(args, "get"), table).run():
        case OptionError():
            raise outcome
    return outcome


def get_long(args, longopts, /):
    """
    Parse args getopt_long(3)-style.

    `longopts` is a LongTable or any iterable of LongOpt. Bundled short
    clusters are decoded through the entries' short keys; '--name' accepts any
    prefix that selects exactly one entry. A failure raises UnknownOptionError
    (also for ambiguous prefixes) or MissingArgumentError.
    """
    if isinstance(longopts, LongTable):
        table = longopts
    elif isinstance(longopts, Iterable) and not isinstance(longopts, str):
        table = LongTable(longopts)
    else:
        raise TypeError("get_long() second argument must be a long-table or an iterable of long-opts")

    match outcome := _Scan(_sanitize_args(args, "get_long"), table).run():
        case OptionError():
            raise outcome
    return outcome


__all__ = (
    "Flag",
    "Parsed",
    "scan",
    "get",
    "get_long",
)
