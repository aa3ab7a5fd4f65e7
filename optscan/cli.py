"""
optscan command-line front-end (outside the scanning core).

Usage
    optscan [-o OPTSTRING] [-l NAME[=SHORT][:|::]]... [-j] [-p] [-f] [-n PROG] [--] ARGV0 [ARG...]

Scans ARGV0 ARG... the way a program declaring those options would, and
prints what it found: a table of flags and the remaining arguments, or JSON
with -j. It is both a debugging aid for option tables and a worked example
of the library, since its own command line is scanned against a LongTable.

Exit status
- 0: the vector scanned cleanly (or -h/-V was given).
- 1: an option fault, either in optscan's own options or in the scanned vector.
- 2: a malformed -l specification.
"""
import json
import sys
from pathlib import Path

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from . import __version__
from .faults import OptionError, trigger
from .scanner import scan
from .tables import ArgMode, NOSHORT, LongOpt, LongTable
from .utils import *

OPTIONS = LongTable((
    LongOpt("options", "o", ArgMode.REQUIRED),
    LongOpt("long", "l", ArgMode.REQUIRED),
    LongOpt("json", "j"),
    LongOpt("plain", "p"),
    LongOpt("fancy", "f"),
    LongOpt("name", "n", ArgMode.REQUIRED),
    LongOpt("help", "h"),
    LongOpt("version", "V"),
))

USAGE = """\
usage: %(prog)s [-o OPTSTRING] [-l NAME[=SHORT][:|::]]... [-j] [-p] [-f] [-n PROG] [--] ARGV0 [ARG...]

scan ARGV0 ARG... against an option table and show the flags found.

options:
  -o, --options OPTSTRING  short options, getopt(3) style (e.g. 'abc:d::')
  -l, --long SPEC          add a long option, e.g. 'change=c:' or 'verbose'
                           (':' requires an argument, '::' makes it optional)
  -j, --json               print the result as JSON
  -p, --plain              disable colors
  -f, --fancy              render faults inside a panel
  -n, --name PROG          program name used when reporting faults
  -h, --help               show this message and exit
  -V, --version            show the version and exit
"""


def parse_longspec(spec, /, *, short=NOSHORT):
    """
    read 'NAME[=SHORT][:|::]' into a LongOpt.

    - one trailing ':' makes the argument required, two make it optional.
    - `short` is the key used when the spec names no short form.

    Raises
    - ValueError: too many colons, a short form that is not one character, or an empty name.
    """
    body = spec.rstrip(":")
    if (colons := len(spec) - len(body)) > 2:
        raise ValueError(f"too many ':' in long option spec {spec!r}")

    name, equals, key = body.partition("=")
    if equals and len(key) != 1:
        raise ValueError(f"short form of long option spec {spec!r} must be a single character")
    if not name:
        raise ValueError(f"long option spec {spec!r} has no name")
    return LongOpt(name, key if equals else short, ArgMode(colons))


def _payload(parsed, /):
    return {
        "flags": [
            {"key": flag.key if flag.char is None else flag.char, "value": flag.value}
            for flag in parsed.flags
        ],
        "remaining": list(parsed.remaining),
        "index": parsed.index,
    }


def _tabulate(parsed, /, *, colorful=True):
    table = Table("#", "key", "value", header_style="bold" if colorful else "")
    for number, flag in enumerate(parsed.flags, 1):
        key = "-" + flag.char if flag.char is not None else "#%d" % flag.key
        table.add_row(str(number), Text(key, "bold #00E5FF" if colorful else ""), Text(flag.value))

    remaining = Text.assemble(
        ("remaining: ", "dim" if colorful else ""),
        " ".join(map(repr, parsed.remaining)) or "(none)",
    )
    return Group(table, remaining)


def run(argv, /, *, stdout=Unset, stderr=Unset):
    """
    run the front-end on argv (argv[0] being this program) and return the exit status.
    """
    argv = list(argv)
    stdout = coalesce(stdout, Console())
    stderr = coalesce(stderr, Console(stderr=True))
    prog = Path(argv[0]).name if argv else "optscan"

    if isinstance(outcome := scan(argv, OPTIONS), OptionError):
        trigger(outcome, shell=True, deferred=True, output=stderr, prog=prog)
        return 1

    optstr = ""
    specs = []
    dump = False
    colorful = True
    fancy = False
    name = Unset

    for flag in outcome.flags:
        match flag.char:
            case "o":
                optstr = flag.value
            case "l":
                specs.append(flag.value)
            case "j":
                dump = True
            case "p":
                colorful = False
            case "f":
                fancy = True
            case "n":
                name = flag.value
            case "h":
                stdout.out(USAGE % {"prog": prog}, highlight=False)
                return 0
            case "V":
                stdout.out(f"{prog} {__version__}", highlight=False)
                return 0

    # short-less long options get distinct negative keys: -1, -2, ...
    try:
        table = LongTable(
            [parse_longspec(spec, short=NOSHORT - number) for number, spec in enumerate(specs)],
            shorts=optstr,
        )
    except ValueError as error:
        stderr.print(Text.assemble(
            "[ ",
            (prog, "bold" if colorful else ""),
            " | ",
            ("Bad Long Option", "bold #FF4DA6" if colorful else ""),
            " ]\n",
            str(error),
        ))
        return 2

    vector = list(outcome.remaining)
    if isinstance(result := scan(vector, table), OptionError):
        program = Path(vector[0]).name if vector else prog
        trigger(result, shell=True, deferred=True, output=stderr, prog=coalesce(name, program), colorful=colorful, fancy=fancy)
        return 1

    if dump:
        stdout.out(json.dumps(_payload(result), ensure_ascii=False), highlight=False)
    else:
        stdout.print(_tabulate(result, colorful=colorful))
    return 0


def main():
    sys.exit(run(sys.argv))


__all__ = (
    "run",
    "main",
    "parse_longspec",
)
