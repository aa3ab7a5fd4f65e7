r"""
Optscan option tables: immutable descriptions of the recognized options.

Overview
- ArgMode: whether a flag takes no value, a required value, or an optional value.
- ShortTable: code point → ArgMode, for getopt(3)-style parsing.
  • ShortTable.from_optstring("abλc:dßĦ::") reads the compact form.
  • ShortTable.from_mapping({"c": ArgMode.REQUIRED}) reads the structured form.
- LongOpt: one getopt_long(3)-style record (long name, short key, ArgMode).
- LongTable: ordered LongOpt records plus the short lookup derived from them.

Code points
- Short options are keyed by integer code points, never by bytes, so 'ß', 'λ'
  or 'Ħ' are single flags exactly like 'a'.
- Every constructor accepts a one-character string or an integer and stores the
  integer.
- A LongOpt short key outside 0..sys.maxunicode (NOSHORT, or any negative integer)
  means “no short form”. The scanner still emits it verbatim as the flag key.

Both table kinds answer the same two questions for the scanner:
- lookup(codepoint) -> ArgMode | None
- match(name) -> tuple[LongOpt, ...]  (every long name starting with `name`)

Duplicates
- The last definition of a short key wins, whatever the construction path.
- Long names are not checked for ambiguity here; an ambiguous prefix is a
  scan-time condition.

Quick example:
    >>> table = ShortTable.from_optstring("ab:c::")
    >>> table.lookup(ord("b"))
    <ArgMode.REQUIRED: 1>
    >>> table.optstring
    'ab:c::'
"""
import sys
from collections.abc import Iterable, Mapping
from enum import IntEnum

from .utils import *

NOSHORT = -1


class ArgMode(IntEnum):
    """
    whether a flag takes an argument.

    the integer values follow getopt_long(3): no_argument, required_argument,
    optional_argument. each mode also knows its suffix in the compact optstring.
    """
    NONE = 0
    REQUIRED = 1
    OPTIONAL = 2

    @property
    def suffix(self):
        """
        the optstring suffix for this mode: '', ':' or '::'.
        """
        return ("", ":", "::")[self]


def iscodepoint(key, /):
    """
    tell whether an integer key names a real Unicode scalar value.
    """
    return 0 <= key <= sys.maxunicode


def _sanitize_key(owner, key, /, *, sentinel=False):
    """
    Internal: normalize a short key to its integer code point.

    Parameters
    - owner: str, used in messages ("short-table", "long-opt").
    - key: one-character str or int.
    - sentinel: when True, integers outside the code point range are accepted
      verbatim (they mean “no short form”).

    Raises
    - TypeError: key is neither a str nor an int (bools are rejected too).
    - ValueError: str of the wrong length, or an out-of-range int when sentinels are not allowed.
    """
    if isinstance(key, str):
        if len(key) != 1:
            raise ValueError(f"{owner} short keys must be single characters, got {key!r}")
        return ord(key)
    if not isinstance(key, int) or isinstance(key, bool):
        raise TypeError(f"{owner} short keys must be characters or integer code points")
    if not sentinel and not iscodepoint(key):
        raise ValueError(f"{owner} short keys must be valid code points, got {key!r}")
    return key


def _sanitize_mode(owner, mode, /):
    """
    Internal: coerce an ArgMode or its integer value into an ArgMode.
    """
    if not isinstance(mode, int) or isinstance(mode, bool):
        raise TypeError(f"{owner} argument modes must be ArgMode members")
    try:
        return ArgMode(mode)
    except ValueError:
        raise ValueError(f"{owner} argument modes must be one of {', '.join(member.name for member in ArgMode)}") from None


def _display_key(key, /):
    return chr(key) if iscodepoint(key) else key


class ShortTable:
    """
    Code point → ArgMode mapping for getopt(3)-style parsing.

    Construction
    - ShortTable(pairs) takes a mapping or an iterable of (key, mode) pairs.
    - ShortTable.from_optstring(optstr) reads the compact form.
    - ShortTable.from_mapping(mapping) reads the structured form.

    The table is read-only once built; `modes` hands out a copy.
    """
    __slots__ = ("_modes",)

    modes = mirror("modes")

    def __new__(cls, pairs=(), /):
        if isinstance(pairs, Mapping):
            pairs = pairs.items()
        elif not isinstance(pairs, Iterable) or isinstance(pairs, str):
            raise TypeError("short-table argument must be a mapping or an iterable of pairs")

        self = super().__new__(cls)
        self._modes = {}
        for key, mode in pairs:
            # later definitions replace earlier ones, keeping their first position
            self._modes[_sanitize_key("short-table", key)] = _sanitize_mode("short-table", mode)
        return self

    @classmethod
    def from_optstring(cls, optstr, /):
        """
        Parse the compact getopt(3) form.

        A bare character takes no argument, a character followed by ':' requires
        one, and a character followed by '::' takes an optional one. A leading ':'
        (the POSIX silent-errors marker) is ignored since the scanner never prints.
        """
        if not isinstance(optstr, str):
            raise TypeError("from_optstring() argument must be a string")

        chars = optstr.removeprefix(":")
        pairs = []
        index = 0
        while index < len(chars):
            if chars.startswith("::", index + 1):
                mode = ArgMode.OPTIONAL
            elif chars.startswith(":", index + 1):
                mode = ArgMode.REQUIRED
            else:
                mode = ArgMode.NONE
            pairs.append((chars[index], mode))
            index += 1 + len(mode.suffix)
        return cls(pairs)

    @classmethod
    def from_mapping(cls, mapping, /):
        """
        Build a table from {key: mode}, keys being characters or code points.
        """
        if not isinstance(mapping, Mapping):
            raise TypeError("from_mapping() argument must be a mapping")
        return cls(mapping)

    @property
    def optstring(self):
        """
        The compact form of this table, in definition order.
        """
        return "".join(chr(key) + mode.suffix for key, mode in self._modes.items())

    def lookup(self, codepoint, /):
        return self._modes.get(codepoint)

    def match(self, name, /):
        # short tables register no long names
        return ()

    def __contains__(self, codepoint):
        return codepoint in self._modes

    def __iter__(self):
        return iter(self._modes)

    def __len__(self):
        return len(self._modes)

    def __eq__(self, other):
        if not isinstance(other, ShortTable):
            return NotImplemented
        return self._modes == other._modes

    def __hash__(self):
        return hash(frozenset(self._modes.items()))

    def __repr__(self):
        return f"{type(self).__name__}.from_optstring({self.optstring!r})"

    def __rich_repr__(self):
        yield self.optstring


class LongOpt:
    """
    One long option: `--long`, reported under the `short` key, taking `arg`.

    Parameters
    - long: non-empty str, matched by prefix at scan time.
    - short: one-character str or int. NOSHORT (or any integer outside the code
      point range) marks an option without a short form; the integer is still
      used as the emitted flag key.
    - arg: ArgMode, NONE by default.
    """
    __slots__ = ("_long", "_short", "_arg")
    __match_args__ = ("long", "short", "arg")

    long = mirror("long")
    short = mirror("short")
    arg = mirror("arg")

    def __new__(cls, long, /, short=NOSHORT, arg=ArgMode.NONE):
        if not isinstance(long, str):
            raise TypeError("long-opt names must be strings")
        elif not long:
            raise ValueError("long-opt names cannot be empty-strings")

        self = super().__new__(cls)
        self._long = long
        self._short = _sanitize_key("long-opt", short, sentinel=True)
        self._arg = _sanitize_mode("long-opt", arg)
        return self

    def __eq__(self, other):
        if not isinstance(other, LongOpt):
            return NotImplemented
        return (self._long, self._short, self._arg) == (other._long, other._short, other._arg)

    def __hash__(self):
        return hash((self._long, self._short, self._arg))

    def __repr__(self):
        return f"{type(self).__name__}({self._long!r}, {_display_key(self._short)!r}, ArgMode.{self._arg.name})"

    def __rich_repr__(self):
        yield self._long
        yield _display_key(self._short)
        yield self._arg


class LongTable:
    """
    Ordered LongOpt records for getopt_long(3)-style parsing.

    The short lookup is derived from the entries whose short key is a real code
    point, so bundled clusters like '-ab' keep working next to '--add --back'.

    Like getopt_long(3), short-only options can be added through `shorts` (an
    optstring, a mapping or a ShortTable); an entry's own short key replaces a
    `shorts` definition of the same code point.
    """
    __slots__ = ("_entries", "_shorts")

    entries = mirror("entries")
    shorts = mirror("shorts")

    def __new__(cls, entries=(), /, shorts=Unset):
        if not isinstance(entries, Iterable) or isinstance(entries, str):
            raise TypeError("long-table argument must be an iterable of long-opts")

        match shorts:
            case UnsetType():
                shorts = ShortTable()
            case str():
                shorts = ShortTable.from_optstring(shorts)
            case Mapping():
                shorts = ShortTable.from_mapping(shorts)
            case ShortTable():
                pass
            case _:
                raise TypeError("long-table 'shorts' must be an option string, a mapping or a short-table")

        self = super().__new__(cls)
        self._entries = tuple(entries)
        for entry in self._entries:
            if not isinstance(entry, LongOpt):
                raise TypeError("long-table entries must be long-opts")
        self._shorts = ShortTable([
            *shorts.modes.items(),
            *((entry.short, entry.arg) for entry in self._entries if iscodepoint(entry.short)),
        ])
        return self

    def lookup(self, codepoint, /):
        return self._shorts.lookup(codepoint)

    def match(self, name, /):
        """
        Every entry whose long name starts with `name`, in table order.
        """
        return tuple(entry for entry in self._entries if entry.long.startswith(name))

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __eq__(self, other):
        if not isinstance(other, LongTable):
            return NotImplemented
        return (self._entries, self._shorts) == (other._entries, other._shorts)

    def __hash__(self):
        return hash((self._entries, self._shorts))

    def __repr__(self):
        return f"{type(self).__name__}({list(self._entries)!r}, shorts={self._shorts.optstring!r})"

    def __rich_repr__(self):
        yield list(self._entries)
        yield "shorts", self._shorts.optstring


__all__ = (
    "ArgMode",
    "NOSHORT",
    "ShortTable",
    "LongOpt",
    "LongTable",
    "iscodepoint",
)
