"""Symbol table with lookup by name and by value, guided by hints."""

from __future__ import annotations

import bisect
import enum
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence


class SymbolMode(enum.Enum):
    NONE = "none"
    DDT = "ddt"
    ALL = "all"


def parse_symbols_mode(string: str) -> SymbolMode:
    """Parse a symbol mode name; raise ValueError for unknown names."""
    try:
        return SymbolMode(string)
    except ValueError:
        raise ValueError(
            f"invalid symbol mode {string!r}; valid modes are: none, ddt, all"
        ) from None


class Hint(enum.IntEnum):
    """What kind of symbol is wanted for a value."""

    OPCODE = 0
    DEVICE = 1
    ACCUMULATOR = 2
    CHANNEL = 3
    NUMBER = 4
    XCTR = 5
    ADDRESS = 6
    OFFSET = 7
    IMMEDIATE = 8
    FLOAT = 9


class SymbolFlag(enum.IntFlag):
    GLOBAL = 1
    HALFKILLED = 2
    KILLED = 4


@dataclass(frozen=True)
class Symbol:
    name: str
    value: int
    sequence: int
    flags: SymbolFlag = SymbolFlag(0)

    @property
    def concealment(self) -> int:
        if self.flags & SymbolFlag.KILLED:
            return 2
        if self.flags & SymbolFlag.HALFKILLED:
            return 1
        return 0


def _first(run: Sequence[Symbol], test: Callable[[Symbol], bool]) -> Optional[Symbol]:
    return next((s for s in run if test(s)), None)


def _hint_accumulator(run: Sequence[Symbol], value: int) -> Symbol:
    return (
        _first(run, lambda s: len(s.name) == 1)
        or _first(run, lambda s: len(s.name) == 2)
        or run[0]
    )


def _hint_address(run: Sequence[Symbol], value: int) -> Symbol:
    if value < 0o20:
        return _hint_accumulator(run, value)
    return run[0]


def _hint_offset(run: Sequence[Symbol], value: int) -> Symbol:
    return _first(run, lambda s: len(s.name) > 1) or run[0]


def _hint_channel(run: Sequence[Symbol], value: int) -> Symbol:
    return (
        _first(run, lambda s: "ch" in s.name)
        or _first(run, lambda s: s.name.endswith("c"))
        or run[0]
    )


def _hint_xctr(run: Sequence[Symbol], value: int) -> Symbol:
    return _first(run, lambda s: s.name.startswith("x")) or run[0]


_HINTS = {
    Hint.ACCUMULATOR: _hint_accumulator,
    Hint.CHANNEL: _hint_channel,
    Hint.ADDRESS: _hint_address,
    Hint.OFFSET: _hint_offset,
    Hint.IMMEDIATE: _hint_offset,
    Hint.XCTR: _hint_xctr,
}


class SymbolTable:
    """Symbols in declaration order, with sorted views for lookups."""

    MAX_SYMBOLS = 16384

    def __init__(self, mode: SymbolMode = SymbolMode.NONE) -> None:
        self.mode = mode
        self._symbols: list[Symbol] = []
        self._name_order: Optional[list[Symbol]] = None
        self._value_order: Optional[list[Symbol]] = None

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols)

    def add(self, name: str, value: int, flags: SymbolFlag = SymbolFlag(0)) -> Symbol:
        """Add a symbol; trailing spaces are stripped from the name."""
        if len(self._symbols) >= self.MAX_SYMBOLS:
            raise OverflowError("Too many symbols")
        symbol = Symbol(name.rstrip(" "), value, len(self._symbols) + 1, SymbolFlag(flags))
        self._symbols.append(symbol)
        self._name_order = None
        self._value_order = None
        return symbol

    def _by_names(self) -> list[Symbol]:
        if self._name_order is None:
            self._name_order = sorted(
                self._symbols, key=lambda s: (s.name, s.concealment, s.sequence)
            )
        return self._name_order

    def _by_values(self) -> list[Symbol]:
        if self._value_order is None:
            self._value_order = sorted(
                self._symbols, key=lambda s: (s.value, s.concealment, s.sequence)
            )
        return self._value_order

    def by_name(self, name: str) -> Optional[Symbol]:
        """The most visible, earliest symbol with this name."""
        ordered = self._by_names()
        i = bisect.bisect_left(ordered, name, key=lambda s: s.name)
        if i < len(ordered) and ordered[i].name == name:
            return ordered[i]
        return None

    def by_value(self, value: int, hint: Hint = Hint.ADDRESS) -> Optional[Symbol]:
        """The symbol best suited to print ``value`` in the hinted role."""
        if self.mode is SymbolMode.NONE or hint == Hint.NUMBER:
            return None
        ordered = self._by_values()
        lo = bisect.bisect_left(ordered, value, key=lambda s: s.value)
        hi = bisect.bisect_right(ordered, value, key=lambda s: s.value)
        if lo == hi:
            return None
        run = ordered[lo:hi]
        chooser = _HINTS.get(hint)
        chosen = chooser(run, value) if chooser else run[0]
        if self.mode is SymbolMode.DDT and chosen.flags & (
            SymbolFlag.KILLED | SymbolFlag.HALFKILLED
        ):
            return None
        return chosen

    def value_of(self, name: str) -> Optional[int]:
        """The value of the named symbol, or None."""
        symbol = self.by_name(name)
        return None if symbol is None else symbol.value