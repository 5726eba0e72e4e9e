"""Sparse 36-bit word memory made of sorted, contiguous areas."""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Iterable, Optional


class OverlapError(ValueError):
    """Raised when data is added at an address that is already occupied."""


@dataclass
class Area:
    """A run of consecutive words starting at ``start``."""

    start: int
    data: list[int] = field(default_factory=list)
    pure: bool = False

    @property
    def end(self) -> int:
        return self.start + len(self.data)

    def __contains__(self, address: int) -> bool:
        return self.start <= address < self.end

    def __getitem__(self, address: int) -> int:
        return self.data[address - self.start]

    def __setitem__(self, address: int, word: int) -> None:
        self.data[address - self.start] = word


class Memory:
    """Core image: a sorted list of non-overlapping areas plus a read cursor."""

    def __init__(self) -> None:
        self.areas: list[Area] = []
        self.current_address: Optional[int] = None
        self._current: Optional[int] = None

    def _find(self, address: int) -> Optional[int]:
        i = bisect.bisect_right(self.areas, address, key=lambda a: a.start) - 1
        if i >= 0 and address in self.areas[i]:
            return i
        return None

    def add(self, address: int, data: Iterable[int]) -> None:
        """Add words at ``address``, merging with an adjoining impure area."""
        if self._find(address) is not None:
            raise OverlapError(f"address {address:o} is already in memory")
        words = list(data)
        i = bisect.bisect_left(self.areas, address, key=lambda a: a.start)
        if i > 0:
            previous = self.areas[i - 1]
            if previous.end == address and not previous.pure:
                previous.data.extend(words)
                return
        self.areas.insert(i, Area(address, words))

    def remove(self, address: int, length: int) -> None:
        """Remove every word in ``[address, address + length)``."""
        end = address + length
        kept: list[Area] = []
        for area in self.areas:
            if area.start >= address and area.end <= end:
                continue
            if area.end <= address or area.start >= end:
                kept.append(area)
                continue
            if area.start < address:
                kept.append(Area(area.start, area.data[: address - area.start], area.pure))
            if area.end > end:
                kept.append(Area(end, area.data[end - area.start :], area.pure))
        self.areas = kept
        self._current = None
        self.current_address = None

    def purify(self, address: int, length: int) -> None:
        """Mark the words in the range as pure, splitting areas as needed.

        Stops at the first address in the range that holds no data.
        """
        end = address + length
        i = address
        while i < end:
            index = self._find(i)
            if index is None:
                return
            area = self.areas[index]
            if area.pure:
                i = area.end
                continue
            middle_end = min(end, area.end)
            pieces = []
            if area.start < i:
                pieces.append(Area(area.start, area.data[: i - area.start]))
            pieces.append(Area(i, area.data[i - area.start : middle_end - area.start], True))
            if area.end > end:
                pieces.append(Area(end, area.data[end - area.start :]))
            self.areas[index : index + 1] = pieces
            i = middle_end

    def seek(self, address: Optional[int]) -> None:
        """Position the cursor at ``address``; ``None`` or -1 rewinds it."""
        if address is None or address == -1:
            self.current_address = None
            self._current = None
            return
        index = self._find(address)
        if index is None:
            raise LookupError(f"address {address:o} is not in memory")
        self.current_address = address
        self._current = index

    def next_word(self) -> Optional[int]:
        """Advance the cursor and return the word there, or None at the end."""
        if self.current_address is None or self._current is None:
            self._current = 0
            if not self.areas:
                return None
            self.current_address = self.areas[0].start
        else:
            if self._current >= len(self.areas):
                return None
            self.current_address += 1
        while self.current_address >= self.areas[self._current].end:
            self._current += 1
            if self._current >= len(self.areas):
                return None
            self.current_address = self.areas[self._current].start
        return self.areas[self._current][self.current_address]

    def get(self, address: int) -> Optional[int]:
        """Return the word at ``address``, or None if there is none."""
        index = self._find(address)
        if index is None:
            return None
        return self.areas[index][address]

    def set(self, address: int, word: int) -> None:
        """Store ``word`` at ``address``, creating memory if necessary."""
        index = self._find(address)
        if index is None:
            self.add(address, [word])
        else:
            self.areas[index][address] = word

    def is_pure(self, address: int) -> bool:
        """Whether ``address`` holds a word in a pure area."""
        index = self._find(address)
        return index is not None and self.areas[index].pure