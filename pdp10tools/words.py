"""Word streams and the raw core image format."""

from __future__ import annotations

import contextlib
import sys
from typing import Iterable, Iterator, Optional, TextIO

from .memory import Memory, OverlapError


class WordStream:
    """A source of 36-bit words that reports the end as None."""

    def __init__(self, words: Iterable[int]) -> None:
        self._words = iter(words)

    def get(self) -> Optional[int]:
        """Return the next word, or None when there are no more."""
        return next(self._words, None)

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        return next(self._words)


def read_raw_at(stream: Iterable[int], memory: Memory, address: int) -> None:
    """Load every word from ``stream`` into consecutive addresses."""
    for word in stream:
        with contextlib.suppress(OverlapError):
            memory.add(address, [word])
        address += 1


def read_raw(stream: Iterable[int], memory: Memory, out: Optional[TextIO] = None) -> None:
    """Load a raw core image starting at address 0."""
    out = sys.stdout if out is None else out
    out.write("Raw format\n")
    read_raw_at(stream, memory, 0)


def write_raw_at(memory: Memory, address: int) -> list[int]:
    """Words from ``address`` to the end of memory, gaps filled with zero."""
    if not memory.areas:
        return []
    end = memory.areas[-1].end
    words = []
    for a in range(address, end):
        word = memory.get(a)
        words.append(0 if word is None else word)
    return words


def write_raw(memory: Memory) -> list[int]:
    """The whole core image from address 0 as a list of words."""
    return write_raw_at(memory, 0)