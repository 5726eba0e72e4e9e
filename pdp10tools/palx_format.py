"""PALX absolute loader format: PDP-11 blocks of 8-bit bytes."""

from __future__ import annotations

import contextlib
import sys
from typing import Iterable, Optional

from .memory import Memory, OverlapError


class PalxError(ValueError):
    """Raised for a malformed PALX file."""


class _ByteSource:
    def __init__(self, words: Iterable[int]) -> None:
        self._words = iter(words)
        self.checksum = 0

    def byte(self) -> int:
        word = next(self._words, None)
        if word is None:
            raise PalxError("Unexpected end of PALX file.")
        word &= 0o377
        self.checksum += word
        return word

    def half(self) -> int:
        low = self.byte()
        return low | (self.byte() << 8)


class _ByteSink:
    def __init__(self) -> None:
        self.words: list[int] = []
        self.checksum = 0

    def byte(self, value: int) -> None:
        value &= 0o377
        self.words.append(value)
        self.checksum += value

    def half(self, value: int) -> None:
        self.byte(value & 0o377)
        self.byte(value >> 8)


def read_palx(stream: Iterable[int], memory: Memory) -> int:
    """Load PALX blocks into ``memory``; return the start address.

    The start address is 1 (no start) unless the final block names an
    even address.
    """
    source = _ByteSource(stream)
    start = 1
    while True:
        source.checksum = 0
        data = source.byte()
        while data == 0:
            data = source.byte()
        data |= source.byte() << 8
        if data != 1:
            raise PalxError("Error looking for start of PALX block.")

        length = source.half() - 6
        address = source.half()
        if length == 0:
            if address & 1 == 0:
                start = address
            return start
        if length < 0:
            raise PalxError(f"Bad PALX block length {length + 6}.")

        core = [source.byte() for _ in range(length)]
        with contextlib.suppress(OverlapError):
            memory.add(address, core)

        data = source.byte()
        if source.checksum & 0xFF:
            print(f"Bad checksum {data:02X}", file=sys.stderr)


def write_palx(memory: Memory, start_instruction: Optional[int] = None) -> list[int]:
    """Bytes (as words) of a PALX file holding every area of ``memory``."""
    sink = _ByteSink()
    for area in memory.areas:
        sink.checksum = 0
        sink.half(0x0001)
        sink.half(len(area.data) + 6)
        sink.half(area.start)
        for word in area.data:
            sink.byte(word)
        sink.byte(-sink.checksum)

    sink.half(0x0001)
    sink.half(0x0006)
    if start_instruction:
        sink.half(start_instruction & 0o177777)
    else:
        sink.half(0x0001)
    return sink.words