"""Convert PALX output, read as words, to PDP-11 absolute loader or image files."""

from __future__ import annotations

import enum
import struct
import sys
from typing import BinaryIO, Iterable, Iterator, Optional, TextIO

IMAGE_SIZE = 65536


class OutputMode(enum.Enum):
    ABSOLUTE = "absolute"
    IMAGE = "image"


class PalxConvertError(ValueError):
    """Raised for input that cannot be converted."""


class _Done(Exception):
    pass


def _word(stream: Iterator[int]) -> int:
    word = next(stream, None)
    return -1 if word is None else word


def _sixbit_to_ascii(word: int) -> str:
    return "".join(
        chr(((word >> shift) & 0o77) + 32) for shift in (30, 24, 18, 12, 6, 0)
    ).rstrip(" ")


def read_symbol_table(
    stream: Iterable[int], out: Optional[TextIO] = None
) -> list[tuple[str, int, str]]:
    """List the symbol table that follows the last block.

    Each symbol is written to ``out`` and returned as
    ``(name, value, description)``.
    """
    out = sys.stderr if out is None else out
    words = iter(stream)

    _word(words)  # checksum of the previous block
    if _word(words) != 2:
        raise PalxConvertError("Bad symbol table.")

    entries: list[tuple[str, int, str]] = []
    while True:
        word = _word(words)
        if word in (-1, 0):
            return entries
        name = _sixbit_to_ascii(word)
        word = _word(words)
        value = word & 0o777777
        flags = word >> 18
        description = "half killed " if flags & 0o20000 else ""
        if flags & 0o1000:
            description += "label"
        elif flags & 0o4000:
            description += "register"
        else:
            description += "symbol"
        out.write(f"{value:06o} {name:>6} ({description})\n")
        entries.append((name, value, description))


def convert(
    words: Iterable[int],
    out: BinaryIO,
    mode: OutputMode,
    symtab: bool = False,
    log: Optional[TextIO] = None,
) -> None:
    """Convert PALX blocks to ``out``, stopping at the end block or end of input.

    In absolute mode every block is copied as bytes.  In image mode the
    loaded bytes from the lowest to the highest address are written when
    the end block is reached.  With ``symtab`` the symbol table after the
    end block is listed on ``log``.
    """
    log = sys.stderr if log is None else log
    stream = iter(words)
    image = bytearray(IMAGE_SIZE)
    low, high = IMAGE_SIZE, -1

    def pdp11_in() -> int:
        first = next(stream, None)
        second = next(stream, None)
        if first is None or second is None:
            raise _Done
        return (first & 0o377) | ((second & 0o377) << 8)

    def finish() -> None:
        if symtab:
            read_symbol_table(stream, log)
        raise _Done

    try:
        while True:
            first = pdp11_in()
            while first & 0o377 != 1:
                first = pdp11_in()
            count = pdp11_in()
            address = pdp11_in()

            if count == 6 and address & 1 == 0:
                log.write(f"Program start: {address:06o}\n")

            if mode is OutputMode.ABSOLUTE:
                out.write(struct.pack("<HHH", first, count, address))
                if count == 6:
                    finish()
                out.write(bytes(_word(stream) & 0o377 for _ in range(6, count)))
                out.write(bytes([_word(stream) & 0o377]))
                continue

            length = count - 6
            if length == 0:
                log.write(f"Image start: {low:06o}\n")
                out.write(bytes(image[low:high]))
                finish()
            if address + length > IMAGE_SIZE:
                raise PalxConvertError(
                    f"Block at {address:06o} does not fit in 64K bytes."
                )
            low = min(low, address)
            high = max(high, address + length)
            for i in range(length):
                image[address + i] = _word(stream) & 0o377
            _word(stream)  # checksum
    except _Done:
        pass