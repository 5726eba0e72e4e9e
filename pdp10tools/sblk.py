"""SBLK format: checksummed core blocks behind a JRST 1, then symbols."""

from __future__ import annotations

import contextlib
import sys
from typing import Iterable, Optional, TextIO

from .memory import Memory, OverlapError
from .symbols import Symbol, SymbolFlag

WORDMASK = 0o777777777777
SIGNBIT = 0o400000000000
JRST_1 = 0o254000000001

SYHKL = 0o400000000000
SYKIL = 0o200000000000
SYLCL = 0o100000000000
SYGBL = 0o040000000000

BLOCK_SIZE = 512

_SQUOZE = " 0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ.$%"


class SblkError(ValueError):
    """Raised for a malformed SBLK file."""


def ascii_to_squoze(name: str) -> int:
    """Encode up to six characters of ``name`` in radix 40."""
    word = 0
    for c in name.upper()[:6]:
        code = _SQUOZE.find(c)
        if code < 0:
            raise ValueError(f"character {c!r} cannot be encoded in squoze")
        word = word * 40 + code
    return word


def _checksum_step(cksum: int, word: int) -> int:
    return (((cksum << 1) | (cksum >> 35)) + word) & WORDMASK


def _next(words, what: str) -> int:
    word = next(words, None)
    if word is None:
        raise SblkError(f"Unexpected end of SBLK file in {what}")
    return word


def read_sblk(stream: Iterable[int], memory: Memory, out: Optional[TextIO] = None) -> int:
    """Load SBLK core blocks into ``memory``; return the start instruction.

    Words after the start instruction (the symbol table) are left unread.
    """
    out = sys.stdout if out is None else out
    out.write("SBLK format\n")
    words = iter(stream)

    for _ in range(101):
        if next(words, None) == JRST_1:
            break
    else:
        raise SblkError("JRST 1 instruction not found in the first 100 words")

    while True:
        word = _next(words, "block header")
        if not word & SIGNBIT:
            break
        length = 0o1000000 - (word >> 18)
        address = word & 0o777777
        cksum = word
        data = []
        for _ in range(length):
            value = _next(words, "block data")
            cksum = _checksum_step(cksum, value)
            data.append(value)
        with contextlib.suppress(OverlapError):
            memory.add(address, data)
        check = _next(words, "block checksum")
        if check != cksum:
            print(f"Checksum error: {check:012o} != {cksum:012o}", file=sys.stderr)

    out.write("\n")
    return word


def write_block(memory: Memory, start: int, end: int) -> list[int]:
    """One SBLK block for ``[start, end)``: header, words, checksum."""
    header = ((-(end - start)) << 18 | start) & WORDMASK
    words = [header]
    cksum = header
    for address in range(start, end):
        word = memory.get(address)
        word = 0 if word is None else word
        cksum = _checksum_step(cksum, word)
        words.append(word)
    words.append(cksum)
    return words


def write_sblk_core(memory: Memory, begin: int) -> list[int]:
    """Blocks of at most 512 words covering memory from ``begin`` on."""
    words: list[int] = []
    for area in memory.areas:
        if area.end <= begin:
            continue
        start = max(area.start, begin)
        while start < area.end:
            n = min(BLOCK_SIZE, area.end - start)
            words.extend(write_block(memory, start, start + n))
            start += n
    return words


def write_sblk_symbols(symbols: Iterable[Symbol]) -> list[int]:
    """The symbol table block: squoze name with flag bits, then value."""
    entries = list(symbols)
    header = ((-2 * len(entries)) << 18) & WORDMASK
    words = [header]
    cksum = header
    for symbol in entries:
        word = ascii_to_squoze(symbol.name)
        if symbol.flags & SymbolFlag.KILLED:
            word |= SYKIL
        if symbol.flags & SymbolFlag.HALFKILLED:
            word |= SYHKL
        word |= SYGBL if symbol.flags & SymbolFlag.GLOBAL else SYLCL
        cksum = _checksum_step(cksum, word)
        words.append(word)

        value = symbol.value & WORDMASK
        cksum = _checksum_step(cksum, value)
        words.append(value)
    words.append(cksum)
    return words


def write_sblk(
    memory: Memory,
    start_instruction: Optional[int] = None,
    symbols: Iterable[Symbol] = (),
) -> list[int]:
    """A complete SBLK file as a list of words."""
    start = start_instruction or 0
    return (
        [JRST_1]
        + write_sblk_core(memory, 0)
        + [start]
        + write_sblk_symbols(symbols)
        + [start]
    )