"""Muddle interpreter save files in the fast save format."""

from __future__ import annotations

import contextlib
import re
import sys
from typing import Iterable, Iterator, Optional, TextIO

from .memory import Memory, OverlapError
from .symbols import SymbolFlag, SymbolTable

# Muddle's page map uses the ITS page size, even on TOPS-20.
MDL_PAGESIZE = 1024
WORDMASK = 0o777777777777

_COMMON_SYMBOLS = (
    ("a", 0o1),
    ("b", 0o2),
    ("c", 0o3),
    ("d", 0o4),
    ("e", 0o5),
    ("pvp", 0o6),
    ("tvp", 0o7),
    ("sp", 0o10),
    ("ab", 0o11),
    ("tb", 0o12),
    ("tp", 0o13),
    ("frm", 0o14),
    ("m", 0o15),
    ("r", 0o16),
    ("p", 0o17),
    ("hibot", 0o700000),
)

# purtop, pmapb, globsp, glotop for each known interpreter version.
_VERSION_SYMBOLS = {
    54: (0o123, 0o126, 0o1364, 0o1372),
    104: (0o163, 0o166, 0o1474, 0o1502),
    105: (0o165, 0o170, 0o1674, 0o1666),
    56: (0o167, 0o175, 0o1566, 0o1574),
    106: (0o217, 0o222, 0o1677, 0o1705),
}


class MdlError(ValueError):
    """Raised for a save file that cannot be loaded."""


def word_to_ascii7(word: int) -> str:
    """The five 7-bit characters packed in a word."""
    return "".join(chr((word >> shift) & 0o177) for shift in (29, 22, 15, 8, 1))


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def _add_global(symbols: SymbolTable, out: TextIO, name: str, value: int) -> None:
    out.write(f"    Symbol {name:<6} = {value:o}\n")
    symbols.add(name, value, SymbolFlag.GLOBAL)


def define_mdl_symbols(
    version: str, symbols: SymbolTable, out: Optional[TextIO] = None
) -> None:
    """Add the interpreter symbols needed to read a save of ``version``."""
    out = sys.stdout if out is None else out
    specific = _VERSION_SYMBOLS.get(_atoi(version))
    if specific is None:
        raise MdlError("Unsupported Muddle version")
    for name, value in _COMMON_SYMBOLS:
        _add_global(symbols, out, name, value)
    for name, value in zip(("purtop", "pmapb", "globsp", "glotop"), specific):
        _add_global(symbols, out, name, value)


def _next(words: Iterator[int], description: str) -> int:
    word = next(words, None)
    if word is None:
        raise MdlError(f"End of file during {description}")
    return word


def _load(
    words: Iterator[int], memory: Memory, address: int, length: int, description: str
) -> None:
    if length <= 0:
        raise MdlError(f"Bad length {length} for {description}")
    data = [_next(words, description) for _ in range(length)]
    with contextlib.suppress(OverlapError):
        memory.add(address, data)


def read_mdl(
    stream: Iterable[int],
    memory: Memory,
    symbols: SymbolTable,
    out: Optional[TextIO] = None,
) -> None:
    """Load impure memory and the purified pages of a Muddle save file."""
    out = sys.stdout if out is None else out
    words = iter(stream)
    out.write("Muddle save format\n\n")

    version = word_to_ascii7(_next(words, "header")).split("\0", 1)[0].rstrip(" ")
    out.write(f'Muddle version: "{version}"\n\n')

    out.write("Interpreter symbols:\n")
    define_mdl_symbols(version, symbols, out)

    word = _next(words, "header")
    out.write(f"\nValue of p.top  = {word:o}\n")

    if _next(words, "header") != 0:
        raise MdlError("Muddle slow save format not supported")
    out.write("Fast save format\n")

    word = _next(words, "header")
    out.write(f"Value of vectop = {word:o}\n")

    partop = _next(words, "header")
    out.write(f"Value of partop = {partop:o}\n")

    # Impure memory, from location 5 to partop.
    _load(words, memory, 5, partop - 5, "impure memory")

    purtop_address = symbols.value_of("purtop")
    purtop = memory.get(purtop_address) if purtop_address is not None else None
    if purtop is None:
        raise MdlError("purtop is not in the saved memory")
    hibot = symbols.value_of("hibot")
    pmapb = symbols.value_of("pmapb")

    # Two bits per page; only purified pages are in the file.
    out.write("\nPage map:\n")
    for page in range(purtop // MDL_PAGESIZE, hibot // MDL_PAGESIZE):
        entry = memory.get(pmapb + page // 16)
        entry = WORDMASK if entry is None else entry
        mask = (1 << 35) >> (2 * (page % 16) + 1)
        purified = bool(entry & mask)
        out.write(f"Page {page:03o}: {'pure' if purified else 'not pure'}\n")
        if purified:
            _load(words, memory, page * MDL_PAGESIZE, MDL_PAGESIZE, "pure pages")

    out.write("\n")