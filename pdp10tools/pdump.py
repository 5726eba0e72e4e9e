"""ITS PDUMP files: a page map followed by the pages it describes."""

from __future__ import annotations

import contextlib
import sys
from typing import Iterable, Iterator, Optional, TextIO

from .memory import Memory, OverlapError
from .sblk import write_sblk_symbols
from .symbols import Symbol

ITS_PAGESIZE = 1024
PAGES = 256

PAGE_ABS = 0o400000000000
PAGE_CBCPY = 0o200000000000
PAGE_SHARE = 0o100000000000
PAGE_WRITE = 0o000000400000
PAGE_READ = 0o000000200000
PAGE_NUM = 0o000000000777

_FLAG_LETTERS = (
    ("a", PAGE_ABS),
    ("c", PAGE_CBCPY),
    ("s", PAGE_SHARE),
    ("w", PAGE_WRITE),
    ("r", PAGE_READ),
)


def page_present(info: int) -> bool:
    """Whether a page map entry describes a page stored in the file."""
    if info == 0:
        return False
    if info & (PAGE_ABS | PAGE_SHARE):
        return False
    return bool(info & (PAGE_READ | PAGE_WRITE))


def _next(words: Iterator[int]) -> int:
    word = next(words, None)
    if word is None:
        raise EOFError("Unexpected end of PDUMP file")
    return word


def read_pdump(
    stream: Iterable[int], memory: Memory, out: Optional[TextIO] = None
) -> int:
    """Load the pages of a PDUMP file; return the start instruction.

    Words after the start instruction are left unread.
    """
    out = sys.stdout if out is None else out
    out.write("PDUMP format\n\n")
    words = iter(stream)

    _next(words)  # zero word

    out.write("Page map:\n")
    out.write("Page  Address  Page description\n")
    page_map = []
    for i in range(PAGES):
        word = _next(words)
        page_map.append(word)
        if word:
            flags = "".join(c if word & bit else "-" for c, bit in _FLAG_LETTERS)
            line = (
                f"{i:03o}   {ITS_PAGESIZE * i:06o}   "
                f"{word >> 18:06o},,{word & 0o777777:06o}  {flags}"
            )
            if word & PAGE_NUM:
                line += f" {word & PAGE_NUM:03o}"
            out.write(line + "\n")

    # The rest of the first page is unused.
    for _ in range(ITS_PAGESIZE - PAGES - 1):
        _next(words)

    for i, info in enumerate(page_map):
        if not page_present(info):
            continue
        data = [_next(words) for _ in range(ITS_PAGESIZE)]
        with contextlib.suppress(OverlapError):
            memory.add(ITS_PAGESIZE * i, data)
        if not info & PAGE_WRITE:
            memory.purify(ITS_PAGESIZE * i, ITS_PAGESIZE)

    out.write("\n")
    return _next(words)


def write_pdump(
    memory: Memory,
    start_instruction: Optional[int] = None,
    symbols: Iterable[Symbol] = (),
) -> list[int]:
    """A PDUMP file as a list of words, ending like an SBLK file."""
    start = start_instruction or 0
    words = [0]
    page_map = []
    for i in range(PAGES):
        address = i * ITS_PAGESIZE
        if memory.get(address) is None:
            info = 0
        elif memory.is_pure(address):
            info = PAGE_READ
        else:
            info = PAGE_READ | PAGE_WRITE
        page_map.append(info)
    words.extend(page_map)
    words.extend([0] * (ITS_PAGESIZE - 1 - PAGES))

    for i, info in enumerate(page_map):
        if not page_present(info):
            continue
        for address in range(ITS_PAGESIZE * i, ITS_PAGESIZE * (i + 1)):
            word = memory.get(address)
            words.append(0 if word is None else word)

    words.append(start)
    words.extend(write_sblk_symbols(symbols))
    words.append(start)
    return words