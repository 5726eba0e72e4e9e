"""ODT deposit commands: a core image as typed-in octal debugger input."""

from __future__ import annotations

import contextlib
import sys
from typing import Iterable, Optional, TextIO

from .memory import Memory, OverlapError

LF = "\n"
CR = "\r"
MASK = 0o177777


def write_odt(memory: Memory, start_instruction: Optional[int] = None) -> str:
    """ODT commands that deposit every 16-bit location and then start.

    Consecutive locations are chained with line feeds; a jump to a new
    location closes the open one with a carriage return and opens the
    next with ``address/``.  A positive start address adds a ``G`` command.
    """
    parts: list[str] = []
    previous: Optional[int] = None
    for area in memory.areas:
        for address in range(max(area.start, 0), min(area.end, MASK + 1)):
            data = area[address] & MASK
            follows = previous is not None and address == previous + 1
            if follows:
                parts.append(LF)
            elif previous is not None:
                parts.append(CR)
            if not follows:
                parts.append(f"{address:06o}/")
            parts.append(f"{data:06o}")
            previous = address
    if previous is not None:
        parts.append(CR)
    if start_instruction is not None and start_instruction > 0:
        parts.append(f"{start_instruction & MASK:06o}G")
    return "".join(parts)


def read_odt(
    text: Iterable[str], memory: Memory, out: Optional[TextIO] = None
) -> Optional[int]:
    """Replay ODT commands into ``memory``; return the ``G`` address, if any.

    Opening a location that already holds data and closing it without
    typing leaves the data as it is; characters ODT would not act on are
    ignored.
    """
    out = sys.stdout if out is None else out
    out.write(";ODT commands\n\n")

    quantity = 0
    address: Optional[int] = None
    start: Optional[int] = None

    for c in text:
        if c in "01234567":
            if quantity < 0:
                quantity = 0
            quantity = quantity * 8 + int(c)
        elif c in (LF, CR):
            if address is None:
                continue
            with contextlib.suppress(OverlapError):
                memory.add(address, [abs(quantity)])
            quantity = 0
            address = address + 1 if c == LF else None
        elif c == "/":
            address = quantity
            existing = memory.get(address)
            quantity = 0 if existing is None else -existing
        elif c == "G":
            start = quantity
            quantity = 0
    return start