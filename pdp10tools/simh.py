"""SIMH deposit scripts: a core image as ``d`` and ``go`` commands."""

from __future__ import annotations

import contextlib
import sys
from typing import Iterable, Optional, TextIO

from .memory import Memory, OverlapError

JRST = 0o254000000000
_WORDMASK = 0o777777777777
_WHITESPACE = " \t\r\n"
_C_SPACE = " \t\n\v\f\r"


class SimhError(ValueError):
    """Raised for a script line that cannot be understood."""


def write_simh(memory: Memory, start_instruction: Optional[int] = None) -> str:
    """Deposit commands for every location, then a start command."""
    lines: list[str] = []
    for area in memory.areas:
        for address in range(max(area.start, 0), min(area.end, 0o1000000)):
            lines.append(f"d {address:06o} {area[address] & _WORDMASK:012o}\n")
    if start_instruction is not None and start_instruction > 0:
        if (start_instruction & 0o777000000000) == JRST or start_instruction <= 0o777777:
            lines.append(f"go {start_instruction & 0o777777:06o}\n")
        else:
            lines.append(f";execute {start_instruction:012o}\n")
    return "".join(lines)


def _is_space(s: str, i: int) -> bool:
    return i < len(s) and s[i] in _WHITESPACE


def _space_or_end(s: str, i: int) -> bool:
    return i >= len(s) or s[i] in _WHITESPACE


def _parse_octal(s: str, pos: int) -> tuple[int, int]:
    """Parse an octal number like strtoul; return (value, end position)."""
    i = pos
    while i < len(s) and s[i] in _C_SPACE:
        i += 1
    negative = False
    if i < len(s) and s[i] in "+-":
        negative = s[i] == "-"
        i += 1
    j = i
    while j < len(s) and s[j] in "01234567":
        j += 1
    if j == i:
        return 0, pos
    value = int(s[i:j], 8)
    if negative:
        value = -value % (1 << 64)
    return value, j


def _deposit(arg: str, memory: Memory) -> None:
    def invalid() -> SimhError:
        return SimhError(f'Invalid DEPOSIT arguments: "{arg.rstrip()}"')

    address, p = _parse_octal(arg, 0)
    if not _is_space(arg, p):
        raise invalid()
    while _is_space(arg, p):
        p += 1
    if p >= len(arg):
        raise invalid()
    value, p = _parse_octal(arg, p)
    if not _space_or_end(arg, p):
        raise invalid()
    with contextlib.suppress(OverlapError):
        memory.add(address, [value])


def _start(arg: str) -> int:
    address, p = _parse_octal(arg, 0)
    if p == 0 or not _space_or_end(arg, p):
        raise SimhError(f'Invalid GO argument: "{arg.rstrip()}"')
    return JRST | address


def _read_line(line: str, memory: Memory) -> Optional[int]:
    p = 0
    while _is_space(line, p):
        p += 1
    if p >= len(line) or line[p] in ";#":
        return None
    begin = p
    p += 1
    while not _space_or_end(line, p):
        p += 1
    if p >= len(line):
        raise SimhError(f"SIMH command has no argument: {line[begin:]}")
    command = line[begin:p].lower()
    arg = line[p + 1 :]
    if "deposit".startswith(command):
        _deposit(arg, memory)
        return None
    if "go".startswith(command):
        return _start(arg)
    raise SimhError(f"Unsupported SIMH command: {line[begin:p]}")


def read_simh(
    lines: Iterable[str], memory: Memory, out: Optional[TextIO] = None
) -> Optional[int]:
    """Run deposit and go commands into ``memory``; return the start instruction."""
    out = sys.stdout if out is None else out
    out.write(";SIMH script\n\n")
    start: Optional[int] = None
    for line in lines:
        result = _read_line(line, memory)
        if result is not None:
            start = result
    return start