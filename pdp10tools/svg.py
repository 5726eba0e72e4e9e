"""Minimal SVG output for plotter drawings."""

from __future__ import annotations

from typing import TextIO

_ESCAPES = {ord("<"): "&lt;", ord(">"): "&gt;", ord("&"): "&amp;"}


def escape_character(c: int) -> str:
    """SVG text for one character code; control characters become ``[^X]``."""
    if c in _ESCAPES:
        return _ESCAPES[c]
    if c <= 31:
        return f"[^{chr(c + ord('@'))}]"
    return chr(c)


class SvgWriter:
    """Writes SVG elements to a text stream."""

    def __init__(self, out: TextIO) -> None:
        self.out = out

    def file_begin(self) -> None:
        self.out.write('<svg viewBox="%d %d %d %d" ' % (-600, -600, 1200, 1200))
        self.out.write('xmlns="http://www.w3.org/2000/svg">\n')

    def file_end(self) -> None:
        self.out.write("</svg>\n")

    def polyline_begin(self, x: int, y: int) -> None:
        self.out.write(f'  <polyline points="{x},{y}')

    def polyline_point(self, x: int, y: int) -> None:
        self.out.write(f" {x},{y}")

    def polyline_end(self) -> None:
        self.out.write('" fill="none" stroke="black" />\n')

    def text_begin(self, x: int, y: int) -> None:
        self.out.write(f'  <text x="{x}" y="{y}">')

    def text_character(self, c: int) -> None:
        self.out.write(escape_character(c))

    def text_end(self) -> None:
        self.out.write("</text>\n")