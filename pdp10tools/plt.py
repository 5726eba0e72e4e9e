"""Plotter files drawn as SVG: vector runs and text strings."""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, Optional, TextIO

from .svg import SvgWriter


class PltError(ValueError):
    """Raised for a word that is neither vector nor text data."""


class _Finished(Exception):
    pass


def _sext(data: int) -> int:
    data &= 0o377777
    data ^= 0o200000
    return data - 0o200000


def _posx(data: int) -> int:
    return _sext(data >> 19)


def _posy(data: int) -> int:
    return _sext(data >> 1)


def _next(words: Iterator[int], closer: Optional[Callable[[], None]]) -> int:
    data = next(words, None)
    if data is None:
        if closer is not None:
            closer()
        raise _Finished
    return data


def _vectors(words: Iterator[int], svg: SvgWriter, data: int) -> int:
    svg.polyline_begin(_posx(data), _posy(data))
    while True:
        data = _next(words, svg.polyline_end)
        if not data & 1:
            break
        svg.polyline_point(_posx(data), _posy(data))
    svg.polyline_end()
    return data


def _ascii(svg: SvgWriter, data: int) -> None:
    for shift in (29, 22, 15, 8, 1):
        c = (data >> shift) & 0o177
        if c:
            svg.text_character(c)


def _text(words: Iterator[int], svg: SvgWriter, data: int) -> int:
    if (data & 0o777777000000) == 0o400001000000:
        raise _Finished
    svg.text_begin(_posx(data), _posy(data))

    data = _next(words, svg.text_end)
    if not data & 1:
        svg.text_end()
        return data
    if data & 0o777777000000:
        raise PltError("Not text")

    while True:
        data = _next(words, svg.text_end)
        if data & 1:
            _ascii(svg, data)
        else:
            svg.text_end()
            return data


def plt_to_svg(words: Iterable[int], out: TextIO) -> None:
    """Write the drawing in ``words`` to ``out`` as SVG elements."""
    svg = SvgWriter(out)
    svg.file_begin()
    stream = iter(words)
    try:
        data = _next(stream, None)
        while True:
            kind = data & 0o1000001
            if kind == 0:
                data = _vectors(stream, svg, data)
            elif kind == 0o1000000:
                data = _text(stream, svg, data)
            else:
                raise PltError(f"Error in input: {data:012o}")
    except _Finished:
        pass