import io

import pytest

from pdp10tools.memory import Memory
from pdp10tools.rim10 import JRST, MIDAS_RIM10, Rim10Error, read_rim10, write_rim10


def _memory(areas):
    memory = Memory()
    for start, data in areas:
        memory.add(start, data)
    return memory


def _load(words):
    memory = Memory()
    out = io.StringIO()
    start = read_rim10(words, memory, out)
    return memory, start, out.getvalue()


def _data(n, seed=1):
    words = [(i * 0o1234567 + seed) & 0o777777777777 for i in range(n)]
    words[0] = 0o777777777777
    words[-1] = 0o400000000000
    return words


def test_write_starts_with_loader_and_ends_with_start():
    words = write_rim10(Memory(), JRST | 0o1000)
    assert words[:16] == list(MIDAS_RIM10)
    assert words[0] == 0o777761000000
    assert words[-1] == JRST | 0o1000
    assert len(words) == 17


def test_round_trip_single_area():
    data = _data(20)
    source = _memory([(0o1000, data)])
    memory, start, text = _load(write_rim10(source, JRST | 0o1000))
    assert start == JRST | 0o1000
    assert [(a.start, a.data) for a in memory.areas] == [(0o1000, data)]
    assert "RIM10 format" in text
    assert f"Start instruction: {JRST | 0o1000:012o}" in text


def test_round_trip_several_blocks_and_areas():
    small = _data(3, seed=7)
    large = _data(600, seed=3)
    source = _memory([(0o100, small), (0o2000, large)])
    memory, start, _ = _load(write_rim10(source, JRST | 0o2000))
    assert start == JRST | 0o2000
    assert [(a.start, a.data) for a in memory.areas] == [
        (0o100, small),
        (0o2000, large),
    ]


def test_accumulators_are_not_written():
    data = _data(20)
    source = _memory([(0o10, data)])
    memory, _, _ = _load(write_rim10(source, JRST | 0o20))
    assert [(a.start, a.data) for a in memory.areas] == [(0o20, data[8:])]


def test_bad_checksum_halts():
    words = write_rim10(_memory([(0o1000, _data(5))]), JRST | 0o1000)
    words[17] ^= 1
    with pytest.raises(Rim10Error, match="HALT"):
        _load(words)


def test_truncated_tape():
    words = write_rim10(_memory([(0o1000, _data(5))]), JRST | 0o1000)
    with pytest.raises(Rim10Error):
        _load(words[:-1])


def test_loader_too_long():
    with pytest.raises(Rim10Error, match="longer than 16"):
        _load([0])


def test_loader_does_not_fit():
    first = ((0o1000000 - 15) << 18) | 5
    with pytest.raises(Rim10Error, match="accumulators"):
        _load([first] + [0] * 15)


def test_empty_tape():
    with pytest.raises(Rim10Error):
        _load([])