import io

import pytest

from pdp10tools.memory import Memory
from pdp10tools.sblk import (
    JRST_1,
    SblkError,
    ascii_to_squoze,
    read_sblk,
    write_block,
    write_sblk,
    write_sblk_core,
    write_sblk_symbols,
)
from pdp10tools.symbols import SymbolFlag, SymbolTable


def _contents(memory):
    return [(area.start, area.data) for area in memory.areas]


def _memory():
    memory = Memory()
    memory.add(0o100, [1, 2, 3])
    memory.add(0o2000, [0o777777777777, 5])
    return memory


def test_round_trip():
    start = 0o254000000100
    words = write_sblk(_memory(), start, [])
    loaded = Memory()
    assert read_sblk(words, loaded, io.StringIO()) == start
    assert _contents(loaded) == _contents(_memory())


def test_round_trip_has_no_checksum_errors(capsys):
    read_sblk(write_sblk(_memory(), 0), Memory(), io.StringIO())
    assert capsys.readouterr().err == ""


def test_block_header():
    words = write_block(_memory(), 0o100, 0o103)
    assert words[0] == 0o777775000100
    assert words[1:4] == [1, 2, 3]


def test_large_area_split_into_blocks():
    memory = Memory()
    memory.add(0, list(range(600)))
    core = write_sblk_core(memory, 0)
    assert core[514] & 0o777777 == 512
    loaded = Memory()
    read_sblk([JRST_1] + core + [0], loaded, io.StringIO())
    assert _contents(loaded) == [(0, list(range(600)))]


def test_core_starts_at_begin():
    memory = Memory()
    memory.add(0, [9] * 0o30)
    core = write_sblk_core(memory, 0o20)
    loaded = Memory()
    read_sblk([JRST_1] + core + [0], loaded, io.StringIO())
    assert _contents(loaded) == [(0o20, [9] * (0o30 - 0o20))]


def test_symbol_block():
    table = SymbolTable()
    table.add("foo", 0o1234, SymbolFlag.GLOBAL)
    table.add("bar", 7, SymbolFlag.KILLED)
    words = write_sblk_symbols(table)
    assert words[0] == 0o777774000000
    assert words[1] & 0o740000000000 == 0o040000000000
    assert words[1] & 0o037777777777 == ascii_to_squoze("foo")
    assert words[2] == 0o1234
    assert words[3] & 0o740000000000 == 0o200000000000 | 0o100000000000
    assert words[4] == 7


def test_squoze():
    assert ascii_to_squoze("a") == 11
    assert ascii_to_squoze("foo") == ascii_to_squoze("FOO")
    assert ascii_to_squoze("abcdefgh") == ascii_to_squoze("abcdef")
    assert ascii_to_squoze("") == 0


def test_squoze_rejects_unknown_character():
    with pytest.raises(ValueError):
        ascii_to_squoze("a!b")


def test_missing_jrst_1():
    with pytest.raises(SblkError):
        read_sblk([0] * 200, Memory(), io.StringIO())


def test_truncated_block():
    words = write_sblk(_memory(), 0)
    with pytest.raises(SblkError):
        read_sblk(words[:4], Memory(), io.StringIO())


def test_bad_checksum_reported(capsys):
    memory = Memory()
    memory.add(0o100, [1, 2, 3])
    words = write_sblk(memory, 0)
    words[5] ^= 1
    loaded = Memory()
    read_sblk(words, loaded, io.StringIO())
    assert "Checksum" in capsys.readouterr().err
    assert loaded.get(0o102) == 3