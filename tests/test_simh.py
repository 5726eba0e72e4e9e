import io

import pytest

from pdp10tools.memory import Memory
from pdp10tools.simh import JRST, SimhError, read_simh, write_simh


def _contents(memory):
    return [(area.start, area.data) for area in memory.areas]


def test_deposit_line_format():
    memory = Memory()
    memory.add(0o100, [5])
    assert write_simh(memory) == "d 000100 000000000005\n"


def test_go_for_small_start():
    assert write_simh(Memory(), 0o100) == "go 000100\n"


def test_execute_for_other_instruction():
    assert write_simh(Memory(), 0o200000000100) == ";execute 200000000100\n"


def test_no_start_when_zero_or_missing():
    memory = Memory()
    memory.add(0, [1])
    assert write_simh(memory, 0) == write_simh(memory, None)


def test_round_trip():
    memory = Memory()
    memory.add(0o100, [1, 0o777777777777, 3])
    memory.add(0o400000, [0o254000000100])
    start = JRST | 0o1000
    script = write_simh(memory, start)

    loaded = Memory()
    result = read_simh(script.splitlines(keepends=True), loaded, io.StringIO())
    assert result == start
    assert _contents(loaded) == _contents(memory)


def test_abbreviated_commands_case_insensitive():
    memory = Memory()
    start = read_simh(["DEP 10 7\n", "G 20\n"], memory, io.StringIO())
    assert memory.get(0o10) == 7
    assert start == JRST | 0o20


def test_comments_and_blank_lines_skipped():
    memory = Memory()
    start = read_simh(["; hi\n", "# x\n", "\n", "   \n"], memory, io.StringIO())
    assert start is None
    assert memory.areas == []


@pytest.mark.parametrize(
    "line", ["foo 1\n", "d 100\n", "d 100 \n", "go", "go x\n", "d 1x 5\n"]
)
def test_invalid_lines(line):
    with pytest.raises(SimhError):
        read_simh([line], Memory(), io.StringIO())