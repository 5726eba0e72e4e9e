import io

from pdp10tools.memory import Memory
from pdp10tools.odt import read_odt, write_odt


def _contents(memory):
    return [(area.start, area.data) for area in memory.areas]


def test_round_trip_memory_and_start():
    memory = Memory()
    memory.add(0o100, [5, 7, 0o177777])
    memory.add(0o200, [3])
    text = write_odt(memory, 0o100)

    loaded = Memory()
    start = read_odt(text, loaded, io.StringIO())
    assert start == 0o100
    assert _contents(loaded) == _contents(memory)


def test_single_location_text():
    memory = Memory()
    memory.add(0o10, [0o123])
    assert write_odt(memory) == "000010/000123\r"


def test_start_without_memory():
    assert write_odt(Memory(), 0o200) == "000200G"


def test_no_start_when_zero():
    memory = Memory()
    memory.add(0o10, [1])
    assert not write_odt(memory, 0).endswith("G")


def test_words_are_masked_to_sixteen_bits():
    memory = Memory()
    memory.add(0o20, [0o1000000 | 0o17])
    loaded = Memory()
    read_odt(write_odt(memory), loaded, io.StringIO())
    assert loaded.get(0o20) == 0o17


def test_line_feed_without_open_location_is_ignored():
    memory = Memory()
    read_odt("5\n", memory, io.StringIO())
    assert memory.areas == []


def test_reopening_existing_location_keeps_value():
    memory = Memory()
    memory.add(0o10, [7])
    read_odt("10/\r", memory, io.StringIO())
    assert memory.get(0o10) == 7


def test_header_written():
    out = io.StringIO()
    assert read_odt("", Memory(), out) is None
    assert out.getvalue().startswith(";ODT commands")