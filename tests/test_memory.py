import pytest

from pdp10tools.memory import Area, Memory, OverlapError


def words_of(memory):
    return {a: memory.get(a) for area in memory.areas for a in range(area.start, area.end)}


def test_add_and_get():
    m = Memory()
    m.add(10, [7, 8, 9])
    assert [m.get(10), m.get(11), m.get(12)] == [7, 8, 9]
    assert m.get(13) is None
    assert m.get(9) is None


def test_adjacent_impure_areas_merge():
    m = Memory()
    m.add(0, [1, 2])
    m.add(2, [3])
    assert len(m.areas) == 1
    assert m.areas[0].data == [1, 2, 3]


def test_adjacent_pure_area_not_extended():
    m = Memory()
    m.add(0, [1, 2])
    m.purify(0, 2)
    m.add(2, [3])
    assert len(m.areas) == 2
    assert m.is_pure(1)
    assert not m.is_pure(2)


def test_add_into_occupied_address_raises():
    m = Memory()
    m.add(5, [1, 2, 3])
    with pytest.raises(OverlapError):
        m.add(6, [4])


def test_areas_kept_sorted():
    m = Memory()
    m.add(100, [1])
    m.add(10, [2])
    m.add(50, [3])
    assert [a.start for a in m.areas] == [10, 50, 100]


def test_set_existing_and_new():
    m = Memory()
    m.add(0, [1, 2])
    m.set(1, 42)
    m.set(7, 99)
    assert m.get(1) == 42
    assert m.get(7) == 99
    assert len(m.areas) == 2


def test_set_next_to_area_extends_it():
    m = Memory()
    m.add(0, [1])
    m.set(1, 5)
    assert m.areas == [Area(0, [1, 5])]


def test_remove_whole_area():
    m = Memory()
    m.add(0, [1, 2])
    m.add(10, [3])
    m.remove(0, 5)
    assert [a.start for a in m.areas] == [10]


def test_remove_tail_and_head():
    m = Memory()
    m.add(0, [1, 2, 3, 4])
    m.remove(2, 10)
    assert words_of(m) == {0: 1, 1: 2}
    m.remove(0, 1)
    assert words_of(m) == {1: 2}


def test_remove_middle_keeps_both_sides():
    m = Memory()
    m.add(0, [1, 2, 3, 4, 5])
    m.remove(1, 2)
    assert words_of(m) == {0: 1, 3: 4, 4: 5}


def test_purify_splits_area():
    m = Memory()
    m.add(0, [1, 2, 3, 4, 5])
    m.purify(1, 2)
    assert [(a.start, a.end, a.pure) for a in m.areas] == [
        (0, 1, False), (1, 3, True), (3, 5, False)
    ]
    assert words_of(m) == {0: 1, 1: 2, 2: 3, 3: 4, 4: 5}
    assert m.is_pure(2)
    assert not m.is_pure(0)
    assert not m.is_pure(100)


def test_purify_whole_area():
    m = Memory()
    m.add(4, [1, 2])
    m.purify(0, 100)
    assert not m.is_pure(4)
    m.purify(4, 2)
    assert m.is_pure(4) and m.is_pure(5)
    assert len(m.areas) == 1


def test_cursor_walks_all_areas():
    m = Memory()
    m.add(0, [1, 2])
    m.add(10, [3])
    seen = []
    while (w := m.next_word()) is not None:
        seen.append((m.current_address, w))
    assert seen == [(0, 1), (1, 2), (10, 3)]
    assert m.next_word() is None


def test_seek_and_rewind():
    m = Memory()
    m.add(0, [1, 2, 3])
    m.seek(1)
    assert m.next_word() == 3
    m.seek(-1)
    assert m.next_word() == 1


def test_seek_missing_address_raises():
    m = Memory()
    m.add(0, [1])
    with pytest.raises(LookupError):
        m.seek(5)


def test_next_word_empty_memory():
    assert Memory().next_word() is None