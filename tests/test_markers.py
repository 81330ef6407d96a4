import math

import pytest

from framemarker.core.markers import MarkerStore


def test_markers_sorted_with_stable_ties():
    store = MarkerStore()
    a = store.add(5.0)
    b = store.add(1.0)
    c = store.add(5.0)
    assert [m.id for m in store] == [b.id, a.id, c.id]
    assert [n for n, _ in store.numbered()] == [1, 2, 3]


def test_ids_unique_and_duplicates_removed_individually():
    store = MarkerStore()
    first = store.add(2.0)
    second = store.add(2.0)
    assert first.id != second.id
    assert store.remove(first.id) is True
    assert store.snapshot() == (second,)
    assert store.remove(first.id) is False
    assert len(store) == 1


def test_rejects_invalid_times():
    store = MarkerStore()
    with pytest.raises(ValueError):
        store.add(-0.1)
    with pytest.raises(ValueError):
        store.add(math.nan)
    assert not store


def test_visible_in_range_is_inclusive():
    store = MarkerStore()
    for t in (5.0, 10.0, 20.0, 35.0, 36.0):
        store.add(t)
    assert [m.time for m in store.visible_in_range(10.0, 35.0)] == [10.0, 20.0, 35.0]


def test_get_and_clear():
    store = MarkerStore()
    m = store.add(3.0)
    assert store.get(m.id) is m
    assert store.get("missing") is None
    store.clear()
    assert store.snapshot() == ()


def test_iteration_is_a_snapshot():
    store = MarkerStore()
    for t in (1.0, 2.0):
        store.add(t)
    for m in store:
        store.remove(m.id)
    assert len(store) == 0
