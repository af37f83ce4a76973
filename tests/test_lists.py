"""Tests for list membership toggling."""
from formstate import toggle
from formstate.lists import is_toggleable


def test_toggle_removes_member():
    assert toggle(2, [1, 2, 3]) == [1, 3]


def test_toggle_appends_missing_member():
    assert toggle(2, [1, 3]) == [1, 3, 2]


def test_toggle_removes_all_equal_members():
    assert toggle(1, [1, 2, 1]) == [2]


def test_toggle_preserves_tuple():
    assert toggle(4, (1, 2)) == (1, 2, 4)


def test_toggle_does_not_mutate_input():
    items = [1, 2]
    toggle(3, items)
    assert items == [1, 2]


def test_toggle_custom_equality():
    same_id = lambda a, b: a["id"] == b["id"]
    assert toggle({"id": 1, "label": "new"}, [{"id": 1, "label": "old"}], same_id) == []


def test_is_toggleable():
    assert is_toggleable([])
    assert is_toggleable(())
    assert not is_toggleable("abc")
    assert not is_toggleable(None)
    assert not is_toggleable({1, 2})
