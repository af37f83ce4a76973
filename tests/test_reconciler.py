"""Tests for merging refreshed initial data into edited form state."""
from formstate import FormState, merge, should_clear_dirty


def change_event(name, value):
    return {"target": {"name": name, "value": value}}


def test_merge_keeps_local_edits():
    """Upstream-moved fields adopt the new value; the rest keep local edits."""
    result = merge({"a": 1, "b": 2}, {"a": 1, "b": 9}, {"a": 5, "b": 2})
    assert result == {"a": 5, "b": 9}


def test_merge_upstream_wins_on_conflict():
    """A field edited locally and moved upstream takes the upstream value."""
    result = merge({"a": 1}, {"a": 7}, {"a": 5})
    assert result == {"a": 5}


def test_merge_does_not_add_keys():
    result = merge({"a": 1}, {"a": 1}, {"a": 1, "c": 3})
    assert result == {"a": 1}


def test_merge_missing_upstream_key_becomes_none():
    result = merge({"a": 1, "b": 2}, {"a": 1, "b": 9}, {"a": 1})
    assert result == {"a": 1, "b": None}


def test_merge_compares_deeply():
    """Equal-but-distinct nested values count as unchanged upstream."""
    result = merge({"tags": [1, 2]}, {"tags": [1]}, {"tags": [1, 2]})
    assert result == {"tags": [1]}


def test_merge_does_not_mutate_inputs():
    prev_initial, prev_state, new_initial = {"a": 1}, {"a": 2}, {"a": 3}
    merge(prev_initial, prev_state, new_initial)
    assert (prev_initial, prev_state, new_initial) == ({"a": 1}, {"a": 2}, {"a": 3})


def test_merge_custom_equality():
    case_insensitive = lambda x, y: str(x).lower() == str(y).lower()
    result = merge({"a": "X"}, {"a": "local"}, {"a": "x"}, case_insensitive)
    assert result == {"a": "local"}


def test_should_clear_dirty():
    assert should_clear_dirty({"a": 1}, {"a": 1}) is True
    assert should_clear_dirty({"a": 1}, {"a": 2}) is False


# === FormState.refresh ===

def test_refresh_preserves_local_edits():
    """End-to-end: edited b survives, untouched a adopts the new value."""
    form = FormState({"a": 1, "b": 2}, lambda data: None)
    form.change(change_event("b", 9))

    assert form.refresh({"a": 5, "b": 2}) is True
    assert form.data == {"a": 5, "b": 9}
    assert form.initial == {"a": 5, "b": 2}
    assert form.has_changed is True


def test_refresh_matching_local_edits_clears_dirty():
    """Upstream catching up with the user's edit makes the form clean."""
    form = FormState({"a": 1}, lambda data: None)
    form.change(change_event("a", 2))
    assert form.has_changed is True

    form.refresh({"a": 2})
    assert form.data == {"a": 2}
    assert form.has_changed is False


def test_refresh_checks_dirty_against_pre_merge_state():
    """The dirty check looks at the state held before the merge.

    Here the merge alone makes data equal to the new snapshot, but the
    pre-merge state did not match it, so the flag stays set.
    """
    form = FormState({"a": 1, "b": 2}, lambda data: None)
    form.trigger_change()

    form.refresh({"a": 5, "b": 2})
    assert form.data == {"a": 5, "b": 2}
    assert form.has_changed is True


def test_identical_refresh_is_ignored():
    calls = []
    form = FormState({"a": 1, "b": [1, 2]}, lambda data: None)
    form.on_state_changed(lambda: calls.append(True))
    form.change(change_event("a", 3))
    calls.clear()

    assert form.refresh({"a": 1, "b": [1, 2]}) is False
    assert form.data == {"a": 3, "b": [1, 2]}
    assert calls == []


def test_refresh_notifies_observers():
    calls = []
    form = FormState({"a": 1}, lambda data: None)
    form.on_state_changed(lambda: calls.append(form.data))
    form.refresh({"a": 2})
    assert calls == [{"a": 2}]


def test_refresh_ignores_non_mapping():
    form = FormState({"a": 1}, lambda data: None)
    assert form.refresh(None) is False
    assert form.data == {"a": 1}


def test_refresh_keeps_field_set_fixed():
    form = FormState({"a": 1}, lambda data: None)
    form.refresh({"a": 1, "extra": 2})
    assert set(form.data) == {"a"}


def test_reset_after_refresh_uses_construction_data():
    """reset() goes back to the very first data, then compares with the latest."""
    form = FormState({"a": 1, "b": 2}, lambda data: None)
    form.refresh({"a": 5, "b": 2})
    form.change(change_event("b", 9))

    form.reset()
    assert form.data == {"a": 1, "b": 2}
    assert form.has_changed is True


def test_merge_copies_adopted_values():
    new_initial = {"tags": [1, 2]}
    result = merge({"tags": [1]}, {"tags": [1]}, new_initial)
    result["tags"].append(3)
    assert new_initial == {"tags": [1, 2]}


def test_editing_refreshed_value_leaves_initial_alone():
    """Mutating a nested value adopted from a refresh does not touch initial."""
    form = FormState({"tags": [1]}, lambda data: None)
    form.refresh({"tags": [1, 2]})
    form.data["tags"].append(3)
    assert form.initial == {"tags": [1, 2]}
