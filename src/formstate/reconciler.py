"""
Reconciliation of refreshed initial data against locally edited state.

When the upstream snapshot changes, each field either keeps the user's local
value (the upstream value for that field did not move) or adopts the fresh
upstream value (it did). This lets a slow data source update untouched fields
without clobbering fields the user is editing.
"""
import copy
import logging
import operator
from typing import Any, Callable, Dict, Mapping

logger = logging.getLogger(__name__)


def merge(
    prev_initial: Mapping[str, Any],
    prev_state: Mapping[str, Any],
    new_initial: Mapping[str, Any],
    equals: Callable[[Any, Any], bool] = operator.eq,
) -> Dict[str, Any]:
    """Merge ``new_initial`` into ``prev_state``.

    Only keys of ``prev_state`` are considered, so the field set never grows.
    A key keeps its local value when its upstream value is unchanged between
    ``prev_initial`` and ``new_initial``; otherwise the upstream value wins.

    Returns:
        A new dict; none of the inputs is mutated, and adopted values are
        copies that share nothing with ``new_initial``.
    """
    merged = dict(prev_state)
    for key in prev_state:
        new_value = new_initial.get(key)
        if not equals(new_value, prev_initial.get(key)):
            merged[key] = copy.deepcopy(new_value)
            logger.debug(f"merge: {key!r} changed upstream, adopting {new_value!r}")
    return merged


def should_clear_dirty(
    pre_merge_state: Mapping[str, Any],
    new_initial: Mapping[str, Any],
    equals: Callable[[Any, Any], bool] = operator.eq,
) -> bool:
    """True when the state held before the merge already matches the new snapshot.

    NOTE: compares the pre-merge state, not the merged result, so a refresh
    that only brings untouched fields up to date leaves the flag as it was
    until the next refresh.
    """
    return equals(dict(pre_merge_state), dict(new_initial))
