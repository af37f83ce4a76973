"""
FormSnapshot: immutable view of a FormState at a point in time.

Observers receive plain data, no reference back to the live FormState,
so a snapshot stays valid after the form keeps changing.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet
import copy
import operator


@dataclass(frozen=True)
class FormSnapshot:
    """Captures field values, the reconciled initial data and the dirty state."""
    data: Dict[str, Any]
    initial: Dict[str, Any]
    has_changed: bool
    dirty_fields: FrozenSet[str]

    @classmethod
    def create(
        cls,
        data: Dict[str, Any],
        initial: Dict[str, Any],
        has_changed: bool,
        equals: Callable[[Any, Any], bool] = operator.eq,
    ) -> 'FormSnapshot':
        """Create a snapshot with its own copies of the mappings.

        ``dirty_fields`` is computed with ``equals`` so it agrees with the
        form that produced the snapshot.
        """
        return cls(
            data=copy.deepcopy(data),
            initial=copy.deepcopy(initial),
            has_changed=has_changed,
            dirty_fields=frozenset(k for k in data if not equals(data.get(k), initial.get(k))),
        )
