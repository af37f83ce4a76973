"""
List helpers for multi-select fields.
"""
import operator
from typing import Any, Callable, Sequence


def toggle(value: Any, collection: Sequence[Any],
           equals: Callable[[Any, Any], bool] = operator.eq) -> Sequence[Any]:
    """Return a new collection with ``value`` membership flipped.

    Members equal to ``value`` are removed; if none matched, ``value`` is
    appended at the end. The container type (list or tuple) is preserved.
    """
    kept = [item for item in collection if not equals(item, value)]
    if len(kept) == len(collection):
        kept.append(value)
    return type(collection)(kept) if isinstance(collection, tuple) else kept


def is_toggleable(field_value: Any) -> bool:
    """Only list and tuple fields hold toggleable membership."""
    return isinstance(field_value, (list, tuple))
