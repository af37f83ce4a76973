"""
PropTracker: local state seeded from an upstream value that keeps changing.

The tracker holds two things:
- prop: the last upstream snapshot it saw
- value: the local working copy, freely updated by its owner

Protocol on every new upstream snapshot (``update_prop``):
1. If the snapshot equals the previous one, nothing happens.
2. ``merge_func(prev_prop, value, new_prop)`` computes the new value
   (without a merge_func the new snapshot replaces the value outright).
3. The new snapshot becomes ``prop``, the computed value becomes ``value``.
4. ``on_refresh(value)`` is called synchronously.

FormState receives a tracker through a factory so tests can inject their own.
"""
import copy
import logging
import operator
from typing import Any, Callable, Generic, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar('T')

MergeFunc = Callable[[T, T, T], T]


class PropTracker(Generic[T]):
    """Tracks an upstream prop and a locally editable value derived from it."""

    def __init__(
        self,
        prop: T,
        merge_func: Optional[MergeFunc] = None,
        on_refresh: Optional[Callable[[T], None]] = None,
        equals: Callable[[Any, Any], bool] = operator.eq,
    ):
        self._prop: T = copy.deepcopy(prop)
        self._value: T = copy.deepcopy(prop)
        self._merge_func = merge_func
        self._on_refresh = on_refresh
        self._equals = equals

    @property
    def prop(self) -> T:
        """Last upstream snapshot seen."""
        return self._prop

    @property
    def value(self) -> T:
        """Current local value."""
        return self._value

    def set_value(self, value: Union[T, Callable[[T], T]]) -> None:
        """Replace the local value, or apply an updater to the current one.

        Updaters receive the value at application time, never a stale copy.
        """
        self._value = value(self._value) if callable(value) else value

    def update_prop(self, new_prop: T) -> bool:
        """Feed a new upstream snapshot.

        Returns:
            True if the snapshot differed and the value was recomputed.
        """
        if self._equals(self._prop, new_prop):
            return False

        new_prop = copy.deepcopy(new_prop)
        if self._merge_func is not None:
            new_value = self._merge_func(self._prop, self._value, new_prop)
        else:
            new_value = copy.deepcopy(new_prop)

        self._prop = new_prop
        self._value = new_value
        logger.debug(f"PropTracker refreshed: value={new_value!r}")

        if self._on_refresh is not None:
            self._on_refresh(new_value)
        return True
