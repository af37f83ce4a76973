"""
FormState: controlled-form state container.

Holds the editable field mapping for a form independently of any widgets.
Lifecycle: created from the first initial data, lives as long as the form
is shown. Upstream refreshes are merged in through a PropTracker, widgets
push edits through change()/toggle_value(), and submit() hands the mapping
to the caller's handler.
"""
from collections.abc import Mapping
from contextlib import contextmanager
import copy
import logging
import operator
from typing import Any, Callable, Dict, Generator, Iterable, List, Optional, Set, Tuple

from formstate.config import FormConfig, get_default_config
from formstate.events import unpack_event
from formstate.lists import is_toggleable, toggle
from formstate.prop_tracker import PropTracker
from formstate.reconciler import merge, should_clear_dirty
from formstate.rules import DependencyRule, derive_patch
from formstate.snapshot_model import FormSnapshot

logger = logging.getLogger(__name__)

FieldMapping = Dict[str, Any]


def apply_change(
    state: Mapping,
    name: str,
    value: Any,
    rules: Iterable[DependencyRule] = (),
    equals: Callable[[Any, Any], bool] = operator.eq,
) -> FieldMapping:
    """Pure reducer for a single field edit.

    Derived values from matching dependency rules are merged first, then the
    edited field itself, so the plain assignment is never lost even if a rule
    also writes that field. Derived keys the form does not already hold are
    dropped so the field set never grows.
    """
    patch = derive_patch(rules, state, name, value, equals)
    unknown = [k for k in patch if k not in state]
    if unknown:
        logger.debug(f"Dropping derived values for unknown form fields: {unknown}")
    known = {k: v for k, v in patch.items() if k in state}
    return {**state, **known, name: value}


class FormState:
    """
    Field values plus a "has changed" flag for one form.

    Core attributes:
    - _tracker: PropTracker owning the live mapping and the last upstream snapshot
    - _original: initial data given at construction (reset() target)
    - _has_changed: dirty flag

    Everything else is derived:
    - data -> _tracker.value
    - initial -> _tracker.prop
    - dirty_fields -> data vs initial
    """

    def __init__(
        self,
        initial: Mapping,
        on_submit: Callable[[FieldMapping], Any],
        *,
        rules: Optional[Iterable[DependencyRule]] = None,
        config: Optional[FormConfig] = None,
        tracker_factory: Optional[Callable[..., PropTracker]] = None,
    ):
        """
        Args:
            initial: First initial data; its keys are the form's fields.
            on_submit: Handler called by submit() with the current mapping.
            rules: Dependency rules; defaults to the config's rule table.
            config: Behavior config; defaults to the thread's default config.
            tracker_factory: Builds the upstream tracker, called as
                ``factory(initial, merge_func=..., on_refresh=..., equals=...)``.
        """
        if not isinstance(initial, Mapping):
            raise TypeError(f"FormState initial data must be a mapping, got {type(initial).__name__}")
        if not callable(on_submit):
            raise TypeError("FormState on_submit must be callable")

        self._config = config if config is not None else get_default_config()
        self._equals = self._config.equals
        self._rules = tuple(rules) if rules is not None else tuple(self._config.rules)
        self._on_submit = on_submit

        self._original: FieldMapping = copy.deepcopy(dict(initial))
        self._has_changed = False

        # State held just before a refresh, read by _handle_refresh
        self._pre_refresh_state: Optional[FieldMapping] = None

        factory = tracker_factory if tracker_factory is not None else PropTracker
        self._tracker = factory(
            dict(initial),
            merge_func=self._merge,
            on_refresh=self._handle_refresh,
            equals=self._equals,
        )

        self._on_state_changed_callbacks: List[Callable[[], None]] = []
        self._batch_depth = 0
        self._batch_dirty = False

        logger.debug(f"FormState created: fields={sorted(self._original)}")

    # === Read accessors ===

    @property
    def data(self) -> FieldMapping:
        """Current field values (a shallow copy)."""
        return dict(self._tracker.value)

    @property
    def has_changed(self) -> bool:
        return self._has_changed

    @property
    def dirty(self) -> bool:
        """Alias of has_changed."""
        return self._has_changed

    @property
    def initial(self) -> FieldMapping:
        """Most recently reconciled initial data."""
        return dict(self._tracker.prop)

    @property
    def dirty_fields(self) -> Set[str]:
        """Fields whose value differs from the latest initial data."""
        current = self._tracker.value
        initial = self._tracker.prop
        return {k for k in current if not self._equals(current.get(k), initial.get(k))}

    def snapshot(self) -> FormSnapshot:
        return FormSnapshot.create(self._tracker.value, self._tracker.prop, self._has_changed, self._equals)

    # === State Change Subscription ===

    def on_state_changed(self, callback: Callable[[], None]) -> None:
        """Subscribe to data / dirty flag change notifications."""
        if callback not in self._on_state_changed_callbacks:
            self._on_state_changed_callbacks.append(callback)

    def off_state_changed(self, callback: Callable[[], None]) -> None:
        """Unsubscribe from state change notifications."""
        if callback in self._on_state_changed_callbacks:
            self._on_state_changed_callbacks.remove(callback)

    def _notify_state_changed(self) -> None:
        """Fire state change callbacks (best-effort)."""
        if self._batch_depth:
            self._batch_dirty = True
            return
        for callback in list(self._on_state_changed_callbacks):
            try:
                callback()
            except Exception as e:
                logger.warning(f"Error in state_changed callback: {e}")

    @contextmanager
    def batch(self) -> Generator[None, None, None]:
        """Coalesce notifications of several operations into one.

        Nested batches are supported; only the outermost one notifies.

        Example:
            with form.batch():
                form.set({"name": "x"})
                form.trigger_change()
            # single on_state_changed notification here
        """
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._batch_dirty:
                self._batch_dirty = False
                self._notify_state_changed()

    def _commit(self, updater: Optional[Callable[[FieldMapping], FieldMapping]] = None,
                has_changed: Optional[bool] = None) -> None:
        """Single point where data and the dirty flag are updated and observers told."""
        before = self._tracker.value
        was_changed = self._has_changed
        if updater is not None:
            self._tracker.set_value(updater)
        if has_changed is not None:
            self._has_changed = has_changed
        if self._has_changed != was_changed or self._tracker.value != before:
            self._notify_state_changed()

    # === Reconciliation ===

    def _merge(self, prev_initial: FieldMapping, prev_state: FieldMapping, new_initial: FieldMapping) -> FieldMapping:
        return merge(prev_initial, prev_state, new_initial, self._equals)

    def _handle_refresh(self, merged: FieldMapping) -> None:
        pre_merge = self._pre_refresh_state if self._pre_refresh_state is not None else merged
        if should_clear_dirty(pre_merge, self._tracker.prop, self._equals):
            self._has_changed = False

    def refresh(self, new_initial: Mapping) -> bool:
        """Feed a new upstream snapshot of the initial data.

        Fields whose upstream value did not move keep their local edits;
        fields that moved upstream adopt the new value.

        Returns:
            True if the snapshot differed from the previous one and was merged.
        """
        if not isinstance(new_initial, Mapping):
            logger.warning(f"Ignoring refresh with non-mapping initial data: {type(new_initial).__name__}")
            return False

        before = self._tracker.value
        was_changed = self._has_changed
        self._pre_refresh_state = dict(before)
        try:
            refreshed = self._tracker.update_prop(dict(new_initial))
        finally:
            self._pre_refresh_state = None

        if refreshed:
            logger.debug(f"FormState refreshed: has_changed={self._has_changed}")
            if self._has_changed != was_changed or self._tracker.value != before:
                self._notify_state_changed()
        return refreshed

    # === Edits ===

    def change_field(self, name: str, value: Any) -> None:
        """Set one field, running any dependency rules it triggers.

        Unknown field names are reported and ignored.
        """
        current = self._tracker.value
        if name not in current:
            logger.log(self._config.unknown_field_level, f"Unknown form field: {name}")
            return

        has_changed = None if self._equals(current[name], value) else True
        rules, equals = self._rules, self._equals
        self._commit(lambda state: apply_change(state, name, value, rules, equals), has_changed)

    def _read_event(self, event: Any) -> Optional[Tuple[str, Any]]:
        try:
            return unpack_event(event)
        except TypeError as e:
            logger.warning(f"Ignoring malformed change event: {e}")
            return None

    def change(self, event: Any, cb: Optional[Callable[[], None]] = None) -> None:
        """Apply a field change event ``{target: {name, value}}``.

        Malformed events are logged and ignored; ``cb`` is not called for them.
        """
        unpacked = self._read_event(event)
        if unpacked is None:
            return
        name, value = unpacked
        self.change_field(name, value)
        if callable(cb):
            cb()

    def toggle_value(self, event: Any, cb: Optional[Callable[[], None]] = None) -> None:
        """Flip membership of ``value`` in the list field ``name``.

        Fields not holding a list or tuple are left alone silently.
        ``cb`` is called either way, except for malformed events.
        """
        unpacked = self._read_event(event)
        if unpacked is None:
            return
        name, value = unpacked
        field_value = self._tracker.value.get(name)

        if is_toggleable(field_value):
            equals = self._equals
            self._commit(
                lambda state: {**state, name: toggle(value, state[name], equals)},
                None if self._has_changed else True,
            )

        if callable(cb):
            cb()

    # === Bulk operations ===

    def reset(self) -> None:
        """Restore the initial data given at construction.

        The dirty flag is recomputed against the latest initial data.
        """
        original = copy.deepcopy(self._original)
        has_changed = not self._equals(original, dict(self._tracker.prop))
        self._commit(lambda state: original, has_changed)

    def set(self, partial: Mapping) -> None:
        """Shallow-merge known fields from ``partial``. Leaves the dirty flag alone."""
        if not isinstance(partial, Mapping):
            logger.warning(f"Ignoring set() with non-mapping data: {type(partial).__name__}")
            return
        current = self._tracker.value
        unknown = [k for k in partial if k not in current]
        if unknown:
            logger.warning(f"set() ignoring unknown form fields: {unknown}")
        known = {k: v for k, v in partial.items() if k in current}
        if not known:
            return
        self._commit(lambda state: {**state, **known})

    def submit(self) -> Any:
        """Hand the current mapping to the submit handler and return its result."""
        return self._on_submit(self.data)

    def trigger_change(self) -> None:
        """Mark the form changed without touching any field."""
        self._commit(has_changed=True)
