"""
Controlled-form state container.

Binds editable field values to a data mapping, tracks whether the user has
changed anything relative to upstream initial data, and keeps local edits
alive when that upstream data refreshes.

Quick Start:
    >>> from formstate import FormState, ChangeEvent
    >>>
    >>> form = FormState({"name": "", "tags": []}, on_submit=save)
    >>> form.change(ChangeEvent.of("name", "Ada"))
    >>> form.toggle_value({"target": {"name": "tags", "value": "admin"}})
    >>> form.has_changed
    True
    >>> form.refresh(new_initial_from_server)   # local edits survive
    >>> form.submit()                           # save(form.data)

Architecture:
    FormState owns the mapping through a PropTracker. Each upstream refresh
    runs the reconciler:

        field unchanged upstream  ->  keep local value
        field changed upstream    ->  adopt upstream value

    Each field edit is one pure reducer: dependency rules derive extra
    fields from the edit, then the edited field is applied on top.

Modules:
    - form_state: FormState and the apply_change reducer
    - reconciler: merge of refreshed initial data into local state
    - prop_tracker: upstream prop tracking with custom merge
    - rules: declarative dependency rules (discount codes)
    - events: change event types
    - lists: membership toggling for multi-select fields
    - config: FormConfig and thread-local defaults
    - snapshot_model: immutable FormSnapshot
"""

# Configuration
from formstate.config import (
    FormConfig,
    set_default_config,
    get_default_config,
    reset_default_config,
)

# Events
from formstate.events import ChangeEvent, EventTarget, unpack_event

# Rules
from formstate.rules import (
    DependencyRule,
    DISCOUNT_CODE_RULES,
    DISCOUNT_CODES,
    derive_patch,
    lookup_rules,
    lookup_value,
)

# Reconciliation
from formstate.reconciler import merge, should_clear_dirty
from formstate.prop_tracker import PropTracker

# Lists
from formstate.lists import toggle

# Form state
from formstate.form_state import FormState, apply_change
from formstate.snapshot_model import FormSnapshot

__all__ = [
    # Configuration
    'FormConfig',
    'set_default_config',
    'get_default_config',
    'reset_default_config',
    # Events
    'ChangeEvent',
    'EventTarget',
    'unpack_event',
    # Rules
    'DependencyRule',
    'DISCOUNT_CODE_RULES',
    'DISCOUNT_CODES',
    'derive_patch',
    'lookup_rules',
    'lookup_value',
    # Reconciliation
    'merge',
    'should_clear_dirty',
    'PropTracker',
    # Lists
    'toggle',
    # Form state
    'FormState',
    'apply_change',
    'FormSnapshot',
]

__version__ = '1.0.0'
__description__ = 'Controlled-form state container with refresh reconciliation'
