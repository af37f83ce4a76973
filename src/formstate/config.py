"""
Form configuration and process-wide defaults.

Provides thread-local storage for the default FormConfig used by every
FormState that is not constructed with an explicit ``config=``.

Default behavior: deep equality via ``==`` and the discount-code rule table.
Explicit override: pass ``config=FormConfig(...)`` to FormState.
"""

import logging
import operator
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from formstate.rules import DISCOUNT_CODE_RULES, DependencyRule


@dataclass(frozen=True)
class FormConfig:
    """Behavioral knobs for a FormState.

    equals: Deep-equality predicate used by reconciliation and toggling.
    rules: Dependency rules evaluated on every field change.
    unknown_field_level: Logging level used to report edits of unknown fields.
    """
    equals: Callable[[Any, Any], bool] = operator.eq
    rules: Tuple[DependencyRule, ...] = DISCOUNT_CODE_RULES
    unknown_field_level: int = logging.ERROR


# Thread-local storage: each thread sees its own default config
_default_config_context = threading.local()


def set_default_config(config: FormConfig) -> None:
    """Set the default FormConfig for the current thread.

    Called when:
    - App startup installs its own rule table
    - Tests swap equality predicates

    Args:
        config: The FormConfig new FormStates pick up
    """
    _default_config_context.value = config


def get_default_config() -> FormConfig:
    """Get the default FormConfig for the current thread.

    Returns:
        The installed config, or a fresh ``FormConfig()`` if none was set
    """
    config: Optional[FormConfig] = getattr(_default_config_context, 'value', None)
    return config if config is not None else FormConfig()


def reset_default_config() -> None:
    """Drop the thread's installed default config."""
    if hasattr(_default_config_context, 'value'):
        del _default_config_context.value
