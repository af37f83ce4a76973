"""
Dependency rules: derive extra field values from a single field edit.

A rule fires when a specific field is set to a specific value. Its ``derive``
function reads the current mapping and returns a partial mapping to merge, or
None to skip (e.g. when an auxiliary collection it needs is missing).

Rules are declarative data; ``derive_patch`` is the single dispatcher that
evaluates them, so adding a trigger value never touches control flow.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from functools import partial
import logging
import operator
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

Derivation = Callable[[Mapping], Optional[Dict[str, Any]]]

# Discount-code selector and its dependent field
SELECTOR_FIELD = "inputType"
DISCOUNT_VALUE_FIELD = "discountValue"
DISCOUNT_LOOKUP_FIELD = "array"
DISCOUNT_FALLBACK = "0"
DISCOUNT_CODES = (
    "DISCOUNT_CODE4000",
    "DISCOUNT_CODE4020",
    "DISCOUNT_CODE4022",
    "DISCOUNT_CODE4030",
    "DISCOUNT_CODE4040",
)


@dataclass(frozen=True)
class DependencyRule:
    """Fires ``derive`` when ``field`` is changed to ``value``."""
    field: str
    value: Any
    derive: Derivation

    def matches(self, name: str, value: Any, equals: Callable[[Any, Any], bool] = operator.eq) -> bool:
        return self.field == name and equals(self.value, value)


def _item_attr(item: Any, attr: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(attr)
    return getattr(item, attr, None)


def lookup_value(
    data: Mapping,
    code: str,
    *,
    collection_field: str = DISCOUNT_LOOKUP_FIELD,
    target_field: str = DISCOUNT_VALUE_FIELD,
    key_attr: str = "key",
    value_attr: str = "value",
    fallback: Any = DISCOUNT_FALLBACK,
) -> Optional[Dict[str, Any]]:
    """Derive ``target_field`` from the first item in ``collection_field`` keyed by ``code``.

    Returns None when the lookup collection is absent or not a list or
    tuple, so the caller skips the derivation instead of writing the fallback.
    """
    collection = data.get(collection_field)
    if collection is None:
        logger.debug(f"Lookup field {collection_field!r} missing, skipping derivation for {code!r}")
        return None
    if not isinstance(collection, (list, tuple)):
        logger.debug(f"Lookup field {collection_field!r} is not a list, skipping derivation for {code!r}")
        return None
    for item in collection:
        if _item_attr(item, key_attr) == code:
            return {target_field: _item_attr(item, value_attr)}
    return {target_field: fallback}


def lookup_rules(
    field: str,
    codes: Iterable[str],
    **lookup_kwargs: Any,
) -> Tuple[DependencyRule, ...]:
    """Build one lookup rule per trigger code on ``field``."""
    return tuple(
        DependencyRule(field=field, value=code, derive=partial(lookup_value, code=code, **lookup_kwargs))
        for code in codes
    )


DISCOUNT_CODE_RULES: Tuple[DependencyRule, ...] = lookup_rules(SELECTOR_FIELD, DISCOUNT_CODES)


def derive_patch(
    rules: Iterable[DependencyRule],
    state: Mapping,
    name: str,
    value: Any,
    equals: Callable[[Any, Any], bool] = operator.eq,
) -> Dict[str, Any]:
    """Evaluate every rule triggered by ``name = value`` against ``state``.

    Patches from several matching rules are merged in table order, later
    rules winning per key. The edited field itself is not included; the
    caller applies it after the patch.
    """
    patch: Dict[str, Any] = {}
    for rule in rules:
        if not rule.matches(name, value, equals):
            continue
        derived = rule.derive(state)
        if derived is None:
            continue
        logger.debug(f"Rule {rule.field}={rule.value!r} derived {derived!r}")
        patch.update(derived)
    return patch
