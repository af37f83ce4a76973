"""
Change events dispatched by the UI layer.

A change event names a field and carries its new value. The UI may hand over
a ``ChangeEvent``, any object shaped like one (``event.target.name``), or the
plain mapping form ``{"target": {"name": ..., "value": ...}}``.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Tuple


@dataclass(frozen=True)
class EventTarget:
    """The widget that changed: field name and its new value."""
    name: str
    value: Any = None


@dataclass(frozen=True)
class ChangeEvent:
    """A single field edit."""
    target: EventTarget

    @classmethod
    def of(cls, name: str, value: Any) -> 'ChangeEvent':
        """Build an event without spelling out the target."""
        return cls(target=EventTarget(name=name, value=value))


def unpack_event(event: Any) -> Tuple[str, Any]:
    """Extract ``(name, value)`` from any supported event shape.

    Raises:
        TypeError: If the event has no target name.
    """
    target = event.get('target') if isinstance(event, Mapping) else getattr(event, 'target', None)
    if isinstance(target, Mapping):
        if 'name' not in target:
            raise TypeError(f"Change event target has no name: {event!r}")
        return target['name'], target.get('value')
    if target is None or not hasattr(target, 'name'):
        raise TypeError(f"Not a change event: {event!r}")
    return target.name, getattr(target, 'value', None)
