"""Type classification: which trap family, if any, a value gets.

Ordinary aggregates are addressed by attribute or index (lists, namespaces,
dataclass instances, classes opted in with ``mark_observable``).
Collections are addressed through methods (mappings and sets).
"""

from __future__ import annotations

import dataclasses
import enum
import types
from collections.abc import MutableMapping, MutableSet
from typing import Any

from reactree._base import ObservedValue

RAW_MARKER = "__reactree_raw__"
OBSERVABLE_MARKER = "__reactree_observable__"

_SCALARS = (str, bytes, bytearray, int, float, complex, bool, type(None))
_IMMUTABLE = (tuple, frozenset, range, memoryview)


class AggregateKind(enum.Enum):
    NOT_OBSERVABLE = "not_observable"
    ORDINARY = "ordinary"
    COLLECTION = "collection"


def is_observable(value: Any) -> bool:
    """True if ``value`` is a wrapper produced by this package."""
    return isinstance(value, ObservedValue)


def is_aggregate(value: Any) -> bool:
    """True if ``value`` has composite structure worth looking at."""
    if isinstance(value, _SCALARS) or callable(value):
        return False
    return not isinstance(value, (type, types.ModuleType))


def _marked(value: Any, marker: str) -> bool:
    try:
        return bool(getattr(value, marker, False))
    except Exception:
        # Objects with exotic __getattr__ are treated as unmarked.
        return False


def classify(value: Any) -> AggregateKind:
    if not is_aggregate(value) or isinstance(value, ObservedValue):
        return AggregateKind.NOT_OBSERVABLE
    if isinstance(value, _IMMUTABLE) or _marked(value, RAW_MARKER):
        return AggregateKind.NOT_OBSERVABLE
    if isinstance(value, (dict, set, MutableMapping, MutableSet)):
        return AggregateKind.COLLECTION
    if isinstance(value, (list, types.SimpleNamespace)):
        return AggregateKind.ORDINARY
    if dataclasses.is_dataclass(value) or _marked(value, OBSERVABLE_MARKER):
        return AggregateKind.ORDINARY
    return AggregateKind.NOT_OBSERVABLE


def is_support_observable(value: Any) -> bool:
    return classify(value) is not AggregateKind.NOT_OBSERVABLE


def _mark(value: Any, marker: str) -> Any:
    try:
        setattr(value, marker, True)
    except (AttributeError, TypeError):
        raise TypeError(
            f"Cannot mark {type(value).__name__!r} instances; mark their class or use a subclass"
        ) from None
    return value


def mark_raw(value: Any) -> Any:
    """Opt a class (all its instances) or a single instance out of observation."""
    return _mark(value, RAW_MARKER)


def mark_observable(value: Any) -> Any:
    """Opt a class (all its instances) or a single instance into observation.

    Usable as a class decorator.
    """
    return _mark(value, OBSERVABLE_MARKER)
