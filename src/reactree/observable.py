"""Observable conversion: the single way a plain value becomes observed.

``observe`` decides whether a value gets wrapped at all and re-attaches
values that already are; ``wrap`` is the factory that builds a fresh
wrapper of the right family and depth and registers it.

Nested aggregates are wrapped lazily, the first time a trap reads them,
never eagerly at wrap time.

Usage:
    state = observable({"todos": [{"title": "write docs", "done": False}]})
    todo = state["todos"][0]        # wrapped on first access
    node_for(todo).path             # ["todos", 0]
"""

from __future__ import annotations

import logging
import types
from typing import Any, TypeVar

from reactree import _anchor
from reactree._base import ObservedValue, is_shallow_proxy, raw_of
from reactree.annotation import Visitor, create_annotation, set_field
from reactree.checkers import AggregateKind, classify, is_aggregate
from reactree.collection import ObservableDict, ObservableSet
from reactree.ordinary import ObservableList, ObservableObject
from reactree.tree import attach, node_for

logger = logging.getLogger("reactree.observable")

T = TypeVar("T")


def _trap_set(raw: Any, kind: AggregateKind) -> type[ObservedValue]:
    if kind is AggregateKind.COLLECTION:
        return ObservableDict if hasattr(raw, "keys") else ObservableSet
    if isinstance(raw, list):
        return ObservableList
    return ObservableObject


def wrap(raw: Any, shallow: bool = False) -> Any:
    """Build and register a new wrapper around ``raw``.

    Always constructs a fresh wrapper: callers go through ``observe``, which
    returns the existing one when there is one.
    """
    kind = classify(raw)
    if kind is AggregateKind.NOT_OBSERVABLE:
        raise TypeError(f"{type(raw).__name__!r} values cannot be observed")
    proxy = _trap_set(raw, kind)(raw, node_for(raw), shallow)
    _anchor.register_proxy(raw, proxy, shallow)
    logger.debug(
        "Wrapped %s as %s%s", type(raw).__name__, type(proxy).__name__, " (shallow)" if shallow else ""
    )
    return proxy


def observe(parent: Any, key: Any, value: Any, shallow: bool = False) -> Any:
    """Return the observed form of ``value`` as reached through ``parent[key]``.

    Primitives, callables and unsupported values come back unchanged. Values
    beneath a shallow wrapper come back unchanged too: shallow observation
    only covers the first level.
    """
    if not is_aggregate(value):
        return value

    if isinstance(value, ObservedValue):
        _reattach(parent, key, value)
        return value

    if classify(value) is AggregateKind.NOT_OBSERVABLE:
        return value

    if _under_shallow(parent):
        return value

    existing = _anchor.lookup_proxy(value, shallow)
    if existing is not None:
        _reattach(parent, key, value)
        return existing

    # Asking for a root does not move a value out of its tree.
    if parent is not None:
        attach(parent, key, value)
    return wrap(value, shallow)


def _under_shallow(parent: Any) -> bool:
    if parent is None:
        return False
    if isinstance(parent, ObservedValue) and is_shallow_proxy(parent):
        return True
    return _anchor.is_shallow(raw_of(parent))


def _reattach(parent: Any, key: Any, value: Any) -> None:
    if parent is None:
        return
    logger.debug("Re-attaching %s under key %r", type(raw_of(value)).__name__, key)
    attach(parent, key, value)


def adopt(parent: Any, key: Any, value: Any) -> Any:
    """Prepare ``value`` for being written into ``parent`` under ``key``.

    Returns the raw form to store and records the new attachment, so the
    written value reports the right path once it is read back.
    """
    raw = raw_of(value)
    if classify(raw) is not AggregateKind.NOT_OBSERVABLE and not _under_shallow(parent):
        attach(parent, key, raw)
    return raw


def observable(value: T) -> T:
    """Deeply observe a root value."""
    return observe(None, None, value)


def shallow(value: T) -> T:
    """Observe only the first level of a root value."""
    return observe(None, None, value, shallow=True)


def to_raw(value: T) -> T:
    """Return the raw value behind a wrapper, or ``value`` itself."""
    return raw_of(value)


def to_plain(value: Any, _seen: dict | None = None) -> Any:
    """Deep-copy ``value`` into plain data with no wrapper anywhere inside.

    Lists, dicts, sets and namespaces are copied; other objects are
    returned as their raw value.
    """
    if _seen is None:
        _seen = {}
    raw = raw_of(value)
    if id(raw) in _seen:
        return _seen[id(raw)]
    if isinstance(raw, list):
        result: Any = []
        _seen[id(raw)] = result
        result.extend(to_plain(item, _seen) for item in raw)
    elif isinstance(raw, dict):
        result = {}
        _seen[id(raw)] = result
        for k, v in raw.items():
            result[k] = to_plain(v, _seen)
    elif isinstance(raw, set):
        result = {to_plain(member, _seen) for member in raw}
    elif isinstance(raw, types.SimpleNamespace):
        result = types.SimpleNamespace()
        _seen[id(raw)] = result
        for k, v in vars(raw).items():
            setattr(result, k, to_plain(v, _seen))
    else:
        result = raw
    return result


def _field_maker(shallow_: bool):
    def make(visitor: Visitor) -> Any:
        if visitor.target is None:
            return observe(None, None, visitor.value, shallow_)
        value = observe(visitor.target, visitor.key, raw_of(visitor.value), shallow_)
        set_field(visitor.target, visitor.key, value)
        return visitor.target

    make.__name__ = "shallow_field" if shallow_ else "observable_field"
    return make


observable_field = create_annotation(_field_maker(False))

shallow_field = create_annotation(_field_maker(True))
