"""Data anchor: identity registries shared by every wrapper.

Two raw -> proxy maps (deep and shallow) keyed by ``id(raw)``. Builtin
containers cannot be weakly referenced, so the maps hold the *proxy*
weakly instead: a proxy keeps its raw value alive, which means an id can
never be reused while its entry exists, and the entry disappears together
with the last reference to the proxy.

The proxy -> raw direction needs no map: every proxy carries its raw
value in its ``_raw`` slot.
"""

from __future__ import annotations

import weakref
from typing import Any

from reactree._base import ObservedValue, raw_slot

raw_proxy: weakref.WeakValueDictionary[int, ObservedValue] = weakref.WeakValueDictionary()
raw_shallow_proxy: weakref.WeakValueDictionary[int, ObservedValue] = weakref.WeakValueDictionary()


def register_proxy(raw: Any, proxy: ObservedValue, shallow: bool = False) -> None:
    registry = raw_shallow_proxy if shallow else raw_proxy
    registry[id(raw)] = proxy


def lookup_raw(proxy: Any) -> Any | None:
    """Return the raw value behind ``proxy``, or None if it is not a proxy."""
    if isinstance(proxy, ObservedValue):
        return raw_slot(proxy)
    return None


def lookup_proxy(raw: Any, shallow: bool = False) -> ObservedValue | None:
    registry = raw_shallow_proxy if shallow else raw_proxy
    return registry.get(id(raw))


def is_shallow(raw: Any) -> bool:
    return id(raw) in raw_shallow_proxy
