"""Common interface of every wrapper, whatever its trap family.

A wrapper holds exactly one raw value and never copies it. The two trap
families (``reactree.ordinary`` and ``reactree.collection``) subclass
ObservedValue and only differ in *where* they intercept: attribute/index
access for ordinary aggregates, method calls for collections.

Wrapper state lives in dunder slots that no user object defines, and the
helpers the traps share are module functions, so every ordinary attribute
name reaches the wrapped object.
"""

from __future__ import annotations

from typing import Any

from reactree import _tracking

_RAW = "__reactree_target__"
_NODE = "__reactree_node__"
_SHALLOW = "__reactree_shallow__"


def raw_of(value: Any) -> Any:
    """Unwrap ``value`` if it is a wrapper, otherwise return it unchanged."""
    if isinstance(value, ObservedValue):
        return object.__getattribute__(value, _RAW)
    return value


def raw_slot(proxy: ObservedValue) -> Any:
    return object.__getattribute__(proxy, _RAW)


def node_slot(proxy: ObservedValue) -> Any:
    return object.__getattribute__(proxy, _NODE)


def is_shallow_proxy(proxy: ObservedValue) -> bool:
    return object.__getattribute__(proxy, _SHALLOW)


def observe_child(proxy: ObservedValue, key: Any, value: Any) -> Any:
    """Lazily observe ``value`` as reached through ``proxy[key]``."""
    # Shallow wrappers only cover their first level.
    if is_shallow_proxy(proxy):
        return value
    from reactree.observable import observe

    return observe(raw_slot(proxy), key, value)


def adopt_value(proxy: ObservedValue, key: Any, value: Any) -> Any:
    """Unwrap a value about to be written and record where it now hangs."""
    if is_shallow_proxy(proxy):
        return raw_of(value)
    from reactree.observable import adopt

    return adopt(raw_slot(proxy), key, value)


def report_operation(
    proxy: ObservedValue, type_: str, key: Any = None, value: Any = None, old_value: Any = None
) -> None:
    if _tracking.handlers:
        _tracking.report(
            _tracking.Operation(type_, raw_slot(proxy), key, value, old_value, node_slot(proxy))
        )


class ObservedValue:
    """Base class of all wrappers. Subclasses define the traps."""

    __slots__ = (_RAW, _NODE, _SHALLOW, "__weakref__")

    def __init__(self, raw: Any, node: Any, shallow: bool = False) -> None:
        object.__setattr__(self, _RAW, raw)
        object.__setattr__(self, _NODE, node)
        object.__setattr__(self, _SHALLOW, shallow)

    # isinstance(proxy, type(raw)) keeps working, as with unittest.mock.
    @property
    def __class__(self):
        return type(raw_slot(self))

    # --- Protocol forwarding shared by both families ---

    def __repr__(self) -> str:
        return repr(raw_slot(self))

    def __str__(self) -> str:
        return str(raw_slot(self))

    def __eq__(self, other: Any) -> bool:
        return raw_slot(self) == raw_of(other)

    def __ne__(self, other: Any) -> bool:
        return raw_slot(self) != raw_of(other)

    def __hash__(self) -> int:
        return hash(raw_slot(self))

    def __bool__(self) -> bool:
        report_operation(self, "has")
        return bool(raw_slot(self))

    def __len__(self) -> int:
        report_operation(self, "iterate")
        return len(raw_slot(self))

    def __contains__(self, item: Any) -> bool:
        report_operation(self, "has", item)
        return raw_of(item) in raw_slot(self)

    def __copy__(self):
        import copy

        return copy.copy(raw_slot(self))

    def __deepcopy__(self, memo):
        import copy

        return copy.deepcopy(raw_slot(self), memo)

    def __lt__(self, other: Any) -> bool:
        return raw_slot(self) < raw_of(other)

    def __le__(self, other: Any) -> bool:
        return raw_slot(self) <= raw_of(other)

    def __gt__(self, other: Any) -> bool:
        return raw_slot(self) > raw_of(other)

    def __ge__(self, other: Any) -> bool:
        return raw_slot(self) >= raw_of(other)
