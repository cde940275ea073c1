"""Collection trap family: values addressed through methods.

Mappings and sets have no per-key attributes to intercept: reading the size,
a member or a value is a method call, so the traps live on the methods.
Reading methods lazily observe aggregate values; every other operation is
forwarded to the raw collection. Keys and members that are wrappers are
unwrapped before they reach the raw collection.
"""

from __future__ import annotations

from collections.abc import ItemsView, KeysView, ValuesView
from typing import Any, Iterable, Iterator

from reactree._base import (
    ObservedValue,
    adopt_value,
    observe_child,
    raw_of,
    raw_slot,
    report_operation,
)

_MISSING = object()


class ObservableDict(ObservedValue):
    """Method-level wrapper around a mapping."""

    __slots__ = ()

    # --- Read operations (report, wrap values) ---

    def __getitem__(self, key: Any) -> Any:
        key = raw_of(key)
        value = raw_slot(self)[key]
        report_operation(self, "get", key, value)
        return observe_child(self, key, value)

    def get(self, key: Any, default: Any = None) -> Any:
        key = raw_of(key)
        raw = raw_slot(self)
        if key not in raw:
            report_operation(self, "has", key)
            return default
        return self[key]

    def __iter__(self) -> Iterator[Any]:
        report_operation(self, "iterate")
        return iter(raw_slot(self))

    def __reversed__(self) -> Iterator[Any]:
        report_operation(self, "iterate")
        return reversed(raw_slot(self))

    def keys(self) -> KeysView:
        return KeysView(self)

    def values(self) -> ValuesView:
        return ValuesView(self)

    def items(self) -> ItemsView:
        return ItemsView(self)

    def copy(self) -> Any:
        """Return a plain shallow copy of the raw mapping."""
        report_operation(self, "iterate")
        return raw_slot(self).copy()

    def __or__(self, other: Any) -> Any:
        return raw_slot(self) | raw_of(other)

    def __ror__(self, other: Any) -> Any:
        return raw_of(other) | raw_slot(self)

    # --- Write operations (forward, report) ---

    def __setitem__(self, key: Any, value: Any) -> None:
        key = raw_of(key)
        raw = raw_slot(self)
        old_value = raw.get(key, _MISSING)
        raw[key] = adopt_value(self, key, value)
        if old_value is _MISSING:
            report_operation(self, "add", key, raw[key])
        elif old_value is not raw[key]:
            report_operation(self, "set", key, raw[key], old_value)

    def __delitem__(self, key: Any) -> None:
        key = raw_of(key)
        raw = raw_slot(self)
        old_value = raw[key]
        del raw[key]
        report_operation(self, "delete", key, None, old_value)

    def setdefault(self, key: Any, default: Any = None) -> Any:
        key = raw_of(key)
        if key not in raw_slot(self):
            self[key] = default
        return self[key]

    def pop(self, key: Any, default: Any = _MISSING) -> Any:
        key = raw_of(key)
        raw = raw_slot(self)
        if key not in raw:
            if default is _MISSING:
                raise KeyError(key)
            return default
        result = raw.pop(key)
        report_operation(self, "delete", key, None, result)
        return result

    def popitem(self) -> tuple[Any, Any]:
        key, value = raw_slot(self).popitem()
        report_operation(self, "delete", key, None, value)
        return key, value

    def update(self, other: Any = (), /, **kwargs: Any) -> None:
        other = raw_of(other)
        pairs = other.items() if hasattr(other, "items") else other
        for key, value in pairs:
            self[key] = value
        for key, value in kwargs.items():
            self[key] = value

    def __ior__(self, other: Any) -> ObservableDict:
        self.update(other)
        return self

    def clear(self) -> None:
        raw = raw_slot(self)
        old_value = dict(raw)
        raw.clear()
        report_operation(self, "clear", None, None, old_value)


class ObservableSet(ObservedValue):
    """Method-level wrapper around a set."""

    __slots__ = ()

    # --- Read operations (report, wrap members) ---

    def __iter__(self) -> Iterator[Any]:
        report_operation(self, "iterate")
        for member in raw_slot(self):
            yield observe_child(self, None, member)

    def copy(self) -> Any:
        report_operation(self, "iterate")
        return raw_slot(self).copy()

    def issubset(self, other: Iterable[Any]) -> bool:
        return raw_slot(self).issubset(_members(other))

    def issuperset(self, other: Iterable[Any]) -> bool:
        return raw_slot(self).issuperset(_members(other))

    def isdisjoint(self, other: Iterable[Any]) -> bool:
        return raw_slot(self).isdisjoint(_members(other))

    def union(self, *others: Iterable[Any]) -> Any:
        return raw_slot(self).union(*map(_members, others))

    def intersection(self, *others: Iterable[Any]) -> Any:
        return raw_slot(self).intersection(*map(_members, others))

    def difference(self, *others: Iterable[Any]) -> Any:
        return raw_slot(self).difference(*map(_members, others))

    def symmetric_difference(self, other: Iterable[Any]) -> Any:
        return raw_slot(self).symmetric_difference(_members(other))

    def __or__(self, other: Any) -> Any:
        return raw_slot(self) | raw_of(other)

    def __and__(self, other: Any) -> Any:
        return raw_slot(self) & raw_of(other)

    def __sub__(self, other: Any) -> Any:
        return raw_slot(self) - raw_of(other)

    def __xor__(self, other: Any) -> Any:
        return raw_slot(self) ^ raw_of(other)

    def __ror__(self, other: Any) -> Any:
        return raw_of(other) | raw_slot(self)

    def __rand__(self, other: Any) -> Any:
        return raw_of(other) & raw_slot(self)

    def __rsub__(self, other: Any) -> Any:
        return raw_of(other) - raw_slot(self)

    def __rxor__(self, other: Any) -> Any:
        return raw_of(other) ^ raw_slot(self)

    # --- Write operations (forward, report) ---

    def add(self, member: Any) -> None:
        raw = raw_slot(self)
        member = raw_of(member)
        if member not in raw:
            raw.add(adopt_value(self, None, member))
            report_operation(self, "add", None, member)

    def discard(self, member: Any) -> None:
        raw = raw_slot(self)
        member = raw_of(member)
        if member in raw:
            raw.discard(member)
            report_operation(self, "delete", None, None, member)

    def remove(self, member: Any) -> None:
        member = raw_of(member)
        if member not in raw_slot(self):
            raise KeyError(member)
        self.discard(member)

    def pop(self) -> Any:
        member = raw_slot(self).pop()
        report_operation(self, "delete", None, None, member)
        return member

    def clear(self) -> None:
        raw = raw_slot(self)
        old_value = set(raw)
        raw.clear()
        report_operation(self, "clear", None, None, old_value)

    def update(self, *others: Iterable[Any]) -> None:
        for other in others:
            for member in _members(other):
                self.add(member)

    def difference_update(self, *others: Iterable[Any]) -> None:
        for other in others:
            for member in _members(other):
                self.discard(member)

    def intersection_update(self, *others: Iterable[Any]) -> None:
        keep = raw_slot(self).intersection(*map(_members, others))
        for member in list(raw_slot(self)):
            if member not in keep:
                self.discard(member)

    def symmetric_difference_update(self, other: Iterable[Any]) -> None:
        for member in _members(other):
            if member in raw_slot(self):
                self.discard(member)
            else:
                self.add(member)

    def __ior__(self, other: Any) -> ObservableSet:
        self.update(other)
        return self

    def __iand__(self, other: Any) -> ObservableSet:
        self.intersection_update(other)
        return self

    def __isub__(self, other: Any) -> ObservableSet:
        self.difference_update(other)
        return self

    def __ixor__(self, other: Any) -> ObservableSet:
        self.symmetric_difference_update(other)
        return self


def _members(other: Iterable[Any]) -> set:
    """Raw members of ``other``, whatever mix of wrappers it holds."""
    return {raw_of(member) for member in raw_of(other)}
