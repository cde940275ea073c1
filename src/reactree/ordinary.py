"""Ordinary trap family: values addressed by attribute or by index.

ObservableObject intercepts attribute access on namespaces, dataclass
instances and opted-in classes. ObservableList intercepts index access and
the list mutators.

Reads lazily observe aggregate children the first time they are reached.
Writes go straight to the raw value; wrappers are unwrapped before storing
so the raw tree never contains a wrapper.
"""

from __future__ import annotations

import inspect
import types
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

# Names resolved on the wrapper itself rather than forwarded to the raw value.
_INTERNALS = frozenset({"__class__", "__copy__", "__deepcopy__"})


class ObservableObject(ObservedValue):
    """Attribute-level wrapper around a plain object."""

    __slots__ = ()

    def __getattribute__(self, name: str) -> Any:
        if name in _INTERNALS:
            return object.__getattribute__(self, name)
        raw = raw_slot(self)
        value = getattr(raw, name)
        if name.startswith("__") and name.endswith("__"):
            return value
        # Methods run against the wrapper so their own writes are intercepted.
        if inspect.ismethod(value) and value.__self__ is raw:
            return types.MethodType(value.__func__, self)
        report_operation(self, "get", name, value)
        return observe_child(self, name, value)

    def __setattr__(self, name: str, value: Any) -> None:
        raw = raw_slot(self)
        old_value = getattr(raw, name, _MISSING)
        new_value = adopt_value(self, name, value)
        setattr(raw, name, new_value)
        if old_value is _MISSING:
            report_operation(self, "add", name, new_value)
        elif old_value is not new_value:
            report_operation(self, "set", name, new_value, old_value)

    def __delattr__(self, name: str) -> None:
        raw = raw_slot(self)
        old_value = getattr(raw, name, None)
        delattr(raw, name)
        report_operation(self, "delete", name, None, old_value)

    def __dir__(self) -> list[str]:
        return dir(raw_slot(self))

    # Item protocol, for objects that also support it.

    def __getitem__(self, key: Any) -> Any:
        value = raw_slot(self)[key]
        report_operation(self, "get", key, value)
        return observe_child(self, key, value)

    def __setitem__(self, key: Any, value: Any) -> None:
        raw = raw_slot(self)
        raw[key] = adopt_value(self, key, value)
        report_operation(self, "set", key, raw_of(value))

    def __delitem__(self, key: Any) -> None:
        del raw_slot(self)[key]
        report_operation(self, "delete", key)

    def __iter__(self) -> Iterator[Any]:
        report_operation(self, "iterate")
        for value in raw_slot(self):
            yield observe_child(self, None, value)


class ObservableList(ObservedValue):
    """Index-level wrapper around a list."""

    __slots__ = ()

    def _index(self, index: int) -> int:
        raw = raw_slot(self)
        return index + len(raw) if index < 0 else index

    # --- Read operations (report, wrap children) ---

    def __getitem__(self, index: int | slice) -> Any:
        raw = raw_slot(self)
        value = raw[index]
        if isinstance(index, slice):
            # Slices are new lists, outside the observed tree.
            report_operation(self, "iterate")
            return value
        key = self._index(index)
        report_operation(self, "get", key, value)
        return observe_child(self, key, value)

    def __iter__(self) -> Iterator[Any]:
        report_operation(self, "iterate")
        for index, value in enumerate(raw_slot(self)):
            yield observe_child(self, index, value)

    def __reversed__(self) -> Iterator[Any]:
        report_operation(self, "iterate")
        raw = raw_slot(self)
        for index in range(len(raw) - 1, -1, -1):
            yield observe_child(self, index, raw[index])

    def index(self, value: Any, *args: Any) -> int:
        report_operation(self, "iterate")
        return raw_slot(self).index(raw_of(value), *args)

    def count(self, value: Any) -> int:
        report_operation(self, "iterate")
        return raw_slot(self).count(raw_of(value))

    def copy(self) -> list:
        """Return a plain shallow copy of the raw list."""
        report_operation(self, "iterate")
        return raw_slot(self).copy()

    def __add__(self, other: Iterable[Any]) -> list:
        return raw_slot(self) + raw_of(other)

    def __radd__(self, other: Iterable[Any]) -> list:
        return raw_of(other) + raw_slot(self)

    def __mul__(self, count: int) -> list:
        return raw_slot(self) * count

    __rmul__ = __mul__

    # --- Write operations (pass through, report) ---

    def __setitem__(self, index: int | slice, value: Any) -> None:
        raw = raw_slot(self)
        if isinstance(index, slice):
            raw[index] = [raw_of(item) for item in value]
            report_operation(self, "set", None, raw)
            return
        key = self._index(index)
        old_value = raw[index]
        raw[index] = adopt_value(self, key, value)
        if old_value is not raw[index]:
            report_operation(self, "set", key, raw[index], old_value)

    def __delitem__(self, index: int | slice) -> None:
        raw = raw_slot(self)
        key = None if isinstance(index, slice) else self._index(index)
        old_value = raw[index]
        del raw[index]
        report_operation(self, "delete", key, None, old_value)

    def append(self, value: Any) -> None:
        raw = raw_slot(self)
        raw.append(adopt_value(self, len(raw), value))
        report_operation(self, "add", len(raw) - 1, raw[-1])

    def extend(self, values: Iterable[Any]) -> None:
        for value in list(values):
            self.append(value)

    def __iadd__(self, values: Iterable[Any]) -> ObservableList:
        self.extend(values)
        return self

    def __imul__(self, count: int) -> ObservableList:
        raw = raw_slot(self)
        raw *= count
        report_operation(self, "set", None, raw)
        return self

    def insert(self, index: int, value: Any) -> None:
        raw = raw_slot(self)
        key = min(max(self._index(index), 0), len(raw))
        raw.insert(key, adopt_value(self, key, value))
        report_operation(self, "add", key, raw[key])

    def pop(self, index: int = -1) -> Any:
        raw = raw_slot(self)
        key = self._index(index)
        result = raw.pop(index)
        report_operation(self, "delete", key, None, result)
        return result

    def remove(self, value: Any) -> None:
        raw = raw_slot(self)
        key = raw.index(raw_of(value))
        result = raw.pop(key)
        report_operation(self, "delete", key, None, result)

    def clear(self) -> None:
        raw = raw_slot(self)
        old_value = raw.copy()
        raw.clear()
        report_operation(self, "clear", None, None, old_value)

    def sort(self, *, key: Any = None, reverse: bool = False) -> None:
        raw = raw_slot(self)
        raw.sort(key=key, reverse=reverse)
        report_operation(self, "set", None, raw)

    def reverse(self) -> None:
        raw = raw_slot(self)
        raw.reverse()
        report_operation(self, "set", None, raw)
