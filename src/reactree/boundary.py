"""Boundaries: symmetric start/end guards around a region of execution.

A Boundary runs ``start()``, then the guarded callable, then ``end()`` on
every exit path. Its ``bound`` binder attaches the boundary to a callback
once, so every later call of that callback (from a timer, an event
handler, ...) re-enters the boundary on its own.

Nesting is plain call-stack nesting: an inner boundary runs entirely inside
an outer one. Reference counting, if any, belongs to ``start``/``end``.
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, TypeVar

from reactree.annotation import MAKER_ATTR, create_annotation, get_field, set_field

R = TypeVar("R")
F = TypeVar("F", bound=Callable[..., Any])


class Boundary:
    """A start/end guard pair, callable and usable as a context manager."""

    def __init__(self, start: Callable[[], Any], end: Callable[[], Any]) -> None:
        self.start = start
        self.end = end
        self.bound = create_bind_function(self)

    def __call__(self, fn: Callable[[], R] | None = None) -> R | None:
        """Run ``fn`` inside the boundary and return its result.

        ``end`` runs on every exit path, including a ``start`` or ``fn`` that
        raises; the exception propagates unchanged.
        """
        result = None
        try:
            self.start()
            if callable(fn):
                result = fn()
        finally:
            self.end()
        return result

    def __enter__(self) -> Boundary:
        # __exit__ is skipped when __enter__ raises.
        try:
            self.start()
        except BaseException:
            self.end()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.end()

    def __repr__(self) -> str:
        return f"Boundary({_name(self.start)}, {_name(self.end)})"


def _name(fn: Callable) -> str:
    return getattr(fn, "__name__", repr(fn))


def create_boundary_function(start: Callable[[], Any], end: Callable[[], Any]) -> Boundary:
    return Boundary(start, end)


def create_bind_function(boundary: Callable[[Callable[[], Any]], Any]) -> Callable[..., Any]:
    """Build the binder of ``boundary``.

    ``bind(callback, context)`` returns a function that re-enters the
    boundary on every call and runs ``callback`` with the call's arguments.
    When ``context`` is given, plain functions are bound to it as ``self``;
    already-bound methods keep their own ``self``.
    """

    def bind(callback: F, context: Any = None) -> F:
        target = callback
        if context is not None and not inspect.ismethod(callback) and hasattr(callback, "__get__"):
            target = callback.__get__(context, type(context))

        @functools.wraps(callback)
        def bound_callback(*args: Any, **kwargs: Any) -> Any:
            return boundary(lambda: target(*args, **kwargs))

        return bound_callback  # type: ignore[return-value]

    return bind


def create_boundary_annotation(start: Callable[[], Any], end: Callable[[], Any]) -> Boundary:
    """Build a boundary that doubles as a field annotation.

    Applied to a field, the annotation replaces the method stored there with
    its bound form, fixed to the owning object:

        batch = create_boundary_annotation(begin, end)
        define(store, {"save": batch})   # every store.save() now runs in the boundary
    """
    boundary = create_boundary_function(start, end)

    def rebind_field(visitor):
        # Methods read off the target come back already bound to it.
        set_field(visitor.target, visitor.key, boundary.bound(get_field(visitor.target, visitor.key)))
        return visitor.target

    annotation = create_annotation(rebind_field)
    setattr(boundary, MAKER_ATTR, annotation)
    setattr(boundary.bound, MAKER_ATTR, annotation)
    return boundary
