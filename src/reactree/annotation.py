"""Annotations: tagged transformations that can be recognised later.

An annotation is a callable carrying its maker under ``__observable_maker__``.
Annotations built on top of other annotations keep the chain, and
``get_observable_maker`` follows it down to the concrete maker.

Usage:
    def upper_maker(visitor):
        return visitor.value.upper()

    upper = create_annotation(upper_maker)
    upper("abc")                     # "ABC"
    get_observable_maker(upper)      # upper_maker
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable, Mapping

MAKER_ATTR = "__observable_maker__"


class AnnotationCycleError(ValueError):
    """A chain of annotations points back at itself."""


@dataclass
class Visitor:
    """What a maker is asked to transform: a value, or a field of a target."""

    value: Any = None
    target: Any = None
    key: Any = None


Maker = Callable[[Visitor], Any]


def create_annotation(maker: Maker) -> Callable[[Any], Any]:
    """Wrap ``maker`` into a callable annotation that remembers it."""

    def annotation(target: Any) -> Any:
        return maker(Visitor(value=target))

    if callable(maker):
        functools.update_wrapper(annotation, maker, updated=())
        setattr(annotation, MAKER_ATTR, maker)
    return annotation


def get_observable_maker(marker: Any) -> Maker | None:
    """Resolve ``marker`` to the innermost maker of its chain.

    Returns None when ``marker`` carries no maker at all.
    """
    maker = getattr(marker, MAKER_ATTR, None)
    if maker is None:
        return None
    seen = {id(marker)}
    while True:
        inner = getattr(maker, MAKER_ATTR, None)
        if inner is None:
            return maker
        if id(maker) in seen:
            raise AnnotationCycleError(f"Annotation chain of {marker!r} is cyclic")
        seen.add(id(maker))
        maker = inner


def get_field(target: Any, key: Any) -> Any:
    if isinstance(target, Mapping):
        return target[key]
    return getattr(target, key)


def set_field(target: Any, key: Any, value: Any) -> None:
    if isinstance(target, Mapping):
        target[key] = value
    else:
        setattr(target, key, value)


def define(target: Any, annotations: Mapping[Any, Any]) -> Any:
    """Apply field annotations to ``target`` and return it.

    ``annotations`` maps a field name (or mapping key) to an annotation;
    each annotation's resolved maker receives a Visitor for that field.
    """
    for key, annotation in annotations.items():
        maker = get_observable_maker(annotation)
        if maker is None:
            raise TypeError(f"{annotation!r} is not an annotation (field {key!r})")
        maker(Visitor(value=get_field(target, key), target=target, key=key))
    return target
