"""reactree: transparent observable wrappers, tree tracking and execution boundaries."""

from importlib.metadata import version as _version

__version__ = _version("reactree")

from reactree._tracking import Operation, get_pending_count, subscribe
from reactree.checkers import (
    AggregateKind,
    classify,
    is_observable,
    is_support_observable,
    mark_observable,
    mark_raw,
)
from reactree.tree import DataNode, attach, detach, node_for
from reactree.ordinary import ObservableList, ObservableObject
from reactree.collection import ObservableDict, ObservableSet
from reactree.observable import (
    observable,
    observable_field,
    observe,
    shallow,
    shallow_field,
    to_plain,
    to_raw,
    wrap,
)
from reactree.annotation import (
    AnnotationCycleError,
    Visitor,
    create_annotation,
    define,
    get_observable_maker,
)
from reactree.boundary import (
    Boundary,
    create_bind_function,
    create_boundary_annotation,
    create_boundary_function,
)
from reactree.action import action, batch, transaction, untracked
# textual NOT auto-imported, opt-in only

__all__ = [
    "AggregateKind",
    "AnnotationCycleError",
    "Boundary",
    "DataNode",
    "ObservableDict",
    "ObservableList",
    "ObservableObject",
    "ObservableSet",
    "Operation",
    "Visitor",
    "action",
    "attach",
    "batch",
    "classify",
    "create_annotation",
    "create_bind_function",
    "create_boundary_annotation",
    "create_boundary_function",
    "define",
    "detach",
    "get_observable_maker",
    "get_pending_count",
    "is_observable",
    "is_support_observable",
    "mark_observable",
    "mark_raw",
    "node_for",
    "observable",
    "observable_field",
    "observe",
    "shallow",
    "shallow_field",
    "subscribe",
    "to_plain",
    "to_raw",
    "transaction",
    "untracked",
    "wrap",
]
