"""Operation reporting: where consumers hook into the wrappers' traps.

Every trap builds an Operation and hands it to ``report``. What a consumer
does with it (dependency tracking, change notification) is its own
business; this module only decides *whether* and *when* it is delivered.

Batching: write operations reported inside ``batch`` accumulate and are
delivered once, in order, when the outermost batch exits.

Untracked: read operations reported inside ``untracked`` are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger("reactree.tracking")

READ_TYPES = frozenset({"get", "has", "iterate"})


@dataclass(frozen=True)
class Operation:
    """One intercepted read or write on a raw value."""

    type: str
    target: Any
    key: Any = None
    value: Any = None
    old_value: Any = None
    # Node of the target at report time; keeps the path resolvable later.
    node: Any = field(default=None, repr=False, compare=False)

    @property
    def is_read(self) -> bool:
        return self.type in READ_TYPES

    @property
    def path(self) -> list:
        """Keys from the observed root down to the touched key."""
        from reactree.tree import node_for

        node = self.node if self.node is not None else node_for(self.target)
        path = node.path
        if self.key is not None:
            path.append(self.key)
        return path


Handler = Callable[[Operation], None]

handlers: list[Handler] = []

# Batch depth counter. When > 0, write operations are deferred.
_batch_depth: int = 0

# Untracked depth counter. When > 0, read operations are dropped.
_untracked_depth: int = 0

# Write operations reported during a batch, awaiting flush.
_pending: list[Operation] = []


def begin_batch() -> None:
    """Enter a batching scope. Nested batches are supported."""
    global _batch_depth
    _batch_depth += 1


def end_batch() -> None:
    """Exit a batching scope. When the outermost scope exits, flush pending operations."""
    global _batch_depth
    _batch_depth -= 1
    if _batch_depth == 0:
        _flush_pending()


def begin_untracked() -> None:
    global _untracked_depth
    _untracked_depth += 1


def end_untracked() -> None:
    global _untracked_depth
    _untracked_depth -= 1


def is_batching() -> bool:
    return _batch_depth > 0


def is_untracked() -> bool:
    return _untracked_depth > 0


def subscribe(handler: Handler) -> Callable[[], None]:
    """Register a handler for reported operations. Returns a function that removes it."""
    handlers.append(handler)

    def _unsubscribe() -> None:
        try:
            handlers.remove(handler)
        except ValueError:
            pass  # already removed

    return _unsubscribe


def report(operation: Operation) -> None:
    """Deliver an operation now, defer it, or drop it."""
    if operation.is_read:
        if _untracked_depth > 0:
            return
        _deliver(operation)
    elif _batch_depth > 0:
        _pending.append(operation)
    else:
        _deliver(operation)


def _deliver(operation: Operation) -> None:
    for handler in list(handlers):
        handler(operation)


def _flush_pending() -> None:
    """Deliver all pending operations. Handles operations reported during flush."""
    while _pending:
        # Handlers may report new writes during delivery.
        batch = list(_pending)
        _pending.clear()
        logger.debug("Flushing %d batched operations", len(batch))
        for operation in batch:
            _deliver(operation)


def get_pending_count() -> int:
    """Number of operations waiting for the outermost batch to exit. Useful for testing."""
    return len(_pending)
