"""Built-in boundaries: batching and tracking suppression.

Writes performed inside ``batch`` are reported to subscribers once, when the
outermost batch exits, so they never see a half-applied change. Reads
performed inside ``untracked`` are not reported at all. ``action`` does both.

Each of them works three ways:

    batch(lambda: move(todo, done_list))      # run a thunk

    with batch:                               # guard a block
        state["a"] = 1
        state["b"] = 2

    @action.bound                             # guard every call of a function
    def reset():
        state.clear()

``batch`` and ``action`` are also field annotations for ``define``.

Calling a boundary runs its argument right away, so decorate functions with
``@action.bound`` rather than ``@action``: the latter would run the function
once at definition time and bind its name to the result.
"""

from __future__ import annotations

from contextlib import contextmanager

from reactree._tracking import begin_batch, begin_untracked, end_batch, end_untracked
from reactree.boundary import create_boundary_annotation, create_boundary_function


def _begin_action() -> None:
    begin_batch()
    begin_untracked()


def _end_action() -> None:
    end_untracked()
    end_batch()


batch = create_boundary_annotation(begin_batch, end_batch)

untracked = create_boundary_function(begin_untracked, end_untracked)

action = create_boundary_annotation(_begin_action, _end_action)


@contextmanager
def transaction():
    """Context manager for batching writes.

    Usage:
        with transaction():
            state["a"] = 1
            state["b"] = 2
            # subscribers see both writes here, after the block
    """
    with batch:
        yield
