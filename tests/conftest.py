"""Shared pytest fixtures for reactree tests."""

import pytest

from reactree import _tracking, subscribe, tree


@pytest.fixture(autouse=True)
def reset_tracking():
    """Drop handlers, pending operations and anchored trees left behind by a test."""
    yield
    _tracking.handlers.clear()
    _tracking._pending.clear()
    _tracking._batch_depth = 0
    _tracking._untracked_depth = 0
    tree._anchored.clear()


@pytest.fixture
def ops():
    """Collect every operation delivered to subscribers."""
    log = []
    subscribe(log.append)
    return log
