"""Structural tree tracking: where each observed value currently hangs.

A DataNode records the parent raw value and the key through which a value
was last reached. Re-attaching a value elsewhere overwrites its node: the
tree follows the *current* attachment, not the history.

Lookup goes through a weak map keyed by ``id(raw)``. Builtin containers
cannot be weakly referenced, so a node lives as long as its tree does. A
parent node owns the nodes attached beneath it and every node keeps its
parent node, so holding any node of a tree holds all of it. Every wrapper
keeps its own node. A tree rooted at a value that has no wrapper is
anchored in this module until its root is attached elsewhere or released
with ``detach``.

A node keeps its raw value alive, so an id is never reused while its node
is reachable.
"""

from __future__ import annotations

import weakref
from typing import Any

from reactree import _anchor
from reactree._base import raw_of

_nodes: weakref.WeakValueDictionary[int, DataNode] = weakref.WeakValueDictionary()

# Roots of trees that no wrapper holds.
_anchored: dict[int, DataNode] = {}


class DataNode:
    """Current attachment of one raw value inside the observed tree."""

    __slots__ = ("value", "target", "key", "_parent_node", "_children", "__weakref__")

    def __init__(self, value: Any, target: Any = None, key: Any = None) -> None:
        self.value = value
        self.target = target
        self.key = key
        self._parent_node: DataNode | None = None
        self._children: set[DataNode] = set()

    @property
    def target_raw(self) -> Any:
        return raw_of(self.target)

    @property
    def parent(self) -> DataNode | None:
        if self.target is None:
            return None
        if self._parent_node is not None:
            return self._parent_node
        return node_for(self.target)

    @property
    def children(self) -> frozenset[DataNode]:
        """Nodes currently attached beneath this one."""
        return frozenset(self._children)

    @property
    def path(self) -> list:
        """Keys from the root down to this node. Set members contribute no key."""
        keys = []
        node: DataNode | None = self
        seen = set()
        while node is not None and id(node) not in seen:
            seen.add(id(node))
            if node.key is not None:
                keys.append(node.key)
            node = node.parent
        keys.reverse()
        return keys

    def is_equal(self, other: DataNode) -> bool:
        if self.key is not None:
            return self.target_raw is other.target_raw and self.key == other.key
        return self.value is other.value

    def contains(self, other: DataNode) -> bool:
        """True if ``other`` is this node or hangs somewhere beneath it."""
        if other is self:
            return True
        node = other.parent
        seen = set()
        while node is not None and id(node) not in seen:
            if node is self:
                return True
            seen.add(id(node))
            node = node.parent
        return False

    def _unlink(self) -> None:
        if self._parent_node is not None:
            self._parent_node._children.discard(self)
            self._parent_node = None

    def __repr__(self) -> str:
        return f"DataNode(key={self.key!r}, path={self.path!r})"


def node_for(value: Any) -> DataNode:
    """Return the node of ``value``, creating an empty one on first request."""
    raw = raw_of(value)
    node = _nodes.get(id(raw))
    if node is None:
        node = DataNode(raw)
        _nodes[id(raw)] = node
    return node


def _anchor_root(node: DataNode) -> None:
    raw = node.value
    if node.target is not None:
        return
    # A root held by a wrapper lives as long as the wrapper.
    if _anchor.lookup_proxy(raw) is not None or _anchor.lookup_proxy(raw, True) is not None:
        return
    _anchored[id(raw)] = node


def attach(parent: Any, key: Any, child: Any) -> DataNode:
    """Record that ``child`` is reached through ``parent`` under ``key``.

    Overwrites any previous attachment of ``child``. The node stays
    reachable as long as the parent's tree does, whether or not the caller
    keeps the result.
    """
    node = node_for(child)
    node._unlink()
    node.key = key
    if parent is None:
        node.target = None
        if key is not None:
            _anchor_root(node)
        return node
    parent_raw = raw_of(parent)
    node.target = parent_raw
    _anchored.pop(id(node.value), None)
    if parent_raw is not node.value:
        parent_node = node_for(parent_raw)
        node._parent_node = parent_node
        parent_node._children.add(node)
        _anchor_root(parent_node)
    return node


def detach(value: Any) -> DataNode | None:
    """Forget the attachment of ``value`` and release a tree anchored at it.

    Returns the released node, or None if ``value`` has no node.
    """
    raw = raw_of(value)
    node = _nodes.get(id(raw))
    if node is None:
        return None
    node._unlink()
    node.target = None
    node.key = None
    _anchored.pop(id(raw), None)
    return node
