"""Immutable binary tree nodes and structural helpers.

Nodes compare by identity: two nodes holding the same value in different
positions are distinct, which is what the traversal bookkeeping relies on.
Structural comparison goes through ``to_dict``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


class TreeFormatError(ValueError):
    pass


@dataclass(slots=True, frozen=True, eq=False, repr=False)
class Node:
    value: Any
    left: Node | None = None
    right: Node | None = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self) -> str:
        return f"Node({self.value!r})"


def node(value: Any, left: Node | None = None, right: Node | None = None) -> Node:
    return Node(value=value, left=left, right=right)


def iter_subtrees(root: Node | None) -> Iterator[Node]:
    """Yield every node under ``root`` in pre-order without recursing."""
    pending: list[Node] = [] if root is None else [root]
    while pending:
        current = pending.pop()
        yield current
        if current.right is not None:
            pending.append(current.right)
        if current.left is not None:
            pending.append(current.left)


def size(root: Node | None) -> int:
    return sum(1 for _ in iter_subtrees(root))


def height(root: Node | None) -> int:
    if root is None:
        return 0
    best = 0
    pending: list[tuple[Node, int]] = [(root, 1)]
    while pending:
        current, depth = pending.pop()
        best = max(best, depth)
        for child in (current.left, current.right):
            if child is not None:
                pending.append((child, depth + 1))
    return best


def to_dict(root: Node | None) -> dict[str, Any] | None:
    if root is None:
        return None
    payload: dict[str, Any] = {"value": root.value, "left": None, "right": None}
    pending: list[tuple[Node, dict[str, Any]]] = [(root, payload)]
    while pending:
        current, target = pending.pop()
        for side in ("left", "right"):
            child = getattr(current, side)
            if child is not None:
                target[side] = {"value": child.value, "left": None, "right": None}
                pending.append((child, target[side]))
    return payload


def _check_mapping(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise TreeFormatError(f"Tree node must be a mapping, got {type(payload).__name__}")
    if "value" not in payload:
        raise TreeFormatError("Tree node is missing required key 'value'")
    unknown = sorted(set(payload) - {"value", "left", "right"})
    if unknown:
        raise TreeFormatError(f"Tree node has unknown keys: {', '.join(unknown)}")
    return payload


def from_dict(payload: Any) -> Node:
    # Mappings are listed in pre-order, so children always follow their
    # parent and the nodes can be built back to front.
    ordered: list[dict[str, Any]] = []
    children: list[dict[str, int]] = []
    pending: list[tuple[Any, int | None, str]] = [(payload, None, "")]
    while pending:
        current, parent, side = pending.pop()
        ordered.append(_check_mapping(current))
        children.append({})
        index = len(ordered) - 1
        if parent is not None:
            children[parent][side] = index
        for child_side in ("right", "left"):
            child = current.get(child_side)
            if child is not None:
                pending.append((child, index, child_side))

    built: list[Node | None] = [None] * len(ordered)
    for index in reversed(range(len(ordered))):
        links = children[index]
        built[index] = Node(
            value=ordered[index]["value"],
            left=built[links["left"]] if "left" in links else None,
            right=built[links["right"]] if "right" in links else None,
        )
    root = built[0]
    assert root is not None
    return root


def render_tree(root: Node | None) -> str:
    """Compact one-line rendering: ``value(left, right)`` with ``.`` for a missing child."""
    if root is None:
        return "."
    rendered: dict[int, str] = {}
    pending: list[tuple[Node, bool]] = [(root, False)]
    while pending:
        current, expanded = pending.pop()
        if current.is_leaf:
            rendered[id(current)] = repr(current.value)
            continue
        if not expanded:
            pending.append((current, True))
            for child in (current.left, current.right):
                if child is not None:
                    pending.append((child, False))
            continue
        left = "." if current.left is None else rendered.pop(id(current.left))
        right = "." if current.right is None else rendered.pop(id(current.right))
        rendered[id(current)] = f"{current.value!r}({left}, {right})"
    return rendered[id(root)]


__all__ = [
    "Node",
    "TreeFormatError",
    "from_dict",
    "height",
    "iter_subtrees",
    "node",
    "render_tree",
    "size",
    "to_dict",
]
