from __future__ import annotations

from collections.abc import Iterator

from treewalk.node import Node


def traverse_recursive(root: Node | None) -> Iterator[Node]:
    """In-place order: left subtree, the node, right subtree.

    Depth is bounded by the interpreter recursion limit.
    """
    if root is None:
        return
    yield from traverse_recursive(root.left)
    yield root
    yield from traverse_recursive(root.right)


__all__ = ["traverse_recursive"]
