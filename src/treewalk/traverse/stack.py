"""In-place traversal driven by an explicit stack.

Every node is pushed twice: first to be opened, which schedules its right
child, itself and its left child, then again to be emitted. Opened nodes are
tracked by ``id()`` so nodes sharing a value are never conflated.
"""

from __future__ import annotations

from collections.abc import Iterator

from treewalk.node import Node


def traverse_stack(root: Node | None) -> Iterator[Node]:
    if root is None:
        return

    stack: list[Node] = [root]
    opened: set[int] = set()
    while stack:
        current = stack.pop()
        if id(current) in opened:
            yield current
            continue

        opened.add(id(current))
        if current.right is not None:
            stack.append(current.right)
        stack.append(current)
        if current.left is not None:
            stack.append(current.left)


__all__ = ["traverse_stack"]
