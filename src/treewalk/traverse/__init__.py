from __future__ import annotations

from collections.abc import Callable, Iterator

from treewalk.node import Node
from treewalk.traverse.recursive import traverse_recursive
from treewalk.traverse.stack import traverse_stack

Traversal = Callable[[Node | None], Iterator[Node]]

TRAVERSALS: dict[str, Traversal] = {
    "recursive": traverse_recursive,
    "stack": traverse_stack,
}

traverse: Traversal = traverse_stack


def get_traversal(name: str) -> Traversal:
    try:
        return TRAVERSALS[name]
    except KeyError:
        known = ", ".join(sorted(TRAVERSALS))
        raise ValueError(f"Unknown traversal {name!r} (expected one of: {known})") from None


__all__ = [
    "TRAVERSALS",
    "Traversal",
    "get_traversal",
    "traverse",
    "traverse_recursive",
    "traverse_stack",
]
