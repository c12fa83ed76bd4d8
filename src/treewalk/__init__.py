"""In-place binary tree traversal with a property-based correctness oracle."""
from __future__ import annotations

from treewalk.node import Node, node, size
from treewalk.traverse import traverse, traverse_recursive, traverse_stack

__version__ = "0.1.0"

__all__ = [
    "Node",
    "__version__",
    "node",
    "size",
    "traverse",
    "traverse_recursive",
    "traverse_stack",
]
