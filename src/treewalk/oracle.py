"""Property checks over a single tree.

Each check is a pure function of the tree (plus, for ordering, the caller's
``pick`` draws) and raises :class:`PropertyViolation` when it does not hold.
Because nothing else is consulted, any smaller tree that still raises is a
valid counterexample, which is what makes shrinking meaningful.
"""

from __future__ import annotations

import itertools
import json
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from treewalk.constants import (
    COMPLETENESS_VIOLATION,
    EQUIVALENCE_VIOLATION,
    ORDERING_VIOLATION,
)
from treewalk.node import Node, iter_subtrees, render_tree, size
from treewalk.traverse import Traversal, traverse, traverse_recursive, traverse_stack

Pick = Callable[[Sequence[Node]], Node]


@dataclass(eq=False)
class PropertyViolation(AssertionError):
    code: str
    message: str
    tree: Node
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Populate args so the exception pickles.
        super().__init__(self.code, self.message, self.tree, self.details)

    def __str__(self) -> str:
        return (
            f"{self.code}: {self.message} :: tree={render_tree(self.tree)} "
            f":: {json.dumps(self.details, sort_keys=True, default=repr)}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "tree": render_tree(self.tree),
            "details": self.details,
        }


def check_completeness(tree: Node, traversal: Traversal = traverse) -> None:
    """Emitted count, distinct emitted values and structural size must agree."""
    emitted = [item.value for item in traversal(tree)]
    distinct = len(set(emitted))
    expected = size(tree)
    if len(emitted) == distinct == expected:
        return

    counts = Counter(emitted)
    duplicates = sorted((value for value, count in counts.items() if count > 1), key=repr)
    missing = sorted({item.value for item in iter_subtrees(tree)} - set(counts), key=repr)
    raise PropertyViolation(
        code=COMPLETENESS_VIOLATION,
        message=f"emitted {len(emitted)} nodes ({distinct} distinct) for a tree of size {expected}",
        tree=tree,
        details={
            "emitted": len(emitted),
            "distinct": distinct,
            "size": expected,
            "duplicates": duplicates,
            "missing": missing,
        },
    )


def _positions(tree: Node, traversal: Traversal) -> dict[int, int]:
    positions: dict[int, int] = {}
    for index, item in enumerate(traversal(tree)):
        positions.setdefault(id(item), index)
    return positions


def _index_of(positions: dict[int, int], target: Node, tree: Node) -> int:
    try:
        return positions[id(target)]
    except KeyError:
        raise PropertyViolation(
            code=ORDERING_VIOLATION,
            message=f"node {target.value!r} is missing from the traversal",
            tree=tree,
            details={"missing": target.value},
        ) from None


def _assert_order(
    tree: Node,
    positions: dict[int, int],
    subtree: Node,
    left: Node | None,
    right: Node | None,
) -> None:
    root_index = _index_of(positions, subtree, tree)
    details: dict[str, Any] = {"subtree": subtree.value, "subtree_index": root_index}
    failed: list[str] = []

    if left is not None:
        left_index = _index_of(positions, left, tree)
        details.update({"left": left.value, "left_index": left_index})
        if not left_index < root_index:
            failed.append(f"left node {left.value!r} at {left_index} is not before {subtree.value!r} at {root_index}")
    if right is not None:
        right_index = _index_of(positions, right, tree)
        details.update({"right": right.value, "right_index": right_index})
        if not root_index < right_index:
            failed.append(f"right node {right.value!r} at {right_index} is not after {subtree.value!r} at {root_index}")

    if failed:
        raise PropertyViolation(
            code=ORDERING_VIOLATION,
            message="; ".join(failed),
            tree=tree,
            details=details,
        )


def ordering_candidates(tree: Node) -> list[Node]:
    """Roots of subtrees with more than one node, i.e. nodes with a child."""
    return [item for item in iter_subtrees(tree) if not item.is_leaf]


def check_ordering(tree: Node, pick: Pick, traversal: Traversal = traverse) -> None:
    """Sample a subtree root S and one descendant on each present side.

    Sampling S first and then L and R below it covers every pair of nodes
    together with their lowest common ancestor, without computing one.
    """
    candidates = ordering_candidates(tree)
    if not candidates:
        return

    subtree = pick(candidates)
    left = None if subtree.left is None else pick(list(iter_subtrees(subtree.left)))
    right = None if subtree.right is None else pick(list(iter_subtrees(subtree.right)))
    _assert_order(tree, _positions(tree, traversal), subtree, left, right)


def check_ordering_exhaustive(tree: Node, traversal: Traversal = traverse) -> None:
    """Check every descendant of every subtree root against that root.

    Left and right sides are independent, so each descendant is checked on
    its own: the work is the sum of subtree sizes, about n times the height.
    """
    positions = _positions(tree, traversal)
    for subtree in ordering_candidates(tree):
        for left in iter_subtrees(subtree.left):
            _assert_order(tree, positions, subtree, left, None)
        for right in iter_subtrees(subtree.right):
            _assert_order(tree, positions, subtree, None, right)


def check_equivalence(
    tree: Node,
    candidate: Traversal = traverse_stack,
    reference: Traversal = traverse_recursive,
) -> None:
    """Both traversals must emit the very same node objects in the same order."""
    pairs = itertools.zip_longest(candidate(tree), reference(tree))
    for index, (got, expected) in enumerate(pairs):
        if got is expected:
            continue
        raise PropertyViolation(
            code=EQUIVALENCE_VIOLATION,
            message=f"traversals diverge at index {index}",
            tree=tree,
            details={
                "index": index,
                "candidate": None if got is None else got.value,
                "reference": None if expected is None else expected.value,
            },
        )


__all__ = [
    "Pick",
    "PropertyViolation",
    "check_completeness",
    "check_equivalence",
    "check_ordering",
    "check_ordering_exhaustive",
    "ordering_candidates",
]
