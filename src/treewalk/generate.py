"""Arbitrary finite trees with values unique across the whole instance.

Both generators draw the tree *shape* first and number the nodes afterwards,
so uniqueness holds for every example, including the ones Hypothesis
produces while shrinking.
"""

from __future__ import annotations

import itertools
import random
from typing import Optional

from hypothesis import strategies as st

from treewalk.constants import DEFAULT_MAX_LEAVES, DEFAULT_MAX_SIZE
from treewalk.node import Node

# A shape is a pair of optional child shapes.
Shape = tuple[Optional["Shape"], Optional["Shape"]]


def shapes(max_leaves: int = DEFAULT_MAX_LEAVES) -> st.SearchStrategy[Shape]:
    if max_leaves < 1:
        raise ValueError("max_leaves must be >= 1")
    leaf = st.just((None, None))
    return st.recursive(
        leaf,
        lambda children: st.tuples(st.none() | children, st.none() | children),
        max_leaves=max_leaves,
    )


def materialize(shape: Shape) -> Node:
    """Build nodes for ``shape``, numbering them 0, 1, 2, ... in pre-order."""
    counter = itertools.count()

    def build(current: Shape) -> Node:
        value = next(counter)
        left, right = current
        return Node(
            value=value,
            left=None if left is None else build(left),
            right=None if right is None else build(right),
        )

    return build(shape)


def trees(max_leaves: int = DEFAULT_MAX_LEAVES) -> st.SearchStrategy[Node]:
    return shapes(max_leaves).map(materialize)


def random_tree(rng: random.Random, max_size: int = DEFAULT_MAX_SIZE) -> Node:
    """Seeded generator used by the property runner.

    Nodes are laid out in an index arena in pre-order: a node at index ``i``
    whose left subtree holds ``k`` nodes has its left child at ``i + 1`` and
    its right child at ``i + 1 + k``. Children therefore always sit at higher
    indices than their parent and the arena is built back to front.
    """
    if max_size < 1:
        raise ValueError("max_size must be >= 1")

    total = rng.randint(1, max_size)
    lefts: list[int | None] = [None] * total
    rights: list[int | None] = [None] * total
    pending: list[tuple[int, int]] = [(0, total)]
    while pending:
        index, subtree_size = pending.pop()
        left_size = rng.randint(0, subtree_size - 1)
        right_size = subtree_size - 1 - left_size
        if left_size:
            lefts[index] = index + 1
            pending.append((index + 1, left_size))
        if right_size:
            rights[index] = index + 1 + left_size
            pending.append((index + 1 + left_size, right_size))

    arena: list[Node | None] = [None] * total
    for index in reversed(range(total)):
        left_index = lefts[index]
        right_index = rights[index]
        arena[index] = Node(
            value=index,
            left=None if left_index is None else arena[left_index],
            right=None if right_index is None else arena[right_index],
        )
    root = arena[0]
    assert root is not None
    return root


__all__ = ["Shape", "materialize", "random_tree", "shapes", "trees"]
