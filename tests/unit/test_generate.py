from __future__ import annotations

import random

import pytest
from hypothesis import given

from treewalk.generate import materialize, random_tree, shapes, trees
from treewalk.node import iter_subtrees, size

SEED = 42
NUM_TRIALS = 50


@given(trees())
def test_generated_values_are_unique(tree) -> None:
    values = [item.value for item in iter_subtrees(tree)]
    assert len(values) == len(set(values)) == size(tree)


@given(trees(max_leaves=4))
def test_generated_values_are_pre_order_indices(tree) -> None:
    assert [item.value for item in iter_subtrees(tree)] == list(range(size(tree)))


def test_materialize_numbers_shape() -> None:
    tree = materialize(((None, None), ((None, None), None)))
    assert tree.value == 0
    assert tree.left is not None and tree.left.value == 1
    assert tree.right is not None and tree.right.value == 2
    assert tree.right.left is not None and tree.right.left.value == 3
    assert tree.right.right is None


def test_strategy_bounds_are_validated() -> None:
    with pytest.raises(ValueError, match="max_leaves must be >= 1"):
        shapes(0)


def test_random_tree_is_reproducible_for_a_seed() -> None:
    first = random_tree(random.Random(SEED), 40)
    second = random_tree(random.Random(SEED), 40)
    assert [(n.value, n.left and n.left.value, n.right and n.right.value) for n in iter_subtrees(first)] == [
        (n.value, n.left and n.left.value, n.right and n.right.value) for n in iter_subtrees(second)
    ]


def test_random_tree_respects_size_and_uniqueness() -> None:
    rng = random.Random(SEED)
    for _ in range(NUM_TRIALS):
        max_size = rng.randint(1, 80)
        tree = random_tree(rng, max_size)
        values = [item.value for item in iter_subtrees(tree)]
        assert 1 <= size(tree) <= max_size
        assert sorted(values) == list(range(size(tree)))


def test_random_tree_covers_one_sided_shapes() -> None:
    rng = random.Random(SEED)
    sides = set()
    for _ in range(200):
        for item in iter_subtrees(random_tree(rng, 12)):
            sides.add((item.left is not None, item.right is not None))
    assert sides == {(False, False), (True, False), (False, True), (True, True)}


def test_random_tree_rejects_empty_bound() -> None:
    with pytest.raises(ValueError, match="max_size must be >= 1"):
        random_tree(random.Random(SEED), 0)
