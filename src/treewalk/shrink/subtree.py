from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from time import monotonic

from treewalk.node import Node, size

logger = logging.getLogger(__name__)

Path = tuple[str, ...]


@dataclass(slots=True)
class ShrinkResult:
    original_size: int
    reduced_size: int
    iterations: int
    seconds: float
    reduced_tree: Node

    @property
    def reduced(self) -> bool:
        return self.reduced_size < self.original_size

    def to_dict(self) -> dict[str, object]:
        return {
            "original_size": self.original_size,
            "reduced_size": self.reduced_size,
            "iterations": self.iterations,
            "seconds": self.seconds,
        }


def _walk(tree: Node) -> Iterator[tuple[Path, Node]]:
    pending: list[tuple[Path, Node]] = [((), tree)]
    while pending:
        path, current = pending.pop()
        yield path, current
        if current.right is not None:
            pending.append(((*path, "right"), current.right))
        if current.left is not None:
            pending.append(((*path, "left"), current.left))


def _replace_at(tree: Node, path: Path, subtree: Node) -> Node:
    ancestors: list[Node] = []
    current = tree
    for side in path:
        ancestors.append(current)
        child = getattr(current, side)
        assert child is not None
        current = child

    rebuilt = subtree
    for parent, side in zip(reversed(ancestors), reversed(path)):
        rebuilt = replace(parent, **{side: rebuilt})
    return rebuilt


def _candidates(tree: Node) -> Iterator[Node]:
    """Strictly smaller trees, biggest cuts first (pre-order, hoists before drops)."""
    for path, current in _walk(tree):
        for side in ("left", "right"):
            child = getattr(current, side)
            if child is not None:
                yield _replace_at(tree, path, child)
        for side in ("left", "right"):
            if getattr(current, side) is not None:
                yield _replace_at(tree, path, replace(current, **{side: None}))


def shrink_tree(
    *,
    tree: Node,
    failure_predicate: Callable[[Node], bool],
    max_seconds: float,
    max_iterations: int,
) -> ShrinkResult:
    """Greedily remove structure from ``tree`` while ``failure_predicate`` keeps holding.

    Every accepted step drops at least one node, so the loop ends once no
    candidate reproduces the failure or a budget is exhausted.
    """
    if max_seconds <= 0:
        raise ValueError("max_seconds must be > 0")
    if max_iterations <= 0:
        raise ValueError("max_iterations must be > 0")
    if not failure_predicate(tree):
        raise ValueError("failure_predicate must hold for original tree")

    started = monotonic()
    current = tree
    iterations = 0
    exhausted = False

    while not exhausted:
        reduced_this_round = False
        for candidate in _candidates(current):
            if monotonic() - started >= max_seconds or iterations >= max_iterations:
                exhausted = True
                break

            iterations += 1
            if failure_predicate(candidate):
                current = candidate
                reduced_this_round = True
                logger.debug("shrink step %d: size %d", iterations, size(current))
                break

        if not reduced_this_round:
            break

    seconds = monotonic() - started
    result = ShrinkResult(
        original_size=size(tree),
        reduced_size=size(current),
        iterations=iterations,
        seconds=round(seconds, 6),
        reduced_tree=current,
    )
    logger.info(
        "shrunk failing tree from %d to %d nodes in %d iterations",
        result.original_size,
        result.reduced_size,
        result.iterations,
    )
    return result


__all__ = ["ShrinkResult", "shrink_tree"]
