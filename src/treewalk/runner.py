"""Run the oracle's properties over seeded random trees.

Each trial draws its own tree from ``random.Random(f"{seed}:{trial}")`` so
results do not depend on how trials are scheduled across workers. Workers are
threads: they overlap trials but share the GIL. For every property the lowest
failing trial is kept, shrunk and reported.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any

from treewalk.config import CheckConfig
from treewalk.constants import (
    EXIT_SUCCESS,
    EXIT_VIOLATION,
    PROPERTY_COMPLETENESS,
    PROPERTY_EQUIVALENCE,
    PROPERTY_NAMES,
    PROPERTY_ORDERING,
)
from treewalk.generate import random_tree
from treewalk.node import Node, render_tree, size
from treewalk.oracle import (
    PropertyViolation,
    check_completeness,
    check_equivalence,
    check_ordering,
    check_ordering_exhaustive,
)
from treewalk.shrink import ShrinkResult, shrink_tree
from treewalk.traverse import Traversal, get_traversal, traverse_recursive, traverse_stack

logger = logging.getLogger(__name__)

TreeCheck = Callable[[Node], None]


@dataclass(slots=True)
class PropertyResult:
    name: str
    trials: int = 0
    trial: int | None = None
    original_tree: Node | None = None
    violation: PropertyViolation | None = None
    shrink: ShrinkResult | None = None

    @property
    def passed(self) -> bool:
        return self.violation is None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "status": "PASS" if self.passed else "FAIL",
            "trials": self.trials,
        }
        if self.violation is not None:
            payload["trial"] = self.trial
            payload["violation"] = self.violation.to_dict()
            if self.original_tree is not None:
                payload["original_tree"] = render_tree(self.original_tree)
        if self.shrink is not None:
            payload["shrink"] = self.shrink.to_dict()
        return payload


@dataclass(slots=True)
class CheckOutcome:
    config: CheckConfig
    traversal_name: str
    results: list[PropertyResult] = field(default_factory=list)
    seconds: float = 0.0

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def exit_code(self) -> int:
        return EXIT_SUCCESS if self.passed else EXIT_VIOLATION

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "PASS" if self.passed else "FAIL",
            "traversal": self.traversal_name,
            "trials": self.config.trials,
            "seed": self.config.seed,
            "max_size": self.config.max_size,
            "seconds": self.seconds,
            "properties": [result.to_dict() for result in self.results],
        }


def _reference_for(candidate: Traversal) -> Traversal:
    return traverse_stack if candidate is traverse_recursive else traverse_recursive


def _sampled_checks(traversal: Traversal, rng: random.Random) -> dict[str, TreeCheck]:
    reference = _reference_for(traversal)
    return {
        PROPERTY_COMPLETENESS: lambda tree: check_completeness(tree, traversal),
        PROPERTY_ORDERING: lambda tree: check_ordering(tree, rng.choice, traversal),
        PROPERTY_EQUIVALENCE: lambda tree: check_equivalence(tree, traversal, reference),
    }


def _deterministic_checks(traversal: Traversal) -> dict[str, TreeCheck]:
    """Checks used while shrinking: ordering is re-checked exhaustively so the predicate is stable."""
    reference = _reference_for(traversal)
    return {
        PROPERTY_COMPLETENESS: lambda tree: check_completeness(tree, traversal),
        PROPERTY_ORDERING: lambda tree: check_ordering_exhaustive(tree, traversal),
        PROPERTY_EQUIVALENCE: lambda tree: check_equivalence(tree, traversal, reference),
    }


def _violation(check: TreeCheck, tree: Node) -> PropertyViolation | None:
    try:
        check(tree)
    except PropertyViolation as exc:
        return exc
    return None


def _run_trial(config: CheckConfig, traversal: Traversal, trial: int) -> tuple[Node, dict[str, PropertyViolation | None]]:
    rng = random.Random(f"{config.seed}:{trial}")
    tree = random_tree(rng, config.max_size)
    logger.debug("trial %d: tree of %d nodes", trial, size(tree), extra={"trial": trial, "tree_size": size(tree)})
    checks = _sampled_checks(traversal, rng)
    return tree, {name: _violation(checks[name], tree) for name in PROPERTY_NAMES}


def _shrink_result(config: CheckConfig, traversal: Traversal, result: PropertyResult) -> None:
    assert result.violation is not None and result.original_tree is not None
    check = _deterministic_checks(traversal)[result.name]
    if _violation(check, result.original_tree) is None:
        # Only reachable when the traversal is not a pure function of the tree.
        logger.warning("%s violation did not reproduce deterministically; not shrinking", result.name)
        return

    result.shrink = shrink_tree(
        tree=result.original_tree,
        failure_predicate=lambda candidate: _violation(check, candidate) is not None,
        max_seconds=config.shrink.max_seconds,
        max_iterations=config.shrink.max_iterations,
    )
    reduced = _violation(check, result.shrink.reduced_tree)
    assert reduced is not None
    result.violation = reduced


def run_checks(config: CheckConfig, traversal: Traversal | None = None) -> CheckOutcome:
    """Run all properties for ``config.trials`` trees.

    ``traversal`` overrides the configured traversal by callable, which is how
    a new traversal strategy is put through the oracle before registration.
    """
    config.validate()
    candidate = traversal if traversal is not None else get_traversal(config.traversal)
    traversal_name = config.traversal if traversal is None else getattr(traversal, "__name__", repr(traversal))
    outcome = CheckOutcome(config=config, traversal_name=traversal_name)
    results = {name: PropertyResult(name=name) for name in PROPERTY_NAMES}
    started = perf_counter()

    def record(trial: int, tree: Node, violations: dict[str, PropertyViolation | None]) -> None:
        for name, violation in violations.items():
            result = results[name]
            if result.violation is not None:
                continue
            result.trials += 1
            if violation is not None:
                logger.warning(
                    "%s violated on trial %d: %s",
                    name,
                    trial,
                    violation.message,
                    extra={"property_name": name, "trial": trial},
                )
                result.trial = trial
                result.original_tree = tree
                result.violation = violation

    if config.workers == 1:
        for trial in range(config.trials):
            record(trial, *_run_trial(config, candidate, trial))
            if not any(result.passed for result in results.values()):
                break
    else:
        with ThreadPoolExecutor(max_workers=config.workers) as pool:
            trial_results = pool.map(lambda trial: _run_trial(config, candidate, trial), range(config.trials))
            for trial, (tree, violations) in enumerate(trial_results):
                record(trial, tree, violations)

    for result in results.values():
        if result.violation is not None:
            _shrink_result(config, candidate, result)
        else:
            logger.info("%s held for %d trials", result.name, result.trials, extra={"property_name": result.name})

    outcome.results = [results[name] for name in PROPERTY_NAMES]
    outcome.seconds = round(perf_counter() - started, 6)
    return outcome


__all__ = ["CheckOutcome", "PropertyResult", "run_checks"]
