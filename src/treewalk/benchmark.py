"""
Traversal benchmark harness.

Times every registered traversal over the same seeded random tree and
reports wall-clock statistics per traversal.
"""

from __future__ import annotations

import random
import time
from typing import Any

from treewalk.generate import random_tree
from treewalk.node import height, size
from treewalk.traverse import TRAVERSALS


def run_benchmark(iterations: int = 5, max_size: int = 10_000, seed: int = 0) -> dict[str, Any]:
    """Walk one random tree ``iterations`` times per traversal; return timings and summary."""
    if iterations < 1:
        raise ValueError("iterations must be >= 1")
    tree = random_tree(random.Random(seed), max_size)
    results: dict[str, Any] = {}
    for name, walk in sorted(TRAVERSALS.items()):
        times_s: list[float] = []
        for _ in range(iterations):
            t0 = time.perf_counter()
            for _item in walk(tree):
                pass
            times_s.append(time.perf_counter() - t0)
        results[name] = {
            "runs": [{"wall_s": round(t, 6)} for t in times_s],
            "summary": {
                "n": iterations,
                "mean_s": round(sum(times_s) / iterations, 6),
                "min_s": round(min(times_s), 6),
                "max_s": round(max(times_s), 6),
            },
        }
    return {"tree": {"size": size(tree), "height": height(tree), "seed": seed}, "traversals": results}


def to_md(data: dict[str, Any]) -> str:
    """Short Markdown summary of benchmark result."""
    tree = data["tree"]
    lines = [
        "## Traversal benchmark summary",
        "",
        f"- **Tree:** {tree['size']} nodes, height {tree['height']} (seed {tree['seed']})",
        "",
        "| Traversal | Runs | Mean (s) | Min (s) | Max (s) |",
        "|---|---:|---:|---:|---:|",
    ]
    for name, result in data["traversals"].items():
        s = result["summary"]
        lines.append(f"| {name} | {s['n']} | {s['mean_s']} | {s['min_s']} | {s['max_s']} |")
    return "\n".join(lines) + "\n"
