from __future__ import annotations

import json
from pathlib import Path

from treewalk.runner import CheckOutcome


def render_markdown(outcome: CheckOutcome) -> str:
    lines: list[str] = []
    lines.append(f"## treewalk check: {outcome.traversal_name}")
    lines.append("")
    status = "All properties hold" if outcome.passed else "Property violation"
    lines.append(f"- Status: **{status}**")
    lines.append(f"- Trials: **{outcome.config.trials}** (seed {outcome.config.seed}, max size {outcome.config.max_size})")
    lines.append(f"- Duration: {outcome.seconds} s")

    lines.append("")
    lines.append("### Properties")
    lines.append("")
    lines.append("| Property | Status | Trials |")
    lines.append("|---|---|---:|")
    for result in outcome.results:
        lines.append(f"| {result.name} | {'PASS' if result.passed else 'FAIL'} | {result.trials} |")

    failing = [result for result in outcome.results if not result.passed]
    if failing:
        lines.append("")
        lines.append("### Counterexamples")
        for result in failing:
            assert result.violation is not None
            lines.append("")
            lines.append(f"#### {result.name} (trial {result.trial})")
            lines.append("")
            lines.append(f"- `{result.violation.code}`: {result.violation.message}")
            lines.append(f"- Tree: `{result.violation.to_dict()['tree']}`")
            if result.shrink is not None:
                lines.append(
                    f"- Shrunk from {result.shrink.original_size} to {result.shrink.reduced_size} nodes "
                    f"in {result.shrink.iterations} iterations"
                )
            for key, value in sorted(result.violation.details.items()):
                lines.append(f"- {key}: `{value!r}`")

    lines.append("")
    return "\n".join(lines)


def render_json(outcome: CheckOutcome) -> str:
    return json.dumps(outcome.to_dict(), indent=2, sort_keys=True, default=repr)


def write_reports(outcome: CheckOutcome, json_path: Path, md_path: Path) -> None:
    json_path.parent.mkdir(parents=True, exist_ok=True)
    md_path.parent.mkdir(parents=True, exist_ok=True)
    json_path.write_text(render_json(outcome), encoding="utf-8")
    md_path.write_text(render_markdown(outcome), encoding="utf-8")


__all__ = ["render_json", "render_markdown", "write_reports"]
