"""CLI smoke tests: walk, generate, check."""
from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from treewalk import __version__
from treewalk.cli import app
from treewalk.node import from_dict, iter_subtrees, size

runner = CliRunner()

SAMPLE_TREE = {
    "value": 1,
    "left": {
        "value": 2,
        "left": {"value": 3},
        "right": {"value": 4, "left": {"value": 6}, "right": None},
    },
    "right": {"value": 5},
}


def _write_json(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestCliSmoke:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"treewalk {__version__}" in result.stdout

    def test_walk_prints_in_place_order(self, tmp_path: Path) -> None:
        tree_path = _write_json(tmp_path / "tree.json", SAMPLE_TREE)
        for traversal in ("stack", "recursive"):
            result = runner.invoke(app, ["walk", str(tree_path), "--traversal", traversal])
            assert result.exit_code == 0
            assert result.stdout.split() == ["3", "2", "6", "4", "1", "5"]

    def test_walk_rejects_malformed_tree(self, tmp_path: Path) -> None:
        tree_path = _write_json(tmp_path / "tree.json", {"left": None})
        result = runner.invoke(app, ["walk", str(tree_path)])
        assert result.exit_code == 2
        assert "ERROR: Tree node is missing required key 'value'" in result.output

    def test_walk_rejects_unknown_traversal(self, tmp_path: Path) -> None:
        tree_path = _write_json(tmp_path / "tree.json", SAMPLE_TREE)
        result = runner.invoke(app, ["walk", str(tree_path), "--traversal", "breadth"])
        assert result.exit_code == 2
        assert "Unknown traversal" in result.output

    def test_walk_rejects_deeply_nested_file(self, tmp_path: Path) -> None:
        depth = 100_000
        tree_path = tmp_path / "deep.json"
        tree_path.write_text('{"value": 0, "left": ' * depth + '{"value": 0}' + "}" * depth, encoding="utf-8")
        result = runner.invoke(app, ["walk", str(tree_path)])
        assert result.exit_code == 2
        assert "ERROR:" in result.output
        assert "nested too deeply" in result.output

    def test_walk_reports_traversal_recursion_limit(self, tmp_path: Path, monkeypatch) -> None:
        def exhausted(root):
            raise RecursionError("maximum recursion depth exceeded")
            yield root

        monkeypatch.setattr("treewalk.cli.commands.get_traversal", lambda name: exhausted)
        tree_path = _write_json(tmp_path / "tree.json", SAMPLE_TREE)
        result = runner.invoke(app, ["walk", str(tree_path), "--traversal", "recursive"])
        assert result.exit_code == 2
        assert "ERROR: Tree is too tall for the recursive traversal" in result.output

    def test_check_help_notes_thread_workers(self) -> None:
        result = runner.invoke(app, ["check", "--help"])
        assert result.exit_code == 0
        assert "GIL" in result.output

    def test_generate_emits_unique_tree(self) -> None:
        result = runner.invoke(app, ["generate", "--seed", "3", "--max-size", "9"])
        assert result.exit_code == 0
        tree = from_dict(json.loads(result.stdout))
        values = [item.value for item in iter_subtrees(tree)]
        assert 1 <= size(tree) <= 9
        assert len(set(values)) == len(values)

        again = runner.invoke(app, ["generate", "--seed", "3", "--max-size", "9"])
        assert again.stdout == result.stdout


class TestCliCheck:
    def test_check_passes(self) -> None:
        result = runner.invoke(app, ["check", "--trials", "20", "--max-size", "10", "--seed", "5"])
        assert result.exit_code == 0
        assert "All properties hold" in result.stdout

    def test_check_json_and_report_dir(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            ["check", "--trials", "10", "--max-size", "6", "--json", "--traversal", "recursive"],
        )
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["status"] == "PASS"
        assert payload["traversal"] == "recursive"

        report_dir = tmp_path / "reports"
        result = runner.invoke(app, ["check", "--trials", "5", "--report-dir", str(report_dir)])
        assert result.exit_code == 0
        assert (report_dir / "report.json").exists()
        assert (report_dir / "report.md").exists()

    def test_check_reads_config_file(self, tmp_path: Path) -> None:
        config = tmp_path / "custom.yaml"
        config.write_text("trials: 7\nmax_size: 5\nworkers: 2\n", encoding="utf-8")
        result = runner.invoke(app, ["check", "--config", str(config), "--json"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["trials"] == 7
        assert payload["max_size"] == 5

    def test_check_rejects_bad_config(self, tmp_path: Path) -> None:
        config = tmp_path / "custom.yaml"
        config.write_text("trials: -3\n", encoding="utf-8")
        result = runner.invoke(app, ["check", "--config", str(config)])
        assert result.exit_code == 2
        assert "ERROR: trials must be >= 1" in result.output

    def test_check_rejects_unknown_traversal(self) -> None:
        result = runner.invoke(app, ["check", "--traversal", "breadth"])
        assert result.exit_code == 2
        assert "Unknown traversal 'breadth'" in result.output
