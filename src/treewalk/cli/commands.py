from __future__ import annotations

import json
import random
from pathlib import Path
from typing import NoReturn

import typer

from treewalk.config import ConfigError, load_config
from treewalk.constants import (
    CONFIG_FILE,
    DEFAULT_MAX_SIZE,
    DEFAULT_SEED,
    DEFAULT_TRAVERSAL,
    EXIT_INTERNAL_ERROR,
    EXIT_SUCCESS,
)
from treewalk.generate import random_tree
from treewalk.log import setup_logging
from treewalk.node import from_dict, to_dict
from treewalk.report import render_json, render_markdown, write_reports
from treewalk.runner import run_checks
from treewalk.traverse import get_traversal


def _version_callback(value: bool) -> None:
    if value:
        from treewalk import __version__

        typer.echo(f"treewalk {__version__}")
        raise typer.Exit()


app = typer.Typer(add_completion=False, help="In-place binary tree traversal and its property oracle")


@app.callback(invoke_without_command=True)
def _main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Print version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    log_format: str = typer.Option("text", "--log-format", help="Log format: text or json."),
) -> None:
    if verbose or log_format != "text":
        setup_logging(level="DEBUG" if verbose else "WARNING", fmt=log_format)


def _fail(message: str) -> NoReturn:
    typer.echo(f"ERROR: {message}", err=True)
    raise typer.Exit(EXIT_INTERNAL_ERROR)


@app.command()
def check(
    config_path: Path | None = typer.Option(None, "--config", help=f"YAML config (default: ./{CONFIG_FILE} if present)"),
    trials: int | None = typer.Option(None, "--trials", min=1, help="Number of random trees per property"),
    seed: int | None = typer.Option(None, "--seed", help="Base random seed"),
    max_size: int | None = typer.Option(None, "--max-size", min=1, help="Largest tree to generate"),
    workers: int | None = typer.Option(
        None,
        "--workers",
        min=1,
        help="Trial worker threads (checks hold the GIL, so expect no CPU speed-up)",
    ),
    traversal: str | None = typer.Option(None, "--traversal", help="Traversal under test"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of Markdown"),
    report_dir: Path | None = typer.Option(None, "--report-dir", help="Also write report.json and report.md here"),
) -> None:
    """Check completeness, ordering and equivalence over random trees."""
    if config_path is None and CONFIG_FILE.exists():
        config_path = CONFIG_FILE
    try:
        config = load_config(config_path).with_overrides(
            trials=trials,
            seed=seed,
            max_size=max_size,
            workers=workers,
            traversal=traversal,
        )
    except ConfigError as exc:
        _fail(str(exc))

    outcome = run_checks(config)
    typer.echo(render_json(outcome) if as_json else render_markdown(outcome))
    if report_dir is not None:
        write_reports(outcome, report_dir / "report.json", report_dir / "report.md")
        typer.echo(f"Report written to: {report_dir}")
    raise typer.Exit(outcome.exit_code)


@app.command()
def walk(
    tree_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Tree as nested JSON objects"),
    traversal: str = typer.Option(DEFAULT_TRAVERSAL, "--traversal", help="Traversal to run"),
) -> None:
    """Print node values in in-place order, one per line."""
    try:
        walker = get_traversal(traversal)
        tree = from_dict(json.loads(tree_path.read_text(encoding="utf-8")))
    except ValueError as exc:
        _fail(str(exc))
    except RecursionError:
        _fail(f"Tree in {tree_path} is nested too deeply to decode")

    try:
        for item in walker(tree):
            typer.echo(json.dumps(item.value))
    except RecursionError:
        _fail(f"Tree is too tall for the {traversal} traversal; use --traversal stack")
    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def generate(
    seed: int = typer.Option(DEFAULT_SEED, "--seed", help="Random seed"),
    max_size: int = typer.Option(DEFAULT_MAX_SIZE, "--max-size", min=1, help="Largest tree to generate"),
) -> None:
    """Print a random tree with unique values as JSON."""
    tree = random_tree(random.Random(seed), max_size)
    typer.echo(json.dumps(to_dict(tree), indent=2))
    raise typer.Exit(EXIT_SUCCESS)


__all__ = ["app"]
