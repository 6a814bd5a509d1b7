# ruff: noqa: B008
"""Command-line helpers for the CVM distinct-count estimator."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, cast

import typer
from pydantic import ValidationError

from cvm_core import __version__
from cvm_core import config as config_module
from cvm_core.errors import CVMError
from cvm_core.estimator import CVMEstimator
from cvm_core.random_source import seeded
from cvm_core.streams import StreamMode, exact_distinct, generate_ints, iter_items

logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cvmcount version {__version__}")
        raise typer.Exit()


app = typer.Typer(help="Estimate the number of distinct items in a stream.")


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (default: {{CVM_LOG_LEVEL}})"
    ),
) -> None:
    """CVM distinct-elements estimator CLI."""
    cfg = _config()
    try:
        cfg.configure_logging(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc


def _config() -> config_module.AppConfig:
    try:
        return config_module.AppConfig.from_env()
    except ValidationError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _build_estimator(
    cfg: config_module.AppConfig, capacity: int | None, key_strategy: str | None
) -> CVMEstimator:
    try:
        return CVMEstimator.with_capacity(
            capacity if capacity is not None else cfg.estimator.capacity,
            key=key_strategy or cfg.estimator.key_strategy,
        )
    except CVMError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def count(
    path: Path = typer.Argument(..., help="Text file to read items from"),
    mode: str = typer.Option("words", "--mode", "-m", help="Item split mode [words|lines]"),
    capacity: int | None = typer.Option(
        None, "--capacity", "-c", help="Sample capacity (default: {{CVM_CAPACITY}})"
    ),
    seed: int | None = typer.Option(None, "--seed", help="Random seed (default: {{CVM_SEED}})"),
    key_strategy: str | None = typer.Option(
        None, "--key-strategy", "-k", help="Dedup key strategy (default: {{CVM_KEY_STRATEGY}})"
    ),
    exact: bool = typer.Option(False, "--exact", help="Also compute the exact distinct count"),
) -> None:
    """Estimate the distinct items in a file."""

    cfg = _config()
    if not path.exists():
        typer.echo(f"Input not found: {path}", err=True)
        raise typer.Exit(code=1)
    if not path.is_file():
        typer.echo(f"Input is not a regular file: {path}", err=True)
        raise typer.Exit(code=1)
    if mode not in {"words", "lines"}:
        raise typer.BadParameter("Mode must be 'words' or 'lines'.")
    stream_mode = cast(StreamMode, mode)

    estimator = _build_estimator(cfg, capacity, key_strategy)
    rng = seeded(seed if seed is not None else cfg.run.seed)
    try:
        estimate = estimator.extend(iter_items(path, stream_mode), rng)
        exact_count = exact_distinct(iter_items(path, stream_mode)) if exact else None
    except (OSError, UnicodeDecodeError) as exc:
        typer.echo(f"Could not read {path}: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    payload: dict[str, Any] = {
        "estimate": estimate,
        "capacity": estimator.capacity,
        "round": estimator.round,
        "sample_size": estimator.sample_size,
        "probability": estimator.probability,
    }
    if exact_count is not None:
        payload["exact"] = exact_count
        payload["relative_error"] = (
            abs(estimate - exact_count) / exact_count if exact_count else 0.0
        )
    logger.info("Finished %s after %d thinning rounds", path, estimator.round)
    typer.echo(
        f"[CVM] {path.name} estimate={estimate:.0f} capacity={estimator.capacity}",
        err=True,
    )
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def generate(
    count_: int = typer.Option(..., "--count", "-n", min=2, help="Number of items to emit"),
    seed: int | None = typer.Option(None, "--seed", help="Random seed (default: {{CVM_SEED}})"),
    out: Path | None = typer.Option(
        None, "--out", "-o", help="Output path (default: {{CVM_DATA_DIR}}/streams/ints_<n>.txt)"
    ),
) -> None:
    """Write a synthetic integer stream, one item per line."""

    cfg = _config()
    target = out or cfg.run.data_dir / "streams" / f"ints_{count_}.txt"
    target.parent.mkdir(parents=True, exist_ok=True)
    ints = generate_ints(count_, seed if seed is not None else cfg.run.seed)
    with target.open("w", encoding="utf-8") as fp:
        for value in ints:
            fp.write(f"{value}\n")
    typer.echo(f"Generated {len(ints)} items ({exact_distinct(ints)} distinct) in {target}")


if __name__ == "__main__":
    app()
