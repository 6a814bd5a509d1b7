# ruff: noqa: B008
"""Evaluation harness for estimator accuracy across capacities and seeds."""

from __future__ import annotations

import json
import statistics
from collections.abc import Hashable, Sequence
from dataclasses import asdict, dataclass
from pathlib import Path

import typer

from cvm_core import config as config_module
from cvm_core.estimator import CVMEstimator
from cvm_core.random_source import seeded
from cvm_core.streams import exact_distinct, generate_ints, iter_words

app = typer.Typer(help="Run accuracy evaluations for the CVM estimator.")


@dataclass(slots=True)
class TrialResult:
    workload: str
    capacity: int
    seed: int
    exact: int
    estimate: float
    relative_error: float


def run_trial(
    workload: str,
    items: Sequence[Hashable],
    capacity: int,
    seed: int,
    key_strategy: str = "builtin",
    exact: int | None = None,
) -> TrialResult:
    truth = exact if exact is not None else exact_distinct(items)
    estimator = CVMEstimator.with_capacity(capacity, key=key_strategy)
    estimate = estimator.extend(items, seeded(seed))
    error = abs(estimate - truth) / truth if truth else 0.0
    return TrialResult(
        workload=workload,
        capacity=capacity,
        seed=seed,
        exact=truth,
        estimate=estimate,
        relative_error=error,
    )


def sweep(
    workloads: dict[str, Sequence[Hashable]],
    capacities: Sequence[int],
    seeds: Sequence[int],
    key_strategy: str = "builtin",
) -> list[TrialResult]:
    results: list[TrialResult] = []
    for name, items in workloads.items():
        truth = exact_distinct(items)
        for capacity in capacities:
            for seed in seeds:
                results.append(
                    run_trial(name, items, capacity, seed, key_strategy=key_strategy, exact=truth)
                )
    return results


def summarize(results: Sequence[TrialResult]) -> list[dict[str, object]]:
    groups: dict[tuple[str, int], list[float]] = {}
    for result in results:
        groups.setdefault((result.workload, result.capacity), []).append(result.relative_error)
    return [
        {
            "workload": workload,
            "capacity": capacity,
            "trials": len(errors),
            "median_relative_error": statistics.median(errors),
            "max_relative_error": max(errors),
        }
        for (workload, capacity), errors in groups.items()
    ]


@app.command()
def main(
    sizes: list[int] = typer.Option([10_000, 100_000], help="Synthetic integer stream sizes"),
    capacities: list[int] = typer.Option([100, 1_000], help="Capacities to sweep"),
    seeds: int = typer.Option(5, min=1, help="Number of seeds per configuration"),
    text: Path | None = typer.Option(
        None, exists=True, dir_okay=False, help="Optional text file evaluated word by word"
    ),
    out: Path | None = typer.Option(
        None, help="Output results path (default: {{CVM_DATA_DIR}}/experiments/accuracy.json)"
    ),
) -> None:
    if any(size < 2 for size in sizes):
        raise typer.BadParameter("Stream sizes must be at least 2.", param_hint="--sizes")
    if any(capacity < 1 for capacity in capacities):
        raise typer.BadParameter("Capacities must be >= 1.", param_hint="--capacities")
    cfg = config_module.AppConfig.from_env()
    target = out or cfg.run.data_dir / "experiments" / "accuracy.json"
    target.parent.mkdir(parents=True, exist_ok=True)

    workloads: dict[str, Sequence[Hashable]] = {
        f"ints_{size}": generate_ints(size, cfg.run.seed) for size in sizes
    }
    if text is not None:
        workloads[f"words_{text.stem}"] = list(iter_words(text))
    seed_values = [cfg.run.seed + offset for offset in range(seeds)]

    results = sweep(workloads, capacities, seed_values, key_strategy=cfg.estimator.key_strategy)
    summary = summarize(results)
    for row in summary:
        typer.echo(
            f"{row['workload']:>16} capacity={row['capacity']:<6} "
            f"median_err={row['median_relative_error']:.2%} "
            f"max_err={row['max_relative_error']:.2%}",
            err=True,
        )
    with target.open("w", encoding="utf-8") as fp:
        json.dump(
            {"trials": [asdict(result) for result in results], "summary": summary},
            fp,
            indent=2,
        )
    typer.echo(f"Wrote {len(results)} trials to {target}")


if __name__ == "__main__":
    app()
