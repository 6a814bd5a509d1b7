# ruff: noqa: B008
"""Throughput benchmark for the CVM estimator."""

from __future__ import annotations

import time
from dataclasses import dataclass

import typer

from cvm_core import config as config_module
from cvm_core.estimator import CVMEstimator
from cvm_core.random_source import seeded
from cvm_core.streams import generate_ints

SEED = 0x1234
DEFAULT_CASES = ["10000:1000", "100000:1000", "1000000:1000", "1000000:10000"]

app = typer.Typer(help="Benchmark estimator throughput on synthetic integer streams.")


@dataclass(slots=True)
class BenchResult:
    items: int
    capacity: int
    seconds: float
    estimate: float

    @property
    def items_per_second(self) -> float:
        return self.items / self.seconds if self.seconds > 0 else float("inf")


def parse_case(case: str) -> tuple[int, int]:
    try:
        count, capacity = (int(part) for part in case.split(":", 1))
    except ValueError as exc:
        raise typer.BadParameter(f"Case '{case}' must look like <items>:<capacity>.") from exc
    if count < 2:
        raise typer.BadParameter(f"Case '{case}' needs at least 2 items.", param_hint="--case")
    if capacity < 1:
        raise typer.BadParameter(f"Case '{case}' needs a capacity >= 1.", param_hint="--case")
    return count, capacity


def bench_case(
    count: int, capacity: int, key_strategy: str = "builtin", repeat: int = 1
) -> BenchResult:
    ints = generate_ints(count, SEED)
    best = float("inf")
    estimate = 0.0
    for _ in range(repeat):
        estimator = CVMEstimator.with_capacity(capacity, key=key_strategy)
        rng = seeded(SEED)
        started = time.perf_counter()
        estimate = estimator.extend(ints, rng)
        best = min(best, time.perf_counter() - started)
    return BenchResult(items=count, capacity=capacity, seconds=best, estimate=estimate)


@app.command()
def main(
    cases: list[str] = typer.Option(DEFAULT_CASES, "--case", help="<items>:<capacity> pairs"),
    repeat: int = typer.Option(3, min=1, help="Runs per case; the fastest is reported"),
) -> None:
    cfg = config_module.AppConfig.from_env()
    for case in cases:
        count, capacity = parse_case(case)
        result = bench_case(count, capacity, key_strategy=cfg.estimator.key_strategy, repeat=repeat)
        typer.echo(
            f"ints n={result.items:<9} capacity={result.capacity:<6} "
            f"time={result.seconds * 1000:9.1f}ms "
            f"throughput={result.items_per_second / 1e6:6.2f}M items/s "
            f"estimate={result.estimate:.0f}"
        )


if __name__ == "__main__":
    app()
