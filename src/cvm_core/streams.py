"""Item sources used by the CLI, evaluation and benchmark harnesses."""

from __future__ import annotations

import random
from collections.abc import Hashable, Iterable, Iterator
from pathlib import Path
from typing import Literal

StreamMode = Literal["words", "lines"]


def iter_words(path: Path) -> Iterator[str]:
    with path.open("r", encoding="utf-8") as fp:
        for line in fp:
            yield from line.split()


def iter_lines(path: Path) -> Iterator[str]:
    with path.open("r", encoding="utf-8") as fp:
        for line in fp:
            yield line.rstrip("\r\n")


def iter_items(path: Path, mode: StreamMode = "words") -> Iterator[str]:
    if mode == "words":
        return iter_words(path)
    if mode == "lines":
        return iter_lines(path)
    raise ValueError(f"Unsupported stream mode '{mode}'. Use words or lines.")


def generate_ints(n: int, seed: int) -> list[int]:
    """Draw ``n`` integers uniformly from ``[0, n // 2)``, so roughly 43% are distinct."""

    if n < 2:
        raise ValueError("n must be at least 2")
    rng = random.Random(seed)
    upper = n // 2
    return [rng.randrange(upper) for _ in range(n)]


def exact_distinct(items: Iterable[Hashable]) -> int:
    return len(set(items))
