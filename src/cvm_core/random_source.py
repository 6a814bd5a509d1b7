"""Randomness capability consumed by the estimator.

The estimator never owns or seeds a generator. Callers pass any object with a
``random()`` method returning floats in ``[0, 1)``; ``random.Random`` and
``numpy.random.Generator`` both fit.
"""

from __future__ import annotations

import math
import random
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from .errors import RandomSourceError, RandomSourceExhausted


@runtime_checkable
class RandomSource(Protocol):
    def random(self) -> float: ...


def draw(rng: RandomSource) -> float:
    """Return one uniform draw, rejecting values outside ``[0, 1)``."""

    value = rng.random()
    if not 0.0 <= value < 1.0:
        raise RandomSourceError(
            f"Randomness source returned {value!r}; expected a float in [0, 1)."
        )
    return value


# 2 ** -1074 is the smallest positive float
MAX_EXACT_ROUND = 1074


def halving_probability(round_: int) -> float:
    """Return ``2 ** -round_``, saturating at the smallest subnormal float."""

    return math.ldexp(1.0, -min(round_, MAX_EXACT_ROUND))


def bernoulli(rng: RandomSource, round_: int) -> bool:
    """Return True with probability ``2 ** -round_``."""

    return draw(rng) < halving_probability(round_)


def coin(rng: RandomSource) -> bool:
    """Fair coin; True means heads (keep)."""

    return draw(rng) < 0.5


def seeded(seed: int) -> random.Random:
    return random.Random(seed)


class ReplayRandom:
    """Replays a fixed sequence of draws, for exact state-transition tests."""

    __slots__ = ("_draws", "_position")

    def __init__(self, draws: Iterable[float]) -> None:
        self._draws = list(draws)
        self._position = 0

    def random(self) -> float:
        if self._position >= len(self._draws):
            raise RandomSourceExhausted(
                f"Replay source exhausted after {len(self._draws)} draws."
            )
        value = self._draws[self._position]
        self._position += 1
        return value

    @property
    def consumed(self) -> int:
        return self._position

    @property
    def remaining(self) -> int:
        return len(self._draws) - self._position
