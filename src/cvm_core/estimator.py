"""CVM distinct-elements estimator.

Implements the algorithm from "Distinct Elements in Streams: An Algorithm for
the (Text) Book" by S. Chakraborty, K. S. Meel and N. V. Vinodchandran.

The estimator keeps a sample of at most ``capacity`` items together with a
sampling probability ``p = 2 ** -round``. Every arriving item is first dropped
from the sample, then re-added with probability ``p``. When the sample fills
up, ``p`` is halved and each sampled item survives an independent fair coin;
this repeats until the sample is below capacity again. ``len(sample) / p`` is
then an estimate of the number of distinct items seen.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Hashable, Iterable
from typing import Any

from .errors import InvalidCapacityError
from .hashing import KeyStrategy, registry
from .random_source import RandomSource, bernoulli, coin, halving_probability

logger = logging.getLogger(__name__)


def _validate_capacity(capacity: object) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise InvalidCapacityError(
            f"capacity must be an integer, not {type(capacity).__name__}"
        )
    if capacity < 1:
        raise InvalidCapacityError(f"capacity must be >= 1, got {capacity}")
    return capacity


class CVMEstimator:
    """Approximate distinct counter with a bounded sample.

    Not thread-safe; give each thread its own estimator or serialize access.
    """

    __slots__ = ("_capacity", "_key", "_round", "_sample")

    def __init__(self, capacity: int, key: str | KeyStrategy | None = None) -> None:
        self._capacity = _validate_capacity(capacity)
        self._key = registry.resolve(key)
        self._round = 0
        # key -> item; insertion order fixes the order coins are drawn in
        self._sample: dict[Hashable, Any] = {}

    @classmethod
    def with_capacity(
        cls, capacity: int, key: str | KeyStrategy | None = None
    ) -> CVMEstimator:
        return cls(capacity, key=key)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def round(self) -> int:
        """Number of thinning rounds so far."""
        return self._round

    @property
    def probability(self) -> float:
        """``2 ** -round``; saturates at the smallest subnormal past round 1074."""
        return halving_probability(self._round)

    @property
    def sample_size(self) -> int:
        """Items currently retained. This is not the distinct count; see :meth:`count`."""
        return len(self._sample)

    def sample(self) -> tuple[Any, ...]:
        return tuple(self._sample.values())

    def __len__(self) -> int:
        return len(self._sample)

    def __contains__(self, item: object) -> bool:
        return self._key(item) in self._sample

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(capacity={self._capacity}, round={self._round}, "
            f"sample_size={len(self._sample)})"
        )

    def insert(self, item: Any, rng: RandomSource) -> None:
        """Observe one stream item.

        Errors raised by ``rng`` propagate unchanged.
        """

        key = self._key(item)
        self._sample.pop(key, None)
        if bernoulli(rng, self._round):
            self._sample[key] = item
        while len(self._sample) >= self._capacity:
            self._thin(rng)

    def extend(self, items: Iterable[Any], rng: RandomSource) -> float:
        """Insert every item in order and return the resulting estimate."""

        for item in items:
            self.insert(item, rng)
        return self.count()

    def _thin(self, rng: RandomSource) -> None:
        # one fresh coin per item, drawn in insertion order
        survivors = {key: item for key, item in self._sample.items() if coin(rng)}
        self._sample = survivors
        self._round += 1
        logger.debug(
            "Thinned sample: capacity=%d round=%d survivors=%d",
            self._capacity,
            self._round,
            len(self._sample),
        )

    def count(self) -> float:
        """Estimated number of distinct items seen so far."""

        try:
            return math.ldexp(float(len(self._sample)), self._round)
        except OverflowError:
            return float("inf")
