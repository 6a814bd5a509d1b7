import random

import hypothesis.strategies as st
from hypothesis import given, settings

from cvm_core.estimator import CVMEstimator


@given(
    items=st.lists(st.integers(min_value=0, max_value=40), min_size=1, max_size=300),
    capacity=st.integers(min_value=1, max_value=12),
    seed=st.integers(min_value=0, max_value=2**32 - 1),
)
@settings(max_examples=100, deadline=None)
def test_invariants_hold_after_every_insert(items: list[int], capacity: int, seed: int) -> None:
    estimator = CVMEstimator.with_capacity(capacity)
    rng = random.Random(seed)
    for item in items:
        before_round = estimator.round
        before_probability = estimator.probability
        before_size = estimator.sample_size
        was_sampled = item in estimator

        estimator.insert(item, rng)

        assert 0.0 < estimator.probability <= 1.0
        assert estimator.sample_size < capacity
        assert estimator.probability <= before_probability
        assert estimator.probability == before_probability / 2 ** (
            estimator.round - before_round
        )
        if estimator.round != before_round:
            # thinning only runs once a fresh item filled the sample
            assert not was_sampled
            assert before_size == capacity - 1
        assert estimator.count() == estimator.sample_size / estimator.probability


@given(
    items=st.lists(st.text(min_size=1, max_size=3), min_size=1, max_size=200),
    seed=st.integers(min_value=0, max_value=2**32 - 1),
)
@settings(max_examples=50, deadline=None)
def test_runs_are_reproducible(items: list[str], seed: int) -> None:
    first = CVMEstimator.with_capacity(8)
    second = CVMEstimator.with_capacity(8)
    first.extend(items, random.Random(seed))
    second.extend(items, random.Random(seed))
    assert first.sample() == second.sample()
    assert first.round == second.round
    assert first.count() == second.count()


@given(
    items=st.lists(st.integers(min_value=0, max_value=50), max_size=200),
    seed=st.integers(min_value=0, max_value=2**32 - 1),
)
@settings(max_examples=50, deadline=None)
def test_large_capacity_counts_exactly(items: list[int], seed: int) -> None:
    estimator = CVMEstimator.with_capacity(64)
    assert estimator.extend(items, random.Random(seed)) == float(len(set(items)))
    assert estimator.round == 0
