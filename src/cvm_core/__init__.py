"""Streaming distinct-elements estimation with the CVM algorithm."""

from .config import AppConfig, EstimatorSettings, RunSettings
from .errors import (
    CVMError,
    InvalidCapacityError,
    RandomSourceError,
    RandomSourceExhausted,
    UnknownKeyStrategyError,
)
from .estimator import CVMEstimator
from .random_source import RandomSource, ReplayRandom

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "CVMError",
    "CVMEstimator",
    "EstimatorSettings",
    "InvalidCapacityError",
    "RandomSource",
    "RandomSourceError",
    "RandomSourceExhausted",
    "ReplayRandom",
    "RunSettings",
    "UnknownKeyStrategyError",
]
