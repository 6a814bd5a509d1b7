"""Exception hierarchy for the CVM estimator."""

from __future__ import annotations


class CVMError(Exception):
    """Base class for estimator errors."""


class InvalidCapacityError(CVMError, ValueError):
    """Raised when an estimator is constructed with an unusable capacity."""


class RandomSourceError(CVMError, RuntimeError):
    """Raised when a randomness source yields a draw outside [0, 1)."""


class RandomSourceExhausted(RandomSourceError):
    """Raised when a replayed randomness source has no draws left."""


class UnknownKeyStrategyError(CVMError, KeyError):
    """Raised when a key strategy name is not registered."""
