"""Centralised configuration models leveraging Pydantic."""

from __future__ import annotations

import logging
import os
import random
import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .estimator import CVMEstimator
from .hashing import registry
from .random_source import seeded

PLACEHOLDER_PATTERN = re.compile(r"\{\{([A-Z0-9_]+)\}\}")

DEFAULT_CAPACITY = 1000
DEFAULT_SEED = 0x123456789
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _as_path(value: str | Path) -> Path:
    return value if isinstance(value, Path) else Path(value).expanduser()


def _is_placeholder(value: object) -> bool:
    return isinstance(value, str) and PLACEHOLDER_PATTERN.fullmatch(value.strip()) is not None


def _resolve_int(value: object, placeholder: str, default: int) -> int:
    if value is None or _is_placeholder(value):
        return default
    if isinstance(value, bool):
        raise TypeError(f"{placeholder} must resolve to an integer value")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        # accept hex seeds such as 0x123456789
        return int(value.strip(), 0)
    raise TypeError(f"{placeholder} must resolve to an integer value")


def _resolve_string(value: object, placeholder: str, default: str | None = None) -> str:
    if value is None:
        if default is not None:
            return default
        raise ValueError(f"{placeholder} must be provided")
    if _is_placeholder(value):
        if default is not None:
            return default
        raise ValueError(f"{placeholder} must be replaced with a concrete value")
    return str(value)


class EstimatorSettings(BaseModel):
    capacity: int = Field(default=DEFAULT_CAPACITY)
    key_strategy: str = Field(default="builtin")

    @field_validator("capacity", mode="before")
    def _v_capacity(cls, v: object) -> int:
        value = _resolve_int(v, "{{CVM_CAPACITY}}", DEFAULT_CAPACITY)
        if value < 1:
            raise ValueError("{{CVM_CAPACITY}} must be a positive integer")
        return value

    @field_validator("key_strategy", mode="before")
    def _v_key_strategy(cls, v: object) -> str:
        value = _resolve_string(v, "{{CVM_KEY_STRATEGY}}", "builtin").strip().lower()
        if value not in registry.strategies:
            choices = ", ".join(f"'{name}'" for name in registry.names())
            raise ValueError(f"{{{{CVM_KEY_STRATEGY}}}} must be one of {choices}")
        return value


class RunSettings(BaseModel):
    seed: int = Field(default=DEFAULT_SEED)
    log_level: str = Field(default="WARNING")
    data_dir: Path = Field(default=Path("./data"))

    @field_validator("seed", mode="before")
    def _v_seed(cls, v: object) -> int:
        return _resolve_int(v, "{{CVM_SEED}}", DEFAULT_SEED)

    @field_validator("log_level", mode="before")
    def _v_log_level(cls, v: object) -> str:
        value = _resolve_string(v, "{{CVM_LOG_LEVEL}}", "WARNING").strip().upper()
        if value not in LOG_LEVELS:
            raise ValueError("{{CVM_LOG_LEVEL}} must be a standard logging level name")
        return value

    @field_validator("data_dir", mode="before")
    def _v_data_dir(cls, v: object) -> Path:
        value = _resolve_string(v, "{{CVM_DATA_DIR}}", "./data")
        return _as_path(value)


class AppConfig(BaseModel):
    estimator: EstimatorSettings = Field(default_factory=EstimatorSettings)
    run: RunSettings = Field(default_factory=RunSettings)

    @classmethod
    def from_env(cls) -> AppConfig:
        env = os.environ
        estimator_kwargs = {
            "capacity": env.get("CVM_CAPACITY"),
            "key_strategy": env.get("CVM_KEY_STRATEGY"),
        }
        run_kwargs = {
            "seed": env.get("CVM_SEED"),
            "log_level": env.get("CVM_LOG_LEVEL"),
            "data_dir": env.get("CVM_DATA_DIR"),
        }
        payload: dict[str, object] = {}
        if any(value is not None for value in estimator_kwargs.values()):
            payload["estimator"] = {k: v for k, v in estimator_kwargs.items() if v is not None}
        if any(value is not None for value in run_kwargs.values()):
            payload["run"] = {k: v for k, v in run_kwargs.items() if v is not None}
        return cls(**payload)

    def build_estimator(self) -> CVMEstimator:
        return CVMEstimator.with_capacity(
            self.estimator.capacity, key=self.estimator.key_strategy
        )

    def build_rng(self) -> random.Random:
        return seeded(self.run.seed)

    def configure_logging(self, level: str | None = None) -> None:
        name = (level or self.run.log_level).upper()
        if name not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {name}")
        logging.basicConfig(
            level=getattr(logging, name),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
