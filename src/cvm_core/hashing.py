"""Dedup-key strategies used by the estimator's sample."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Any

import xxhash

from .errors import UnknownKeyStrategyError

KeyStrategy = Callable[[Any], Hashable]

XXHASH_SEED = 0


def builtin_key(item: Hashable) -> Hashable:
    """Use the item itself; Python's hash and equality decide duplicates."""

    return item


def _as_bytes(item: object) -> bytes:
    # one-byte type tag keeps 49, "1" and b"1" apart
    if isinstance(item, bytes | bytearray | memoryview):
        return b"b" + bytes(item)
    if isinstance(item, str):
        return b"s" + item.encode("utf-8")
    if isinstance(item, int) and not isinstance(item, bool):
        length = max(1, (item.bit_length() + 8) // 8)
        return b"i" + item.to_bytes(length, "little", signed=True)
    raise TypeError(
        f"xxhash key strategy supports bytes, str and int items, not {type(item).__name__}"
    )


def xxhash_key(item: object) -> int:
    """Map an item to the 64-bit xxHash digest of its type-tagged byte encoding.

    Bytes-like items of any type share a tag, so ``b"a"`` and ``bytearray(b"a")``
    are the same key while ``"a"`` and ``b"a"`` are not.
    """

    return xxhash.xxh64_intdigest(_as_bytes(item), seed=XXHASH_SEED)


@dataclass(slots=True)
class KeyStrategyRegistry:
    """Named key strategies, resolved by the estimator and the config layer."""

    strategies: dict[str, KeyStrategy] = field(default_factory=dict)
    default: str = "builtin"

    def register(self, name: str, strategy: KeyStrategy) -> None:
        self.strategies[name] = strategy

    def names(self) -> list[str]:
        return sorted(self.strategies)

    def resolve(self, strategy: str | KeyStrategy | None = None) -> KeyStrategy:
        if callable(strategy):
            return strategy
        name = strategy or self.default
        if name not in self.strategies:
            raise UnknownKeyStrategyError(f"Unknown key strategy: {name}")
        return self.strategies[name]


registry = KeyStrategyRegistry()
registry.register("builtin", builtin_key)
registry.register("xxhash", xxhash_key)
