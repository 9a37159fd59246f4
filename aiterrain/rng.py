"""Deterministic seed streams for offset sampling."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib

import numpy as np

NAMESPACE = "aiterrain-v1"


def _normalize_seed(seed: int) -> int:
    # Negative seeds map onto the unsigned 64-bit range.
    return int(seed) & ((1 << 64) - 1)


def derive_seed(parent_seed: int, key: str, *, namespace: str = NAMESPACE) -> int:
    """Derive a child seed from a parent seed and a stage label."""

    payload = f"{namespace}:{_normalize_seed(parent_seed)}:{key}".encode("utf-8")
    digest = hashlib.blake2b(payload, digest_size=8, person=b"aiterrng").digest()
    return int.from_bytes(digest, byteorder="big", signed=False)


@dataclass(frozen=True)
class RngStream:
    """Immutable seed holder; each stage forks its own generator by name."""

    seed: int
    namespace: str = NAMESPACE

    def fork(self, key: str) -> "RngStream":
        if not key:
            raise ValueError("fork key must be non-empty")
        return RngStream(derive_seed(self.seed, key, namespace=self.namespace), self.namespace)

    def generator(self) -> np.random.Generator:
        # A private PCG64 keeps draws independent of numpy's global state.
        return np.random.Generator(np.random.PCG64(np.uint64(_normalize_seed(self.seed))))

    def offset_2d(self, high: int) -> tuple[int, int]:
        """Draw two independent integers in ``[0, high)``."""

        if high <= 0:
            raise ValueError("high must be positive")
        gen = self.generator()
        offset_x = int(gen.integers(0, high))
        offset_y = int(gen.integers(0, high))
        return offset_x, offset_y
