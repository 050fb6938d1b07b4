"""Deterministic RNG container handing out independent named streams."""

from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass, field

import numpy as np


@dataclass
class DeterministicRNG:
    """Owns deterministic RNG streams without touching global random state.

    Each named stream is seeded from ``seed`` and the stream name, so adding a
    consumer never shifts the draws seen by another one.
    """

    seed: int
    _streams: dict[str, random.Random] = field(default_factory=dict, init=False, repr=False)
    _numpy_streams: dict[str, np.random.Generator] = field(default_factory=dict, init=False, repr=False)

    def derive_seed(self, name: str) -> int:
        """Return a stable 32-bit seed for ``name``."""
        # Built-in hash() is salted per process.
        digest = hashlib.sha256(f"{self.seed}:{name}".encode("utf-8")).digest()
        return int.from_bytes(digest[:8], byteorder="big", signed=False) & 0xFFFFFFFF

    def stream(self, name: str) -> random.Random:
        """Return independent deterministic stream by name."""
        if name not in self._streams:
            self._streams[name] = random.Random(self.derive_seed(name))
        return self._streams[name]

    def numpy_stream(self, name: str) -> np.random.Generator:
        """Return independent numpy generator by name."""
        if name not in self._numpy_streams:
            self._numpy_streams[name] = np.random.default_rng(self.derive_seed(name))
        return self._numpy_streams[name]
