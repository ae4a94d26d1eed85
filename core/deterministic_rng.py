"""Deterministic RNG container handing out named numpy generator streams."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

import numpy as np


@dataclass
class DeterministicRNG:
    """Owns deterministic RNG streams without touching global random state."""

    seed: int

    def __post_init__(self) -> None:
        self._streams: dict[str, np.random.Generator] = {}

    def stream(self, name: str) -> np.random.Generator:
        """Return independent deterministic stream by name."""
        if name not in self._streams:
            self._streams[name] = self._derive(name)
        return self._streams[name]

    def fresh_stream(self, name: str) -> np.random.Generator:
        """Restart stream ``name`` from its seed and return it.

        Draws made from the previous generator for ``name`` have no effect on
        the new one, so rebuilding a world from fresh streams repeats it.
        """
        self._streams[name] = self._derive(name)
        return self._streams[name]

    def stream_names(self) -> list[str]:
        """Names of streams handed out so far, in creation order."""
        return list(self._streams)

    def _derive(self, name: str) -> np.random.Generator:
        # Use stable cross-process seed derivation instead of built-in hash().
        digest = hashlib.sha256(f"{self.seed}:{name}".encode("utf-8")).digest()
        derived_seed = int.from_bytes(digest[:8], byteorder="big", signed=False)
        return np.random.default_rng(derived_seed)
