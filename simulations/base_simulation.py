"""Contract every simulation plugin implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from core.deterministic_rng import DeterministicRNG


class Simulation(ABC):
    """Abstract simulation plugin.

    The simulator talks to a plugin only through these methods, and a plugin
    keeps all of its world state on the instance.
    """

    def __init__(self, params: dict[str, Any], rng: DeterministicRNG) -> None:
        """Keep validated plugin params and the simulator-owned RNG streams."""
        self.params = params
        self.rng = rng

    @abstractmethod
    def reset(self) -> None:
        """Rebuild the world from params."""

    @abstractmethod
    def step(self, dt: float) -> None:
        """Advance the simulation by one tick of ``dt`` seconds."""

    @abstractmethod
    def get_metrics(self) -> dict[str, float]:
        """Scalar metrics for logging."""

    @abstractmethod
    def get_render_state(self) -> dict[str, Any]:
        """World state for a renderer (data only)."""

    @abstractmethod
    def close(self) -> None:
        """Release plugin resources."""
