"""Nest geometry and spawn-point generation."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

# Agents spawn this far outside the nest edge.
SPAWN_MARGIN = 5.0


class HomeRegion:
    """Circular nest with an immutable center and radius."""

    def __init__(self, center: Sequence[float], radius: float, rng: np.random.Generator) -> None:
        self._center = (float(center[0]), float(center[1]))
        self._radius = float(radius)
        self.rng = rng

    @property
    def center(self) -> tuple[float, float]:
        return self._center

    @property
    def radius(self) -> float:
        return self._radius

    def touching_home(self, position: Sequence[float]) -> bool:
        dx = float(position[0]) - self._center[0]
        dy = float(position[1]) - self._center[1]
        return math.hypot(dx, dy) <= self._radius

    def generate_starting_position(self) -> tuple[np.ndarray, float]:
        """Return a point on the spawn ring and the heading pointing away from the nest."""
        angle = float(self.rng.random() * 2.0 * math.pi)
        ring = self._radius + SPAWN_MARGIN
        point = np.array(
            [self._center[0] + math.cos(angle) * ring, self._center[1] + math.sin(angle) * ring],
            dtype=np.float64,
        )
        return point, angle

    def generate_starting_positions(self, count: int) -> tuple[np.ndarray, np.ndarray]:
        """Draw ``count`` spawn points; returns ``(positions[count, 2], angles[count])``."""
        positions = np.zeros((count, 2), dtype=np.float64)
        angles = np.zeros(count, dtype=np.float64)
        for index in range(count):
            positions[index], angles[index] = self.generate_starting_position()
        return positions, angles
