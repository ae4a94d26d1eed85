"""Vision raycast: turn trail intensity ahead of an agent into a heading.

Three square sampling boxes are cast ahead of the agent, one along its
current heading and one rotated each way by ``SPREAD``. For each trail grid
the box with the strictly greatest summed intensity wins, ties going to the
box cast first. A grid whose winning box is empty yields no direction.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from simulations.ant_colony.pheromones import box_sum

SPREAD = math.pi / 5.0


class SensingEngine:
    """Stateless sampler parameterised by box edge length and separation."""

    def __init__(self, box_size: int, box_separation: int) -> None:
        if box_size <= 0:
            raise ValueError(f"Vision box size must be positive, got {box_size}.")
        self.box_size = int(box_size)
        self.box_separation = int(box_separation)

    @property
    def reach(self) -> float:
        """Distance from the agent to each box center."""
        return float(self.box_separation + self.box_size)

    def candidate_headings(self, heading: float) -> tuple[float, float, float]:
        return (heading, heading - SPREAD, heading + SPREAD)

    def box_bounds(self, position: Sequence[float], heading: float) -> tuple[int, int, int, int]:
        """Half-open cell box ``(x0, y0, x1, y1)`` for one candidate heading."""
        center_x = float(position[0]) + math.cos(heading) * self.reach
        center_y = float(position[1]) + math.sin(heading) * self.reach
        half = self.box_size / 2.0
        x0 = int(math.floor(center_x - half))
        y0 = int(math.floor(center_y - half))
        return (x0, y0, x0 + self.box_size, y0 + self.box_size)

    def scores(self, position: Sequence[float], heading: float, grid: np.ndarray) -> list[float]:
        return [box_sum(grid, *self.box_bounds(position, candidate)) for candidate in self.candidate_headings(heading)]

    def strongest(self, position: Sequence[float], heading: float, grid: np.ndarray) -> float | None:
        """Heading of the highest-scoring box, or None when every box is empty."""
        headings = self.candidate_headings(heading)
        best_score = -1.0
        best_heading = headings[0]
        for candidate, score in zip(headings, self.scores(position, heading, grid)):
            if score > best_score:
                best_score = score
                best_heading = candidate
        if best_score > 0.0:
            return best_heading
        return None

    def sense(
        self,
        position: Sequence[float],
        heading: float,
        home_grid: np.ndarray,
        food_grid: np.ndarray,
    ) -> tuple[float | None, float | None]:
        """Return ``(home_angle, food_angle)`` sensed from ``position``."""
        if not math.isfinite(heading):
            return (None, None)
        return (
            self.strongest(position, heading, home_grid),
            self.strongest(position, heading, food_grid),
        )
