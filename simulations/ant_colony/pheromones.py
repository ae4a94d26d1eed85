"""Two decaying pheromone grids: the home trail and the food trail.

Both grids are numpy arrays of shape ``(height, width)`` indexed ``[y, x]``,
one cell per integer coordinate unit. Every cell stays in ``[0, 1]``:
deposits overwrite a cell with exactly 1.0 and decay subtracts a fixed rate
floored at zero.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

import numpy as np

# Residues below this fraction of the decay rate are float rounding left over
# from repeated subtraction, so a cell holding k * rate reaches exactly 0.0
# after k ticks.
_RESIDUE_FRACTION = 1e-6


class Trail(Enum):
    """Which grid a deposit or lookup refers to."""

    HOME = "home"
    FOOD = "food"


class PheromoneField:
    """Home and food trail grids sized to the simulation window."""

    def __init__(self, width: int, height: int, decay_rate: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Pheromone field needs positive dimensions, got {width}x{height}.")
        self.width = int(width)
        self.height = int(height)
        self.decay_rate = float(decay_rate)
        self._grids = {
            Trail.HOME: np.zeros((self.height, self.width), dtype=np.float64),
            Trail.FOOD: np.zeros((self.height, self.width), dtype=np.float64),
        }

    @property
    def home(self) -> np.ndarray:
        return self.grid(Trail.HOME)

    @property
    def food(self) -> np.ndarray:
        return self.grid(Trail.FOOD)

    def grid(self, trail: Trail) -> np.ndarray:
        """Return a read-only view of one trail grid."""
        view = self._grids[trail].view()
        view.flags.writeable = False
        return view

    def decay(self) -> None:
        """Evaporate both grids by ``decay_rate``, never going below zero."""
        for grid in self._grids.values():
            np.subtract(grid, self.decay_rate, out=grid)
            np.maximum(grid, 0.0, out=grid)
            if self.decay_rate > 0.0:
                grid[grid < self.decay_rate * _RESIDUE_FRACTION] = 0.0

    def deposit(self, cell: tuple[int, int], trail: Trail) -> bool:
        """Saturate ``cell`` (x, y) in ``trail``. Out-of-range cells are skipped."""
        x, y = cell
        if not self.in_bounds(x, y):
            return False
        self._grids[trail][y, x] = 1.0
        return True

    def set_cell(self, cell: tuple[int, int], trail: Trail, value: float) -> None:
        """Write an explicit intensity, clipped to [0, 1]."""
        x, y = cell
        self._grids[trail][y, x] = min(1.0, max(0.0, float(value)))

    def intensity(self, cell: tuple[int, int], trail: Trail) -> float:
        x, y = cell
        if not self.in_bounds(x, y):
            return 0.0
        return float(self._grids[trail][y, x])

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_for(self, position: Sequence[float]) -> tuple[int, int] | None:
        """Round a continuous position to its grid cell, or None when off-grid."""
        x = int(round(float(position[0])))
        y = int(round(float(position[1])))
        if not self.in_bounds(x, y):
            return None
        return (x, y)

    def box_sum(self, trail: Trail, x0: int, y0: int, x1: int, y1: int) -> float:
        """Sum the half-open box ``[x0, x1) x [y0, y1)``, skipping off-grid cells."""
        return box_sum(self._grids[trail], x0, y0, x1, y1)

    def total(self, trail: Trail) -> float:
        return float(self._grids[trail].sum())


def box_sum(grid: np.ndarray, x0: int, y0: int, x1: int, y1: int) -> float:
    """Sum a half-open cell box of a ``[y, x]`` grid clipped to its extent."""
    height, width = grid.shape
    x0 = max(0, x0)
    y0 = max(0, y0)
    x1 = min(width, x1)
    y1 = min(height, y1)
    if x0 >= x1 or y0 >= y1:
        return 0.0
    return float(grid[y0:y1, x0:x1].sum())
