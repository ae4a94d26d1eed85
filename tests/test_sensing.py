"""Tests for the three-box vision raycast."""

from __future__ import annotations

import math

import numpy as np
import pytest

from simulations.ant_colony.sensing import SPREAD, SensingEngine


def _grid(width: int = 100, height: int = 100) -> np.ndarray:
    return np.zeros((height, width), dtype=np.float64)


def _fill_box(grid: np.ndarray, bounds: tuple[int, int, int, int], value: float) -> None:
    x0, y0, x1, y1 = bounds
    grid[max(0, y0):y1, max(0, x0):x1] = value


def test_empty_grids_sense_nothing() -> None:
    engine = SensingEngine(box_size=10, box_separation=5)

    home, food = engine.sense((50.0, 50.0), 0.0, _grid(), _grid())

    assert home is None
    assert food is None


def test_box_is_centered_separation_plus_size_ahead() -> None:
    engine = SensingEngine(box_size=10, box_separation=5)

    assert engine.reach == 15.0
    assert engine.box_bounds((50.0, 50.0), 0.0) == (60, 45, 70, 55)
    assert engine.box_bounds((50.0, 50.0), math.pi / 2.0) == (45, 60, 55, 70)


def test_strongest_box_heading_wins_per_grid() -> None:
    engine = SensingEngine(box_size=10, box_separation=5)
    position = (50.0, 50.0)
    heading = 0.0
    home = _grid()
    food = _grid()
    _fill_box(home, engine.box_bounds(position, heading + SPREAD), 1.0)
    _fill_box(food, engine.box_bounds(position, heading - SPREAD), 1.0)
    food[50, 65] = 0.5

    home_angle, food_angle = engine.sense(position, heading, home, food)

    assert home_angle == pytest.approx(heading + SPREAD)
    assert food_angle == pytest.approx(heading - SPREAD)


def test_ties_go_to_the_forward_box() -> None:
    engine = SensingEngine(box_size=10, box_separation=5)
    grid = _grid()
    grid[:, :] = 0.25

    assert engine.strongest((50.0, 50.0), 1.0, grid) == pytest.approx(1.0)


def test_tie_between_side_boxes_goes_to_lower_index() -> None:
    engine = SensingEngine(box_size=10, box_separation=5)
    position = (50.0, 50.0)
    grid = _grid()
    _fill_box(grid, engine.box_bounds(position, -SPREAD), 0.5)
    _fill_box(grid, engine.box_bounds(position, SPREAD), 0.5)

    assert engine.strongest(position, 0.0, grid) == pytest.approx(-SPREAD)


def test_boxes_off_the_grid_are_skipped() -> None:
    engine = SensingEngine(box_size=10, box_separation=5)
    grid = _grid(width=20, height=20)
    grid[:, :] = 1.0

    # Facing out of the left edge: every box lies beyond x < 0.
    assert engine.strongest((2.0, 10.0), math.pi, grid) is None
    # Partially covered boxes still score.
    assert engine.strongest((5.0, 10.0), 0.0, grid) is not None


def test_non_finite_heading_senses_nothing() -> None:
    engine = SensingEngine(box_size=10, box_separation=5)
    grid = _grid()
    grid[:, :] = 1.0

    assert engine.sense((50.0, 50.0), float("nan"), grid, grid) == (None, None)
