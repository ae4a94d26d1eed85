"""Immutable render-state contracts handed to visualization collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np


@dataclass(frozen=True)
class AgentView:
    """Read-only snapshot of one agent slot."""

    id: int
    position: tuple[float, float]
    angle: float
    state: str


@dataclass(frozen=True)
class FoodView:
    """Read-only snapshot of one food item."""

    id: int
    position: tuple[float, float]
    state: str


@dataclass(frozen=True)
class EnvironmentState:
    """Field geometry plus the read-only trail grids."""

    bounds: tuple[int, int]
    home_center: tuple[float, float]
    home_radius: float
    home_trail: np.ndarray
    food_trail: np.ndarray
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RenderState:
    """Top-level immutable render frame emitted by the simulator once per tick."""

    step_index: int
    agents: list[AgentView]
    food: list[FoodView]
    environment: EnvironmentState
    metrics: dict[str, float]
    timestamp: float
