"""Runtime configuration value shared by every ant_colony component."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from simulations.ant_colony import config_schema


@dataclass(frozen=True)
class FoodPatch:
    """Rectangle that receives ``count`` uniformly scattered food items."""

    x_min: float
    y_min: float
    x_max: float
    y_max: float
    count: int

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "FoodPatch":
        if len(row) != 5:
            raise ValueError(f"Food patch needs [x_min, y_min, x_max, y_max, count], got {list(row)!r}.")
        x_min, y_min, x_max, y_max, count = row
        return cls(float(x_min), float(y_min), float(x_max), float(y_max), int(count))


@dataclass(frozen=True)
class ColonyConfig:
    """Runtime parameters for the ant colony simulation."""

    width: int
    height: int
    agent_count: int
    food_capacity: int
    food_patches: tuple[FoodPatch, ...]
    home_x: float
    home_y: float
    home_radius: float
    max_speed: float
    steer_strength: float
    wander_strength: float
    vision_radius: float
    decay_rate: float
    box_size: int
    box_separation: int
    workers: int = 1

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ColonyConfig":
        """Build from a validated plugin params mapping, filling gaps from defaults."""
        merged = dict(config_schema.DEFAULTS)
        merged.update(params)
        patches = tuple(FoodPatch.from_row(row) for row in merged["food_patches"])
        total_food = sum(patch.count for patch in patches)
        if total_food > int(merged["food_capacity"]):
            raise ValueError(
                f"Food patches hold {total_food} items but food_capacity is {merged['food_capacity']}."
            )
        return cls(
            width=int(merged["width"]),
            height=int(merged["height"]),
            agent_count=int(merged["agent_count"]),
            food_capacity=int(merged["food_capacity"]),
            food_patches=patches,
            home_x=float(merged["home_x"]),
            home_y=float(merged["home_y"]),
            home_radius=float(merged["home_radius"]),
            max_speed=float(merged["max_speed"]),
            steer_strength=float(merged["steer_strength"]),
            wander_strength=float(merged["wander_strength"]),
            vision_radius=float(merged["vision_radius"]),
            decay_rate=float(merged["decay_rate"]),
            box_size=int(merged["box_size"]),
            box_separation=int(merged["box_separation"]),
            workers=int(merged["workers"]),
        )

    @property
    def home_center(self) -> tuple[float, float]:
        return (self.home_x, self.home_y)
