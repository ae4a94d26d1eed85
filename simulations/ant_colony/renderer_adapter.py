"""Render adapter for ant_colony plugin."""

from __future__ import annotations

import time
from typing import Any

from core.render_state import AgentView, EnvironmentState, FoodView, RenderState
from simulations.ant_colony.agents import AgentState
from simulations.ant_colony.food import FoodState


def build_render_state(simulator: object) -> RenderState:
    """Build an immutable frame from the plugin's render snapshot."""
    sim = getattr(simulator, "sim")
    raw: dict[str, Any] = sim.get_render_state()
    metrics = sim.get_metrics()

    agents_raw = raw["agents"]
    agents = [
        AgentView(
            id=index,
            position=(float(position[0]), float(position[1])),
            angle=float(angle),
            state=AgentState(int(state)).name,
        )
        for index, (position, angle, state) in enumerate(
            zip(agents_raw["positions"], agents_raw["angles"], agents_raw["states"])
        )
    ]

    food_raw = raw["food"]
    food = [
        FoodView(
            id=index,
            position=(float(position[0]), float(position[1])),
            state=FoodState(int(state)).name,
        )
        for index, (position, state) in enumerate(zip(food_raw["positions"], food_raw["states"]))
    ]

    home = raw["home"]
    env_state = EnvironmentState(
        bounds=(int(raw["width"]), int(raw["height"])),
        home_center=(float(home["x"]), float(home["y"])),
        home_radius=float(home["radius"]),
        home_trail=raw["home_trail"].copy(),
        food_trail=raw["food_trail"].copy(),
        metadata={"simulation": raw.get("simulation", "ant_colony")},
    )

    return RenderState(
        step_index=int(getattr(simulator, "step_index", raw.get("step", 0))),
        agents=agents,
        food=food,
        environment=env_state,
        metrics={key: float(value) for key, value in metrics.items()},
        timestamp=float(time.time()),
    )
