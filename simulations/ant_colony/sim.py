"""Simulation plugin for ant_colony."""

from __future__ import annotations

from typing import Any

from core.deterministic_rng import DeterministicRNG
from simulations.ant_colony.config import ColonyConfig
from simulations.ant_colony.environment import ColonyEnvironment
from simulations.base_simulation import Simulation


class AntColonySimulation(Simulation):
    """Foraging ants recruiting nestmates through home and food trails."""

    def __init__(self, params: dict[str, Any], rng: DeterministicRNG) -> None:
        super().__init__(params=params, rng=rng)
        self.colony_config = ColonyConfig.from_params(params)
        self.environment = ColonyEnvironment(config=self.colony_config, rng=rng)

    def reset(self) -> None:
        self.environment.reset()

    def step(self, dt: float) -> None:
        self.environment.step(dt)

    def get_metrics(self) -> dict[str, float]:
        return self.environment.get_metrics()

    def get_render_state(self) -> dict[str, Any]:
        return self.environment.get_render_state()

    def close(self) -> None:
        self.environment.close()


SIMULATION_NAME = "ant_colony"
SimulationClass = AntColonySimulation
