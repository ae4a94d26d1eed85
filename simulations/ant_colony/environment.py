"""Per-tick orchestration of the ant colony world."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from threading import Lock
from typing import Any

import numpy as np

from core.deterministic_rng import DeterministicRNG
from simulations.ant_colony.agents import AgentPopulation, AgentState
from simulations.ant_colony.config import ColonyConfig
from simulations.ant_colony.food import FoodState, FoodStore
from simulations.ant_colony.home import HomeRegion
from simulations.ant_colony.pheromones import PheromoneField, Trail
from simulations.ant_colony.sensing import SensingEngine

LOGGER = logging.getLogger(__name__)


class ColonyEnvironment:
    """Owns the nest, food, trails and ants and advances them one tick at a time.

    The components are siblings: agents refer to food by index and keep a
    copy of the target position, nothing holds a reference into another
    component.
    """

    def __init__(self, config: ColonyConfig, rng: DeterministicRNG) -> None:
        self.config = config
        self.rng = rng
        self.sensing = SensingEngine(box_size=config.box_size, box_separation=config.box_separation)
        self._executor: ThreadPoolExecutor | None = None
        self._delivery_lock = Lock()
        self._last_metrics: dict[str, float] = {}
        self._build_world()

    def reset(self) -> None:
        """Rebuild nest, food, trails and population from the config."""
        self._build_world()
        LOGGER.info(
            "Colony reset: %d agents, %d food items on a %dx%d field",
            self.agents.size,
            len(self.food),
            self.config.width,
            self.config.height,
        )

    def step(self, dt: float) -> None:
        """Advance one tick: decay trails, resolve every agent, then move them."""
        self.pheromones.decay()
        self.run_agent_pass()
        self.agents.step(dt)
        self.step_count += 1
        self._last_metrics = self._compute_metrics()

    def run_agent_pass(self) -> None:
        """Transitions, food claims, deposits and sensing for every agent.

        Sequential in index order unless ``workers > 1``, in which case
        contiguous chunks of agents are processed on a thread pool. Food
        claims stay exclusive through ``FoodStore.try_claim`` and deposits
        always write the same value, so chunk order does not matter for
        correctness.
        """
        home_grid = self.pheromones.home
        food_grid = self.pheromones.food
        if self.config.workers <= 1 or self.agents.size < 2:
            for index in range(self.agents.size):
                self._resolve_agent(index, home_grid, food_grid)
            return

        chunks = [chunk for chunk in np.array_split(np.arange(self.agents.size), self.config.workers) if chunk.size]
        executor = self._ensure_executor()
        futures = [executor.submit(self._resolve_chunk, chunk, home_grid, food_grid) for chunk in chunks]
        for future in futures:
            future.result()

    def get_metrics(self) -> dict[str, float]:
        """Return latest scalar metrics."""
        if not self._last_metrics:
            self._last_metrics = self._compute_metrics()
        return dict(self._last_metrics)

    def get_render_state(self) -> dict[str, Any]:
        """Return the per-tick world snapshot; arrays are read-only views."""
        return {
            "simulation": "ant_colony",
            "step": int(self.step_count),
            "width": int(self.config.width),
            "height": int(self.config.height),
            "home": {
                "x": float(self.home.center[0]),
                "y": float(self.home.center[1]),
                "radius": float(self.home.radius),
            },
            "agents": {
                "positions": self.agents.positions,
                "angles": self.agents.angles,
                "states": self.agents.states,
            },
            "food": {
                "positions": self.food.positions,
                "states": self.food.states,
            },
            "home_trail": self.pheromones.home,
            "food_trail": self.pheromones.food,
        }

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _build_world(self) -> None:
        config = self.config
        self.step_count = 0
        self.food_delivered = 0
        self._last_metrics = {}
        self.home = HomeRegion(config.home_center, config.home_radius, rng=self.rng.fresh_stream("home"))
        self.pheromones = PheromoneField(config.width, config.height, config.decay_rate)
        self.food = FoodStore(config.food_capacity, rng=self.rng.fresh_stream("food"))
        for patch in config.food_patches:
            self.food.add_food((patch.x_min, patch.y_min), (patch.x_max, patch.y_max), patch.count)
        self.agents = AgentPopulation(
            size=config.agent_count,
            width=config.width,
            height=config.height,
            home_center=config.home_center,
            max_speed=config.max_speed,
            steer_strength=config.steer_strength,
            wander_strength=config.wander_strength,
            rng=self.rng.fresh_stream("agents"),
        )
        positions, angles = self.home.generate_starting_positions(config.agent_count)
        self.agents.initialize(angles, positions)

    def _ensure_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.config.workers, thread_name_prefix="colony")
        return self._executor

    def _resolve_chunk(self, indices: np.ndarray, home_grid: np.ndarray, food_grid: np.ndarray) -> None:
        for index in indices:
            self._resolve_agent(int(index), home_grid, food_grid)

    def _resolve_agent(self, i: int, home_grid: np.ndarray, food_grid: np.ndarray) -> None:
        agents = self.agents

        if agents.food_acquired(i):
            food_id = agents.begin_return(i)
            agents.reverse_velocity(i)
            if food_id is not None:
                self.food.collect(food_id)

        if agents.state[i] == AgentState.FORAGING:
            food_id = self.food.claim_first_within(agents.position[i], self.config.vision_radius)
            if food_id is not None:
                agents.set_food_target(i, self.food.position(food_id), food_id)

        # Only loaded ants turn at the nest; a TO_FOOD ant crossing it keeps its target.
        if agents.state[i] == AgentState.RETURNING and self.home.touching_home(agents.position[i]):
            agents.begin_foraging(i)
            agents.reverse_velocity(i)
            with self._delivery_lock:
                self.food_delivered += 1

        # Outbound ants mark the way home; loaded ants mark the way to food.
        trail = Trail.FOOD if agents.state[i] == AgentState.RETURNING else Trail.HOME
        cell = self.pheromones.cell_for(agents.position[i])
        if cell is not None:
            self.pheromones.deposit(cell, trail)

        home_angle, food_angle = self.sensing.sense(agents.position[i], float(agents.angle[i]), home_grid, food_grid)
        agents.set_pheromone_sense(i, home_angle, food_angle)

    def _compute_metrics(self) -> dict[str, float]:
        return {
            "step_count": float(self.step_count),
            "agents_foraging": float(self.agents.count(AgentState.FORAGING)),
            "agents_to_food": float(self.agents.count(AgentState.TO_FOOD)),
            "agents_returning": float(self.agents.count(AgentState.RETURNING)),
            "food_available": float(self.food.count(FoodState.AVAILABLE)),
            "food_targeted": float(self.food.count(FoodState.TARGETED)),
            "food_collected": float(self.food.count(FoodState.COLLECTED)),
            "food_delivered": float(self.food_delivered),
            "home_trail_mass": self.pheromones.total(Trail.HOME),
            "food_trail_mass": self.pheromones.total(Trail.FOOD),
        }
