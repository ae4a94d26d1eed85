"""Struct-of-arrays ant population: state machine helpers and steering physics.

Every per-agent attribute is a numpy array indexed by agent id, so the
kinematics integrator in ``AgentPopulation.step`` runs over the whole
population at once. Optional per-agent values (food target, sensed trail
directions) are stored as a value array plus a presence mask.
"""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Sequence

import numpy as np

CAPTURE_RADIUS = 5.0
NEAR_HOME_DISTANCE = 100.0


class AgentState(IntEnum):
    FORAGING = 0
    TO_FOOD = 1
    RETURNING = 2


def clamp_magnitude(vectors: np.ndarray, limit: float) -> np.ndarray:
    """Scale down rows longer than ``limit``; shorter rows pass through."""
    norms = np.linalg.norm(vectors, axis=-1, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        scale = np.where(norms > limit, limit / norms, 1.0)
    return vectors * scale


def normalize_rows(vectors: np.ndarray, fallback: np.ndarray) -> np.ndarray:
    """Unit-length rows; zero-length or non-finite rows take ``fallback``."""
    norms = np.linalg.norm(vectors, axis=-1, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        unit = vectors / norms
    valid = np.isfinite(unit).all(axis=-1) & (norms[..., 0] > 0.0)
    return np.where(valid[..., None], unit, fallback)


def heading_of(velocity: np.ndarray) -> np.ndarray:
    """``atan(vy / vx)`` shifted by -pi when ``vx < 0``.

    Not a true four-quadrant arctangent: results span (-3pi/2, pi/2] instead
    of (-pi, pi], and a negative-zero ``vx`` with nonzero ``vy`` points the
    heading the wrong way along the y axis.
    """
    vx = velocity[..., 0]
    vy = velocity[..., 1]
    with np.errstate(divide="ignore", invalid="ignore"):
        angle = np.arctan(vy / vx)
    return np.where(vx < 0.0, angle - math.pi, angle)


class AgentPopulation:
    """Fixed-size population of ants; agent ``i`` is row ``i`` of every array."""

    def __init__(
        self,
        size: int,
        width: float,
        height: float,
        home_center: Sequence[float],
        max_speed: float,
        steer_strength: float,
        wander_strength: float,
        rng: np.random.Generator,
    ) -> None:
        if size < 0:
            raise ValueError(f"Population size must not be negative, got {size}.")
        self.size = int(size)
        self.width = float(width)
        self.height = float(height)
        self.home_center = np.array([float(home_center[0]), float(home_center[1])], dtype=np.float64)
        self.max_speed = float(max_speed)
        self.steer_strength = float(steer_strength)
        self.wander_strength = float(wander_strength)
        self.rng = rng

        self.position = np.zeros((self.size, 2), dtype=np.float64)
        self.velocity = np.zeros((self.size, 2), dtype=np.float64)
        self.velocity[:, 0] = self.max_speed
        self.desired_direction = np.zeros((self.size, 2), dtype=np.float64)
        self.desired_direction[:, 0] = 1.0
        self.angle = np.zeros(self.size, dtype=np.float64)
        self.state = np.full(self.size, AgentState.FORAGING, dtype=np.int8)

        self._has_target = np.zeros(self.size, dtype=bool)
        self._target_food_id = np.zeros(self.size, dtype=np.int64)
        self._target_position = np.zeros((self.size, 2), dtype=np.float64)

        self._has_home_sense = np.zeros(self.size, dtype=bool)
        self._home_sense = np.zeros((self.size, 2), dtype=np.float64)
        self._has_food_sense = np.zeros(self.size, dtype=bool)
        self._food_sense = np.zeros((self.size, 2), dtype=np.float64)

    def __len__(self) -> int:
        return self.size

    # -- setup -------------------------------------------------------------

    def initialize(self, angles: Sequence[float], positions: Sequence[Sequence[float]]) -> None:
        """Place every agent at its spawn point, heading along ``angles``."""
        if len(angles) != self.size or len(positions) != self.size:
            raise ValueError(
                f"Expected {self.size} spawn points, got {len(positions)} positions and {len(angles)} angles."
            )
        for index in range(self.size):
            self.place(index, positions[index], float(angles[index]))

    def place(self, i: int, position: Sequence[float], angle: float) -> None:
        """Reset one slot to a fresh FORAGING agent at ``position`` facing ``angle``."""
        heading = np.array([math.cos(angle), math.sin(angle)], dtype=np.float64)
        self.position[i] = (float(position[0]), float(position[1]))
        self.angle[i] = float(angle)
        self.desired_direction[i] = heading
        self.velocity[i] = heading * self.max_speed
        self.state[i] = AgentState.FORAGING
        self._has_target[i] = False
        self._has_home_sense[i] = False
        self._has_food_sense[i] = False

    # -- per-agent queries ---------------------------------------------------

    def state_of(self, i: int) -> AgentState:
        return AgentState(int(self.state[i]))

    def target(self, i: int) -> tuple[int, np.ndarray] | None:
        """``(food_id, food_position)`` of the current target, if any."""
        if not self._has_target[i]:
            return None
        return int(self._target_food_id[i]), self._target_position[i].copy()

    def target_food_id(self, i: int) -> int | None:
        if not self._has_target[i]:
            return None
        return int(self._target_food_id[i])

    def home_sense_direction(self, i: int) -> np.ndarray | None:
        if not self._has_home_sense[i]:
            return None
        return self._home_sense[i].copy()

    def food_sense_direction(self, i: int) -> np.ndarray | None:
        if not self._has_food_sense[i]:
            return None
        return self._food_sense[i].copy()

    def food_acquired(self, i: int) -> bool:
        """True when agent ``i`` is heading to food and within capture radius."""
        if self.state[i] != AgentState.TO_FOOD or not self._has_target[i]:
            return False
        offset = self._target_position[i] - self.position[i]
        return math.hypot(float(offset[0]), float(offset[1])) < CAPTURE_RADIUS

    # -- per-agent transitions -----------------------------------------------

    def set_food_target(self, i: int, food_pos: Sequence[float], food_id: int) -> bool:
        """Send a FORAGING agent toward ``food_pos``; other states are left alone."""
        if self.state[i] != AgentState.FORAGING:
            return False
        self.state[i] = AgentState.TO_FOOD
        self._has_target[i] = True
        self._target_food_id[i] = int(food_id)
        self._target_position[i] = (float(food_pos[0]), float(food_pos[1]))
        self.desired_direction[i] = normalize_rows(
            self._target_position[i] - self.position[i], self.desired_direction[i]
        )
        return True

    def clear_target(self, i: int) -> None:
        self._has_target[i] = False

    def begin_return(self, i: int) -> int | None:
        """TO_FOOD -> RETURNING. Returns the carried food id and drops the target."""
        if self.state[i] != AgentState.TO_FOOD:
            return None
        food_id = self.target_food_id(i)
        self.state[i] = AgentState.RETURNING
        self.clear_target(i)
        return food_id

    def begin_foraging(self, i: int) -> bool:
        """RETURNING -> FORAGING after reaching the nest."""
        if self.state[i] != AgentState.RETURNING:
            return False
        self.state[i] = AgentState.FORAGING
        return True

    def set_pheromone_sense(self, i: int, home_angle: float | None, food_angle: float | None) -> None:
        """Cache sensed trail headings as unit vectors (None clears)."""
        if home_angle is None:
            self._has_home_sense[i] = False
        else:
            self._has_home_sense[i] = True
            self._home_sense[i] = (math.cos(home_angle), math.sin(home_angle))
        if food_angle is None:
            self._has_food_sense[i] = False
        else:
            self._has_food_sense[i] = True
            self._food_sense[i] = (math.cos(food_angle), math.sin(food_angle))

    def reverse_velocity(self, i: int) -> None:
        self.velocity[i] *= -1.0

    # -- integrator ------------------------------------------------------------

    def step(self, dt: float) -> None:
        """Steer and move every agent by ``dt`` seconds.

        Agents are independent of each other here: each reads only its own
        row and the cached sense/target values.
        """
        if self.size == 0:
            return
        dt = float(dt)
        self._update_desired_directions()

        desired_velocity = self.desired_direction * self.max_speed
        steering = clamp_magnitude((desired_velocity - self.velocity) * self.steer_strength, self.steer_strength)
        new_velocity = clamp_magnitude(self.velocity + steering * dt, self.max_speed)
        finite = np.isfinite(new_velocity).all(axis=1)
        self.velocity[finite] = new_velocity[finite]

        self.position += self.velocity * dt

        x = self.position[:, 0]
        y = self.position[:, 1]
        outside = (x < 0.0) | (x > self.width) | (y < 0.0) | (y > self.height)
        self.velocity[outside] *= -1.0
        self.desired_direction[outside] *= -1.0

        angle = heading_of(self.velocity)
        finite_angle = np.isfinite(angle)
        self.angle[finite_angle] = angle[finite_angle]

    def _update_desired_directions(self) -> None:
        previous = self.desired_direction.copy()
        jitter = self.rng.uniform(-1.0, 1.0, size=(self.size, 2))
        desired = normalize_rows(previous + jitter * self.wander_strength, previous)

        foraging = self.state == AgentState.FORAGING
        to_food = self.state == AgentState.TO_FOOD
        returning = self.state == AgentState.RETURNING

        use_food_sense = foraging & self._has_food_sense
        desired[use_food_sense] = self._food_sense[use_food_sense]

        chasing = to_food & self._has_target
        toward_target = normalize_rows(self._target_position - self.position, previous)
        desired[chasing] = toward_target[chasing]

        to_home = self.home_center - self.position
        near_home = np.einsum("ij,ij->i", to_home, to_home) < NEAR_HOME_DISTANCE ** 2
        use_home_sense = returning & ~near_home & self._has_home_sense
        desired[use_home_sense] = self._home_sense[use_home_sense]
        heading_home = returning & near_home
        desired[heading_home] = normalize_rows(to_home, previous)[heading_home]

        self.desired_direction[:] = desired

    # -- read-only views -------------------------------------------------------

    def count(self, state: AgentState) -> int:
        return int(np.count_nonzero(self.state == state))

    @property
    def positions(self) -> np.ndarray:
        return _readonly(self.position)

    @property
    def velocities(self) -> np.ndarray:
        return _readonly(self.velocity)

    @property
    def angles(self) -> np.ndarray:
        return _readonly(self.angle)

    @property
    def states(self) -> np.ndarray:
        return _readonly(self.state)


def _readonly(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view
