"""Tests for the ant population state machine and steering integrator."""

from __future__ import annotations

import math

import numpy as np
import pytest

from simulations.ant_colony.agents import (
    CAPTURE_RADIUS,
    AgentPopulation,
    AgentState,
    clamp_magnitude,
    heading_of,
    normalize_rows,
)


def _population(size: int = 1, **overrides: object) -> AgentPopulation:
    defaults = {
        "size": size,
        "width": 200.0,
        "height": 200.0,
        "home_center": (100.0, 100.0),
        "max_speed": 60.0,
        "steer_strength": 200.0,
        "wander_strength": 0.2,
        "rng": np.random.default_rng(5),
    }
    defaults.update(overrides)
    return AgentPopulation(**defaults)  # type: ignore[arg-type]


def test_initialize_places_agents_facing_spawn_angle() -> None:
    agents = _population(size=2, max_speed=10.0)
    agents.initialize([0.0, math.pi / 2.0], [(10.0, 20.0), (30.0, 40.0)])

    np.testing.assert_allclose(agents.position, [[10.0, 20.0], [30.0, 40.0]])
    np.testing.assert_allclose(agents.desired_direction, [[1.0, 0.0], [0.0, 1.0]], atol=1e-12)
    np.testing.assert_allclose(agents.velocity, [[10.0, 0.0], [0.0, 10.0]], atol=1e-12)
    assert agents.count(AgentState.FORAGING) == 2
    assert agents.target(0) is None


def test_initialize_rejects_wrong_spawn_count() -> None:
    agents = _population(size=3)
    with pytest.raises(ValueError, match="Expected 3 spawn points"):
        agents.initialize([0.0], [(0.0, 0.0)])


def test_set_food_target_switches_foraging_agent_to_food() -> None:
    agents = _population()
    agents.place(0, (10.0, 10.0), 0.0)

    assert agents.set_food_target(0, (10.0, 40.0), food_id=7) is True

    assert agents.state_of(0) == AgentState.TO_FOOD
    food_id, food_pos = agents.target(0)  # type: ignore[misc]
    assert food_id == 7
    np.testing.assert_allclose(food_pos, [10.0, 40.0])
    np.testing.assert_allclose(agents.desired_direction[0], [0.0, 1.0], atol=1e-12)


@pytest.mark.parametrize("state", [AgentState.TO_FOOD, AgentState.RETURNING])
def test_set_food_target_ignores_non_foraging_agents(state: AgentState) -> None:
    agents = _population()
    agents.place(0, (10.0, 10.0), 0.0)
    if state == AgentState.TO_FOOD:
        agents.set_food_target(0, (10.0, 20.0), food_id=1)
    else:
        agents.state[0] = AgentState.RETURNING
    before_direction = agents.desired_direction[0].copy()
    before_target = agents.target_food_id(0)

    assert agents.set_food_target(0, (90.0, 90.0), food_id=2) is False

    assert agents.state_of(0) == state
    assert agents.target_food_id(0) == before_target
    np.testing.assert_array_equal(agents.desired_direction[0], before_direction)


def test_food_acquired_requires_target_within_capture_radius() -> None:
    agents = _population()
    agents.place(0, (50.0, 50.0), 0.0)
    assert agents.food_acquired(0) is False

    agents.set_food_target(0, (50.0 + CAPTURE_RADIUS, 50.0), food_id=0)
    assert agents.food_acquired(0) is False

    agents.position[0] = (50.1, 50.0)
    assert agents.food_acquired(0) is True

    agents.position[0] = (55.0, 50.0)
    assert agents.food_acquired(0) is True


def test_food_acquired_false_outside_to_food_state() -> None:
    agents = _population()
    agents.place(0, (50.0, 50.0), 0.0)
    agents.set_food_target(0, (50.0, 50.0), food_id=0)

    assert agents.begin_return(0) == 0
    assert agents.state_of(0) == AgentState.RETURNING
    assert agents.target(0) is None
    assert agents.food_acquired(0) is False


def test_transitions_only_fire_from_their_source_state() -> None:
    agents = _population()
    agents.place(0, (50.0, 50.0), 0.0)

    assert agents.begin_return(0) is None
    assert agents.begin_foraging(0) is False
    agents.state[0] = AgentState.RETURNING
    assert agents.begin_foraging(0) is True
    assert agents.state_of(0) == AgentState.FORAGING


def test_set_pheromone_sense_stores_unit_vectors_and_clears() -> None:
    agents = _population()
    agents.set_pheromone_sense(0, math.pi / 2.0, math.pi)

    np.testing.assert_allclose(agents.home_sense_direction(0), [0.0, 1.0], atol=1e-12)
    np.testing.assert_allclose(agents.food_sense_direction(0), [-1.0, 0.0], atol=1e-12)
    assert agents.state_of(0) == AgentState.FORAGING

    agents.set_pheromone_sense(0, None, None)
    assert agents.home_sense_direction(0) is None
    assert agents.food_sense_direction(0) is None


def test_reverse_velocity_negates_in_place() -> None:
    agents = _population()
    agents.velocity[0] = (3.0, -4.0)

    agents.reverse_velocity(0)

    np.testing.assert_array_equal(agents.velocity[0], [-3.0, 4.0])


def test_foraging_agent_follows_sensed_food_trail() -> None:
    agents = _population()
    agents.place(0, (50.0, 50.0), 0.0)
    agents.set_pheromone_sense(0, None, math.pi / 2.0)

    agents.step(0.1)

    np.testing.assert_allclose(agents.desired_direction[0], [0.0, 1.0], atol=1e-12)
    assert agents.velocity[0, 1] > 0.0


def test_wandering_keeps_unit_desired_direction() -> None:
    agents = _population(size=16)
    agents.initialize(np.linspace(0.0, 2.0 * math.pi, 16, endpoint=False), [(100.0, 100.0)] * 16)

    for _ in range(20):
        agents.step(0.01)

    np.testing.assert_allclose(np.linalg.norm(agents.desired_direction, axis=1), 1.0)
    assert np.all(np.linalg.norm(agents.velocity, axis=1) <= 60.0 + 1e-9)


def test_to_food_agent_steers_at_target() -> None:
    agents = _population()
    agents.place(0, (50.0, 50.0), math.pi)
    agents.set_food_target(0, (50.0, 10.0), food_id=0)

    agents.step(0.05)

    np.testing.assert_allclose(agents.desired_direction[0], [0.0, -1.0], atol=1e-12)


def test_to_food_agent_without_target_wanders() -> None:
    agents = _population(wander_strength=0.0)
    agents.place(0, (50.0, 50.0), 0.0)
    agents.state[0] = AgentState.TO_FOOD

    agents.step(0.05)

    np.testing.assert_allclose(agents.desired_direction[0], [1.0, 0.0], atol=1e-12)


def test_returning_agent_near_home_heads_for_nest_center() -> None:
    agents = _population()
    agents.place(0, (160.0, 100.0), 0.0)
    agents.state[0] = AgentState.RETURNING
    agents.set_pheromone_sense(0, math.pi / 2.0, None)

    agents.step(0.01)

    np.testing.assert_allclose(agents.desired_direction[0], [-1.0, 0.0], atol=1e-12)


def test_returning_agent_far_from_home_follows_home_trail() -> None:
    agents = _population(width=1000.0, height=1000.0, home_center=(0.0, 0.0))
    agents.place(0, (500.0, 500.0), 0.0)
    agents.state[0] = AgentState.RETURNING
    agents.set_pheromone_sense(0, math.pi / 2.0, None)

    agents.step(0.01)

    np.testing.assert_allclose(agents.desired_direction[0], [0.0, 1.0], atol=1e-12)


def test_steering_force_and_speed_are_clamped() -> None:
    agents = _population(max_speed=10.0, steer_strength=4.0)
    agents.place(0, (100.0, 100.0), 0.0)
    agents.set_pheromone_sense(0, None, math.pi)

    agents.step(1.0)

    # Desired velocity is (-10, 0); the steering force is capped at 4.
    np.testing.assert_allclose(agents.velocity[0], [6.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(agents.position[0], [106.0, 100.0], atol=1e-9)


def test_position_integrates_without_extra_scaling() -> None:
    agents = _population()
    agents.place(0, (100.0, 100.0), 0.0)
    agents.set_pheromone_sense(0, None, 0.0)

    agents.step(0.5)

    np.testing.assert_allclose(agents.position[0], [130.0, 100.0])


def test_crossing_width_reflects_velocity_and_direction_without_moving_position() -> None:
    agents = _population(width=200.0, height=200.0)
    agents.place(0, (199.0, 50.0), 0.0)
    agents.set_pheromone_sense(0, None, 0.0)

    agents.step(0.1)

    np.testing.assert_allclose(agents.position[0], [205.0, 50.0])
    np.testing.assert_allclose(agents.velocity[0], [-60.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(agents.desired_direction[0], [-1.0, 0.0], atol=1e-12)


def test_crossing_zero_on_y_axis_also_reflects() -> None:
    agents = _population()
    agents.place(0, (50.0, 1.0), -math.pi / 2.0)
    agents.set_pheromone_sense(0, None, -math.pi / 2.0)

    agents.step(0.1)

    assert agents.position[0, 1] < 0.0
    assert agents.velocity[0, 1] > 0.0
    assert agents.desired_direction[0, 1] > 0.0


def test_nan_velocity_is_discarded() -> None:
    agents = _population()
    agents.place(0, (100.0, 100.0), 0.0)
    before = agents.velocity[0].copy()
    agents.set_pheromone_sense(0, None, float("nan"))

    agents.step(0.1)

    np.testing.assert_array_equal(agents.velocity[0], before)
    assert np.all(np.isfinite(agents.position[0]))
    assert math.isfinite(agents.angle[0])


def test_heading_uses_single_quadrant_arctangent() -> None:
    velocity = np.array([[1.0, 1.0], [-1.0, 1.0], [-1.0, -1.0], [0.0, 1.0]])

    angles = heading_of(velocity)

    assert angles[0] == pytest.approx(math.pi / 4.0)
    assert angles[1] == pytest.approx(-math.pi / 4.0 - math.pi)
    assert angles[2] == pytest.approx(math.pi / 4.0 - math.pi)
    assert angles[3] == pytest.approx(math.pi / 2.0)
    for angle, (vx, vy) in zip(angles, velocity):
        assert math.cos(angle) * math.hypot(vx, vy) == pytest.approx(vx, abs=1e-12)
        assert math.sin(angle) * math.hypot(vx, vy) == pytest.approx(vy, abs=1e-12)


def test_clamp_and_normalize_helpers() -> None:
    vectors = np.array([[3.0, 4.0], [0.3, 0.4], [0.0, 0.0]])
    fallback = np.array([[9.0, 9.0], [9.0, 9.0], [1.0, 0.0]])

    np.testing.assert_allclose(clamp_magnitude(vectors, 1.0), [[0.6, 0.8], [0.3, 0.4], [0.0, 0.0]])
    np.testing.assert_allclose(normalize_rows(vectors, fallback), [[0.6, 0.8], [0.6, 0.8], [1.0, 0.0]])


def test_views_are_read_only() -> None:
    agents = _population()
    with pytest.raises(ValueError):
        agents.positions[0, 0] = 1.0
    with pytest.raises(ValueError):
        agents.states[0] = AgentState.RETURNING
