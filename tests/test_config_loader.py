"""Tests for the shipped config, the seeded RNG streams and the headless runner."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

import main
from core.config_loader import load_config
from core.deterministic_rng import DeterministicRNG
from simulations.ant_colony.config import ColonyConfig

ROOT = Path(__file__).resolve().parents[1]


def test_shipped_config_is_valid() -> None:
    config = load_config(str(ROOT / "configs" / "ant_colony.yaml"))

    colony = ColonyConfig.from_params(config["simulation_config"])
    assert config["simulation"] == "ant_colony"
    assert colony.agent_count > 0
    assert sum(patch.count for patch in colony.food_patches) <= colony.food_capacity
    assert config["run_config"]["dt"] > 0.0


def test_named_streams_are_stable_and_independent() -> None:
    first = DeterministicRNG(9)
    second = DeterministicRNG(9)

    a = first.stream("agents").uniform(size=4)
    b = second.stream("agents").uniform(size=4)
    c = first.stream("food").uniform(size=4)

    np.testing.assert_array_equal(a, b)
    assert not np.array_equal(a, c)
    assert first.stream("agents") is first.stream("agents")
    assert first.stream_names() == ["agents", "food"]


def test_different_seeds_give_different_streams() -> None:
    a = DeterministicRNG(1).stream("home").uniform(size=4)
    b = DeterministicRNG(2).stream("home").uniform(size=4)
    assert not np.array_equal(a, b)


def test_main_runs_headless_with_overrides(tmp_path, caplog) -> None:
    config_path = tmp_path / "colony.yaml"
    config_path.write_text(
        "simulation: ant_colony\n"
        "params:\n"
        "  width: 120\n"
        "  height: 90\n"
        "  agent_count: 5\n"
        "  food_capacity: 6\n"
        "  food_patches: [[10, 10, 30, 30, 6]]\n"
        "  home_x: 60.0\n"
        "  home_y: 45.0\n"
        "run:\n"
        "  random_seed: 3\n"
        "  ticks: 1000\n"
        "  dt: 0.02\n"
        "logging:\n"
        "  log_interval: 2\n"
        "  level: WARNING\n",
        encoding="utf-8",
    )

    with caplog.at_level(logging.INFO):
        exit_code = main.main(["--config", str(config_path), "--ticks", "4", "--log-level", "info"])

    assert exit_code == 0
    assert "tick 4:" in caplog.text
    assert "Delivered" in caplog.text


def test_fresh_stream_restarts_from_the_seed() -> None:
    rng = DeterministicRNG(4)
    first = rng.stream("agents").uniform(size=3)

    restarted = rng.fresh_stream("agents").uniform(size=3)

    np.testing.assert_array_equal(first, restarted)
    assert rng.stream_names() == ["agents"]
