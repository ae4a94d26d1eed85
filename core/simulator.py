"""Core simulator that drives plugins tick by tick without plugin-specific logic."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Callable

from core.config_loader import load_config
from core.deterministic_rng import DeterministicRNG
from core.event_bus import EventBus
from core.plugin_registry import get_simulation_class

LOGGER = logging.getLogger(__name__)


class SimulatorRuntimeError(RuntimeError):
    """Raised when a simulation plugin fails during execution."""


class Simulator:
    """Plugin-driven simulator runtime.

    The host frame loop calls ``tick(dt)`` once per frame; ``run`` is a
    fixed-step loop for headless use. After every tick the plugin's render
    adapter (if any) builds a frame that is published on the event bus as
    ``"render_state"``.
    """

    def __init__(
        self,
        config_path: str | Path,
        event_bus: EventBus | None = None,
        strict: bool = True,
    ) -> None:
        config = load_config(str(config_path), strict=strict)
        self.config = config

        self.simulation_name = str(config["simulation"])
        self.simulation_config = dict(config["simulation_config"])
        self.run_config = dict(config["run_config"])
        self.logging_config = dict(config["logging_config"])

        self.seed = int(config["seed"])
        self.rng = DeterministicRNG(self.seed)
        self.event_bus = event_bus

        self.step_index = 0
        self._log_interval = int(self.logging_config.get("log_interval", 0))

        simulation_class = get_simulation_class(self.simulation_name)
        try:
            self.sim = simulation_class(params=self.simulation_config, rng=self.rng)
        except Exception as exc:
            raise SimulatorRuntimeError(
                f"Failed to initialize simulation plugin '{self.simulation_name}': {exc}"
            ) from exc

        self._render_adapter: Callable[[Simulator], Any] | None = None
        try:
            adapter_module = importlib.import_module(
                f"simulations.{self.simulation_name}.renderer_adapter"
            )
        except ImportError:
            LOGGER.debug("Simulation '%s' has no render adapter", self.simulation_name)
        else:
            self._render_adapter = getattr(adapter_module, "build_render_state", None)

    def reset(self) -> None:
        self.step_index = 0
        self.sim.reset()

    def tick(self, dt: float) -> dict[str, float]:
        """Advance the plugin by one tick of ``dt`` seconds and return its metrics."""
        try:
            self.sim.step(float(dt))
        except Exception as exc:
            raise SimulatorRuntimeError(
                f"Simulation plugin '{self.simulation_name}' crashed at tick {self.step_index + 1}: {exc}"
            ) from exc
        self.step_index += 1
        metrics = self.sim.get_metrics()
        if self._log_interval > 0 and self.step_index % self._log_interval == 0:
            LOGGER.info("tick %d: %s", self.step_index, _format_metrics(metrics))
        self._emit_render_state()
        return metrics

    def render_state(self) -> Any:
        """Build the current frame with the plugin's adapter, if it has one."""
        if self._render_adapter is None:
            return None
        return self._render_adapter(self)

    def run(self, ticks: int | None = None, dt: float | None = None) -> list[dict[str, float]]:
        """Reset the plugin, run a fixed number of ticks and collect metrics."""
        ticks = int(self.run_config["ticks"] if ticks is None else ticks)
        dt = float(self.run_config["dt"] if dt is None else dt)
        metrics: list[dict[str, float]] = []
        LOGGER.info("Running '%s' for %d ticks (dt=%s, seed=%d)", self.simulation_name, ticks, dt, self.seed)
        try:
            self.reset()
            for _ in range(ticks):
                metrics.append(self.tick(dt))
        finally:
            self.close()

        if self.event_bus is not None:
            self.event_bus.publish("simulation_end", {"step_index": self.step_index})
        LOGGER.info("Finished '%s' after %d ticks", self.simulation_name, self.step_index)
        return metrics

    def close(self) -> None:
        try:
            self.sim.close()
        except Exception as exc:
            raise SimulatorRuntimeError(
                f"Simulation plugin '{self.simulation_name}' failed during close: {exc}"
            ) from exc

    def _emit_render_state(self) -> None:
        if self.event_bus is None or self._render_adapter is None:
            return
        self.event_bus.publish("render_state", self._render_adapter(self))


def _format_metrics(metrics: dict[str, float]) -> str:
    return ", ".join(f"{key}={value:g}" for key, value in sorted(metrics.items()))
