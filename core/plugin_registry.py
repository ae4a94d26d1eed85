"""Dynamic simulation plugin discovery and lookup."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Type

from simulations.base_simulation import Simulation
import simulations

LOGGER = logging.getLogger(__name__)

_DISCOVERED: dict[str, Type[Simulation]] | None = None


class SimulationPluginNotFoundError(LookupError):
    """Raised when requested simulation plugin cannot be resolved."""


def discover_simulations() -> dict[str, Type[Simulation]]:
    """Discover simulation plugins from the ``simulations`` package."""
    global _DISCOVERED
    if _DISCOVERED is not None:
        return dict(_DISCOVERED)

    discovered: dict[str, Type[Simulation]] = {}
    for package_name in _plugin_package_names():
        try:
            plugin_module = importlib.import_module(f"simulations.{package_name}.sim")
        except ImportError:
            LOGGER.warning("Skipping simulation package '%s' without an importable sim module", package_name)
            continue

        sim_name = getattr(plugin_module, "SIMULATION_NAME", None)
        sim_class = getattr(plugin_module, "SimulationClass", None)
        if isinstance(sim_name, str) and isinstance(sim_class, type) and issubclass(sim_class, Simulation):
            discovered[sim_name] = sim_class

    _DISCOVERED = discovered
    return dict(discovered)


def _plugin_package_names() -> list[str]:
    """Sub-directories of ``simulations`` that hold a ``sim.py``.

    Plugin packages are namespace packages (no ``__init__.py``), which
    ``pkgutil.iter_modules`` does not report, so the directories are scanned.
    """
    names: set[str] = set()
    for root in simulations.__path__:
        for entry in Path(root).iterdir():
            if entry.name.startswith(("_", ".")) or not entry.is_dir():
                continue
            if (entry / "sim.py").is_file():
                names.add(entry.name)
    return sorted(names)


def get_simulation_class(name: str) -> Type[Simulation]:
    """Return simulation class by name or raise descriptive error."""
    discovered = discover_simulations()
    if name in discovered:
        return discovered[name]

    available = ", ".join(sorted(discovered.keys())) or "<none>"
    raise SimulationPluginNotFoundError(
        f"Simulation plugin '{name}' not found. Available simulations: {available}"
    )
