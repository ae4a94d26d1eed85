"""YAML run-config loading and validation for the plugin-driven simulator."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from core.plugin_registry import get_simulation_class
from core.schema_validator import SchemaValidationError, validate_simulation_params

LOGGER = logging.getLogger(__name__)


class ConfigValidationError(ValueError):
    """Raised when runtime config fails validation."""


_SECTIONS = ("simulation", "params", "run", "logging")
_RUN_FIELDS: dict[str, type[Any]] = {
    "random_seed": int,
    "ticks": int,
    "dt": float,
}
_LOGGING_FIELDS: dict[str, type[Any]] = {
    "log_interval": int,
    "level": str,
}
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigValidationError(f"Config file not found: {path}")
    try:
        with path.open(encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Failed to parse YAML config '{path}': {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ConfigValidationError("Top-level config must be a mapping.")
    return dict(payload)


def _typed_section(name: str, raw: Any, fields: Mapping[str, type[Any]]) -> dict[str, Any]:
    """Check a flat section has exactly ``fields`` with matching types.

    Integers are widened to float for float fields; bools are never numbers.
    """
    if not isinstance(raw, Mapping):
        raise ConfigValidationError(f"Section '{name}' must be a mapping.")
    section = dict(raw)

    missing = [key for key in fields if key not in section]
    if missing:
        raise ConfigValidationError(f"Section '{name}' missing required field(s): {missing}.")
    unknown = [key for key in section if key not in fields]
    if unknown:
        raise ConfigValidationError(f"Section '{name}' has unknown field(s): {unknown}.")

    for key, expected in fields.items():
        value = section[key]
        if expected is float and type(value) is int:
            section[key] = float(value)
        elif type(value) is not expected:
            raise ConfigValidationError(
                f"Field '{name}.{key}' expected {expected.__name__}, got {type(value).__name__}."
            )
    return section


def _run_section(raw: Any) -> dict[str, Any]:
    run = _typed_section("run", raw, _RUN_FIELDS)
    if run["ticks"] < 0:
        raise ConfigValidationError("Field 'run.ticks' must not be negative.")
    if run["dt"] <= 0:
        raise ConfigValidationError("Field 'run.dt' must be positive.")
    return run


def _logging_section(raw: Any) -> dict[str, Any]:
    section = _typed_section("logging", raw, _LOGGING_FIELDS)
    level = section["level"].upper()
    if level not in _LOG_LEVELS:
        raise ConfigValidationError(
            f"Field 'logging.level' must be one of {list(_LOG_LEVELS)}, got '{section['level']}'."
        )
    if section["log_interval"] < 0:
        raise ConfigValidationError("Field 'logging.log_interval' must not be negative.")
    section["level"] = level
    return section


def _plugin_params(simulation_name: str, raw: Any, strict: bool) -> dict[str, Any]:
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigValidationError("Section 'params' must be a mapping.")

    schema_module_name = f"simulations.{simulation_name}.config_schema"
    try:
        schema_module = importlib.import_module(schema_module_name)
    except ImportError as exc:
        raise ConfigValidationError(
            f"Could not load schema for simulation '{simulation_name}' ({schema_module_name})."
        ) from exc

    try:
        return validate_simulation_params(
            params=dict(raw),
            schema_module=schema_module,
            simulation_name=simulation_name,
            strict=strict,
        )
    except SchemaValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc


def load_config(path: str, strict: bool = True) -> dict[str, Any]:
    """Load and validate a YAML run configuration.

    Returns normalized config with keys:
    - simulation
    - simulation_config
    - run_config
    - logging_config
    - seed
    """
    config = _read_yaml(Path(path))

    missing = sorted(key for key in _SECTIONS if key not in config)
    if missing:
        raise ConfigValidationError(f"Missing required top-level section(s): {missing}.")
    unknown = [key for key in config if key not in _SECTIONS]
    if unknown:
        raise ConfigValidationError(f"Unknown top-level field(s): {unknown}.")

    simulation_name = config["simulation"]
    if not isinstance(simulation_name, str) or not simulation_name:
        raise ConfigValidationError("Field 'simulation' must be a non-empty string.")
    # fail early with the list of available plugins
    get_simulation_class(simulation_name)

    run_config = _run_section(config["run"])
    logging_config = _logging_section(config["logging"])
    simulation_params = _plugin_params(simulation_name, config["params"], strict)
    LOGGER.debug("Loaded config '%s' for simulation '%s'", path, simulation_name)

    return {
        "simulation": simulation_name,
        "simulation_config": simulation_params,
        "run_config": run_config,
        "logging_config": logging_config,
        "seed": int(run_config["random_seed"]),
    }
