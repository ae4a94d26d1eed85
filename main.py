"""Headless runner: load a config and drive the colony for a fixed number of ticks."""

from __future__ import annotations

import argparse
import logging

from core.simulator import Simulator

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="antsim", description=__doc__)
    parser.add_argument("--config", default="configs/ant_colony.yaml")
    parser.add_argument("--ticks", type=int, default=None, help="override run.ticks")
    parser.add_argument("--dt", type=float, default=None, help="override run.dt (seconds per tick)")
    parser.add_argument("--log-level", default=None, help="override logging.level")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the configured simulation and log its final metrics."""
    args = build_parser().parse_args(argv)
    simulator = Simulator(args.config)

    level = args.log_level or simulator.logging_config["level"]
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO))

    metrics = simulator.run(ticks=args.ticks, dt=args.dt)
    if metrics:
        final = metrics[-1]
        LOGGER.info(
            "Delivered %d food items; %d still available",
            int(final["food_delivered"]),
            int(final["food_available"]),
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
