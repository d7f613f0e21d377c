from __future__ import annotations

import argparse
import logging
from typing import Literal, Optional

from pydantic import BaseModel, Field

from websim.cli.argparse_model import add_model_to_parser
from websim.driver import DriverStats

logger = logging.getLogger(__name__)


class RunCommand(BaseModel):
    sessions: Optional[int] = Field(None, description="Number of sessions to simulate.")
    until: Optional[float] = Field(None, description="Simulation time to run until.")
    step: Optional[float] = Field(None, description="Simulation time between driver ticks.")
    seed: Optional[int] = Field(None, description="Master seed for the workload generators.")
    require_hosts: Optional[bool] = Field(
        None, description="Fail when a session releases a pair before both hosts are bound."
    )
    config_file: Optional[str] = Field(None, description="Optional websim config file (toml/yaml).")
    loglevel: Optional[
        Literal[
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
            "critical",
            "error",
            "warning",
            "info",
            "debug",
        ]
    ] = Field(None, description="Logging level override.")


def handle_run(command: RunCommand) -> DriverStats:
    from websim.config import get_settings

    overrides: dict[str, dict[str, object]] = {}
    if command.loglevel is not None:
        overrides["logging"] = {"level": command.loglevel.upper()}
    if command.sessions is not None:
        overrides.setdefault("workload", {})["sessions"] = command.sessions
    if command.seed is not None:
        overrides.setdefault("workload", {})["seed"] = command.seed
    if command.until is not None:
        overrides.setdefault("driver", {})["until"] = command.until
    if command.step is not None:
        overrides.setdefault("driver", {})["step"] = command.step
    if command.require_hosts is not None:
        overrides["session"] = {"require_hosts": command.require_hosts}

    settings = get_settings(config_file=command.config_file, **overrides)
    settings.logging.configure()

    from websim.simulation import Simulation

    simulation = Simulation(settings)
    stats = simulation.run()

    for session in simulation.sessions:
        logger.info("%s: %d pair(s)", session, stats.pairs_per_session[session.session_id])
    return stats


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="websim-run")
    add_model_to_parser(parser, RunCommand)
    ns = parser.parse_args(argv)
    cmd = RunCommand.model_validate(vars(ns))
    handle_run(cmd)
