from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

import websim.__main__ as websim_main
import websim.cli.commands as commands_cli
import websim.cli.run as run_cli
import websim.simulation as simulation_mod
from websim.cli.commands import CommandLineError, Commands, handle_command, parse_command
from websim.driver import DriverStats


@dataclass(slots=True)
class Captured:
    called: bool = False
    args: Any = None


def test_websim_main_run_subcommand_calls_handle_run(monkeypatch: pytest.MonkeyPatch) -> None:
    cap = Captured()

    def fake_handle_run(cmd: Any) -> None:
        cap.called = True
        cap.args = cmd

    monkeypatch.setattr(commands_cli, "handle_run", fake_handle_run)

    websim_main.main(
        [
            "run",
            "--sessions",
            "3",
            "--until",
            "120.5",
            "--seed",
            "7",
            "--loglevel",
            "debug",
        ]
    )

    assert cap.called is True
    cmd = cap.args
    assert cmd.sessions == 3
    assert cmd.until == 120.5
    assert cmd.seed == 7
    assert cmd.step is None
    assert cmd.loglevel == "debug"
    assert cmd.require_hosts is None


def test_websim_run_entrypoint_calls_handle_run(monkeypatch: pytest.MonkeyPatch) -> None:
    cap = Captured()

    def fake_handle_run(cmd: Any) -> None:
        cap.called = True
        cap.args = cmd

    monkeypatch.setattr(run_cli, "handle_run", fake_handle_run)

    run_cli.main(["--step", "0.5", "--config-file", "sim.toml"])

    assert cap.called is True
    assert cap.args.step == 0.5
    assert cap.args.config_file == "sim.toml"
    assert cap.args.sessions is None


def test_websim_main_requires_subcommand() -> None:
    with pytest.raises(SystemExit):
        websim_main.main([])


def test_handle_run_runs_a_simulation_from_overrides() -> None:
    stats = run_cli.handle_run(run_cli.RunCommand(sessions=2, until=30.0, seed=1, loglevel="warning"))

    assert isinstance(stats, DriverStats)
    assert stats.ticks == 31
    assert len(stats.pairs_per_session) == 2


def test_handle_command_requires_a_command() -> None:
    with pytest.raises(CommandLineError):
        handle_command(Commands())

    stats = handle_command(Commands(run=run_cli.RunCommand(until=5.0)))
    assert stats.ticks == 6


def test_parse_command_maps_subcommand_and_host_switch() -> None:
    command = parse_command(["run", "--no-require-hosts", "--until", "3"])
    assert command.run is not None
    assert command.run.require_hosts is False
    assert command.run.until == 3.0

    assert parse_command(["run", "--require-hosts"]).run.require_hosts is True


def test_handle_run_forwards_require_hosts_to_session_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = []

    class FakeSimulation:
        def __init__(self, settings: Any) -> None:
            seen.append(settings)
            self.sessions = []

        def run(self) -> DriverStats:
            return DriverStats()

    monkeypatch.setattr(simulation_mod, "Simulation", FakeSimulation)

    run_cli.handle_run(run_cli.RunCommand(require_hosts=False, until=5.0))
    run_cli.handle_run(run_cli.RunCommand(until=5.0))

    assert seen[0].session.require_hosts is False
    # left unset, the configured default applies
    assert seen[1].session.require_hosts is True
