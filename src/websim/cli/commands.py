from __future__ import annotations

import argparse
from typing import Optional, Sequence, get_args

from pydantic import BaseModel, Field

from websim.driver import DriverStats
from websim.exceptions import WebsimError
from .argparse_model import add_model_to_parser
from .run import RunCommand, handle_run


class CommandLineError(WebsimError): ...


class Commands(BaseModel):
    """One optional field per subcommand; at most one is set after parsing."""

    run: Optional[RunCommand] = Field(None, description="Run a synthetic web session simulation.")


def build_parser(prog: str = "websim") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog)
    sub = parser.add_subparsers(dest="command", required=True)
    for name, field in Commands.model_fields.items():
        # the subcommand model is the non-None member of Optional[...]
        command_model = next(a for a in get_args(field.annotation) if a is not type(None))
        add_model_to_parser(sub.add_parser(name, help=field.description), command_model)
    return parser


def parse_command(argv: Sequence[str] | None = None) -> Commands:
    ns = vars(build_parser().parse_args(argv))
    name = ns.pop("command")
    return Commands.model_validate({name: ns})


def handle_command(command: Commands) -> DriverStats:
    if command.run:
        return handle_run(command.run)

    else:
        raise CommandLineError('No command given.')
