from __future__ import annotations

import argparse
from typing import Literal, Optional

import pytest
from pydantic import BaseModel, Field

from websim.cli.argparse_model import add_model_to_parser


class DemoModel(BaseModel):
    # required
    name: str = Field(description="Run name.")

    # optionals
    sessions: Optional[int] = Field(None, description="Session count.")
    until: Optional[float] = Field(None, description="Horizon.")
    require_hosts: bool = Field(True, description="Fail on unbound hosts.")
    warn: Optional[bool] = Field(None, description="Override the configured warning switch.")
    loglevel: Optional[Literal["INFO", "DEBUG"]] = Field(None, description="Log level.")


def test_add_model_to_parser_required_field_enforced() -> None:
    parser = argparse.ArgumentParser(prog="x")
    add_model_to_parser(parser, DemoModel)

    with pytest.raises(SystemExit):
        # missing required --name
        _ = parser.parse_args([])


def test_add_model_to_parser_parses_scalars_and_choices() -> None:
    parser = argparse.ArgumentParser(prog="x")
    add_model_to_parser(parser, DemoModel)

    ns = parser.parse_args(["--name", "r1", "--sessions", "3", "--until", "2.5", "--loglevel", "DEBUG"])
    assert ns.name == "r1"
    assert ns.sessions == 3
    assert ns.until == 2.5
    assert ns.loglevel == "DEBUG"

    model = DemoModel.model_validate(vars(ns))
    assert model.sessions == 3 and model.until == 2.5


def test_add_model_to_parser_bool_flag_defaults_and_negation() -> None:
    parser = argparse.ArgumentParser(prog="x")
    add_model_to_parser(parser, DemoModel)

    ns1 = parser.parse_args(["--name", "r1"])
    assert ns1.require_hosts is True  # default from model

    ns2 = parser.parse_args(["--name", "r1", "--no-require-hosts"])
    assert ns2.require_hosts is False

    ns3 = parser.parse_args(["--name", "r1", "--require-hosts"])
    assert ns3.require_hosts is True


def test_add_model_to_parser_literal_choices_rejected() -> None:
    parser = argparse.ArgumentParser(prog="x")
    add_model_to_parser(parser, DemoModel)

    with pytest.raises(SystemExit):
        _ = parser.parse_args(["--name", "r1", "--loglevel", "WARN"])


def test_add_model_to_parser_optional_bool_stays_unset() -> None:
    parser = argparse.ArgumentParser(prog="x")
    add_model_to_parser(parser, DemoModel)

    assert parser.parse_args(["--name", "r1"]).warn is None
    assert parser.parse_args(["--name", "r1", "--warn"]).warn is True
    assert parser.parse_args(["--name", "r1", "--no-warn"]).warn is False
