from __future__ import annotations

import argparse
from typing import Optional

import pytest
from pydantic import BaseModel, Field

from package_loader.cli.argparse_model import add_model_to_parser
from package_loader.cli.listing import ListCommand


def _list_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="x")
    add_model_to_parser(parser, ListCommand)
    return parser


def test_list_command_defaults_are_none() -> None:
    ns = _list_parser().parse_args([])

    assert vars(ns) == {"dirs": None, "root": None, "instance": None, "config_file": None, "loglevel": None}


def test_list_command_parses_dirs_root_and_config_file() -> None:
    ns = _list_parser().parse_args(["--dirs", "plugins=/srv/p", "/srv/t", "--root", "plugins", "--config-file", "c.toml"])
    cmd = ListCommand.model_validate(vars(ns))

    assert cmd.dirs == ["plugins=/srv/p", "/srv/t"]
    assert cmd.root == "plugins"
    assert cmd.config_file == "c.toml"
    assert cmd.instance is None


def test_list_command_loglevel_choices() -> None:
    assert _list_parser().parse_args(["--loglevel", "debug"]).loglevel == "debug"
    with pytest.raises(SystemExit):
        _list_parser().parse_args(["--loglevel", "WARN"])


def test_required_field_is_enforced() -> None:
    class NeedsRoot(BaseModel):
        root: str = Field(description="Dir name.")

    parser = argparse.ArgumentParser(prog="x")
    add_model_to_parser(parser, NeedsRoot)

    with pytest.raises(SystemExit):
        parser.parse_args([])
    assert parser.parse_args(["--root", "themes"]).root == "themes"


def test_unsupported_field_type_is_rejected() -> None:
    class Counted(BaseModel):
        depth: Optional[int] = None

    with pytest.raises(TypeError):
        add_model_to_parser(argparse.ArgumentParser(prog="x"), Counted)
