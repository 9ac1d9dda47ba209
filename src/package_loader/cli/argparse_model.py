from __future__ import annotations

import argparse
from typing import Any, Literal, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo


def _unwrap_optional(tp: Any) -> Any:
    if get_origin(tp) is Union:
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def _argument_options(field: FieldInfo) -> dict[str, Any]:
    """argparse keyword arguments for one command field: a str, a list of str or a Literal."""
    options: dict[str, Any] = {
        "required": field.is_required(),
        "default": None if field.is_required() else field.default,
        "help": field.description or "",
    }
    tp = _unwrap_optional(field.annotation)
    origin = get_origin(tp)
    if origin is Literal:
        options["choices"] = list(get_args(tp))
    elif origin is list:
        options["nargs"] = "*"
        options["metavar"] = "VALUE"
    elif tp is not str:
        raise TypeError(f"Unsupported command option type for argparse: {tp!r}")
    return options


def add_model_to_parser(parser: argparse.ArgumentParser, model: Type[BaseModel]) -> None:
    """
    Declare one ``--flag`` per field of a command model. Values stay strings;
    pass ``vars(namespace)`` to ``model.model_validate`` for conversion.
    """
    for name, field in model.model_fields.items():
        parser.add_argument(f"--{name.replace('_', '-')}", dest=name, **_argument_options(field))
