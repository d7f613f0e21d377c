"""
Expose the fields of a pydantic command model as ``--long-options``.

Every command model in ``websim.cli`` is flat: its fields are plain scalars, ``bool`` switches, or
``Literal`` choices, usually ``Optional`` with a ``None`` default meaning "keep the configured value".
argparse only converts and restricts; pydantic does the validation in ``model_validate``.
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, Literal, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

_SCALARS = (str, int, float)


def _unwrap_optional(tp: Any) -> Any:
    if get_origin(tp) is Union:
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def option_name(field_name: str) -> str:
    return "--" + field_name.replace("_", "-")


def _argument_kwargs(field: FieldInfo) -> Dict[str, Any]:
    tp = _unwrap_optional(field.annotation if field.annotation is not None else Any)
    required = field.is_required()
    kwargs: Dict[str, Any] = {
        "help": field.description or "",
        "required": required,
        "default": None if required else field.default,
    }

    if tp is bool:
        # --flag / --no-flag; an Optional[bool] left unset stays None
        kwargs["action"] = argparse.BooleanOptionalAction
    elif get_origin(tp) is Literal:
        kwargs["choices"] = list(get_args(tp))
    elif tp in _SCALARS:
        kwargs["type"] = tp
    # anything else is passed through as a string for pydantic to parse
    return kwargs


def add_model_to_parser(parser: argparse.ArgumentParser, model: Type[BaseModel]) -> None:
    """
    Add one option per field of ``model``. The parsed namespace is meant for
    ``model.model_validate(vars(namespace))``.
    """
    for name, field in model.model_fields.items():
        parser.add_argument(option_name(name), dest=name, **_argument_kwargs(field))
