from __future__ import annotations

from typing import Any

from .base import ToolSpec
from ..errors import InvalidArguments


def _matches(value: Any, type_name: str) -> bool:
    if type_name == "string":
        return isinstance(value, str)
    if type_name == "integer":
        if isinstance(value, bool):
            return False
        return isinstance(value, int) or (isinstance(value, float) and value.is_integer())
    if type_name == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if type_name == "boolean":
        return isinstance(value, bool)
    if type_name == "array":
        return isinstance(value, list)
    if type_name == "object":
        return isinstance(value, dict)
    if type_name == "null":
        return value is None
    return True


def check_arguments(spec: ToolSpec, args: Any) -> list[str]:
    """Return the problems found checking `args` against the tool's schema.

    Covers what the tool schemas use: required keys, primitive types of the
    declared properties and array item types. Undeclared keys are ignored.
    """
    if not isinstance(args, dict):
        return ["arguments must be an object"]

    schema = spec.parameters or {}
    props = schema.get("properties") or {}
    problems: list[str] = []

    for key in schema.get("required") or []:
        if key not in args or args[key] is None:
            problems.append(f"missing required argument '{key}'")
        elif isinstance(args[key], str) and not args[key].strip():
            problems.append(f"argument '{key}' must not be empty")

    for key, value in args.items():
        prop = props.get(key)
        if not isinstance(prop, dict) or value is None:
            continue
        type_name = prop.get("type")
        if isinstance(type_name, str) and not _matches(value, type_name):
            problems.append(f"argument '{key}' must be of type {type_name}")
            continue
        items = prop.get("items")
        if type_name == "array" and isinstance(items, dict) and isinstance(items.get("type"), str):
            bad = [i for i, v in enumerate(value) if not _matches(v, items["type"])]
            if bad:
                problems.append(f"argument '{key}' items must be of type {items['type']} (bad index {bad[0]})")

    return problems


def validate_arguments(spec: ToolSpec, args: Any) -> dict[str, Any]:
    problems = check_arguments(spec, args)
    if problems:
        raise InvalidArguments(spec.name, problems)
    return args
