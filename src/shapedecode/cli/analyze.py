"""Record analysis CLI command."""

from __future__ import annotations

import importlib.util
import inspect
import sys
from pathlib import Path
from types import ModuleType
from typing import Annotated, Any, get_args, get_origin

from ..codec.schema import FieldSchema, RecordSchema
from ..models.base import Record

USER_MODULE = "user_module"


def load_module(file_path: Path) -> ModuleType:
    """Import a Python file as the module ``user_module``.

    Raises:
        ValueError: If the file cannot be loaded as a module
    """
    spec = importlib.util.spec_from_file_location(USER_MODULE, file_path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Could not load module from {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[USER_MODULE] = module
    spec.loader.exec_module(module)
    return module


def analyze_file(file_path: Path) -> None:
    """Print the wire layout of every Record class defined in a Python file.

    Args:
        file_path: Path to Python file containing record definitions
    """
    module = load_module(file_path)

    # Only include classes defined in this file (not imported)
    record_classes = [
        obj
        for _name, obj in inspect.getmembers(module, inspect.isclass)
        if issubclass(obj, Record) and obj.__module__ == USER_MODULE
    ]

    if not record_classes:
        print(f"No Record classes found in {file_path}")
        return

    print(f"{len(record_classes)} record{'s' if len(record_classes) != 1 else ''} loaded.")
    print()

    for record_class in record_classes:
        analyze_record_class(record_class)


def describe_type(target: Any) -> str:
    """Render a field's type hint without its decode metadata."""
    if get_origin(target) is Annotated:
        target = get_args(target)[0]
    if isinstance(target, type):
        return target.__name__
    return repr(target).replace("typing.", "")


def _flags(field: FieldSchema) -> list[str]:
    flags = []
    if field.flatten:
        flags.append("flatten")
    if field.skip:
        flags.append("skip")
    if field.aliases:
        flags.append("aliases: " + ", ".join(field.aliases))
    if field.attrs.decode_with is not None:
        flags.append("custom decode")
    return flags


def analyze_record_class(record_class: type[Record]) -> None:
    """Print the layout of a single record class.

    Args:
        record_class: Record class to analyze
    """
    schema = RecordSchema.from_model(record_class)

    print(f"{'=' * 19} {schema.name} {'=' * 19}")
    policy = "deny (strict)" if schema.deny_unknown_fields else "ignore (lenient)"
    print(f"Unknown fields: {policy}")
    if schema.rename_all:
        print(f"Rename rule: {schema.rename_all}")
    print()

    for i, field in enumerate(schema.fields, 1):
        field_desc = f"{i}. {field.wire_name}"
        if field.wire_name != field.name:
            field_desc += f" ({field.name})"

        if field.required:
            presence = "required"
        elif field.optional and field.field_info.is_required():
            presence = "optional"
        else:
            presence = f"default={field.default_value()!r}"

        type_desc = describe_type(field.target)
        dots = "." * max(1, 54 - len(field_desc) - len(type_desc))
        line = f"        {field_desc}{dots}{type_desc} [{presence}]"
        flags = _flags(field)
        if flags:
            line += " (" + "; ".join(flags) + ")"
        print(line)

    print()
