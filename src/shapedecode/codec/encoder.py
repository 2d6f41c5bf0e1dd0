"""Conversion of typed values back to plain data and JSON.

The encode direction mirrors decoding closely enough that
``from_value(T, to_value(x, T)) == x`` for records built from supported
types: renames, flattened fields, enum layouts and remote shadows are all
applied in reverse.
"""

from __future__ import annotations

import enum
import json
import types
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel

from ..de.enums import is_unit_variant, variant_name
from ..de.types import union_members
from ..exceptions import EncodeError
from ..models.base import RemoteRecord
from .schema import RecordSchema


def to_value(value: Any, target: Any = None) -> Any:
    """Convert ``value`` to plain data (dicts, lists, scalars).

    Args:
        value: Value to convert
        target: Type hint the value was declared with; required when
            annotations (an enum layout, a remote shadow) change its form

    Returns:
        Plain data accepted by :func:`~shapedecode.codec.decoder.from_value`

    Raises:
        EncodeError: If a value cannot be represented

    Example:
        >>> to_value(User(id=1, username="ada"))
        {'id': 1, 'username': 'ada'}
    """
    return _encode(value, target if target is not None else Any)


def to_json(value: Any, target: Any = None, indent: int | None = None) -> str:
    """Serialize ``value`` to JSON text.

    Bytes are written as arrays of integers.

    Raises:
        EncodeError: If the value holds a NaN or infinite float, which JSON
            cannot represent
    """
    data = to_value(value, target)
    try:
        return json.dumps(data, indent=indent, allow_nan=False)
    except ValueError as e:
        raise EncodeError(f"Cannot encode as JSON: {e}") from e


def _runtime_classes(hint: Any) -> list[type]:
    if get_origin(hint) is Annotated:
        hint = get_args(hint)[0]
    members = union_members(hint)
    if len(members) > 1:
        return [cls for member in members for cls in _runtime_classes(member)]
    hint = get_origin(hint) or hint
    return [hint] if isinstance(hint, type) else []


def _member_for(value: Any, members: tuple[Any, ...]) -> Any:
    """Pick the union member ``value`` belongs to, keeping its annotations."""
    present = [member for member in members if member is not type(None)]
    if len(present) == 1:
        return present[0]
    for member in present:
        if any(isinstance(value, cls) for cls in _runtime_classes(member)):
            return member
    return Any


def _encode(value: Any, target: Any) -> Any:
    if get_origin(target) is Annotated:
        base, *metadata = get_args(target)
        for meta in metadata:
            if hasattr(meta, "encode_union"):
                return _encode_variant(meta, value)
            encode_with = getattr(meta, "encode_with", None)
            if encode_with is not None:
                return encode_with(value)
            decode_with = getattr(meta, "decode_with", None)
            if isinstance(decode_with, type) and issubclass(decode_with, RemoteRecord):
                return _encode(value, decode_with)
        return _encode(value, base)

    if value is None:
        return None

    origin = get_origin(target)
    args = get_args(target)

    # Before records: a member may carry an enum layout or a remote shadow
    if origin is Union or origin is types.UnionType:
        return _encode(value, _member_for(value, args))

    if isinstance(target, type) and issubclass(target, RemoteRecord) and not isinstance(value, target):
        return _encode_record(target.from_remote(value))
    if isinstance(value, BaseModel):
        return _encode_record(value)

    # IntEnum before int: encoded by value
    if isinstance(value, enum.Enum):
        return value.value if isinstance(value, int) else value.name
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return list(value)

    if isinstance(value, dict):
        key_type, value_type = args if len(args) == 2 else (Any, Any)
        return {_encode(k, key_type): _encode(v, value_type) for k, v in value.items()}

    if isinstance(value, tuple) and args and not (len(args) == 2 and args[1] is Ellipsis):
        if len(args) != len(value):
            raise EncodeError(f"Expected a tuple of size {len(args)}, got {len(value)}")
        return [_encode(item, item_type) for item, item_type in zip(value, args)]

    if isinstance(value, (list, tuple, set, frozenset)):
        item_type = args[0] if args else Any
        return [_encode(item, item_type) for item in value]

    raise EncodeError(f"Cannot encode value of type {type(value).__name__}")


def _encode_variant(layout: Any, value: Any) -> Any:
    variant = type(value)
    return layout.encode_union(variant_name(variant), _encode(value, variant), is_unit_variant(variant))


def _encode_record(record: BaseModel) -> dict[str, Any]:
    schema = RecordSchema.from_model(type(record))
    out: dict[str, Any] = {}

    for field in schema.fields:
        if field.skip:
            continue
        value = getattr(record, field.name)
        predicate = field.attrs.skip_serializing_if
        if predicate is not None and predicate(value):
            continue

        encoded = _encode(value, field.target)

        if field.flatten:
            if encoded is None:
                continue
            if not isinstance(encoded, dict):
                raise EncodeError(f"{schema.name}.{field.name}: flattened field must encode as a map")
            out.update(encoded)
        else:
            out[field.wire_name] = encoded

    return out
