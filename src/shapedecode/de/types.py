"""Decode entry points for type hints.

:func:`decode_type` is the single dispatch point used by every accessor and
record field: given a type hint and a decoder, it picks the decode entry point
for the hint, builds the matching visitor and asks the decoder to drive it.

Supported hints:
    - classes with a ``__decode__(decoder)`` classmethod (records, user types)
    - ``Any`` / ``object`` (plain Python data)
    - ``None``, ``bool``, ``int``, ``float``, ``str``, ``bytes``
    - ``Enum`` subclasses (by member name) and ``IntEnum`` (by value)
    - ``list``, ``set``, ``frozenset``, ``tuple`` (fixed or variadic), ``dict``
      and their ``collections.abc`` counterparts
    - ``Optional[T]`` and ``Union[...]`` (untagged unless annotated)
    - ``Annotated[...]`` carrying integer widths, ``ge``/``gt``/``le``/``lt``
      bounds, an enum layout, or field attributes with ``decode_with``
"""

from __future__ import annotations

import collections.abc
import enum
import importlib
import types
from typing import TYPE_CHECKING, Annotated, Any, Callable, Union, get_args, get_origin

from pydantic.fields import FieldInfo

from ..exceptions import SchemaError
from .primitives import (
    I64_MIN,
    U64_MAX,
    BoolVisitor,
    BytesVisitor,
    DictVisitor,
    EnumNameVisitor,
    FloatVisitor,
    IntEnumVisitor,
    IntVisitor,
    IntWidth,
    ListVisitor,
    OptionVisitor,
    StrVisitor,
    TupleVisitor,
    UnitVisitor,
    ValueVisitor,
)

if TYPE_CHECKING:
    from .decoder import Decoder

_SEQUENCES = {
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Iterable,
    collections.abc.Collection,
}
_SETS = {set, collections.abc.Set, collections.abc.MutableSet}
_MAPPINGS = {dict, collections.abc.Mapping, collections.abc.MutableMapping}


def decode_type(target: Any, decoder: Decoder) -> Any:
    """Decode one value of type ``target`` from ``decoder``.

    Args:
        target: Type hint describing the value to produce
        decoder: Decoder positioned before the value

    Returns:
        Decoded value

    Raises:
        SchemaError: If ``target`` has no decode entry point
        DecodeError: If the input does not match ``target``
    """
    if target is Any or target is object:
        return decoder.decode_any(ValueVisitor())

    origin = get_origin(target)
    if origin is Annotated:
        return _decode_annotated(target, decoder)

    hook = getattr(target, "__decode__", None)
    if hook is not None:
        return hook(decoder)

    if target is None or target is type(None):
        return decoder.decode_unit(UnitVisitor())
    if target is bool:
        return decoder.decode_bool(BoolVisitor())

    if isinstance(target, type) and issubclass(target, enum.Enum):
        if issubclass(target, int):
            return decoder.decode_int(IntEnumVisitor(target))
        return decoder.decode_identifier(EnumNameVisitor(target))

    if target is int:
        return decoder.decode_int(IntVisitor(I64_MIN, U64_MAX, "an integer"))
    if target is float:
        return decoder.decode_float(FloatVisitor())
    if target is str:
        return decoder.decode_str(StrVisitor())
    if target in (bytes, bytearray):
        return decoder.decode_bytes(BytesVisitor())

    # Generic containers, bare or parametrized
    container = origin if origin is not None else target
    args = get_args(target)

    if container is Union or container is types.UnionType:
        return _decode_union(args, decoder)

    if container in _SEQUENCES:
        return decoder.decode_sequence(ListVisitor(args[0] if args else Any))

    if container in _SETS:
        return decoder.decode_sequence(ListVisitor(args[0] if args else Any, set))

    if container is frozenset:
        return decoder.decode_sequence(ListVisitor(args[0] if args else Any, frozenset))

    if container is tuple:
        if not args or (len(args) == 2 and args[1] is Ellipsis):
            return decoder.decode_sequence(ListVisitor(args[0] if args else Any, tuple))
        return decoder.decode_tuple(len(args), TupleVisitor(args))

    if container in _MAPPINGS:
        key_type, value_type = args if args else (Any, Any)
        return decoder.decode_map(DictVisitor(key_type, value_type))

    raise SchemaError(f"No decode entry point for {target!r}")


def resolve_decode_with(decode_with: Any) -> Callable[[Decoder], Any]:
    """Turn a ``decode_with`` attribute into a ``decode(decoder)`` callable.

    Accepts a class (or object) with ``__decode__``, a plain callable, or a
    dotted ``"package.module:function"`` / ``"package.module.function"`` name.

    Raises:
        SchemaError: If the name cannot be imported or the object is not callable
    """
    if isinstance(decode_with, str):
        module_name, _, attr = decode_with.rpartition(":")
        if not module_name:
            module_name, _, attr = decode_with.rpartition(".")
        try:
            decode_with = getattr(importlib.import_module(module_name), attr)
        except (ImportError, AttributeError, ValueError) as e:
            raise SchemaError(f"Cannot resolve decode_with={decode_with!r}: {e}") from e

    hook = getattr(decode_with, "__decode__", None)
    if hook is not None:
        return hook
    if not callable(decode_with):
        raise SchemaError(f"decode_with must be callable, got {decode_with!r}")
    return decode_with


def union_members(target: Any) -> tuple[Any, ...]:
    """Return the members of a ``Union`` hint, or ``(target,)``."""
    origin = get_origin(target)
    if origin is Union or origin is types.UnionType:
        return get_args(target)
    return (target,)


def _decode_union(members: tuple[Any, ...], decoder: Decoder) -> Any:
    present = tuple(member for member in members if member is not type(None))
    if len(present) < len(members):
        inner = present[0] if len(present) == 1 else Union[present]
        return decoder.decode_option(OptionVisitor(inner))

    # Import here to avoid circular dependency
    from .enums import Untagged

    return Untagged().decode_union(members, decoder)


def _expand_metadata(metadata: tuple[Any, ...]) -> list[Any]:
    # Field(ge=0) inside Annotated keeps its constraints in FieldInfo.metadata
    expanded: list[Any] = []
    for meta in metadata:
        if isinstance(meta, FieldInfo):
            expanded.extend(meta.metadata)
        else:
            expanded.append(meta)
    return expanded


def _decode_annotated(target: Any, decoder: Decoder) -> Any:
    base, *raw_metadata = get_args(target)
    metadata = _expand_metadata(tuple(raw_metadata))

    for meta in metadata:
        decode_union = getattr(meta, "decode_union", None)
        if decode_union is not None:
            return decode_union(union_members(base), decoder)
        decode_with = getattr(meta, "decode_with", None)
        if decode_with is not None:
            return resolve_decode_with(decode_with)(decoder)

    if base is int:
        return decoder.decode_int(int_visitor(metadata))
    return decode_type(base, decoder)


def int_visitor(metadata: list[Any]) -> IntVisitor:
    """Build an integer visitor from width and bound metadata.

    ``IntWidth`` narrows the range to the width; ``ge``/``gt``/``le``/``lt``
    attributes (annotated-types constraints, as produced by pydantic's
    ``Field``) narrow it further.
    """
    low, high = I64_MIN, U64_MAX
    label = None

    for meta in metadata:
        if isinstance(meta, IntWidth):
            width_low, width_high = meta.bounds()
            low, high = max(low, width_low), min(high, width_high)
            label = meta.label
            continue

        ge = getattr(meta, "ge", None)
        gt = getattr(meta, "gt", None)
        le = getattr(meta, "le", None)
        lt = getattr(meta, "lt", None)
        if ge is not None:
            low = max(low, int(ge))
        if gt is not None:
            low = max(low, int(gt) + 1)
        if le is not None:
            high = min(high, int(le))
        if lt is not None:
            high = min(high, int(lt) - 1)

    if label is not None and (low, high) == _width_bounds(metadata):
        description = f"{label} in [{low}, {high}]"
    elif (low, high) == (I64_MIN, U64_MAX):
        description = "an integer"
    else:
        description = f"an integer in [{low}, {high}]"
    return IntVisitor(low, high, description)


def _width_bounds(metadata: list[Any]) -> tuple[int, int] | None:
    for meta in metadata:
        if isinstance(meta, IntWidth):
            return meta.bounds()
    return None
