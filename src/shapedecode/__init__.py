"""shapedecode: structured decoding for Python types

A format-agnostic decoding protocol. Readers of self-describing input (JSON,
in-memory data, ...) report each value's shape to a visitor built from the
target type, so typed values are produced directly from the input without a
generic intermediate tree, and readers never know the target types.

Key Features:
- Pydantic-based record modeling (renames, aliases, defaults, flatten)
- Externally, internally, adjacently tagged and untagged enums
- Seeded decode for context-carrying entry points
- Shadow records for types you cannot modify
- Errors with the path and position of the failing value

Quick Start:
    >>> from typing import Annotated, Any
    >>> from shapedecode import Flatten, Record, from_json
    >>>
    >>> class User(Record):
    ...     id: str
    ...     username: str
    ...     extra: Annotated[dict[str, Any], Flatten()] = {}
    >>>
    >>> user = from_json(User, '{"id": "x", "username": "y", "extra1": "z"}')
    >>> user.extra
    {'extra1': 'z'}
"""

from __future__ import annotations

from .codec import decode, decode_seed, from_json, from_value, to_json, to_value
from .de import (
    Adjacent,
    Decoder,
    DecodeSeed,
    External,
    IgnoredAny,
    Internal,
    NthElement,
    Untagged,
    Visitor,
    max_of,
    parse_str,
    reduce_sequence,
)
from .exceptions import (
    AccessorStateError,
    CustomError,
    DecodeError,
    DuplicateField,
    EncodeError,
    InvalidLength,
    InvalidValue,
    MissingField,
    RangeError,
    SchemaError,
    ShapedecodeError,
    ShapeMismatch,
    UnknownField,
    UnknownVariant,
)
from .formats import JsonDecoder, ValueDecoder
from .models import (
    I8,
    I16,
    I32,
    I64,
    U8,
    U16,
    U32,
    U64,
    Alias,
    Attr,
    BoundedInt,
    DecodeWith,
    Flatten,
    Getter,
    Record,
    RemoteRecord,
    Rename,
    Skip,
    SkipIf,
)

__version__ = "0.1.0"

__all__ = [
    # Core API
    "Record",
    "RemoteRecord",
    "decode",
    "decode_seed",
    "from_value",
    "from_json",
    "to_value",
    "to_json",
    # Field helpers
    "Attr",
    "Alias",
    "BoundedInt",
    "DecodeWith",
    "Flatten",
    "Getter",
    "Rename",
    "Skip",
    "SkipIf",
    "I8",
    "I16",
    "I32",
    "I64",
    "U8",
    "U16",
    "U32",
    "U64",
    # Enum layouts
    "External",
    "Internal",
    "Adjacent",
    "Untagged",
    # Protocol
    "Visitor",
    "Decoder",
    "DecodeSeed",
    "IgnoredAny",
    "NthElement",
    "parse_str",
    "reduce_sequence",
    "max_of",
    # Readers
    "JsonDecoder",
    "ValueDecoder",
    # Exceptions
    "ShapedecodeError",
    "SchemaError",
    "EncodeError",
    "AccessorStateError",
    "DecodeError",
    "ShapeMismatch",
    "InvalidValue",
    "MissingField",
    "DuplicateField",
    "UnknownField",
    "UnknownVariant",
    "InvalidLength",
    "RangeError",
    "CustomError",
    # Version
    "__version__",
]
