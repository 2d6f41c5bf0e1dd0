"""Pydantic record modeling for shapedecode.

This module provides the Record base classes and the field attribute helpers
used to shape how records appear on the wire.
"""

from __future__ import annotations

from .base import Record, RemoteRecord
from .fields import (
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
    Rename,
    Skip,
    SkipIf,
)

__all__ = [
    "Record",
    "RemoteRecord",
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
]
