"""Decode and encode entry points for shapedecode.

This module provides the top-level functions that drive the decode protocol
from in-memory data or JSON text, the reverse conversion to plain data, and
the record schema introspection both directions share.
"""

from __future__ import annotations

from .decoder import decode, decode_seed, from_json, from_value
from .encoder import to_json, to_value
from .schema import FieldSchema, RecordSchema

__all__ = [
    "decode",
    "decode_seed",
    "from_value",
    "from_json",
    "to_value",
    "to_json",
    "RecordSchema",
    "FieldSchema",
]
