"""The decode protocol: visitors, accessors, decoders and seeds.

A :class:`Decoder` discovers the shape of its input and calls exactly one
handler of a :class:`Visitor`; aggregates are handed over as lazy
:class:`SeqAccess` / :class:`MapAccess` cursors. Neither side knows the
other's concrete type.
"""

from __future__ import annotations

from .access import END, MapAccess, SeqAccess
from .decoder import Decoder, MapAccessDecoder
from .enums import Adjacent, EnumRepr, External, Internal, Untagged
from .ignore import IGNORED, IgnoredAny, IgnoreVisitor
from .primitives import IntWidth, parse_str
from .seed import DecodeSeed, TypeSeed
from .shape import Shape, Unexpected
from .stream import NthElement, max_of, reduce_sequence
from .types import decode_type
from .visitor import Visitor

__all__ = [
    "Visitor",
    "Decoder",
    "MapAccessDecoder",
    "SeqAccess",
    "MapAccess",
    "END",
    "DecodeSeed",
    "TypeSeed",
    "NthElement",
    "IgnoredAny",
    "IgnoreVisitor",
    "IGNORED",
    "Shape",
    "Unexpected",
    "IntWidth",
    "EnumRepr",
    "External",
    "Internal",
    "Adjacent",
    "Untagged",
    "decode_type",
    "parse_str",
    "reduce_sequence",
    "max_of",
]
