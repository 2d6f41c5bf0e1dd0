"""Abstract decoder: the format-specific driver of the protocol.

A decoder inspects the next token(s) of its input, determines the shape that
is present, and invokes exactly one handler of the visitor it was given,
supplying an accessor for aggregate shapes. If it cannot decode the input it
raises a :class:`~shapedecode.exceptions.DecodeError` without invoking any
handler.

Every ``decode_*`` method other than :meth:`Decoder.decode_any` is a hint:
it tells the decoder what the caller expects, which matters for formats that
are not self-describing. Self-describing formats (all the ones shipped here)
can ignore hints, which is what the defaults do.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from .access import MapAccess
    from .visitor import Visitor


class Decoder(ABC):
    """Base class for all decoders."""

    @abstractmethod
    def decode_any(self, visitor: Visitor[Any]) -> Any:
        """Discover the shape of the next value and visit it."""

    @abstractmethod
    def decode_option(self, visitor: Visitor[Any]) -> Any:
        """Call ``visit_none`` for an absent value, ``visit_some(self)`` otherwise."""

    def decode_bool(self, visitor: Visitor[Any]) -> Any:
        return self.decode_any(visitor)

    def decode_int(self, visitor: Visitor[Any]) -> Any:
        return self.decode_any(visitor)

    def decode_float(self, visitor: Visitor[Any]) -> Any:
        return self.decode_any(visitor)

    def decode_str(self, visitor: Visitor[Any]) -> Any:
        return self.decode_any(visitor)

    def decode_bytes(self, visitor: Visitor[Any]) -> Any:
        return self.decode_any(visitor)

    def decode_unit(self, visitor: Visitor[Any]) -> Any:
        return self.decode_any(visitor)

    def decode_sequence(self, visitor: Visitor[Any]) -> Any:
        return self.decode_any(visitor)

    def decode_tuple(self, length: int, visitor: Visitor[Any]) -> Any:
        return self.decode_sequence(visitor)

    def decode_map(self, visitor: Visitor[Any]) -> Any:
        return self.decode_any(visitor)

    def decode_struct(self, name: str, fields: Sequence[str], visitor: Visitor[Any]) -> Any:
        """Hint that a record named ``name`` with wire names ``fields`` follows."""
        return self.decode_any(visitor)

    def decode_identifier(self, visitor: Visitor[Any]) -> Any:
        """Hint that a field name or variant name follows."""
        return self.decode_str(visitor)

    def decode_ignored_any(self, visitor: Visitor[Any]) -> Any:
        """Hint that the value will be discarded; formats may skip it cheaply."""
        return self.decode_any(visitor)


class MapAccessDecoder(Decoder):
    """Presents an already-open map accessor as a map-shaped decoder.

    Used to hand the remaining entries of a map to another entry point, for
    instance the variant record of an internally tagged enum once its tag was
    read as the first key. The accessor stays owned by the frame that opened
    it; this decoder never closes it.
    """

    def __init__(self, access: MapAccess) -> None:
        self.access = access

    def decode_any(self, visitor: Visitor[Any]) -> Any:
        return visitor.visit_map(self.access)

    def decode_option(self, visitor: Visitor[Any]) -> Any:
        return visitor.visit_some(self)
