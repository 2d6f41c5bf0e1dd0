"""Visitor: type-specific construction logic driven by a decoder.

A visitor is built by a decode entry point and handed to a decoder. The
decoder, not the visitor, picks which handler to call based on what it finds
in the input. That inversion lets one visitor work across encodings that
represent the same value differently, as long as the visitor declares a
handler for each representation.

Handlers that are not overridden fall back to a default that raises
:class:`~shapedecode.exceptions.ShapeMismatch` citing :meth:`Visitor.expecting`.
Narrower integer handlers forward to the 64-bit ones and ``visit_f32``
forwards to ``visit_f64``, so a visitor only needs to widen once.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..exceptions import ShapeMismatch
from .shape import Shape, Unexpected

if TYPE_CHECKING:
    from .access import MapAccess, SeqAccess
    from .decoder import Decoder

T = TypeVar("T")


class Visitor(ABC, Generic[T]):
    """Base class for all visitors.

    Subclasses must implement :meth:`expecting` and override the handlers for
    the shapes they accept.

    Example:
        >>> class EvenVisitor(Visitor[int]):
        ...     def expecting(self) -> str:
        ...         return "an even integer"
        ...
        ...     def visit_u64(self, value: int) -> int:
        ...         if value % 2:
        ...             raise InvalidValue(Unexpected(Shape.INT, value), self.expecting())
        ...         return value
    """

    @abstractmethod
    def expecting(self) -> str:
        """Describe what this visitor accepts, for error messages."""

    def invalid_type(self, found: Unexpected) -> ShapeMismatch:
        """Build the shape-mismatch error for ``found``."""
        return ShapeMismatch(found, self.expecting())

    def visit_bool(self, value: bool) -> T:
        raise self.invalid_type(Unexpected(Shape.BOOL, value))

    def visit_i8(self, value: int) -> T:
        return self.visit_i64(value)

    def visit_i16(self, value: int) -> T:
        return self.visit_i64(value)

    def visit_i32(self, value: int) -> T:
        return self.visit_i64(value)

    def visit_i64(self, value: int) -> T:
        raise self.invalid_type(Unexpected(Shape.INT, value))

    def visit_u8(self, value: int) -> T:
        return self.visit_u64(value)

    def visit_u16(self, value: int) -> T:
        return self.visit_u64(value)

    def visit_u32(self, value: int) -> T:
        return self.visit_u64(value)

    def visit_u64(self, value: int) -> T:
        raise self.invalid_type(Unexpected(Shape.INT, value))

    def visit_f32(self, value: float) -> T:
        return self.visit_f64(value)

    def visit_f64(self, value: float) -> T:
        raise self.invalid_type(Unexpected(Shape.FLOAT, value))

    def visit_str(self, value: str) -> T:
        raise self.invalid_type(Unexpected(Shape.STR, value))

    def visit_bytes(self, value: bytes) -> T:
        raise self.invalid_type(Unexpected(Shape.BYTES))

    def visit_none(self) -> T:
        raise self.invalid_type(Unexpected(Shape.OPTION))

    def visit_some(self, decoder: Decoder) -> T:
        raise self.invalid_type(Unexpected(Shape.OPTION))

    def visit_unit(self) -> T:
        raise self.invalid_type(Unexpected(Shape.UNIT))

    def visit_seq(self, access: SeqAccess) -> T:
        raise self.invalid_type(Unexpected(Shape.SEQUENCE))

    def visit_map(self, access: MapAccess) -> T:
        raise self.invalid_type(Unexpected(Shape.MAP))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} expecting {self.expecting()}>"
