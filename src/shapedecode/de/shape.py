"""Structural kinds a decoder can discover in its input."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class Shape(enum.Enum):
    """The structural kind of one piece of input.

    The decoder determines which shape is present; a visitor declares which
    shapes it accepts by overriding the matching ``visit_*`` handlers.
    """

    BOOL = "boolean"
    INT = "integer"
    FLOAT = "floating point"
    STR = "string"
    BYTES = "byte array"
    SEQUENCE = "sequence"
    MAP = "map"
    IDENTIFIER = "identifier"
    UNIT = "unit value"
    OPTION = "option value"

    @property
    def label(self) -> str:
        return self.value


# Shapes whose value is worth quoting in an error message
_SCALARS = {Shape.BOOL, Shape.INT, Shape.FLOAT, Shape.STR, Shape.IDENTIFIER}


@dataclass(frozen=True)
class Unexpected:
    """What a decoder actually found, rendered for error messages.

    Example:
        >>> str(Unexpected(Shape.INT, 5))
        'integer `5`'
        >>> str(Unexpected(Shape.STR, "abc"))
        'string "abc"'
    """

    shape: Shape
    value: Any = None

    def __str__(self) -> str:
        if self.shape not in _SCALARS or self.value is None:
            return self.shape.label
        if self.shape in (Shape.STR, Shape.IDENTIFIER):
            return f'{self.shape.label} "{self.value}"'
        if self.shape is Shape.BOOL:
            return f"{self.shape.label} `{str(self.value).lower()}`"
        return f"{self.shape.label} `{self.value}`"
