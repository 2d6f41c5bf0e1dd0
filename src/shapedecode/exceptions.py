"""Exception hierarchy for shapedecode.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from ShapedecodeError for easy catching of any
shapedecode-specific error.

Decode failures form their own branch under DecodeError. Every decode error
carries the message built at the point of mismatch plus contextual metadata:
the path of field names and sequence indices leading to the failing value,
and (for text formats) the line/column where the reader stopped.
"""

from __future__ import annotations

from typing import Any, Sequence


class ShapedecodeError(Exception):
    """Base exception for all shapedecode errors."""

    pass


class SchemaError(ShapedecodeError):
    """Raised when a target type cannot be decoded as declared.

    Examples:
        - No decode entry point for a type hint
        - Unknown ``rename_all`` convention
        - Internally tagged enum with a non-record variant
        - Two variants sharing the same wire name
    """

    pass


class EncodeError(ShapedecodeError):
    """Raised when converting a value to plain data fails.

    Examples:
        - Value of an unsupported type
        - Flattened field that does not encode to a map
        - Internally tagged variant whose payload is not a map
    """

    pass


class AccessorStateError(ShapedecodeError):
    """Raised when a sequence or map accessor is driven out of order.

    Examples:
        - ``next_value`` called without a preceding ``next_key``
        - ``next_key`` called while the previous value is still unread
        - Accessor used after the visit call that received it returned
    """

    pass


class DecodeError(ShapedecodeError):
    """Raised when input cannot be decoded into the requested type.

    Attributes:
        message: Description of the failure, without location
        path: Field names and sequence indices leading to the failing value
        line: 1-based line of the reader position (text formats only)
        column: 1-based column of the reader position (text formats only)
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.path: list[str | int] = []
        self.line: int | None = None
        self.column: int | None = None

    def add_path(self, segment: str | int) -> DecodeError:
        """Prepend a field name or index while the error travels upward."""
        self.path.insert(0, segment)
        return self

    def set_position(self, line: int, column: int) -> DecodeError:
        """Record the reader position, keeping the innermost one."""
        if self.line is None:
            self.line = line
            self.column = column
        return self

    @property
    def location(self) -> str:
        """Dotted path such as ``users[0].id``; empty at the top level."""
        parts: list[str] = []
        for segment in self.path:
            if isinstance(segment, int):
                parts.append(f"[{segment}]")
            elif parts:
                parts.append(f".{segment}")
            else:
                parts.append(str(segment))
        return "".join(parts)

    def __str__(self) -> str:
        text = self.message
        if self.path:
            text += f" at `{self.location}`"
        if self.line is not None:
            text += f" (line {self.line} column {self.column})"
        return text


class ShapeMismatch(DecodeError):
    """The input holds a shape the active visitor has no handler for."""

    def __init__(self, found: Any, expected: str) -> None:
        super().__init__(f"invalid type: {found}, expected {expected}")
        self.found = found
        self.expected = expected


class InvalidValue(DecodeError):
    """The shape is right but the value is not one the target accepts."""

    def __init__(self, found: Any, expected: str) -> None:
        super().__init__(f"invalid value: {found}, expected {expected}")
        self.found = found
        self.expected = expected


class MissingField(DecodeError):
    """A required field is absent from a map."""

    def __init__(self, field: str) -> None:
        super().__init__(f"missing field `{field}`")
        self.field = field


class DuplicateField(DecodeError):
    """The same field appears twice in a map."""

    def __init__(self, field: str) -> None:
        super().__init__(f"duplicate field `{field}`")
        self.field = field


def _one_of(names: Sequence[str]) -> str:
    if not names:
        return "there are none"
    if len(names) == 1:
        return f"expected `{names[0]}`"
    return "expected one of " + ", ".join(f"`{name}`" for name in names)


class UnknownField(DecodeError):
    """A strict record met a key it does not declare."""

    def __init__(self, field: str, expected: Sequence[str]) -> None:
        if expected:
            detail = _one_of(expected)
        else:
            detail = "there are no fields"
        super().__init__(f"unknown field `{field}`, {detail}")
        self.field = field
        self.expected = tuple(expected)


class UnknownVariant(DecodeError):
    """An enum tag names no declared variant."""

    def __init__(self, variant: str, expected: Sequence[str]) -> None:
        if expected:
            detail = _one_of(expected)
        else:
            detail = "there are no variants"
        super().__init__(f"unknown variant `{variant}`, {detail}")
        self.variant = variant
        self.expected = tuple(expected)


class InvalidLength(DecodeError):
    """A sequence or map has the wrong number of elements.

    ``length`` is the index of the first missing element when the input is
    too short, or the total length when it is too long.
    """

    def __init__(self, length: int, expected: str) -> None:
        super().__init__(f"invalid length {length}, expected {expected}")
        self.length = length
        self.expected = expected


class RangeError(DecodeError):
    """A number does not fit the target type's representable range."""

    def __init__(self, value: Any, expected: str) -> None:
        super().__init__(f"number `{value}` out of range, expected {expected}")
        self.value = value
        self.expected = expected


class CustomError(DecodeError):
    """Free-form failure reported by handwritten decode logic."""

    pass
