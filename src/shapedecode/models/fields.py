"""Field attribute helpers and integer type aliases.

Field-level decode options are attached as ``Annotated`` metadata, next to
the pydantic constraints the field may already carry:

    >>> class Request(Record):
    ...     resource: Annotated[str, Rename("path")] = "/"
    ...     timeout: Annotated[int, Alias("timeout_s")] = Field(default=30, ge=0)
    ...     extra: Annotated[dict[str, Any], Flatten()] = Field(default_factory=dict)

Defaults come from pydantic itself (``= value`` or ``Field(default_factory=...)``).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Annotated, Any, Callable, cast

from pydantic import Field
from pydantic.fields import FieldInfo

from ..de.primitives import IntWidth

I8 = Annotated[int, IntWidth(8)]
I16 = Annotated[int, IntWidth(16)]
I32 = Annotated[int, IntWidth(32)]
I64 = Annotated[int, IntWidth(64)]
U8 = Annotated[int, IntWidth(8, signed=False)]
U16 = Annotated[int, IntWidth(16, signed=False)]
U32 = Annotated[int, IntWidth(32, signed=False)]
U64 = Annotated[int, IntWidth(64, signed=False)]


@dataclass(frozen=True)
class Attr:
    """Decode/encode options for one record field.

    Attributes:
        rename: Wire name used instead of the Python field name
        aliases: Additional wire names accepted when decoding
        flatten: Splice the field's own entries into the parent map
        skip: Never read from input (the default is used) nor written
        decode_with: Class with ``__decode__``, ``decode(decoder)`` callable, or
            dotted name of one, used instead of the field type's entry point
        encode_with: ``value -> plain data`` function for the encode direction
        getter: Reads the field from a foreign value (remote records)
        skip_serializing_if: Predicate; when true the field is not written
    """

    rename: str | None = None
    aliases: tuple[str, ...] = ()
    flatten: bool = False
    skip: bool = False
    decode_with: Any = None
    encode_with: Callable[[Any], Any] | None = None
    getter: Callable[[Any], Any] | None = None
    skip_serializing_if: Callable[[Any], bool] | None = field(default=None)

    def merge(self, other: Attr) -> Attr:
        """Combine two attribute sets; options set on ``other`` win."""
        changes: dict[str, Any] = {}
        for name in self.__dataclass_fields__:
            value = getattr(other, name)
            if value not in (None, False, ()):
                changes[name] = value
        return replace(self, **changes)


def Rename(name: str) -> Attr:
    """Decode and encode the field under ``name``.

    Example:
        >>> class S(Record):
        ...     max_value: Annotated[int, Rename("values")]
    """
    return Attr(rename=name)


def Alias(*names: str) -> Attr:
    """Also accept ``names`` as the field's key when decoding."""
    return Attr(aliases=tuple(names))


def Flatten() -> Attr:
    """Merge the field's entries into the parent map."""
    return Attr(flatten=True)


def Skip() -> Attr:
    """Never decode or encode the field; it must have a default."""
    return Attr(skip=True)


def DecodeWith(decode_with: Any, encode_with: Callable[[Any], Any] | None = None) -> Attr:
    """Delegate the field's decode to another entry point.

    Args:
        decode_with: Class with ``__decode__`` (e.g. a remote record), a
            ``decode(decoder)`` function, or the dotted name of either
        encode_with: Optional inverse for the encode direction
    """
    return Attr(decode_with=decode_with, encode_with=encode_with)


def SkipIf(predicate: Callable[[Any], bool]) -> Attr:
    """Leave the field out when encoding if ``predicate(value)`` is true."""
    return Attr(skip_serializing_if=predicate)


def Getter(getter: Callable[[Any], Any]) -> Attr:
    """Read the field from the foreign value through ``getter`` (remote records)."""
    return Attr(getter=getter)


def BoundedInt(*, ge: int | None = None, le: int | None = None, **kwargs: Any) -> FieldInfo:
    """Create a bounded integer field.

    This is a convenience wrapper around Pydantic's Field(). The bounds are
    enforced while decoding: values outside ``[ge, le]`` fail with
    ``RangeError`` before the record is constructed.

    Args:
        ge: Minimum value (inclusive)
        le: Maximum value (inclusive)
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Message(Record):
        ...     vehicle_id: int = BoundedInt(ge=0, le=255)
    """
    return cast(FieldInfo, Field(ge=ge, le=le, **kwargs))
