"""Visitors for builtin Python types.

Numeric handlers own widening: an integer visitor accepts every narrower
integer the decoder reports (through the forwarding defaults of
:class:`~shapedecode.de.visitor.Visitor`) and rejects values outside its
target range with :class:`~shapedecode.exceptions.RangeError`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any, Callable

from ..exceptions import CustomError, InvalidLength, InvalidValue, RangeError, UnknownVariant
from .access import END
from .seed import TypeSeed
from .shape import Shape, Unexpected
from .visitor import Visitor

if TYPE_CHECKING:
    from .access import MapAccess, SeqAccess
    from .decoder import Decoder

I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1
U64_MAX = (1 << 64) - 1


@dataclass(frozen=True)
class IntWidth:
    """Fixed-width integer metadata, used as ``Annotated[int, IntWidth(32)]``.

    Attributes:
        bits: Width in bits (8, 16, 32 or 64)
        signed: Two's complement range if True, unsigned range otherwise
    """

    bits: int
    signed: bool = True

    def __post_init__(self) -> None:
        if self.bits not in (8, 16, 32, 64):
            raise ValueError(f"bits must be 8, 16, 32 or 64, got {self.bits}")

    @property
    def label(self) -> str:
        return f"{'i' if self.signed else 'u'}{self.bits}"

    def bounds(self) -> tuple[int, int]:
        """Return the inclusive ``(min, max)`` range."""
        if self.signed:
            return -(1 << (self.bits - 1)), (1 << (self.bits - 1)) - 1
        return 0, (1 << self.bits) - 1


class BoolVisitor(Visitor[bool]):
    def expecting(self) -> str:
        return "a boolean"

    def visit_bool(self, value: bool) -> bool:
        return value


class IntVisitor(Visitor[int]):
    """Accepts integers within ``[low, high]``.

    Args:
        low: Smallest accepted value (inclusive)
        high: Largest accepted value (inclusive)
        description: Override for the expecting text
    """

    def __init__(self, low: int, high: int, description: str | None = None) -> None:
        self.low = low
        self.high = high
        self.description = description or f"an integer in [{low}, {high}]"

    def expecting(self) -> str:
        return self.description

    def _check(self, value: int) -> int:
        if value < self.low or value > self.high:
            raise RangeError(value, self.expecting())
        return value

    def visit_i64(self, value: int) -> int:
        return self._check(value)

    def visit_u64(self, value: int) -> int:
        return self._check(value)


class FloatVisitor(Visitor[float]):
    """Accepts floats, widening integers to float."""

    def expecting(self) -> str:
        return "a number"

    def visit_f64(self, value: float) -> float:
        return float(value)

    def visit_i64(self, value: int) -> float:
        return float(value)

    def visit_u64(self, value: int) -> float:
        return float(value)


class StrVisitor(Visitor[str]):
    def expecting(self) -> str:
        return "a string"

    def visit_str(self, value: str) -> str:
        return value

    def visit_bytes(self, value: bytes) -> str:
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidValue(Unexpected(Shape.BYTES), self.expecting()) from e


class BytesVisitor(Visitor[bytes]):
    """Accepts a byte array, or a sequence of integers in ``[0, 255]``."""

    def expecting(self) -> str:
        return "a byte array"

    def visit_bytes(self, value: bytes) -> bytes:
        return bytes(value)

    def visit_seq(self, access: SeqAccess) -> bytes:
        buffer = bytearray()
        for value in access.iter_elements(Annotated[int, IntWidth(8, signed=False)]):
            buffer.append(value)
        return bytes(buffer)


class UnitVisitor(Visitor[None]):
    def expecting(self) -> str:
        return "unit"

    def visit_unit(self) -> None:
        return None

    def visit_none(self) -> None:
        return None


class OptionVisitor(Visitor[Any]):
    """``None`` for an absent value, otherwise decodes ``inner``."""

    def __init__(self, inner: Any) -> None:
        self.inner = inner

    def expecting(self) -> str:
        return "an optional value"

    def visit_none(self) -> None:
        return None

    def visit_unit(self) -> None:
        return None

    def visit_some(self, decoder: Decoder) -> Any:
        return TypeSeed(self.inner).consume(decoder)


class ListVisitor(Visitor[Any]):
    """Collects a sequence element by element into ``build``.

    Args:
        element: Type hint of each element
        build: Container constructor applied to the element iterator
    """

    def __init__(self, element: Any, build: Callable[[Any], Any] = list) -> None:
        self.element = element
        self.build = build

    def expecting(self) -> str:
        return "a sequence"

    def visit_seq(self, access: SeqAccess) -> Any:
        return self.build(access.iter_elements(self.element))


class TupleVisitor(Visitor[tuple]):
    """Fixed-length heterogeneous sequence."""

    def __init__(self, items: tuple[Any, ...]) -> None:
        self.items = items

    def expecting(self) -> str:
        return f"a tuple of size {len(self.items)}"

    def visit_seq(self, access: SeqAccess) -> tuple:
        values = []
        for index, item in enumerate(self.items):
            value = access.next_element(item)
            if value is END:
                raise InvalidLength(index, self.expecting())
            values.append(value)
        return tuple(values)


class DictVisitor(Visitor[dict]):
    def __init__(self, key: Any, value: Any) -> None:
        self.key = key
        self.value = value

    def expecting(self) -> str:
        return "a map"

    def visit_map(self, access: MapAccess) -> dict:
        result: dict[Any, Any] = {}
        for key, value in access.iter_entries(self.key, self.value):
            result[key] = value
        return result


class ValueVisitor(Visitor[Any]):
    """Builds plain Python data (``dict``, ``list``, scalars) from any shape.

    This is the decode path of ``Any``, and the way buffered content is
    captured before it is replayed through
    :class:`~shapedecode.formats.value.ValueDecoder`.
    """

    def expecting(self) -> str:
        return "any value"

    def visit_bool(self, value: bool) -> bool:
        return value

    def visit_i64(self, value: int) -> int:
        return value

    def visit_u64(self, value: int) -> int:
        return value

    def visit_f64(self, value: float) -> float:
        return value

    def visit_str(self, value: str) -> str:
        return value

    def visit_bytes(self, value: bytes) -> bytes:
        return bytes(value)

    def visit_none(self) -> None:
        return None

    def visit_some(self, decoder: Decoder) -> Any:
        return decoder.decode_any(self)

    def visit_unit(self) -> None:
        return None

    def visit_seq(self, access: SeqAccess) -> list:
        return list(access.iter_elements(Any))

    def visit_map(self, access: MapAccess) -> dict:
        return dict(access.iter_entries(Any, Any))


class EnumNameVisitor(Visitor[enum.Enum]):
    """Maps an identifier to the enum member of the same name."""

    def __init__(self, enum_type: type[enum.Enum]) -> None:
        self.enum_type = enum_type

    def expecting(self) -> str:
        return f"variant identifier of {self.enum_type.__name__}"

    def visit_str(self, value: str) -> enum.Enum:
        try:
            return self.enum_type[value]
        except KeyError:
            raise UnknownVariant(value, list(self.enum_type.__members__)) from None

    def visit_bytes(self, value: bytes) -> enum.Enum:
        return self.visit_str(value.decode("utf-8", errors="replace"))


class IntEnumVisitor(Visitor[enum.Enum]):
    """Maps an integer to the enum member with that value."""

    def __init__(self, enum_type: type[enum.Enum]) -> None:
        self.enum_type = enum_type

    def expecting(self) -> str:
        values = ", ".join(str(member.value) for member in self.enum_type)
        return f"{self.enum_type.__name__} discriminant ({values})"

    def visit_i64(self, value: int) -> enum.Enum:
        try:
            return self.enum_type(value)
        except ValueError:
            raise InvalidValue(Unexpected(Shape.INT, value), self.expecting()) from None

    def visit_u64(self, value: int) -> enum.Enum:
        return self.visit_i64(value)


class _ParseVisitor(Visitor[Any]):
    def __init__(self, parser: Callable[[str], Any], description: str) -> None:
        self.parser = parser
        self.description = description

    def expecting(self) -> str:
        return self.description

    def visit_str(self, value: str) -> Any:
        try:
            return self.parser(value)
        except (ValueError, TypeError) as e:
            raise CustomError(str(e) or f"cannot parse {value!r}") from e


def parse_str(parser: Callable[[str], Any], expecting: str = "a string") -> Callable[[Decoder], Any]:
    """Build a decode function that reads a string and converts it with ``parser``.

    This is the handwritten ("custom") decode strategy: the wire carries text,
    the target is whatever ``parser`` returns. ``ValueError`` and
    ``TypeError`` raised by ``parser`` are reported as ``CustomError``.

    Args:
        parser: Text-to-value conversion, e.g. ``int``, ``Decimal``, ``UUID``
        expecting: Description used when the input is not a string

    Returns:
        Function suitable for ``Attr(decode_with=...)``

    Example:
        >>> class Outer(Record):
        ...     s: Annotated[int, DecodeWith(parse_str(int))]
        >>> from_json(Outer, '{"s": "1234567890"}').s
        1234567890
    """

    def decode(decoder: Decoder) -> Any:
        return decoder.decode_str(_ParseVisitor(parser, expecting))

    return decode
