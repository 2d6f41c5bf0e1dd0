"""Decoder over plain in-memory Python data.

``ValueDecoder`` reads ``dict``, ``list``/``tuple``, ``str``, ``int``,
``float``, ``bool``, ``bytes`` and ``None``. Besides decoding data that was
already parsed by something else, it is the replay source for content the
protocol has to buffer (flattened fields, internally tagged and untagged
enums).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator

from ..de.access import END, MapAccess, SeqAccess
from ..de.decoder import Decoder
from ..de.primitives import I64_MIN, U64_MAX
from ..exceptions import CustomError, InvalidLength, RangeError

if TYPE_CHECKING:
    from ..de.seed import DecodeSeed
    from ..de.visitor import Visitor


class ValueDecoder(Decoder):
    """Decoder for one in-memory value.

    Example:
        >>> from shapedecode.de.types import decode_type
        >>> decode_type(list[int], ValueDecoder([1, 2, 3]))
        [1, 2, 3]
    """

    def __init__(self, value: Any) -> None:
        self.value = value

    def decode_any(self, visitor: Visitor[Any]) -> Any:
        value = self.value

        # bool before int: bool is an int subclass
        if value is None:
            return visitor.visit_unit()
        if isinstance(value, bool):
            return visitor.visit_bool(value)
        if isinstance(value, int):
            if value < I64_MIN or value > U64_MAX:
                raise RangeError(value, "a 64-bit integer")
            if value < 0:
                return visitor.visit_i64(value)
            return visitor.visit_u64(value)
        if isinstance(value, float):
            return visitor.visit_f64(value)
        if isinstance(value, str):
            return visitor.visit_str(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return visitor.visit_bytes(bytes(value))
        if isinstance(value, (list, tuple)):
            return self._visit_seq(value, visitor)
        if isinstance(value, dict):
            return self._visit_map(value, visitor)

        raise CustomError(f"unsupported in-memory value of type {type(value).__name__}")

    def decode_option(self, visitor: Visitor[Any]) -> Any:
        if self.value is None:
            return visitor.visit_none()
        return visitor.visit_some(self)

    def decode_ignored_any(self, visitor: Visitor[Any]) -> Any:
        # Nothing to advance past in memory
        return visitor.visit_unit()

    def _visit_seq(self, items: list[Any] | tuple[Any, ...], visitor: Visitor[Any]) -> Any:
        access = ValueSeqAccess(items)
        try:
            result = visitor.visit_seq(access)
        finally:
            access.close()
        access.end()
        return result

    def _visit_map(self, entries: dict[Any, Any], visitor: Visitor[Any]) -> Any:
        access = ValueMapAccess(entries)
        try:
            result = visitor.visit_map(access)
        finally:
            access.close()
        access.end()
        return result

    def __repr__(self) -> str:
        return f"ValueDecoder({self.value!r})"


class ValueSeqAccess(SeqAccess):
    def __init__(self, items: list[Any] | tuple[Any, ...]) -> None:
        super().__init__()
        self._items = items
        self._iter: Iterator[Any] = iter(items)

    def _next_element_seed(self, seed: DecodeSeed[Any]) -> Any:
        try:
            item = next(self._iter)
        except StopIteration:
            return END
        return seed.consume(ValueDecoder(item))

    def size_hint(self) -> int | None:
        return len(self._items) - self.consumed

    def end(self) -> None:
        """Fail if the visitor returned before reading every element."""
        if self.consumed < len(self._items):
            raise InvalidLength(len(self._items), f"{self.consumed} elements in sequence")


class ValueMapAccess(MapAccess):
    def __init__(self, entries: dict[Any, Any]) -> None:
        super().__init__()
        self._entries = entries
        self._iter: Iterator[tuple[Any, Any]] = iter(entries.items())
        self._value: Any = None

    def _next_key_seed(self, seed: DecodeSeed[Any]) -> Any:
        try:
            key, self._value = next(self._iter)
        except StopIteration:
            return END
        self._raw_key = key
        return seed.consume(ValueDecoder(key))

    def _next_value_seed(self, seed: DecodeSeed[Any]) -> Any:
        return seed.consume(ValueDecoder(self._value))

    def size_hint(self) -> int | None:
        return len(self._entries) - self.consumed

    def end(self) -> None:
        """Fail if the visitor returned before reading every entry."""
        if self.consumed < len(self._entries):
            raise InvalidLength(len(self._entries), f"{self.consumed} elements in map")
