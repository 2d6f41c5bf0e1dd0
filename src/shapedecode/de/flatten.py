"""Replay of buffered map entries into flattened fields.

A record with flattened fields cannot tell which of the keys it does not
recognize belong to which flattened field, so it buffers them as plain data.
Each flattened field is then decoded from a :class:`FlatMapDecoder` over that
buffer: struct targets claim only the keys they declare, map targets claim
everything that is left.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from ..formats.value import ValueDecoder
from .access import END, MapAccess
from .decoder import Decoder

if TYPE_CHECKING:
    from .seed import DecodeSeed
    from .visitor import Visitor


class FlatEntries:
    """Buffered ``(key, value)`` entries, each claimable once."""

    def __init__(self, pairs: Iterable[tuple[Any, Any]]) -> None:
        self._entries = [[key, value, False] for key, value in pairs]

    def __len__(self) -> int:
        return len(self._entries)

    def claim_next(self, start: int, keys: set[Any] | None) -> tuple[int, Any, Any] | None:
        """Claim the first unclaimed entry at or after ``start`` whose key is in ``keys``."""
        for index in range(start, len(self._entries)):
            entry = self._entries[index]
            if entry[2] or (keys is not None and entry[0] not in keys):
                continue
            entry[2] = True
            return index, entry[0], entry[1]
        return None

    def unclaimed(self) -> list[Any]:
        return [key for key, _, taken in self._entries if not taken]


class FlatMapDecoder(Decoder):
    """Presents buffered entries to a flattened field as a map."""

    def __init__(self, entries: FlatEntries) -> None:
        self.entries = entries

    def decode_any(self, visitor: Visitor[Any]) -> Any:
        return self._visit(visitor, None)

    def decode_option(self, visitor: Visitor[Any]) -> Any:
        return visitor.visit_some(self)

    def decode_unit(self, visitor: Visitor[Any]) -> Any:
        return visitor.visit_unit()

    def decode_struct(self, name: str, fields: Iterable[str], visitor: Visitor[Any]) -> Any:
        return self._visit(visitor, set(fields))

    def _visit(self, visitor: Visitor[Any], keys: set[Any] | None) -> Any:
        access = FlatMapAccess(self.entries, keys)
        try:
            return visitor.visit_map(access)
        finally:
            access.close()


class FlatMapAccess(MapAccess):
    def __init__(self, entries: FlatEntries, keys: set[Any] | None) -> None:
        super().__init__()
        self.entries = entries
        self.keys = keys
        self._cursor = 0
        self._value: Any = None

    def _next_key_seed(self, seed: DecodeSeed[Any]) -> Any:
        claimed = self.entries.claim_next(self._cursor, self.keys)
        if claimed is None:
            return END
        index, key, self._value = claimed
        self._cursor = index + 1
        self._raw_key = key
        return seed.consume(ValueDecoder(key))

    def _next_value_seed(self, seed: DecodeSeed[Any]) -> Any:
        return seed.consume(ValueDecoder(self._value))


class ReplayDecoder(FlatMapDecoder):
    """Presents buffered entries as the complete map they were read from.

    Every entry is offered whatever the target declares, so repeated and
    unknown keys reach the target as they appeared in the input.
    """

    def decode_struct(self, name: str, fields: Iterable[str], visitor: Visitor[Any]) -> Any:
        return self._visit(visitor, None)

    def decode_unit(self, visitor: Visitor[Any]) -> Any:
        return self._visit(visitor, None)
