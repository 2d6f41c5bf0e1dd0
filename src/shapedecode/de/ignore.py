"""Discard adapter: a universal visitor that accepts and drops any shape.

Used to skip fields and elements that are not of interest. Nested sequences
and maps are still walked to their end so the decoder's cursor stays
correctly positioned for whatever comes next at the same nesting level.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .visitor import Visitor

if TYPE_CHECKING:
    from .access import MapAccess, SeqAccess
    from .decoder import Decoder


class IgnoredAny:
    """Target type whose decode entry point discards the value.

    Example:
        >>> access.next_element(IgnoredAny)   # skip one element
        >>> access.next_value(IgnoredAny)     # skip the value of a map entry
    """

    __slots__ = ()

    @classmethod
    def __decode__(cls, decoder: Decoder) -> IgnoredAny:
        return decoder.decode_ignored_any(IgnoreVisitor())

    def __repr__(self) -> str:
        return "IgnoredAny"


IGNORED = IgnoredAny()


class IgnoreVisitor(Visitor[IgnoredAny]):
    """Accepts every shape and returns :data:`IGNORED`."""

    def expecting(self) -> str:
        return "anything at all"

    def visit_bool(self, value: bool) -> IgnoredAny:
        return IGNORED

    def visit_i64(self, value: int) -> IgnoredAny:
        return IGNORED

    def visit_u64(self, value: int) -> IgnoredAny:
        return IGNORED

    def visit_f64(self, value: float) -> IgnoredAny:
        return IGNORED

    def visit_str(self, value: str) -> IgnoredAny:
        return IGNORED

    def visit_bytes(self, value: bytes) -> IgnoredAny:
        return IGNORED

    def visit_none(self) -> IgnoredAny:
        return IGNORED

    def visit_some(self, decoder: Decoder) -> IgnoredAny:
        return IgnoredAny.__decode__(decoder)

    def visit_unit(self) -> IgnoredAny:
        return IGNORED

    def visit_seq(self, access: SeqAccess) -> IgnoredAny:
        for _ in access.iter_elements(IgnoredAny):
            pass
        return IGNORED

    def visit_map(self, access: MapAccess) -> IgnoredAny:
        for _ in access.iter_entries(IgnoredAny, IgnoredAny):
            pass
        return IGNORED
