"""Seeded decode: decode entry points that carry caller-supplied state.

A plain decode entry point is fully determined by the target type. A seed
also carries context the type cannot express ("only element 3 matters",
"the variant tag was already read and names ``Request``"). The state is
consumed exactly once by :meth:`DecodeSeed.consume`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from .decoder import Decoder

T = TypeVar("T")


class DecodeSeed(ABC, Generic[T]):
    """Stateful form of a decode entry point."""

    @abstractmethod
    def consume(self, decoder: Decoder) -> T:
        """Decode one value from ``decoder`` using the carried state."""


class TypeSeed(DecodeSeed[Any]):
    """The stateless seed: it only carries which type to produce.

    Accessors use it to turn ``next_element(int)`` into
    ``next_element_seed(TypeSeed(int))``.
    """

    __slots__ = ("target",)

    def __init__(self, target: Any) -> None:
        self.target = target

    def consume(self, decoder: Decoder) -> Any:
        # Import here to avoid circular dependency
        from .types import decode_type

        return decode_type(self.target, decoder)

    def __repr__(self) -> str:
        return f"TypeSeed({self.target!r})"
