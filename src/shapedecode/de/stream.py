"""Decode strategies that look at a sequence without collecting it.

These work element by element through the accessor, so at most one element
is held at a time however long the input sequence is.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, TypeVar

from ..exceptions import CustomError, InvalidLength
from .access import END
from .ignore import IgnoredAny
from .seed import DecodeSeed
from .visitor import Visitor

if TYPE_CHECKING:
    from .access import SeqAccess
    from .decoder import Decoder

T = TypeVar("T")


class NthElement(Visitor[T], DecodeSeed[T]):
    """Seed that keeps element ``n`` of a sequence and discards the rest.

    Elements before and after ``n`` are decoded as ``IgnoredAny``, so the
    input is walked to its end but nothing else is built.

    Example:
        >>> from_json(NthElement(3, int), "[10, 20, 30, 40, 50]")
        40
    """

    def __init__(self, n: int, target: Any = Any) -> None:
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        self.n = n
        self.target = target

    def expecting(self) -> str:
        return f"a sequence in which we care about element {self.n}"

    def visit_seq(self, access: SeqAccess) -> T:
        for index in range(self.n):
            if access.next_element(IgnoredAny) is END:
                raise InvalidLength(index, self.expecting())

        nth = access.next_element(self.target)
        if nth is END:
            raise InvalidLength(self.n, self.expecting())

        for _ in access.iter_elements(IgnoredAny):
            pass
        return nth

    def consume(self, decoder: Decoder) -> T:
        return decoder.decode_sequence(self)


class _ReduceVisitor(Visitor[Any]):
    def __init__(self, target: Any, fn: Callable[[Any, Any], Any], description: str, empty: str) -> None:
        self.target = target
        self.fn = fn
        self.description = description
        self.empty = empty

    def expecting(self) -> str:
        return self.description

    def visit_seq(self, access: SeqAccess) -> Any:
        result = access.next_element(self.target)
        if result is END:
            raise CustomError(self.empty)
        for value in access.iter_elements(self.target):
            result = self.fn(result, value)
        return result


def reduce_sequence(
    target: Any,
    fn: Callable[[Any, Any], Any],
    expecting: str = "a nonempty sequence",
    empty_message: str = "no values in sequence",
) -> Callable[[Decoder], Any]:
    """Build a decode function folding a sequence of ``target`` with ``fn``.

    Raises (from the returned function):
        CustomError: If the sequence is empty
    """

    def decode(decoder: Decoder) -> Any:
        return decoder.decode_sequence(_ReduceVisitor(target, fn, expecting, empty_message))

    return decode


def max_of(target: Any = int) -> Callable[[Decoder], Any]:
    """Decode function returning the maximum of a sequence without storing it.

    Example:
        >>> class Outer(Record):
        ...     id: str
        ...     max_value: Annotated[int, DecodeWith(max_of(int)), Rename("values")]
    """
    return reduce_sequence(
        target,
        max,
        expecting="a nonempty sequence of numbers",
        empty_message="no values in sequence when looking for maximum",
    )
