"""Lazy, single-pass cursors over sequence and map shapes.

A decoder opens an accessor when it meets an aggregate and hands it to the
visitor's ``visit_seq`` / ``visit_map``. The accessor yields one element or
entry per call and never materializes the aggregate.

Both base classes enforce the protocol state machine
``Start -> Reading* -> Exhausted``:

- a map value can only be fetched right after its key,
- a key cannot be fetched while the previous value is unread,
- an accessor is closed by its decoder when the visit call returns, and any
  later use raises :class:`~shapedecode.exceptions.AccessorStateError`.

Concrete formats implement ``_next_element_seed`` / ``_next_key_seed`` /
``_next_value_seed`` only.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterator

from ..exceptions import AccessorStateError, DecodeError
from .seed import TypeSeed

if TYPE_CHECKING:
    from .seed import DecodeSeed


class _End:
    """Marker returned by accessors once the aggregate is exhausted.

    ``None`` cannot play that role since a sequence may contain nulls.
    """

    _instance: _End | None = None

    def __new__(cls) -> _End:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "END"


END = _End()


class SeqAccess(ABC):
    """Cursor over the elements of a sequence."""

    def __init__(self) -> None:
        self._index = 0
        self._exhausted = False
        self._closed = False

    @abstractmethod
    def _next_element_seed(self, seed: DecodeSeed[Any]) -> Any:
        """Decode the next element with ``seed``, or return ``END``."""

    def size_hint(self) -> int | None:
        """Number of remaining elements, if the format knows it."""
        return None

    @property
    def consumed(self) -> int:
        """Number of elements fetched so far."""
        return self._index

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def next_element_seed(self, seed: DecodeSeed[Any]) -> Any:
        """Fetch the next element through ``seed``.

        Returns:
            The decoded element, or ``END`` when the sequence is exhausted

        Raises:
            AccessorStateError: If the accessor was already closed
            DecodeError: If the element cannot be decoded; its index is
                prepended to the error path
        """
        if self._closed:
            raise AccessorStateError("sequence accessor used after its visit call returned")
        if self._exhausted:
            return END

        try:
            value = self._next_element_seed(seed)
        except DecodeError as err:
            err.add_path(self._index)
            raise

        if value is END:
            self._exhausted = True
            return END
        self._index += 1
        return value

    def next_element(self, target: Any = Any) -> Any:
        """Fetch the next element as ``target``, or ``END``."""
        return self.next_element_seed(TypeSeed(target))

    def iter_elements(self, target: Any = Any) -> Iterator[Any]:
        """Yield the remaining elements as ``target`` until exhaustion."""
        while True:
            value = self.next_element(target)
            if value is END:
                return
            yield value

    def close(self) -> None:
        """Called by the owning decoder once the visit call returned."""
        self._closed = True


class MapAccess(ABC):
    """Cursor over the entries of a map.

    Subclasses set ``self._raw_key`` in ``_next_key_seed`` to the key as it
    appeared in the input, so value errors can report where they happened.
    """

    def __init__(self) -> None:
        self._count = 0
        self._pending = False
        self._exhausted = False
        self._closed = False
        self._raw_key: Any = None

    @abstractmethod
    def _next_key_seed(self, seed: DecodeSeed[Any]) -> Any:
        """Decode the next key with ``seed``, or return ``END``."""

    @abstractmethod
    def _next_value_seed(self, seed: DecodeSeed[Any]) -> Any:
        """Decode the value belonging to the last key with ``seed``."""

    def size_hint(self) -> int | None:
        """Number of remaining entries, if the format knows it."""
        return None

    @property
    def consumed(self) -> int:
        """Number of complete entries fetched so far."""
        return self._count

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def _check_open(self) -> None:
        if self._closed:
            raise AccessorStateError("map accessor used after its visit call returned")

    def next_key_seed(self, seed: DecodeSeed[Any]) -> Any:
        """Fetch the next key through ``seed``.

        Returns:
            The decoded key, or ``END`` when the map is exhausted

        Raises:
            AccessorStateError: If the value of the previous key is unread
        """
        self._check_open()
        if self._pending:
            raise AccessorStateError(
                f"value for key {self._raw_key!r} must be consumed before the next key"
            )
        if self._exhausted:
            return END

        key = self._next_key_seed(seed)
        if key is END:
            self._exhausted = True
            return END
        self._pending = True
        return key

    def next_value_seed(self, seed: DecodeSeed[Any]) -> Any:
        """Fetch the value for the key returned by the last ``next_key_seed``.

        Raises:
            AccessorStateError: If no key is pending
            DecodeError: If the value cannot be decoded; the key is prepended
                to the error path
        """
        self._check_open()
        if not self._pending:
            raise AccessorStateError("next_value called without a preceding next_key")
        self._pending = False

        try:
            value = self._next_value_seed(seed)
        except DecodeError as err:
            err.add_path(self._path_segment())
            raise

        self._count += 1
        return value

    def _path_segment(self) -> str | int:
        if isinstance(self._raw_key, (str, int)):
            return self._raw_key
        return str(self._raw_key)

    def next_key(self, target: Any = Any) -> Any:
        return self.next_key_seed(TypeSeed(target))

    def next_value(self, target: Any = Any) -> Any:
        return self.next_value_seed(TypeSeed(target))

    def next_entry_seed(self, key_seed: DecodeSeed[Any], value_seed: DecodeSeed[Any]) -> Any:
        """Fetch key and value as one paired operation.

        Returns:
            ``(key, value)`` tuple, or ``END`` when the map is exhausted
        """
        key = self.next_key_seed(key_seed)
        if key is END:
            return END
        return key, self.next_value_seed(value_seed)

    def next_entry(self, key_type: Any = Any, value_type: Any = Any) -> Any:
        return self.next_entry_seed(TypeSeed(key_type), TypeSeed(value_type))

    def iter_entries(self, key_type: Any = Any, value_type: Any = Any) -> Iterator[tuple[Any, Any]]:
        """Yield ``(key, value)`` pairs until exhaustion."""
        while True:
            entry = self.next_entry(key_type, value_type)
            if entry is END:
                return
            yield entry

    def close(self) -> None:
        """Called by the owning decoder once the visit call returned."""
        self._closed = True
