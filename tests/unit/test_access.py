"""Tests for the sequence/map accessor protocol."""

from __future__ import annotations

from typing import Any

import pytest

from shapedecode import AccessorStateError, CustomError, DecodeError, InvalidLength, Visitor, from_json, from_value
from shapedecode.de.access import END, MapAccess, SeqAccess
from shapedecode.formats.value import ValueMapAccess, ValueSeqAccess


class FirstOnly(Visitor[Any]):
    """Reads the first element and returns without draining."""

    def expecting(self) -> str:
        return "a sequence"

    def visit_seq(self, access: SeqAccess) -> Any:
        return access.next_element(int)


class Stash(Visitor[Any]):
    """Keeps a reference to the accessor it was given."""

    def __init__(self) -> None:
        self.access: Any = None

    def expecting(self) -> str:
        return "a sequence or map"

    def visit_seq(self, access: SeqAccess) -> Any:
        self.access = access
        return list(access.iter_elements(Any))

    def visit_map(self, access: MapAccess) -> Any:
        self.access = access
        return dict(access.iter_entries(Any, Any))


class TestSeqAccess:
    """Tests for SeqAccess."""

    def test_end_sentinel_distinct_from_none(self) -> None:
        """A null element is returned as None; exhaustion as END."""
        access = ValueSeqAccess([None])
        assert access.next_element(Any) is None
        assert access.next_element(Any) is END
        assert access.exhausted

    def test_end_is_falsy_and_repeats(self) -> None:
        access = ValueSeqAccess([])
        assert not access.next_element(int)
        assert access.next_element(int) is END

    def test_size_hint(self) -> None:
        access = ValueSeqAccess([1, 2, 3])
        assert access.size_hint() == 3
        access.next_element(int)
        assert access.size_hint() == 2
        assert access.consumed == 1

    def test_use_after_close(self) -> None:
        """An accessor cannot outlive the visit call that received it."""
        stash = Stash()
        from_value(stash_target(stash), [1, 2])

        with pytest.raises(AccessorStateError):
            stash.access.next_element(int)

    def test_undrained_sequence_rejected(self) -> None:
        """Leftover elements are reported by the in-memory reader."""
        with pytest.raises(InvalidLength) as exc_info:
            from_value(first_only_target(), [1, 2, 3])

        assert exc_info.value.length == 3
        assert "1 elements in sequence" in str(exc_info.value)

    def test_undrained_sequence_rejected_json(self) -> None:
        """Leftover elements are a syntax error for the JSON reader."""
        with pytest.raises(CustomError, match="trailing elements"):
            from_json(first_only_target(), "[1, 2, 3]")

    def test_element_error_carries_index(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            from_value(list[int], [1, 2, "three"])

        assert exc_info.value.path == [2]


class TestMapAccess:
    """Tests for the MapAccess state machine."""

    def test_value_without_key(self) -> None:
        access = ValueMapAccess({"a": 1})
        with pytest.raises(AccessorStateError, match="without a preceding next_key"):
            access.next_value(int)

    def test_key_while_value_pending(self) -> None:
        access = ValueMapAccess({"a": 1, "b": 2})
        assert access.next_key(str) == "a"
        with pytest.raises(AccessorStateError, match="must be consumed"):
            access.next_key(str)

    def test_key_then_value(self) -> None:
        access = ValueMapAccess({"a": 1, "b": 2})
        assert access.next_key(str) == "a"
        assert access.next_value(int) == 1
        assert access.next_entry(str, int) == ("b", 2)
        assert access.next_entry(str, int) is END
        assert access.consumed == 2

    def test_use_after_close(self) -> None:
        stash = Stash()
        from_value(stash_target(stash), {"a": 1})

        with pytest.raises(AccessorStateError):
            stash.access.next_key(str)

    def test_value_error_carries_key(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            from_value(dict[str, int], {"a": 1, "b": "x"})

        assert exc_info.value.path == ["b"]


def stash_target(stash: Stash) -> type:
    class Target:
        @classmethod
        def __decode__(cls, decoder: Any) -> Any:
            return decoder.decode_any(stash)

    return Target


def first_only_target() -> type:
    class Target:
        @classmethod
        def __decode__(cls, decoder: Any) -> Any:
            return decoder.decode_sequence(FirstOnly())

    return Target
