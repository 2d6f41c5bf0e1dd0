"""Tests for seeded decode, the discard adapter and streaming reductions."""

from __future__ import annotations

from typing import Annotated

import pytest

from shapedecode import (
    CustomError,
    DecodeError,
    DecodeSeed,
    DecodeWith,
    IgnoredAny,
    InvalidLength,
    NthElement,
    Record,
    Rename,
    decode_seed,
    from_json,
    from_value,
    max_of,
    reduce_sequence,
)
from shapedecode.de.decoder import Decoder
from shapedecode.de.ignore import IGNORED
from shapedecode.formats import JsonDecoder, ValueDecoder
from shapedecode.formats.value import ValueSeqAccess


class TestNthElement:
    """Tests for the NthElement seed."""

    def test_third_element(self, numbers_json: str) -> None:
        assert from_json(NthElement(3, int), numbers_json) == 40

    def test_leaves_cursor_exhausted(self) -> None:
        access = ValueSeqAccess([10, 20, 30, 40, 50])
        assert NthElement(3, int).visit_seq(access) == 40
        assert access.exhausted
        assert access.consumed == 5

    def test_json_reader_consumed_whole_array(self, numbers_json: str) -> None:
        decoder = JsonDecoder(numbers_json + "  ")
        assert decode_seed(NthElement(3, int), decoder) == 40
        decoder.end()
        assert decoder.pos == len(numbers_json) + 2

    def test_past_the_end(self, numbers_json: str) -> None:
        with pytest.raises(InvalidLength) as exc_info:
            from_json(NthElement(5, int), numbers_json)

        assert exc_info.value.length == 5
        assert "element 5" in str(exc_info.value)

    def test_short_sequence_reports_first_missing_index(self) -> None:
        with pytest.raises(InvalidLength) as exc_info:
            from_value(NthElement(4), [1, 2])

        assert exc_info.value.length == 2

    def test_skipped_elements_need_not_match(self) -> None:
        """Discarded elements are never decoded as the target type."""
        assert from_json(NthElement(1, str), '[{"a": [1, 2]}, "kept", null, [[]]]') == "kept"

    def test_as_record_field(self) -> None:
        class Outer(Record):
            second: Annotated[int, DecodeWith(NthElement(1, int).consume)]

        assert from_json(Outer, '{"second": [5, 6, 7]}').second == 6

    def test_negative_index(self) -> None:
        with pytest.raises(ValueError):
            NthElement(-1)


class TestSeeds:
    """Tests for user-defined seeds."""

    def test_seed_carries_state(self) -> None:
        class Scaled(DecodeSeed[int]):
            def __init__(self, factor: int) -> None:
                self.factor = factor

            def consume(self, decoder: Decoder) -> int:
                from shapedecode.de.types import decode_type

                return decode_type(int, decoder) * self.factor

        assert decode_seed(Scaled(3), ValueDecoder(7)) == 21
        assert from_json(Scaled(2), "4") == 8


class TestIgnoredAny:
    """Tests for the discard adapter."""

    def test_accepts_every_shape(self) -> None:
        for value in (None, True, -1, 1, 1.5, "s", b"b", [1, [2]], {"a": {"b": []}}):
            assert from_value(IgnoredAny, value) is IGNORED

    def test_json_skips_nested_value(self) -> None:
        assert from_json(list[IgnoredAny], '[{"a": [1, {"b": null}]}, "x"]') == [IGNORED, IGNORED]

    def test_json_skip_still_checks_syntax(self) -> None:
        with pytest.raises(CustomError):
            from_json(IgnoredAny, '{"a": [1, }')


class TestReductions:
    """Tests for streaming reductions over sequences."""

    def test_max_of_field(self) -> None:
        class Outer(Record):
            id: str
            max_value: Annotated[int, DecodeWith(max_of(int)), Rename("values")]

        outer = from_json(Outer, '{"id": "demo", "values": [256, 100, 384, 314, 271]}')
        assert outer.max_value == 384

    def test_max_of_empty(self) -> None:
        with pytest.raises(CustomError, match="looking for maximum"):
            max_of(int)(JsonDecoder("[]"))

    def test_reduce_sequence(self) -> None:
        total = reduce_sequence(int, lambda a, b: a + b)
        assert total(ValueDecoder([1, 2, 3, 4])) == 10

    def test_reduce_element_error_has_index(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            max_of(int)(ValueDecoder([1, "x"]))

        assert exc_info.value.path == [1]
