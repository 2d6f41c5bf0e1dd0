"""Tests for remote (shadow) records and custom decode functions."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, ClassVar

import pytest

from shapedecode import (
    CustomError,
    DecodeWith,
    Getter,
    MissingField,
    Record,
    RemoteRecord,
    SchemaError,
    from_json,
    parse_str,
    to_value,
)
from shapedecode.de.ignore import IGNORED


class Duration:
    """A type from some other library that cannot be made a Record."""

    def __init__(self, secs: int, nanos: int) -> None:
        self._secs = secs
        self._nanos = nanos

    def seconds(self) -> int:
        return self._secs

    def subsec_nanos(self) -> int:
        return self._nanos

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Duration) and (self._secs, self._nanos) == (other._secs, other._nanos)


class DurationDef(RemoteRecord):
    """Shadow of Duration."""

    remote: ClassVar[Any] = Duration

    secs: Annotated[int, Getter(Duration.seconds)]
    nanos: Annotated[int, Getter(Duration.subsec_nanos)]


class Process(Record):
    command_line: str
    wall_time: Annotated[Duration, DecodeWith(DurationDef)]


class TestRemote:
    """Tests for RemoteRecord shadows."""

    def test_decode_produces_foreign_value(self) -> None:
        process = from_json(Process, '{"command_line": "ls", "wall_time": {"secs": 2, "nanos": 500}}')
        assert isinstance(process.wall_time, Duration)
        assert process.wall_time == Duration(2, 500)

    def test_direct_decode(self) -> None:
        assert from_json(DurationDef, '{"secs": 1, "nanos": 0}') == Duration(1, 0)

    def test_encode_uses_getters(self) -> None:
        process = Process(command_line="ls", wall_time=Duration(2, 500))
        assert to_value(process) == {"command_line": "ls", "wall_time": {"secs": 2, "nanos": 500}}

    def test_shadow_errors_have_path(self) -> None:
        with pytest.raises(MissingField) as exc_info:
            from_json(Process, '{"command_line": "ls", "wall_time": {"secs": 2}}')

        assert exc_info.value.path == ["wall_time"]

    def test_custom_conversion(self) -> None:
        class Point:
            def __init__(self, xy: tuple[int, int]) -> None:
                self.xy = xy

        class PointDef(RemoteRecord):
            x: int
            y: int

            def into_remote(self) -> Point:
                return Point((self.x, self.y))

        assert from_json(PointDef, '{"x": 1, "y": 2}').xy == (1, 2)

    def test_missing_remote(self) -> None:
        class Orphan(RemoteRecord):
            a: int

        with pytest.raises(SchemaError, match="remote"):
            from_json(Orphan, '{"a": 1}')


class TestDecodeWith:
    """Tests for handwritten decode functions on fields."""

    def test_parse_str(self) -> None:
        class Outer(Record):
            s: Annotated[int, DecodeWith(parse_str(int), encode_with=str)]

        outer = from_json(Outer, '{"s": "1234567890"}')
        assert outer.s == 1234567890
        assert to_value(outer) == {"s": "1234567890"}

    def test_parse_str_failure(self) -> None:
        class Outer(Record):
            s: Annotated[int, DecodeWith(parse_str(int))]

        with pytest.raises(CustomError) as exc_info:
            from_json(Outer, '{"s": "twelve"}')

        assert exc_info.value.path == ["s"]

    def test_decimal(self) -> None:
        class Price(Record):
            amount: Annotated[Decimal, DecodeWith(parse_str(Decimal, "a decimal string"))]

        assert from_json(Price, '{"amount": "1.10"}').amount == Decimal("1.10")

    def test_dotted_name(self) -> None:
        class Envelope(Record):
            id: int
            body: Annotated[Any, DecodeWith("shapedecode.de.ignore:IgnoredAny")] = None
            trailer: Annotated[Any, DecodeWith("shapedecode.de.ignore.IgnoredAny")] = None

        envelope = from_json(Envelope, '{"id": 1, "body": {"big": [1, 2, 3]}, "trailer": "t"}')
        assert envelope.body is IGNORED
        assert envelope.trailer is IGNORED

    def test_unresolvable_name(self) -> None:
        class Broken(Record):
            amount: Annotated[Decimal, DecodeWith("no.such.module:fn")]

        with pytest.raises(SchemaError, match="Cannot resolve"):
            from_json(Broken, '{"amount": "1"}')

