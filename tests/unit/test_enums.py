"""Tests for enum tag layouts."""

from __future__ import annotations

import logging
from typing import Annotated, Any, ClassVar, Optional, Union, get_args

import pytest

from shapedecode import (
    Adjacent,
    CustomError,
    DuplicateField,
    External,
    Internal,
    InvalidLength,
    MissingField,
    Record,
    SchemaError,
    UnknownField,
    UnknownVariant,
    Untagged,
    from_json,
    from_value,
    to_value,
)


class Request(Record):
    id: str
    method: str


class Response(Record):
    id: str
    result: int


class Ping(Record):
    """Unit variant."""


class Renamed(Record):
    value: int

    decode_name: ClassVar[Optional[str]] = "renamed"


ExternalMsg = Annotated[Union[Request, Response, Ping], External()]
InternalMsg = Annotated[Union[Request, Response, Ping], Internal("type")]
AdjacentMsg = Annotated[Union[Request, Response, Ping], Adjacent("t", "c")]
UntaggedMsg = Annotated[Union[Request, Response], Untagged()]


class Loose(Record):
    id: str


class Full(Record):
    id: str
    extra: int


# Same members in both orders, built in the same module
LooseFirst = Annotated[Union[Loose, Full], Untagged()]
FullFirst = Annotated[Union[Full, Loose], Untagged()]


class Holder(Record):
    msg: Optional[InternalMsg] = None

REQUEST = Request(id="1", method="get")


class TestAllLayouts:
    """The same variant decodes identically from each layout's wire shape."""

    @pytest.mark.parametrize(
        ("target", "text"),
        [
            (ExternalMsg, '{"Request": {"id": "1", "method": "get"}}'),
            (InternalMsg, '{"type": "Request", "id": "1", "method": "get"}'),
            (AdjacentMsg, '{"t": "Request", "c": {"id": "1", "method": "get"}}'),
            (UntaggedMsg, '{"id": "1", "method": "get"}'),
        ],
    )
    def test_same_value(self, target: Any, text: str) -> None:
        assert from_json(target, text) == REQUEST

    @pytest.mark.parametrize("target", [ExternalMsg, InternalMsg, AdjacentMsg, UntaggedMsg])
    def test_encode_then_decode(self, target: Any) -> None:
        response = Response(id="2", result=5)
        assert from_value(target, to_value(response, target)) == response

    def test_optional_tagged_field_keeps_tag(self) -> None:
        holder = Holder(msg=REQUEST)
        data = to_value(holder)

        assert data == {"msg": {"type": "Request", "id": "1", "method": "get"}}
        assert from_value(Holder, data) == holder

    def test_optional_tagged_field_absent(self) -> None:
        assert to_value(Holder()) == {"msg": None}
        assert from_value(Holder, {"msg": None}) == Holder()


class TestExternal:
    """Tests for externally tagged enums."""

    def test_unit_variant_as_string(self) -> None:
        assert from_json(ExternalMsg, '"Ping"') == Ping()
        assert to_value(Ping(), ExternalMsg) == "Ping"

    def test_unknown_variant(self) -> None:
        with pytest.raises(UnknownVariant) as exc_info:
            from_json(ExternalMsg, '{"Query": {}}')

        assert exc_info.value.expected == ("Request", "Response", "Ping")

    def test_more_than_one_key(self) -> None:
        with pytest.raises(InvalidLength):
            from_value(ExternalMsg, {"Ping": None, "Request": {"id": "1", "method": "m"}})

    def test_decode_name(self) -> None:
        target = Annotated[Union[Renamed, Ping], External()]
        assert from_value(target, {"renamed": {"value": 3}}) == Renamed(value=3)

    def test_payload_error_path(self) -> None:
        with pytest.raises(MissingField) as exc_info:
            from_json(ExternalMsg, '{"Request": {"id": "1"}}')

        assert exc_info.value.path == ["Request"]


class TestInternal:
    """Tests for internally tagged enums."""

    def test_tag_not_first(self) -> None:
        text = '{"id": "1", "method": "get", "type": "Request"}'
        assert from_json(InternalMsg, text) == REQUEST

    def test_tag_in_the_middle(self) -> None:
        assert from_json(InternalMsg, '{"id": "1", "type": "Request", "method": "get"}') == REQUEST

    @pytest.mark.parametrize(
        "text",
        [
            '{"type": "Request", "id": "1", "id": "2", "method": "get"}',
            '{"id": "1", "id": "2", "method": "get", "type": "Request"}',
            '{"id": "1", "type": "Request", "id": "2", "method": "get"}',
        ],
    )
    def test_repeated_field_rejected_wherever_the_tag_is(self, text: str) -> None:
        with pytest.raises(DuplicateField, match="duplicate field `id`"):
            from_json(InternalMsg, text)

    def test_repeated_unknown_key_before_tag(self) -> None:
        text = '{"x": 1, "x": 2, "type": "Request", "id": "1", "method": "get"}'
        assert from_json(InternalMsg, text) == REQUEST

    def test_unit_variant(self) -> None:
        assert from_json(InternalMsg, '{"type": "Ping"}') == Ping()
        assert to_value(Ping(), InternalMsg) == {"type": "Ping"}

    def test_missing_tag(self) -> None:
        with pytest.raises(MissingField, match="`type`"):
            from_json(InternalMsg, '{"id": "1", "method": "get"}')

    def test_non_record_variant(self) -> None:
        with pytest.raises(SchemaError, match="must be a record"):
            from_value(Annotated[Union[Request, int], Internal("type")], {"type": "int"})

    def test_streams_when_tag_first(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="shapedecode.de.enums"):
            from_json(InternalMsg, '{"type": "Request", "id": "1", "method": "get"}')

        assert "streaming Request" in caplog.text


class TestAdjacent:
    """Tests for adjacently tagged enums."""

    def test_content_before_tag(self) -> None:
        assert from_json(AdjacentMsg, '{"c": {"id": "1", "method": "get"}, "t": "Request"}') == REQUEST

    def test_sequence_form(self) -> None:
        assert from_json(AdjacentMsg, '["Request", {"id": "1", "method": "get"}]') == REQUEST

    def test_unit_variant_without_content(self) -> None:
        assert from_json(AdjacentMsg, '{"t": "Ping"}') == Ping()

    def test_missing_content(self) -> None:
        with pytest.raises(MissingField, match="`c`"):
            from_json(AdjacentMsg, '{"t": "Request"}')

    def test_missing_tag(self) -> None:
        with pytest.raises(MissingField, match="`t`"):
            from_json(AdjacentMsg, '{"c": {}}')

    def test_unknown_keys(self) -> None:
        text = '{"t": "Ping", "x": 1}'
        assert from_json(AdjacentMsg, text) == Ping()

        strict = Annotated[Union[Request, Ping], Adjacent("t", "c", deny_unknown_fields=True)]
        with pytest.raises(UnknownField):
            from_json(strict, text)

    def test_buffered_content_error_path(self) -> None:
        with pytest.raises(MissingField) as exc_info:
            from_json(AdjacentMsg, '{"c": {"id": "1"}, "t": "Request"}')

        assert exc_info.value.path == ["c"]


class TestUntagged:
    """Tests for untagged enums and plain unions."""

    def test_second_variant(self) -> None:
        assert from_json(UntaggedMsg, '{"id": "2", "result": 5}') == Response(id="2", result=5)

    def test_no_variant_matches(self) -> None:
        with pytest.raises(CustomError, match="did not match any variant of untagged enum"):
            from_json(UntaggedMsg, '{"id": "3"}')

    def test_declaration_order_wins(self) -> None:
        """The first accepting variant wins even if a later one fits better."""

        class Loose(Record):
            id: str

        class Full(Record):
            id: str
            extra: int

        data = {"id": "1", "extra": 2}
        assert type(from_value(Annotated[Union[Loose, Full], Untagged()], data)) is Loose
        assert type(from_value(Annotated[Union[Full, Loose], Untagged()], data)) is Full

    def test_reordered_hints_keep_their_own_order(self) -> None:
        data = {"id": "1", "extra": 2}

        assert get_args(get_args(FullFirst)[0]) == (Full, Loose)
        assert type(from_value(LooseFirst, data)) is Loose
        assert type(from_value(FullFirst, data)) is Full

    def test_repeated_field_matches_no_variant(self) -> None:
        with pytest.raises(CustomError, match="did not match any variant"):
            from_json(UntaggedMsg, '{"id": "1", "id": "2", "method": "get"}')

    def test_plain_union_is_untagged(self) -> None:
        assert from_json(Union[int, str], '"5"') == "5"
        assert from_json(Union[int, str], "5") == 5

    def test_repeated_names_allowed(self) -> None:
        assert from_json(Union[list[int], list[str]], '["a"]') == ["a"]

    def test_optional_union(self) -> None:
        assert from_json(Optional[Union[int, str]], "null") is None

    def test_attempts_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="shapedecode.de.enums"):
            from_json(UntaggedMsg, '{"id": "2", "result": 5}')

        assert "variant Request rejected" in caplog.text
