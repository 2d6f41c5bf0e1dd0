"""Property-based tests using hypothesis."""

from __future__ import annotations

from typing import Annotated, Optional, Union

from hypothesis import given
from hypothesis import strategies as st
from pydantic import Field

from shapedecode import (
    I16,
    U8,
    Adjacent,
    External,
    Internal,
    NthElement,
    Record,
    Untagged,
    from_json,
    from_value,
    max_of,
    to_json,
    to_value,
)
from shapedecode.formats import JsonDecoder

text = st.text(max_size=20)


class BoundedMessage(Record):
    """Message for property testing."""

    value: int = Field(ge=0, le=255)
    flag: bool


class Profile(Record):
    rename_all = "camelCase"

    user_name: str
    age: U8
    offset: I16
    scores: list[int]
    nickname: Optional[str] = None
    labels: dict[str, bool] = {}


class Circle(Record):
    radius: int


class Square(Record):
    side: int
    label: str


class Empty(Record):
    pass


Shape = Union[Circle, Square]

profiles = st.builds(
    Profile,
    user_name=text,
    age=st.integers(min_value=0, max_value=255),
    offset=st.integers(min_value=-(2**15), max_value=2**15 - 1),
    scores=st.lists(st.integers(min_value=-(2**63), max_value=2**64 - 1), max_size=5),
    nickname=st.none() | text,
    labels=st.dictionaries(text, st.booleans(), max_size=3),
)

shapes = st.one_of(
    st.builds(Circle, radius=st.integers(min_value=0, max_value=1000)),
    st.builds(Square, side=st.integers(min_value=0, max_value=1000), label=text),
)


class TestRecordProperties:
    """Round trips through plain data and JSON."""

    @given(value=st.integers(min_value=0, max_value=255), flag=st.booleans())
    def test_bounded_roundtrip(self, value: int, flag: bool) -> None:
        msg = BoundedMessage(value=value, flag=flag)
        assert from_json(BoundedMessage, to_json(msg)) == msg

    @given(profile=profiles)
    def test_json_roundtrip(self, profile: Profile) -> None:
        assert from_json(Profile, to_json(profile)) == profile

    @given(profile=profiles)
    def test_value_roundtrip(self, profile: Profile) -> None:
        assert from_value(Profile, to_value(profile)) == profile

    @given(profile=profiles)
    def test_positional_form_matches_map_form(self, profile: Profile) -> None:
        data = to_value(profile)
        assert from_value(Profile, list(data.values())) == profile


class TestEnumProperties:
    """Every layout decodes what it encodes."""

    @given(shape=shapes)
    def test_layouts_roundtrip(self, shape: Union[Circle, Square]) -> None:
        for layout in (External(), Internal("type"), Adjacent("t", "c"), Untagged()):
            target = Annotated[Shape, layout]
            assert from_json(target, to_json(shape, target)) == shape

    @given(shape=shapes)
    def test_internal_tag_position_irrelevant(self, shape: Union[Circle, Square]) -> None:
        target = Annotated[Shape, Internal("type")]
        data = to_value(shape, target)
        tag_last = {k: v for k, v in data.items() if k != "type"}
        tag_last["type"] = data["type"]
        assert from_value(target, tag_last) == from_value(target, data)

    def test_unit_variant_external(self) -> None:
        target = Annotated[Union[Empty, Circle], External()]
        assert from_json(target, to_json(Empty(), target)) == Empty()


class TestStreamingProperties:
    """Streaming seeds agree with their collecting counterparts."""

    @given(values=st.lists(st.integers(min_value=-1000, max_value=1000), min_size=1, max_size=30), data=st.data())
    def test_nth_element(self, values: list[int], data: st.DataObject) -> None:
        n = data.draw(st.integers(min_value=0, max_value=len(values) - 1))
        assert from_json(NthElement(n, int), to_json(values)) == values[n]

    @given(values=st.lists(st.integers(min_value=-1000, max_value=1000), min_size=1, max_size=30))
    def test_max_of(self, values: list[int]) -> None:
        decoder = JsonDecoder(to_json(values))
        assert max_of(int)(decoder) == max(values)
