"""Enum tag layouts for ``Union`` fields.

A union of records is a tagged enum: each member is a variant, named by its
``decode_name`` (or class name). The layout says how the tag appears in the
input, and is attached as metadata:

    >>> Message = Annotated[Union[Request, Response], Internal("type")]

Given ``Request(id="...", method="...")`` the four layouts read:

==========  ================================================================
External    ``{"Request": {"id": "...", "method": "..."}}``
Internal    ``{"type": "Request", "id": "...", "method": "..."}``
Adjacent    ``{"t": "Request", "c": {"id": "...", "method": "..."}}``
Untagged    ``{"id": "...", "method": "..."}``
==========  ================================================================

A record without fields is a unit variant; externally tagged it is written
as the bare variant name.

Internal and untagged layouts buffer content they cannot attribute to a
variant yet. Buffered map entries keep their order and repetitions and are
replayed through :class:`~shapedecode.de.flatten.ReplayDecoder`; other
content through :class:`~shapedecode.formats.value.ValueDecoder`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

from pydantic import BaseModel

from ..exceptions import (
    CustomError,
    DecodeError,
    DuplicateField,
    EncodeError,
    InvalidLength,
    MissingField,
    SchemaError,
    ShapeMismatch,
    UnknownField,
    UnknownVariant,
)
from ..formats.value import ValueDecoder
from .access import END
from .decoder import MapAccessDecoder
from .flatten import FlatEntries, ReplayDecoder
from .ignore import IgnoredAny
from .primitives import UnitVisitor, ValueVisitor
from .seed import DecodeSeed
from .shape import Shape, Unexpected
from .types import decode_type
from .visitor import Visitor

if TYPE_CHECKING:
    from .access import MapAccess, SeqAccess
    from .decoder import Decoder

logger = logging.getLogger("shapedecode.de.enums")

_MISSING = object()


def variant_name(variant: Any) -> str:
    """Name under which ``variant`` appears as a tag."""
    return getattr(variant, "decode_name", None) or getattr(variant, "__name__", None) or repr(variant)


def is_record(variant: Any) -> bool:
    return isinstance(variant, type) and issubclass(variant, BaseModel)


def is_unit_variant(variant: Any) -> bool:
    """A record without fields carries no payload."""
    return is_record(variant) and not variant.model_fields


class VariantTable:
    """Name lookup over the members of a union."""

    def __init__(self, variants: Sequence[Any]) -> None:
        self.variants = tuple(variants)
        self.by_name: dict[str, Any] = {}
        for variant in self.variants:
            name = variant_name(variant)
            if name in self.by_name:
                raise SchemaError(f"Two variants are named {name!r}")
            self.by_name[name] = variant

    @property
    def name(self) -> str:
        return " | ".join(self.by_name)

    def lookup(self, name: str) -> Any:
        try:
            return self.by_name[name]
        except KeyError:
            raise UnknownVariant(name, list(self.by_name)) from None


class VariantKeyVisitor(Visitor[Any]):
    def __init__(self, table: VariantTable) -> None:
        self.table = table

    def expecting(self) -> str:
        return "variant identifier"

    def visit_str(self, value: str) -> Any:
        return self.table.lookup(value)

    def visit_bytes(self, value: bytes) -> Any:
        return self.visit_str(value.decode("utf-8", errors="replace"))


class VariantKeySeed(DecodeSeed[Any]):
    """Decodes a tag into the variant it names."""

    def __init__(self, table: VariantTable) -> None:
        self.table = table

    def consume(self, decoder: Decoder) -> Any:
        return decoder.decode_identifier(VariantKeyVisitor(self.table))


class VariantPayloadSeed(DecodeSeed[Any]):
    """Decodes the payload of a variant whose tag was already read."""

    def __init__(self, variant: Any) -> None:
        self.variant = variant

    def consume(self, decoder: Decoder) -> Any:
        if is_unit_variant(self.variant):
            decoder.decode_unit(UnitVisitor())
            return self.variant()
        return decode_type(self.variant, decoder)


class EnumRepr(ABC):
    """Base class of enum tag layouts.

    Layouts compare and hash by identity: ``typing`` caches ``Annotated``
    hints by argument equality, and ``Union[A, B] == Union[B, A]``. Use a
    fresh layout instance per union.
    """

    @abstractmethod
    def decode_union(self, variants: Sequence[Any], decoder: Decoder) -> Any:
        """Decode one value whose type is one of ``variants``."""

    @abstractmethod
    def encode_union(self, name: str, payload: Any, unit: bool) -> Any:
        """Wrap the plain-data ``payload`` of variant ``name`` with its tag."""


@dataclass(frozen=True, eq=False)
class External(EnumRepr):
    """``{"Variant": payload}``; unit variants as ``"Variant"``."""

    def decode_union(self, variants: Sequence[Any], decoder: Decoder) -> Any:
        return decoder.decode_any(_ExternalVisitor(VariantTable(variants)))

    def encode_union(self, name: str, payload: Any, unit: bool) -> Any:
        return name if unit else {name: payload}


class _ExternalVisitor(Visitor[Any]):
    def __init__(self, table: VariantTable) -> None:
        self.table = table

    def expecting(self) -> str:
        return f"enum {self.table.name}"

    def visit_str(self, value: str) -> Any:
        variant = self.table.lookup(value)
        if not is_unit_variant(variant):
            raise ShapeMismatch(Unexpected(Shape.STR, value), f"a map holding the payload of {value}")
        return variant()

    def visit_map(self, access: MapAccess) -> Any:
        variant = access.next_key_seed(VariantKeySeed(self.table))
        if variant is END:
            raise InvalidLength(0, "map with a single key")
        value = access.next_value_seed(VariantPayloadSeed(variant))
        if access.next_key(IgnoredAny) is not END:
            raise InvalidLength(2, "map with a single key")
        return value


@dataclass(frozen=True, eq=False)
class Internal(EnumRepr):
    """``{"<tag>": "Variant", ...fields}``.

    Every variant must be a record. When the tag is the first key the rest
    of the map is streamed straight into the variant; otherwise the entries
    read before the tag are buffered.
    """

    tag: str

    def decode_union(self, variants: Sequence[Any], decoder: Decoder) -> Any:
        for variant in variants:
            if not is_record(variant):
                raise SchemaError(
                    f"Internally tagged variant {variant!r} must be a record, "
                    f"its content is merged with the `{self.tag}` key"
                )
        return decoder.decode_map(_InternalVisitor(self.tag, VariantTable(variants)))

    def encode_union(self, name: str, payload: Any, unit: bool) -> Any:
        if unit:
            return {self.tag: name}
        if not isinstance(payload, dict):
            raise EncodeError(f"Variant {name} of an internally tagged enum must encode as a map")
        return {self.tag: name, **payload}


class _InternalVisitor(Visitor[Any]):
    def __init__(self, tag: str, table: VariantTable) -> None:
        self.tag = tag
        self.table = table

    def expecting(self) -> str:
        return f"internally tagged enum {self.table.name}"

    def visit_map(self, access: MapAccess) -> Any:
        variant = None
        buffered: list[tuple[Any, Any]] = []

        while True:
            key = access.next_key(Any)
            if key is END:
                break

            if key == self.tag:
                if variant is not None:
                    raise DuplicateField(self.tag)
                variant = access.next_value_seed(VariantKeySeed(self.table))
                if not buffered:
                    logger.debug("tag `%s` leads the map, streaming %s", self.tag, variant_name(variant))
                    return decode_type(variant, MapAccessDecoder(access))
                continue

            buffered.append((key, access.next_value(Any)))

        if variant is None:
            raise MissingField(self.tag)

        logger.debug("tag `%s` found after %d entries, replaying them", self.tag, len(buffered))
        return decode_type(variant, ReplayDecoder(FlatEntries(buffered)))


@dataclass(frozen=True, eq=False)
class Adjacent(EnumRepr):
    """``{"<tag>": "Variant", "<content>": payload}``, keys in either order.

    The two-element sequence ``["Variant", payload]`` is accepted as well.

    Attributes:
        tag: Key holding the variant name
        content: Key holding the payload
        deny_unknown_fields: Reject keys other than ``tag`` and ``content``
    """

    tag: str
    content: str
    deny_unknown_fields: bool = False

    def decode_union(self, variants: Sequence[Any], decoder: Decoder) -> Any:
        table = VariantTable(variants)
        return decoder.decode_struct(table.name, (self.tag, self.content), _AdjacentVisitor(self, table))

    def encode_union(self, name: str, payload: Any, unit: bool) -> Any:
        if unit:
            return {self.tag: name}
        return {self.tag: name, self.content: payload}


class _AdjacentVisitor(Visitor[Any]):
    def __init__(self, layout: Adjacent, table: VariantTable) -> None:
        self.layout = layout
        self.table = table

    def expecting(self) -> str:
        return f"adjacently tagged enum {self.table.name}"

    def visit_map(self, access: MapAccess) -> Any:
        tag, content = self.layout.tag, self.layout.content
        variant = None
        payload: Any = _MISSING
        buffered: Any = _MISSING

        while True:
            key = access.next_key(Any)
            if key is END:
                break

            if key == tag:
                if variant is not None:
                    raise DuplicateField(tag)
                variant = access.next_value_seed(VariantKeySeed(self.table))
            elif key == content:
                if payload is not _MISSING or buffered is not _MISSING:
                    raise DuplicateField(content)
                if variant is not None:
                    payload = access.next_value_seed(VariantPayloadSeed(variant))
                else:
                    buffered = access.next_value_seed(_ContentSeed())
            elif self.layout.deny_unknown_fields:
                raise UnknownField(str(key), [tag, content])
            else:
                access.next_value(IgnoredAny)

        if variant is None:
            raise MissingField(tag)
        if payload is not _MISSING:
            return payload
        if buffered is not _MISSING:
            logger.debug("content `%s` preceded tag `%s`, replaying it", content, tag)
            try:
                return VariantPayloadSeed(variant).consume(_replay(buffered))
            except DecodeError as err:
                raise err.add_path(content)
        if is_unit_variant(variant):
            return variant()
        raise MissingField(content)

    def visit_seq(self, access: SeqAccess) -> Any:
        variant = access.next_element_seed(VariantKeySeed(self.table))
        if variant is END:
            raise InvalidLength(0, "tag and content")
        payload = access.next_element_seed(VariantPayloadSeed(variant))
        if payload is END:
            raise InvalidLength(1, "tag and content")
        return payload


@dataclass(frozen=True, eq=False)
class Untagged(EnumRepr):
    """No tag: the first variant (in declaration order) that accepts the input wins.

    The input is buffered once and each variant is tried against a replay of
    it. Order matters: with ``Union[A, B]`` where every ``B`` input is also a
    valid ``A`` (for example ``A`` has a subset of ``B``'s fields and ignores
    unknown keys), ``B`` is never produced.
    """

    def decode_union(self, variants: Sequence[Any], decoder: Decoder) -> Any:
        # Names may repeat here (list[int] | list[str]); only order matters
        name = " | ".join(variant_name(variant) for variant in variants)
        content = _ContentSeed().consume(decoder)

        for variant in variants:
            try:
                return VariantPayloadSeed(variant).consume(_replay(content))
            except DecodeError as err:
                logger.debug("untagged %s: variant %s rejected: %s", name, variant_name(variant), err)

        raise CustomError(f"data did not match any variant of untagged enum {name}")

    def encode_union(self, name: str, payload: Any, unit: bool) -> Any:
        return None if unit else payload


class _MapContent:
    """Entries of a buffered top-level map, in input order."""

    __slots__ = ("pairs",)

    def __init__(self, pairs: list[tuple[Any, Any]]) -> None:
        self.pairs = pairs


class _ContentVisitor(ValueVisitor):
    def visit_map(self, access: MapAccess) -> _MapContent:
        return _MapContent(list(access.iter_entries(Any, Any)))


def _replay(content: Any) -> Decoder:
    if isinstance(content, _MapContent):
        return ReplayDecoder(FlatEntries(content.pairs))
    return ValueDecoder(content)


class _ContentSeed(DecodeSeed[Any]):
    def consume(self, decoder: Decoder) -> Any:
        return decoder.decode_any(_ContentVisitor())
