"""Record decoding: the visitor behind every :class:`~shapedecode.models.base.Record`.

A record is read either from a map keyed by wire names (the usual form) or
from a sequence holding the fields in declaration order. Field keys are
decoded through ``decode_identifier`` so formats with numeric field tags can
answer with an index instead of a name.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from ..codec.schema import FieldSchema, RecordSchema
from ..exceptions import CustomError, DuplicateField, InvalidLength, InvalidValue, MissingField, UnknownField
from .access import END
from .ignore import IgnoredAny
from .seed import DecodeSeed
from .shape import Shape, Unexpected
from .types import decode_type
from .visitor import Visitor

if TYPE_CHECKING:
    from .access import MapAccess, SeqAccess
    from .decoder import Decoder

logger = logging.getLogger("shapedecode.de.record")


class UnknownKey:
    """A map key that names no field of the record."""

    __slots__ = ("name",)

    def __init__(self, name: Any) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"UnknownKey({self.name!r})"


class FieldKeyVisitor(Visitor[Any]):
    """Resolves a key to its :class:`FieldSchema` (or :class:`UnknownKey`)."""

    def __init__(self, schema: RecordSchema) -> None:
        self.schema = schema

    def expecting(self) -> str:
        return f"field identifier ({self.schema.describe_fields()})"

    def visit_str(self, value: str) -> Any:
        field = self.schema.lookup(value)
        if field is not None:
            return field
        if self.schema.deny_unknown_fields and not self.schema.flattened:
            raise UnknownField(value, self.schema.wire_names)
        return UnknownKey(value)

    def visit_bytes(self, value: bytes) -> Any:
        return self.visit_str(value.decode("utf-8", errors="replace"))

    def visit_u64(self, value: int) -> Any:
        positional = self.schema.positional
        if value < len(positional):
            return positional[value]
        if not self.schema.deny_unknown_fields:
            return UnknownKey(value)
        raise InvalidValue(Unexpected(Shape.INT, value), f"field index 0 <= i < {len(positional)}")


class FieldKeySeed(DecodeSeed[Any]):
    def __init__(self, schema: RecordSchema) -> None:
        self.schema = schema

    def consume(self, decoder: Decoder) -> Any:
        return decoder.decode_identifier(FieldKeyVisitor(self.schema))


class FieldSeed(DecodeSeed[Any]):
    """Decodes one field value with the field's annotated type."""

    def __init__(self, field: FieldSchema) -> None:
        self.field = field

    def consume(self, decoder: Decoder) -> Any:
        return decode_type(self.field.target, decoder)


class RecordVisitor(Visitor[Any]):
    """Builds a record from a map or a positional sequence.

    Args:
        model_class: Record class to construct
        schema: Its introspected schema
    """

    def __init__(self, model_class: type[BaseModel], schema: RecordSchema) -> None:
        self.model_class = model_class
        self.schema = schema

    def expecting(self) -> str:
        return f"struct {self.schema.name}"

    def visit_map(self, access: MapAccess) -> Any:
        schema = self.schema
        values: dict[str, Any] = {}
        leftovers: list[tuple[Any, Any]] = []

        while True:
            key = access.next_key_seed(FieldKeySeed(schema))
            if key is END:
                break

            if isinstance(key, UnknownKey):
                if schema.flattened:
                    leftovers.append((key.name, access.next_value(Any)))
                else:
                    access.next_value(IgnoredAny)
                continue

            if key.name in values:
                raise DuplicateField(key.wire_name)
            values[key.name] = access.next_value_seed(FieldSeed(key))

        if schema.flattened:
            self._decode_flattened(values, leftovers)
        return self._finish(values)

    def visit_seq(self, access: SeqAccess) -> Any:
        schema = self.schema
        if schema.flattened:
            raise self.invalid_type(Unexpected(Shape.SEQUENCE))

        positional = schema.positional
        values: dict[str, Any] = {}
        for index, field in enumerate(positional):
            value = access.next_element_seed(FieldSeed(field))
            if value is END:
                if field.has_default:
                    continue
                raise InvalidLength(index, f"struct {schema.name} with {len(positional)} elements")
            values[field.name] = value

        return self._finish(values)

    def _decode_flattened(self, values: dict[str, Any], leftovers: list[tuple[Any, Any]]) -> None:
        # Import here to avoid circular dependency
        from .flatten import FlatEntries, FlatMapDecoder

        entries = FlatEntries(leftovers)
        for field in self.schema.flattened:
            values[field.name] = FieldSeed(field).consume(FlatMapDecoder(entries))

        unclaimed = entries.unclaimed()
        logger.debug(
            "%s: %d buffered keys, %d left unclaimed", self.schema.name, len(leftovers), len(unclaimed)
        )
        if unclaimed and self.schema.deny_unknown_fields:
            raise UnknownField(str(unclaimed[0]), self.schema.wire_names)

    def _finish(self, values: dict[str, Any]) -> Any:
        for field in self.schema.fields:
            if field.name in values:
                continue
            if field.required:
                raise MissingField(field.wire_name)
            values[field.name] = field.default_value()

        try:
            return self.model_class(**values)
        except ValidationError as e:
            raise CustomError(f"invalid {self.schema.name}: {e}") from e


def decode_record(model_class: type[BaseModel], decoder: Decoder) -> Any:
    """Decode a record of type ``model_class``.

    Records without flattened fields announce their keys through
    ``decode_struct``; records with flattened fields must see every key and
    ask for a plain map.
    """
    schema = RecordSchema.from_model(model_class)
    visitor = RecordVisitor(model_class, schema)
    if schema.flattened:
        return decoder.decode_map(visitor)
    return decoder.decode_struct(schema.name, schema.accepted_keys, visitor)
