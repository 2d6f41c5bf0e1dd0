"""Schema introspection for record models.

This module analyzes Pydantic record models and extracts decode-relevant
information: wire names after renaming, aliases, defaults, flattened and
skipped fields, and the full annotated target type of each field.
"""

from __future__ import annotations

import types
from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Optional, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError
from ..models.fields import Attr


def _pascal(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in name.split("_"))


def _camel(name: str) -> str:
    pascal = _pascal(name)
    return pascal[:1].lower() + pascal[1:]


RENAME_RULES = {
    "lowercase": str.lower,
    "UPPERCASE": str.upper,
    "PascalCase": _pascal,
    "camelCase": _camel,
    "snake_case": lambda name: name,
    "SCREAMING_SNAKE_CASE": str.upper,
    "kebab-case": lambda name: name.replace("_", "-"),
    "SCREAMING-KEBAB-CASE": lambda name: name.upper().replace("_", "-"),
}


def apply_rename_rule(name: str, rule: str | None) -> str:
    """Convert a snake_case field name with a ``rename_all`` rule.

    Raises:
        SchemaError: If ``rule`` is not a known convention
    """
    if rule is None:
        return name
    try:
        return RENAME_RULES[rule](name)
    except KeyError:
        known = ", ".join(RENAME_RULES)
        raise SchemaError(f"Unknown rename_all rule {rule!r}; expected one of: {known}") from None


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single field.

    Attributes:
        name: Python attribute name
        wire_name: Key used on the wire (after ``rename`` / ``rename_all``)
        aliases: Additional keys accepted when decoding
        target: Type hint to decode, including the field's ``Annotated`` metadata
        required: Whether the input must provide the field
        optional: Whether the field is ``Optional[...]`` (absent means ``None``)
        field_info: Pydantic FieldInfo, the source of defaults
        attrs: Merged decode/encode attributes
    """

    name: str
    wire_name: str
    aliases: tuple[str, ...]
    target: Any
    required: bool
    optional: bool
    field_info: FieldInfo
    attrs: Attr

    @property
    def flatten(self) -> bool:
        return self.attrs.flatten

    @property
    def skip(self) -> bool:
        return self.attrs.skip

    @property
    def has_default(self) -> bool:
        return not self.required

    def default_value(self) -> Any:
        """Return the value used when the input omits this field."""
        if not self.field_info.is_required():
            return self.field_info.get_default(call_default_factory=True)
        if self.optional:
            return None
        raise SchemaError(f"Field {self.name} has no default")


class RecordSchema:
    """Schema information for an entire record.

    Example:
        >>> schema = RecordSchema.from_model(User)
        >>> for field in schema.fields:
        ...     print(f"{field.name} <- {field.wire_name}")
    """

    _cache: Dict[Type[BaseModel], RecordSchema] = {}

    def __init__(self, model_class: Type[BaseModel]) -> None:
        """Initialize schema from a Pydantic model.

        Args:
            model_class: Pydantic model class to introspect

        Raises:
            SchemaError: If a field's attributes are inconsistent
        """
        self.model_class = model_class
        self.name: str = getattr(model_class, "decode_name", None) or model_class.__name__
        self.deny_unknown_fields: bool = bool(getattr(model_class, "deny_unknown_fields", False))
        self.rename_all: Optional[str] = getattr(model_class, "rename_all", None)
        self.fields: List[FieldSchema] = []
        self._by_key: Dict[str, FieldSchema] = {}
        self._introspect()

    @classmethod
    def from_model(cls, model_class: Type[BaseModel]) -> RecordSchema:
        """Return the (cached) schema of a Pydantic model.

        Args:
            model_class: Pydantic model class

        Returns:
            RecordSchema instance
        """
        schema = cls._cache.get(model_class)
        if schema is None:
            schema = cls._cache[model_class] = cls(model_class)
        return schema

    def _introspect(self) -> None:
        """Introspect the model and populate field schemas."""
        for field_name, field_info in self.model_class.model_fields.items():
            field = self._extract_field_schema(field_name, field_info)
            self.fields.append(field)

            if field.skip or field.flatten:
                continue
            for key in (field.wire_name, *field.aliases):
                if key in self._by_key:
                    raise SchemaError(
                        f"{self.name}: key `{key}` is used by both "
                        f"{self._by_key[key].name} and {field.name}"
                    )
                self._by_key[key] = field

    def _extract_field_schema(self, name: str, field_info: FieldInfo) -> FieldSchema:
        annotation = field_info.annotation
        if annotation is None:
            raise SchemaError(f"Field {name} has no type annotation")

        attrs = Attr()
        for meta in field_info.metadata:
            if isinstance(meta, Attr):
                attrs = attrs.merge(meta)

        # Check if Optional (Union[T, None])
        origin = get_origin(annotation)
        is_optional = (origin is Union or origin is types.UnionType) and type(None) in get_args(annotation)

        if attrs.skip and field_info.is_required():
            raise SchemaError(f"Field {name}: skipped fields need a default")

        target = annotation
        if field_info.metadata:
            target = Annotated[(annotation, *field_info.metadata)]

        return FieldSchema(
            name=name,
            wire_name=attrs.rename or apply_rename_rule(name, self.rename_all),
            aliases=attrs.aliases,
            target=target,
            required=field_info.is_required() and not is_optional,
            optional=is_optional,
            field_info=field_info,
            attrs=attrs,
        )

    def lookup(self, key: str) -> FieldSchema | None:
        """Find the field read from ``key`` (wire name or alias)."""
        return self._by_key.get(key)

    @property
    def wire_names(self) -> List[str]:
        """Primary keys of the fields read directly from the record's map."""
        return [f.wire_name for f in self.fields if not (f.skip or f.flatten)]

    @property
    def accepted_keys(self) -> List[str]:
        """Every key the record reads, aliases included."""
        return list(self._by_key)

    @property
    def positional(self) -> List[FieldSchema]:
        """Fields read from the sequence form, in declaration order."""
        return [f for f in self.fields if not (f.skip or f.flatten)]

    @property
    def flattened(self) -> List[FieldSchema]:
        return [f for f in self.fields if f.flatten]

    def describe_fields(self) -> str:
        """Render the accepted keys for identifier error messages."""
        names = [f"`{name}`" for name in self.wire_names]
        if not names:
            return "no fields"
        if len(names) == 1:
            return names[0]
        return ", ".join(names[:-1]) + f" or {names[-1]}"
