"""Base record classes and shapedecode-specific Pydantic configuration.

Records are Pydantic models whose fields are filled by the decode protocol
instead of by Pydantic's own parser. Pydantic still owns construction: field
defaults, validators and assignment checks behave as usual.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict

from ..exceptions import SchemaError

if TYPE_CHECKING:
    from ..de.decoder import Decoder


class Record(BaseModel):
    """Base class for all decodable records.

    Records declare fields with type hints; decode options go in ``ClassVar``
    attributes and field-level options in ``Annotated`` metadata.

    Example:
        >>> from typing import Annotated, ClassVar
        >>> class User(Record):
        ...     id: int
        ...     username: Annotated[str, Alias("login")]
        ...
        ...     deny_unknown_fields: ClassVar[bool] = True

    Attributes:
        decode_name: Name reported in messages (defaults to the class name)
        deny_unknown_fields: Reject keys that match no field (default: ignore)
        rename_all: Naming convention applied to every field's wire name
    """

    # ConfigDict for Pydantic v2
    model_config = ConfigDict(
        strict=False,
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra="forbid",
    )

    decode_name: ClassVar[str | None] = None
    deny_unknown_fields: ClassVar[bool] = False
    rename_all: ClassVar[str | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Hook called when a subclass is created.

        Rejects unknown ``rename_all`` conventions at class definition time.
        """
        super().__init_subclass__(**kwargs)

        # Import here to avoid circular dependency
        from ..codec.schema import RENAME_RULES

        if cls.rename_all is not None and cls.rename_all not in RENAME_RULES:
            raise SchemaError(
                f"{cls.__name__}: unknown rename_all rule {cls.rename_all!r}; "
                f"expected one of: {', '.join(RENAME_RULES)}"
            )

    @classmethod
    def __decode__(cls, decoder: Decoder) -> Any:
        from ..de.record import decode_record

        return decode_record(cls, decoder)


class RemoteRecord(Record):
    """Shadow of a type that cannot be made a record itself.

    The shadow lists the foreign type's fields; decoding fills the shadow and
    converts it with :meth:`into_remote`. Fields that are not plain
    attributes of the foreign value can name a ``Getter`` for encoding.

    Example:
        >>> class DurationDef(RemoteRecord):
        ...     remote: ClassVar[type] = Duration
        ...     secs: int
        ...     nanos: int
        >>> class Process(Record):
        ...     wall_time: Annotated[Duration, DecodeWith(DurationDef)]
    """

    remote: ClassVar[Any] = None

    def into_remote(self) -> Any:
        """Build the foreign value; override when its constructor differs."""
        if self.remote is None:
            raise SchemaError(f"{type(self).__name__} does not name a remote type")
        return self.remote(**{name: getattr(self, name) for name in type(self).model_fields})

    @classmethod
    def from_remote(cls, value: Any) -> RemoteRecord:
        """Read a shadow back from a foreign value (encode direction)."""
        # Import here to avoid circular dependency
        from ..codec.schema import RecordSchema

        fields = {}
        for field in RecordSchema.from_model(cls).fields:
            getter = field.attrs.getter
            fields[field.name] = getter(value) if getter is not None else getattr(value, field.name)
        return cls.model_construct(**fields)

    @classmethod
    def __decode__(cls, decoder: Decoder) -> Any:
        from ..de.record import decode_record

        return decode_record(cls, decoder).into_remote()
