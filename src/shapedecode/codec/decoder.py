"""Top-level decode entry points.

This module provides the functions that turn input (an arbitrary decoder,
in-memory data or JSON text) into a typed value.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar, overload

from ..de.decoder import Decoder
from ..de.seed import DecodeSeed
from ..de.types import decode_type
from ..exceptions import DecodeError
from ..formats.json import JsonDecoder
from ..formats.value import ValueDecoder

T = TypeVar("T")

logger = logging.getLogger("shapedecode.codec")


def _run(target: Any, decoder: Decoder) -> Any:
    if isinstance(target, DecodeSeed):
        return target.consume(decoder)
    return decode_type(target, decoder)


@overload
def decode(target: type[T], decoder: Decoder) -> T: ...


@overload
def decode(target: Any, decoder: Decoder) -> Any: ...


def decode(target: Any, decoder: Decoder) -> Any:
    """Decode one value of ``target`` from any decoder.

    Args:
        target: Type hint (record class, builtin, ``Annotated``/``Union``
            hint...) or a :class:`~shapedecode.de.seed.DecodeSeed` instance
        decoder: Format-specific decoder positioned before the value

    Returns:
        Decoded value

    Raises:
        SchemaError: If ``target`` has no decode entry point
        DecodeError: If the input does not match ``target``; no partially
            built value is returned

    Examples:
        ```python
        from shapedecode import Record, decode
        from shapedecode.formats import ValueDecoder

        class User(Record):
            id: int
            username: str

        user = decode(User, ValueDecoder({"id": 1, "username": "ada"}))
        ```
    """
    return _run(target, decoder)


def decode_seed(seed: DecodeSeed[T], decoder: Decoder) -> T:
    """Decode with a seed, i.e. with caller-supplied state.

    Equivalent to ``seed.consume(decoder)``.
    """
    return seed.consume(decoder)


def from_value(target: Any, value: Any) -> Any:
    """Decode ``target`` from plain Python data (dicts, lists, scalars).

    Example:
        >>> from_value(list[int], [1, 2, 3])
        [1, 2, 3]
    """
    logger.debug("Decoding %r from in-memory %s", target, type(value).__name__)
    return _run(target, ValueDecoder(value))


def from_json(target: Any, text: str | bytes) -> Any:
    """Decode ``target`` from a JSON document.

    The whole document must be consumed; trailing characters are an error.
    Errors carry the line and column at which decoding stopped.

    Args:
        target: Type hint or seed instance
        text: JSON text (bytes are read as UTF-8)

    Raises:
        DecodeError: If the text is not valid JSON or does not match ``target``

    Example:
        >>> from_json(dict[str, int], '{"a": 1}')
        {'a': 1}
    """
    decoder = JsonDecoder(text)
    logger.debug("Decoding %r from %d characters of JSON", target, len(decoder.text))
    try:
        value = _run(target, decoder)
        decoder.end()
    except DecodeError as err:
        err.set_position(*decoder.position())
        raise
    return value
