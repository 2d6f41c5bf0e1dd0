"""Concrete readers that drive the decode protocol.

- :class:`ValueDecoder` reads plain in-memory Python data.
- :class:`JsonDecoder` reads JSON text with a cursor.
"""

from __future__ import annotations

from .json import JsonDecoder
from .value import ValueDecoder

__all__ = [
    "JsonDecoder",
    "ValueDecoder",
]
