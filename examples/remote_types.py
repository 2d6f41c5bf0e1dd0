#!/usr/bin/env python3
"""Remote type example for shapedecode.

``datetime.timedelta`` cannot be turned into a Record, so a shadow record
lists its fields and converts itself into the real type after decoding.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated, Any, ClassVar

from shapedecode import DecodeWith, Getter, Record, RemoteRecord, from_json, to_json


class TimedeltaDef(RemoteRecord):
    """Shadow of ``timedelta`` as ``{"days": .., "seconds": .., "microseconds": ..}``."""

    remote: ClassVar[Any] = timedelta

    days: Annotated[int, Getter(lambda td: td.days)] = 0
    seconds: Annotated[int, Getter(lambda td: td.seconds)] = 0
    microseconds: Annotated[int, Getter(lambda td: td.microseconds)] = 0


class Process(Record):
    command_line: str
    wall_time: Annotated[timedelta, DecodeWith(TimedeltaDef)]


def main() -> None:
    """Run the remote type example."""
    print("=" * 60)
    print("shapedecode Remote Type Example")
    print("=" * 60)
    print()

    process = from_json(Process, '{"command_line": "make", "wall_time": {"seconds": 75}}')
    print(f"Decoded: {process!r}")
    print(f"Encoded: {to_json(process)}")


if __name__ == "__main__":
    main()
