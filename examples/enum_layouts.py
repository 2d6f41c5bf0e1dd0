#!/usr/bin/env python3
"""Enum tag layouts example for shapedecode.

The same message is read from the four wire shapes a tagged union can take.
"""

from __future__ import annotations

from typing import Annotated, Union

from shapedecode import Adjacent, External, Internal, Record, Untagged, from_json, to_json


class Request(Record):
    id: str
    method: str


class Response(Record):
    id: str
    result: int


class Ping(Record):
    """Unit variant: no payload."""


Message = Union[Request, Response, Ping]

LAYOUTS = {
    "external": (Annotated[Message, External()], '{"Request": {"id": "1", "method": "get"}}'),
    "internal": (Annotated[Message, Internal("type")], '{"type": "Request", "id": "1", "method": "get"}'),
    "adjacent": (Annotated[Message, Adjacent("t", "c")], '{"t": "Request", "c": {"id": "1", "method": "get"}}'),
    "untagged": (Annotated[Union[Request, Response], Untagged()], '{"id": "1", "method": "get"}'),
}


def main() -> None:
    """Run the enum layouts example."""
    print("=" * 60)
    print("shapedecode Enum Layouts Example")
    print("=" * 60)
    print()

    for name, (target, text) in LAYOUTS.items():
        value = from_json(target, text)
        print(f"{name:>9}: {text}")
        print(f"{'':>9}  -> {value!r}")
        print(f"{'':>9}  <- {to_json(value, target)}")
        print()


if __name__ == "__main__":
    main()
