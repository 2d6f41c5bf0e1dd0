#!/usr/bin/env python3
"""Streaming decode example for shapedecode.

Seeds and reductions read one element at a time, so neither example below
ever holds the whole array in memory.
"""

from __future__ import annotations

from typing import Annotated

from shapedecode import DecodeWith, NthElement, Record, Rename, from_json, max_of


class Outer(Record):
    id: str
    max_value: Annotated[int, DecodeWith(max_of(int)), Rename("values")]


def main() -> None:
    """Run the streaming example."""
    print("=" * 60)
    print("shapedecode Streaming Example")
    print("=" * 60)
    print()

    numbers = "[10, 20, 30, 40, 50]"
    print(f"1. Element 3 of {numbers}: {from_json(NthElement(3, int), numbers)}")

    text = '{"id": "demo", "values": [256, 100, 384, 314, 271]}'
    print(f"2. Maximum of the values in {text}: {from_json(Outer, text).max_value}")


if __name__ == "__main__":
    main()
