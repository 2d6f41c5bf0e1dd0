#!/usr/bin/env python3
"""Basic usage example for shapedecode.

This example demonstrates:
1. Defining records with Pydantic
2. Decoding JSON text straight into records
3. Lenient vs strict handling of unknown keys
4. Flattening leftover keys into a catch-all map
5. Encoding back to JSON

It also serves as input for the CLI:

    shapedecode --analyze examples/basic_usage.py
    echo '{"id": "x", "username": "y", "extra1": "z"}' | \
        shapedecode --decode examples/basic_usage.py:User
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Optional

from pydantic import Field

from shapedecode import Alias, DecodeError, Flatten, Record, Rename, from_json, to_json


class User(Record):
    """Account record; unknown keys end up in ``extra``."""

    id: str
    username: Annotated[str, Alias("login")]
    extra: Annotated[dict[str, Any], Flatten()] = Field(default_factory=dict)


class StatusReport(Record):
    """Vehicle status report with camelCase keys on the wire."""

    vehicle_id: int = Field(ge=0, le=255)
    depth_cm: int = Field(ge=0, le=10000)
    battery_pct: Annotated[int, Rename("battery")] = 100
    note: Optional[str] = None

    rename_all: ClassVar[Optional[str]] = "camelCase"
    deny_unknown_fields: ClassVar[bool] = True


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("shapedecode Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Decoding a strict record...")
    report = from_json(StatusReport, '{"vehicleId": 42, "depthCm": 2500, "battery": 87}')
    print(f"   {report!r}")
    print()

    print("2. Unknown keys are rejected by strict records...")
    try:
        from_json(StatusReport, '{"vehicleId": 42, "depthCm": 2500, "speed": 3}')
    except DecodeError as e:
        print(f"   Error: {e}")
    print()

    print("3. Range checks report the failing field...")
    try:
        from_json(StatusReport, '{"vehicleId": 420, "depthCm": 2500}')
    except DecodeError as e:
        print(f"   Error: {e}")
    print()

    print("4. Flattening leftover keys...")
    user = from_json(User, '{"extra1": "z", "id": "x", "login": "y"}')
    print(f"   {user!r}")
    print()

    print("5. Encoding back to JSON...")
    print(f"   {to_json(user)}")
    print(f"   {to_json(report)}")


if __name__ == "__main__":
    main()
