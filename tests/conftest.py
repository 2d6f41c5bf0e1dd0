"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest


@pytest.fixture
def numbers_json() -> str:
    """Five-element JSON array used by the seeded decode tests."""
    return "[10, 20, 30, 40, 50]"


@pytest.fixture
def user_payload() -> dict:
    """In-memory user record with one key no record declares."""
    return {"id": "x", "username": "y", "extra1": "z"}
