"""Shared fixtures for authentication tests."""

from datetime import timedelta
from typing import Any

import pytest

from src.vault.services.auth.passwords import PasswordHasher
from src.vault.services.auth.tokens import SessionTokenCodec


@pytest.fixture
def hasher() -> PasswordHasher:
    """Hasher with the minimum bcrypt cost to keep tests fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def codec() -> SessionTokenCodec:
    return SessionTokenCodec("test-secret", ttl=timedelta(days=7))


@pytest.fixture
def user_row() -> dict[str, Any]:
    """A users table row as returned by Supabase."""
    return {
        "id": "123e4567-e89b-12d3-a456-426614174000",
        "email": "a@x.com",
        "username": "alice",
        "name": "Alice",
        "password_hash": "$2b$04$notarealhash",
    }
