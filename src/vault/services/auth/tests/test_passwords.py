"""Tests for the bcrypt password hasher."""

import pytest

from src.vault.services.auth.passwords import PasswordHasher


class TestPasswordHasher:
    def test_verify_accepts_the_hashed_password(self, hasher: PasswordHasher) -> None:
        digest = hasher.hash("pw123456")

        assert hasher.verify("pw123456", digest) is True

    @pytest.mark.parametrize("attempt", ["pw1234567", "PW123456", "", "pw12345"])
    def test_verify_rejects_other_passwords(self, hasher: PasswordHasher, attempt: str) -> None:
        digest = hasher.hash("pw123456")

        assert hasher.verify(attempt, digest) is False

    def test_hash_is_salted(self, hasher: PasswordHasher) -> None:
        assert hasher.hash("pw123456") != hasher.hash("pw123456")

    def test_digest_is_bcrypt_with_configured_cost(self, hasher: PasswordHasher) -> None:
        digest = hasher.hash("pw123456")

        assert digest.startswith("$2b$04$")
        assert "pw123456" not in digest

    @pytest.mark.parametrize("digest", [None, "", "not-a-hash", "$2b$04$short"])
    def test_verify_returns_false_for_missing_or_malformed_digest(
        self, hasher: PasswordHasher, digest: str | None
    ) -> None:
        assert hasher.verify("pw123456", digest) is False

    def test_multibyte_password_longer_than_bcrypt_limit(self, hasher: PasswordHasher) -> None:
        """Passwords over 72 bytes are truncated on a character boundary, not rejected."""
        password = "é" * 50  # 100 bytes in UTF-8
        digest = hasher.hash(password)

        assert hasher.verify(password, digest) is True
        assert hasher.verify("é" * 36, digest) is True
        assert hasher.verify("é" * 35, digest) is False
