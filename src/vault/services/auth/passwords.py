"""One-way password hashing for local credentials."""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# bcrypt ignores everything past 72 bytes
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """
    Salted bcrypt hashing with a fixed work factor.

    Attributes:
        rounds: bcrypt cost factor used for new hashes

    Example:
        >>> hasher = PasswordHasher(rounds=10)
        >>> digest = hasher.hash("pw123456")
        >>> hasher.verify("pw123456", digest)
        True
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    @staticmethod
    def _truncate(password: str) -> str:
        """Truncate to 72 bytes without splitting a multi-byte UTF-8 character."""
        encoded = password.encode("utf-8")
        if len(encoded) <= BCRYPT_MAX_BYTES:
            return password
        return encoded[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")

    def hash(self, password: str) -> str:
        return self._context.hash(self._truncate(password))

    def verify(self, password: str, digest: str | None) -> bool:
        """
        Check a plaintext against a stored digest.

        Returns False for a mismatch and for a missing or malformed digest.
        """
        if not digest:
            return False
        try:
            return self._context.verify(self._truncate(password), digest)
        except (ValueError, TypeError) as e:
            logger.warning(f"Rejected malformed password digest: {e}")
            return False
