"""Signed session tokens carried in the session cookie."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from src.vault.exceptions import InvalidTokenError
from src.vault.services.auth.models import SessionUser

logger = logging.getLogger(__name__)


class SessionTokenCodec:
    """
    Issues and verifies HS256 JWTs holding a user's identity claims.

    Tokens are self-contained; nothing is stored server-side. Rotating the
    secret invalidates every outstanding token.

    Attributes:
        secret: HMAC signing secret
        algorithm: JWS algorithm (default: HS256)
        ttl: Lifetime of newly issued tokens

    Example:
        >>> codec = SessionTokenCodec("secret", ttl=timedelta(days=7))
        >>> token = codec.issue({"id": "1", "email": "a@x.com", "username": "alice"})
        >>> codec.verify(token).username
        'alice'
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=7)):
        if not secret:
            raise ValueError("Session token secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, user: dict[str, Any], now: datetime | None = None) -> str:
        """
        Sign a token for a user row.

        Args:
            user: Mapping with at least 'id', 'email' and 'username'
            now: Issuance instant (default: current UTC time)

        Returns:
            Compact JWT string
        """
        issued_at = now or datetime.now(UTC)
        claims = {
            "sub": str(user["id"]),
            "id": str(user["id"]),
            "email": user["email"],
            "username": user["username"],
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.ttl).timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> SessionUser:
        """
        Verify signature and expiry and return the identity claims.

        Raises:
            InvalidTokenError: On a bad signature, malformed payload,
                missing claims or passed expiry
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_iat": True},
            )
            return SessionUser(
                id=claims["id"],
                email=claims["email"],
                username=claims["username"],
                expires_at=datetime.fromtimestamp(claims["exp"], UTC),
            )
        except JWTError as e:
            logger.info(f"Session token rejected: {e}")
            raise InvalidTokenError() from e
        except (KeyError, TypeError, PydanticValidationError) as e:
            logger.warning(f"Session token has malformed claims: {e}")
            raise InvalidTokenError() from e
