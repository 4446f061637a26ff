"""FastAPI dependencies for cookie-based session authentication."""

import logging

from fastapi import Depends, Request

from src.vault.exceptions import AuthenticationError, InvalidTokenError
from src.vault.services.analytics.posthog import PostHogService
from src.vault.services.auth.models import SessionUser
from src.vault.services.auth.passwords import PasswordHasher
from src.vault.services.auth.tokens import SessionTokenCodec

logger = logging.getLogger(__name__)


def get_token_codec(request: Request) -> SessionTokenCodec:
    """Session token codec built at startup by ``create_app``."""
    return request.app.state.token_codec


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_analytics(request: Request) -> PostHogService:
    return request.app.state.analytics


async def get_current_user(
    request: Request,
    codec: SessionTokenCodec = Depends(get_token_codec),
) -> SessionUser:
    """
    Authenticate the request from its session cookie.

    No cookie short-circuits to 401 "Not authenticated"; a cookie that fails
    verification gives 401 "Invalid token". On success the identity is stored
    on ``request.state.user`` (used by the rate limiter) and returned. The
    token is never refreshed here.

    Args:
        request: Incoming request
        codec: Session token codec

    Returns:
        SessionUser with id, email and username

    Raises:
        AuthenticationError: 401 if the cookie is missing
        InvalidTokenError: 401 if the token is invalid or expired

    Example:
        @router.get("/me")
        async def me(current_user: SessionUser = Depends(get_current_user)):
            return {"user_id": current_user.id}
    """
    cookie_name = request.app.state.settings.session_cookie_name
    token = request.cookies.get(cookie_name)

    if not token:
        raise AuthenticationError()

    try:
        user = codec.verify(token)
    except InvalidTokenError:
        logger.warning(
            "Auth failed: invalid session token",
            extra={"error_type": "invalid_session_token", "path": request.url.path},
        )
        request.app.state.analytics.capture(
            distinct_id="anonymous",
            event="authentication_failed",
            properties={"error": "invalid_session_token"},
        )
        raise

    request.state.user = user
    logger.debug(f"User authenticated: {user.id} ({user.username})")
    return user
