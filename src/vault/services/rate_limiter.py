"""Rate limiting service for API endpoints."""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from src.vault.config import settings
from src.vault.services.auth.models import SessionUser

logger = logging.getLogger(__name__)


def get_user_id_or_ip(request: Request) -> str:
    """
    Extract user ID from the authenticated session or fall back to IP address.

    This function is used as the key_func for rate limiting:
    - Authenticated requests: Rate limited per user ID
    - Unauthenticated requests: Rate limited per IP address

    Args:
        request: FastAPI request object

    Returns:
        User ID string or IP address
    """
    # Set by the auth gate dependency, which runs before the endpoint body
    user: SessionUser | None = getattr(request.state, "user", None)

    if user and user.id:
        return f"user:{user.id}"

    return f"ip:{get_remote_address(request)}"


# In-memory storage; limits are per process
limiter = Limiter(
    key_func=get_user_id_or_ip,
    default_limits=[],
    storage_uri="memory://",
    enabled=settings.rate_limit_enabled,
)


class RateLimitTiers:
    """
    Rate limit tiers for different endpoint categories.

    Authenticated endpoints are limited per user, the public auth endpoints
    per IP address.
    """

    # Reads (GET)
    DEFAULT = ["100 per minute", "1000 per hour"]

    # State-changing operations (POST)
    WRITE = ["30 per minute", "200 per hour"]

    # Signup and login, the password-guessing surface
    AUTH = ["10 per minute", "50 per hour"]


# Note: decorated endpoints must take a 'request: Request' parameter
default_rate_limit = limiter.limit(";".join(RateLimitTiers.DEFAULT))
write_rate_limit = limiter.limit(";".join(RateLimitTiers.WRITE))
auth_rate_limit = limiter.limit(";".join(RateLimitTiers.AUTH))
