"""Authentication module for cookie-based session authentication."""

from src.vault.services.auth.cookies import clear_session_cookie, set_session_cookie
from src.vault.services.auth.dependencies import (
    get_analytics,
    get_current_user,
    get_password_hasher,
    get_token_codec,
)
from src.vault.services.auth.models import ExternalProfile, SessionUser
from src.vault.services.auth.oauth import GitHubOAuthProvider, OAuthError, OAuthProvider
from src.vault.services.auth.ownership import require_ownership
from src.vault.services.auth.passwords import PasswordHasher
from src.vault.services.auth.tokens import SessionTokenCodec

__all__ = [
    "clear_session_cookie",
    "set_session_cookie",
    "get_analytics",
    "get_current_user",
    "get_password_hasher",
    "get_token_codec",
    "ExternalProfile",
    "SessionUser",
    "GitHubOAuthProvider",
    "OAuthError",
    "OAuthProvider",
    "require_ownership",
    "PasswordHasher",
    "SessionTokenCodec",
]
