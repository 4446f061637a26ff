"""API handlers for local signup, login, logout and the current user."""

import logging

from fastapi import APIRouter, Depends, Request, Response

from src.vault.exceptions import NotFoundError, UpstreamError, VaultError
from src.vault.features.auth.schemas import (
    LoginRequest,
    LogoutResponse,
    SignupRequest,
    UserEnvelope,
)
from src.vault.features.auth.services import AccountService
from src.vault.services.analytics.posthog import PostHogService
from src.vault.services.auth.cookies import clear_session_cookie, set_session_cookie
from src.vault.services.auth.dependencies import (
    get_analytics,
    get_current_user,
    get_password_hasher,
    get_token_codec,
)
from src.vault.services.auth.models import SessionUser
from src.vault.services.auth.passwords import PasswordHasher
from src.vault.services.auth.tokens import SessionTokenCodec
from src.vault.services.database import SupabaseQueryBuilder, get_query_builder
from src.vault.services.database.models import PUBLIC_USER_COLUMNS, USERS_TABLE, UserResponse
from src.vault.services.rate_limiter import auth_rate_limit, default_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter()


def get_account_service(
    db: SupabaseQueryBuilder = Depends(get_query_builder),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AccountService:
    return AccountService(db, hasher)


@router.post("/auth/signup", response_model=UserEnvelope)
@auth_rate_limit
async def signup(
    request: Request,
    response: Response,
    body: SignupRequest,
    accounts: AccountService = Depends(get_account_service),
    codec: SessionTokenCodec = Depends(get_token_codec),
    analytics: PostHogService = Depends(get_analytics),
) -> UserEnvelope:
    """
    Create a local account and start a session.

    Returns:
        The new user; the session cookie is set on the response

    Raises:
        ValidationError: 400 if username, email or password is missing
        ConflictError: 400 if username or email is taken
        UpstreamError: 500 if the database fails
    """
    try:
        user = accounts.register(body.username, body.email, body.password, body.name)
    except VaultError:
        raise
    except Exception as e:
        logger.error(f"Signup failed: {e}", exc_info=True)
        raise UpstreamError("Signup failed") from e

    set_session_cookie(response, codec.issue(user), request.app.state.settings)
    analytics.capture(
        distinct_id=str(user["id"]), event="user_signed_up", properties={"method": "password"}
    )
    logger.info(f"User signed up: {user['id']} ({user['username']})")
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post("/auth/login", response_model=UserEnvelope)
@auth_rate_limit
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
    codec: SessionTokenCodec = Depends(get_token_codec),
    analytics: PostHogService = Depends(get_analytics),
) -> UserEnvelope:
    """
    Log in with username (or email) and password.

    Raises:
        ValidationError: 400 if a field is missing
        InvalidCredentialsError: 400 "Invalid username or password"
    """
    try:
        user = accounts.authenticate(body.username, body.password)
    except VaultError:
        raise
    except Exception as e:
        logger.error(f"Login failed: {e}", exc_info=True)
        raise UpstreamError("Login failed") from e

    set_session_cookie(response, codec.issue(user), request.app.state.settings)
    analytics.capture(
        distinct_id=str(user["id"]), event="user_logged_in", properties={"method": "password"}
    )
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post("/auth/logout", response_model=LogoutResponse)
async def logout(request: Request, response: Response) -> LogoutResponse:
    clear_session_cookie(response, request.app.state.settings)
    return LogoutResponse(ok=True)


@router.get("/me", response_model=UserEnvelope)
@default_rate_limit
async def get_me(
    request: Request,
    current_user: SessionUser = Depends(get_current_user),
    db: SupabaseQueryBuilder = Depends(get_query_builder),
) -> UserEnvelope:
    """
    Return the signed-in user's public profile.

    Raises:
        AuthenticationError: 401 if not signed in
        NotFoundError: 404 if the user row no longer exists
    """
    try:
        user = db.get_by_id(USERS_TABLE, current_user.id, PUBLIC_USER_COLUMNS)
    except VaultError:
        raise
    except Exception as e:
        logger.error(f"Error fetching user {current_user.id}: {e}", exc_info=True)
        raise UpstreamError("Failed to fetch user") from e

    if user is None:
        logger.warning(f"Session references missing user {current_user.id}")
        raise NotFoundError("User not found")

    return UserEnvelope(user=UserResponse.model_validate(user))
