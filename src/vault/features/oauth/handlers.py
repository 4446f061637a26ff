"""OAuth login routes (``/auth/{provider}`` and its callback)."""

import logging
import secrets

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from src.vault.exceptions import NotFoundError, VaultError
from src.vault.features.auth.handlers import get_account_service
from src.vault.features.auth.services import AccountService
from src.vault.services.analytics.posthog import PostHogService
from src.vault.services.auth.cookies import set_session_cookie
from src.vault.services.auth.dependencies import get_analytics, get_token_codec
from src.vault.services.auth.oauth import OAuthError, OAuthProvider
from src.vault.services.auth.tokens import SessionTokenCodec

logger = logging.getLogger(__name__)

router = APIRouter()

STATE_COOKIE = "oauth_state"
STATE_TTL_SECONDS = 600
FAILURE_PATH = "/auth/failure"


def get_oauth_provider(provider: str, request: Request) -> OAuthProvider:
    """Look up a registered provider by the ``{provider}`` path segment."""
    providers: dict[str, OAuthProvider] = request.app.state.oauth_providers
    if provider not in providers:
        raise NotFoundError(f"Unknown OAuth provider: {provider}")
    return providers[provider]


def _failure(reason: str, provider: str) -> RedirectResponse:
    logger.warning(f"{provider} OAuth failed: {reason}", extra={"provider": provider})
    response = RedirectResponse(url=FAILURE_PATH, status_code=302)
    response.delete_cookie(STATE_COOKIE)
    return response


# Registered before the parameterised routes so "failure" is not taken for a provider
@router.get(FAILURE_PATH)
async def oauth_failure() -> PlainTextResponse:
    return PlainTextResponse("GitHub auth failed", status_code=401)


@router.get("/auth/{provider}")
async def oauth_login(
    request: Request, oauth: OAuthProvider = Depends(get_oauth_provider)
) -> RedirectResponse:
    """Redirect to the provider's consent page with a fresh CSRF state."""
    state = secrets.token_urlsafe(16)
    response = RedirectResponse(url=oauth.authorization_url(state), status_code=302)
    response.set_cookie(
        key=STATE_COOKIE,
        value=state,
        max_age=STATE_TTL_SECONDS,
        httponly=True,
        samesite="lax",
        secure=request.app.state.settings.cookie_secure,
    )
    return response


@router.get("/auth/{provider}/callback")
async def oauth_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    oauth: OAuthProvider = Depends(get_oauth_provider),
    accounts: AccountService = Depends(get_account_service),
    codec: SessionTokenCodec = Depends(get_token_codec),
    analytics: PostHogService = Depends(get_analytics),
) -> RedirectResponse:
    """
    Finish the OAuth flow.

    Validates the state against the cookie set by ``oauth_login``, exchanges
    the code for a profile, links or creates the user and redirects to the
    client dashboard with the session cookie set. Any failure redirects to
    ``/auth/failure``.
    """
    expected_state = request.cookies.get(STATE_COOKIE)
    if not state or not expected_state or not secrets.compare_digest(state, expected_state):
        return _failure("invalid state", oauth.name)
    if not code:
        return _failure("missing code", oauth.name)

    try:
        profile = await oauth.exchange_code_for_profile(code)
    except (OAuthError, httpx.HTTPError) as e:
        return _failure(f"code exchange failed: {e}", oauth.name)

    try:
        user = accounts.link_external_profile(profile)
    except VaultError as e:
        return _failure(f"account linking failed: {e.message}", oauth.name)
    except Exception as e:
        logger.error(f"Error linking {oauth.name} profile: {e}", exc_info=True)
        return _failure("account linking failed", oauth.name)

    settings = request.app.state.settings
    response = RedirectResponse(url=f"{settings.client_origin}/dashboard", status_code=302)
    response.delete_cookie(STATE_COOKIE)
    set_session_cookie(response, codec.issue(user), settings)

    analytics.capture(
        distinct_id=str(user["id"]), event=f"{oauth.name}_linked", properties={"method": "oauth"}
    )
    return response
