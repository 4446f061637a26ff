"""OAuth providers performing the authorization-code exchange."""

import logging
import urllib.parse
from abc import ABC, abstractmethod

import httpx

from src.vault.config import Settings
from src.vault.services.auth.models import ExternalProfile

logger = logging.getLogger(__name__)


class OAuthError(Exception):
    """Raised when the provider rejects the code or returns an unusable profile."""

    pass


class OAuthProvider(ABC):
    """A third-party identity provider usable for login."""

    name: str

    @abstractmethod
    def authorization_url(self, state: str) -> str:
        """URL the browser is redirected to in order to start the flow."""

    @abstractmethod
    async def exchange_code_for_profile(self, code: str) -> ExternalProfile:
        """Trade an authorization code for the user's profile and access token."""


class GitHubOAuthProvider(OAuthProvider):
    """
    GitHub OAuth app flow.

    Exchanges the code at GitHub's token endpoint, then reads ``/user`` and,
    when the public profile has no email, ``/user/emails`` for the primary
    verified address.

    Attributes:
        client_id: OAuth app client ID
        client_secret: OAuth app client secret
        callback_url: Registered redirect URI
        scopes: Space-separated scopes to request
    """

    name = "github"

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.client_id = settings.github_client_id
        self.client_secret = settings.github_client_secret
        self.callback_url = settings.github_callback_url
        self.scopes = settings.github_oauth_scopes
        self.authorize_url = settings.github_authorize_url
        self.token_url = settings.github_token_url
        self.api_url = settings.github_api_url.rstrip("/")
        self.timeout = httpx.Timeout(settings.http_timeout_seconds)
        self._transport = transport

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.callback_url,
            "scope": self.scopes,
            "state": state,
            "allow_signup": "true",
        }
        return f"{self.authorize_url}?{urllib.parse.urlencode(params)}"

    async def exchange_code_for_profile(self, code: str) -> ExternalProfile:
        """
        Exchange the code and load the GitHub profile.

        Raises:
            OAuthError: If GitHub does not return an access token
            httpx.HTTPError: If any GitHub request fails
        """
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "redirect_uri": self.callback_url,
        }
        async with httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            token_resp = await client.post(self.token_url, data=data)
            token_resp.raise_for_status()
            token_data = token_resp.json()

        access_token = token_data.get("access_token")
        if not access_token:
            # GitHub answers 200 with an "error" field for bad or reused codes
            raise OAuthError(f"GitHub did not return an access token: {token_data.get('error')}")

        async with httpx.AsyncClient(
            base_url=self.api_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/vnd.github+json",
            },
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            user_resp = await client.get("/user")
            user_resp.raise_for_status()
            github_user = user_resp.json()

            email = github_user.get("email")
            if not email:
                email = await self._primary_email(client)

        login = github_user.get("login")
        if github_user.get("id") is None or not login:
            raise OAuthError("GitHub profile is missing id or login")

        return ExternalProfile(
            provider=self.name,
            provider_id=github_user["id"],
            username=login,
            display_name=github_user.get("name"),
            email=email,
            avatar_url=github_user.get("avatar_url"),
            access_token=access_token,
        )

    async def _primary_email(self, client: httpx.AsyncClient) -> str | None:
        resp = await client.get("/user/emails")
        if resp.status_code != 200:
            logger.info(f"GitHub /user/emails unavailable (status {resp.status_code})")
            return None
        for entry in resp.json():
            if entry.get("primary") and entry.get("verified"):
                return entry.get("email")
        return None
