"""Tests for the GitHub OAuth provider."""

import urllib.parse

import httpx
import pytest

from src.vault.config import Settings
from src.vault.services.auth.oauth import GitHubOAuthProvider, OAuthError


def github_transport(
    token_body: dict,
    user_body: dict,
    emails: list[dict] | None = None,
    calls: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if request.url.path == "/login/oauth/access_token":
            return httpx.Response(200, json=token_body)
        if request.url.path == "/user":
            return httpx.Response(200, json=user_body)
        if request.url.path == "/user/emails":
            if emails is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=emails)
        return httpx.Response(404)

    return httpx.MockTransport(handler)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        github_client_id="client-id",
        github_client_secret="client-secret",
        github_callback_url="http://localhost:4000/auth/github/callback",
    )


class TestAuthorizationUrl:
    def test_contains_client_scopes_and_state(self, settings: Settings) -> None:
        url = GitHubOAuthProvider(settings).authorization_url("xyz")

        parsed = urllib.parse.urlparse(url)
        params = urllib.parse.parse_qs(parsed.query)
        assert parsed.netloc == "github.com"
        assert params["client_id"] == ["client-id"]
        assert params["state"] == ["xyz"]
        assert params["scope"] == ["read:user user:email repo"]
        assert params["redirect_uri"] == ["http://localhost:4000/auth/github/callback"]


@pytest.mark.asyncio
class TestExchangeCodeForProfile:
    async def test_builds_profile_from_github_user(self, settings: Settings) -> None:
        calls: list[httpx.Request] = []
        transport = github_transport(
            {"access_token": "gho_abc", "token_type": "bearer"},
            {
                "id": 101,
                "login": "octocat",
                "name": "The Octocat",
                "email": "octo@github.com",
                "avatar_url": "https://avatars/101",
            },
            calls=calls,
        )

        profile = await GitHubOAuthProvider(settings, transport).exchange_code_for_profile("c0de")

        assert profile.provider == "github"
        assert profile.provider_id == 101
        assert profile.username == "octocat"
        assert profile.display_name == "The Octocat"
        assert profile.email == "octo@github.com"
        assert profile.avatar_url == "https://avatars/101"
        assert profile.access_token == "gho_abc"

        token_request, user_request = calls
        assert urllib.parse.parse_qs(token_request.content.decode())["code"] == ["c0de"]
        assert user_request.headers["Authorization"] == "Bearer gho_abc"

    async def test_falls_back_to_primary_verified_email(self, settings: Settings) -> None:
        transport = github_transport(
            {"access_token": "gho_abc"},
            {"id": 101, "login": "octocat", "email": None},
            emails=[
                {"email": "old@example.com", "primary": False, "verified": True},
                {"email": "main@example.com", "primary": True, "verified": True},
            ],
        )

        profile = await GitHubOAuthProvider(settings, transport).exchange_code_for_profile("c0de")

        assert profile.email == "main@example.com"

    async def test_email_is_none_when_emails_endpoint_unavailable(
        self, settings: Settings
    ) -> None:
        transport = github_transport(
            {"access_token": "gho_abc"}, {"id": 101, "login": "octocat", "email": None}
        )

        profile = await GitHubOAuthProvider(settings, transport).exchange_code_for_profile("c0de")

        assert profile.email is None

    async def test_bad_code_raises_oauth_error(self, settings: Settings) -> None:
        transport = github_transport({"error": "bad_verification_code"}, {})

        with pytest.raises(OAuthError):
            await GitHubOAuthProvider(settings, transport).exchange_code_for_profile("stale")

    async def test_github_outage_raises_http_error(self, settings: Settings) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway"))

        with pytest.raises(httpx.HTTPStatusError):
            await GitHubOAuthProvider(settings, transport).exchange_code_for_profile("c0de")

    async def test_profile_without_login_is_rejected(self, settings: Settings) -> None:
        transport = github_transport({"access_token": "gho_abc"}, {"id": 101, "email": "a@x.com"})

        with pytest.raises(OAuthError):
            await GitHubOAuthProvider(settings, transport).exchange_code_for_profile("c0de")
