"""Minimal async GitHub REST client."""

import httpx

from src.vault.config import Settings


class GitHubClient:
    """
    Calls the GitHub REST API on behalf of a user.

    A fresh ``httpx.AsyncClient`` is opened per call, always with an explicit
    timeout.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = settings.github_api_url.rstrip("/")
        self.timeout = httpx.Timeout(settings.http_timeout_seconds)
        self._transport = transport

    def _headers(self, access_token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/vnd.github+json",
        }

    async def get_repos(self, access_token: str) -> list[dict]:
        """
        List repositories the token's user can access, most recently updated first.

        Raises:
            httpx.HTTPError: If the request fails or GitHub answers with an error
        """
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(access_token),
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            resp = await client.get("/user/repos", params={"per_page": 100, "sort": "updated"})
            resp.raise_for_status()
            return resp.json()
