"""PostHog analytics service for event tracking."""

import posthog

from src.vault.config import Settings


class PostHogService:
    """Service for tracking analytics events via PostHog."""

    def __init__(self, settings: Settings) -> None:
        """Initialize PostHog service."""
        self.enabled = bool(settings.posthog_api_key)
        if self.enabled:
            posthog.api_key = settings.posthog_api_key
            posthog.host = settings.posthog_host

    def capture(self, distinct_id: str, event: str, properties: dict | None = None) -> None:
        """
        Track an event.

        Args:
            distinct_id: Unique identifier for the user
            event: Event name (e.g., "user_signed_up", "github_linked")
            properties: Optional event properties

        Example:
            >>> service = PostHogService(settings)
            >>> service.capture("user-123", "user_logged_in", {"method": "password"})
        """
        if not self.enabled:
            return

        posthog.capture(distinct_id=distinct_id, event=event, properties=properties or {})

