"""Shared services module for external integrations."""

from src.vault.services.analytics.posthog import PostHogService

__all__ = [
    "PostHogService",
]
