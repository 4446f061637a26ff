"""GitHub REST API integration."""

from src.vault.services.github.client import GitHubClient

__all__ = ["GitHubClient"]
