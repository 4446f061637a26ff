"""Data models for authentication."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class SessionUser(BaseModel):
    """
    Identity claims carried by a session token.

    Attached to ``request.state.user`` by the auth gate and injected into
    handlers.

    Attributes:
        id: User ID from the 'id' claim
        email: User email
        username: Username
        expires_at: Absolute expiry of the token the identity came from
    """

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    username: str
    expires_at: datetime | None = None


class ExternalProfile(BaseModel):
    """
    Profile returned by an OAuth provider after the code exchange.

    Attributes:
        provider: Provider name, also the column prefix on the users table
        provider_id: Stable account ID at the provider
        username: Login name at the provider
        display_name: Human name, if the provider has one
        email: Primary email, if the provider disclosed one
        avatar_url: Avatar image URL
        access_token: Provider API token for later calls on the user's behalf
    """

    provider: str
    provider_id: Any
    username: str
    display_name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    access_token: str
