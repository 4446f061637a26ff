"""Request and response models for local authentication."""

from pydantic import BaseModel

from src.vault.services.database.models import UserResponse


class SignupRequest(BaseModel):
    """Signup body. Presence is checked in the handler so that a missing field is a 400."""

    username: str | None = None
    email: str | None = None
    password: str | None = None
    name: str | None = None


class LoginRequest(BaseModel):
    """Login body. ``username`` may also hold the account's email."""

    username: str | None = None
    password: str | None = None


class UserEnvelope(BaseModel):
    user: UserResponse


class LogoutResponse(BaseModel):
    ok: bool
