"""Business logic for local accounts and OAuth account linking."""

import logging
from typing import Any

from src.vault.exceptions import InvalidCredentialsError, ValidationError
from src.vault.services.auth.models import ExternalProfile
from src.vault.services.auth.passwords import PasswordHasher
from src.vault.services.database import SupabaseQueryBuilder
from src.vault.services.database.models import USERS_TABLE

logger = logging.getLogger(__name__)


def _require(*values: str | None) -> None:
    if not all(values):
        raise ValidationError("Missing fields")


class AccountService:
    """Creates, authenticates and links user accounts."""

    def __init__(self, db: SupabaseQueryBuilder, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    def register(
        self, username: str | None, email: str | None, password: str | None, name: str | None
    ) -> dict[str, Any]:
        """
        Create a local account.

        Args:
            username: Unique username
            email: Unique email
            password: Plaintext password, hashed before storage
            name: Optional display name

        Returns:
            The inserted user row

        Raises:
            ValidationError: 400 if username, email or password is missing
            ConflictError: 400 if username or email is already taken
        """
        _require(username, email, password)

        return self.db.insert_record(
            USERS_TABLE,
            {
                "username": username,
                "email": email,
                "name": name,
                "password_hash": self.hasher.hash(password),
            },
        )

    def authenticate(self, login: str | None, password: str | None) -> dict[str, Any]:
        """
        Check a username-or-email and password pair.

        Unknown logins, OAuth-only accounts and wrong passwords all raise the
        same error so that responses do not reveal which accounts exist.

        Raises:
            ValidationError: 400 if a field is missing
            InvalidCredentialsError: 400 on any credential failure
        """
        _require(login, password)

        user = self.db.get_by_field(USERS_TABLE, "username", login)
        if user is None:
            user = self.db.get_by_field(USERS_TABLE, "email", login)

        if user is None or not user.get("password_hash"):
            raise InvalidCredentialsError()

        if not self.hasher.verify(password, user["password_hash"]):
            raise InvalidCredentialsError()

        return user

    def link_external_profile(self, profile: ExternalProfile) -> dict[str, Any]:
        """
        Find or create the user for an OAuth profile.

        Looks the user up by provider ID first, then by email so that a local
        account signed up with the same address gets merged. A match has its
        provider fields and access token refreshed in place; otherwise a new
        user is seeded from the profile.

        Args:
            profile: Profile returned by the OAuth provider

        Returns:
            The updated or created user row
        """
        prefix = profile.provider
        email = profile.email or f"{profile.username}@{prefix}.local"
        provider_fields = {
            f"{prefix}_id": profile.provider_id,
            f"{prefix}_username": profile.username,
            f"{prefix}_avatar": profile.avatar_url,
            f"{prefix}_access_token": profile.access_token,
        }

        user = self.db.get_by_field(USERS_TABLE, f"{prefix}_id", profile.provider_id)
        if user is None:
            user = self.db.get_by_field(USERS_TABLE, "email", email)

        if user is not None:
            logger.info(
                f"Linking {prefix} account {profile.username} to user {user['id']}",
                extra={"provider": prefix, "user_id": str(user["id"])},
            )
            return self.db.update_record(USERS_TABLE, user["id"], provider_fields)

        logger.info(
            f"Creating user from {prefix} account {profile.username}",
            extra={"provider": prefix},
        )
        return self.db.insert_record(
            USERS_TABLE,
            {
                "email": email,
                "username": profile.username,
                "name": profile.display_name or profile.username,
                **provider_fields,
            },
        )
