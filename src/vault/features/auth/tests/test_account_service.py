"""Tests for AccountService, including OAuth account linking."""

import pytest

from src.vault.exceptions import InvalidCredentialsError, ValidationError
from src.vault.features.auth.services import AccountService
from src.vault.services.auth.models import ExternalProfile
from src.vault.services.auth.passwords import PasswordHasher


@pytest.fixture
def accounts(fake_db) -> AccountService:
    return AccountService(fake_db, PasswordHasher(rounds=4))


def github_profile(**overrides) -> ExternalProfile:
    data = {
        "provider": "github",
        "provider_id": 101,
        "username": "octocat",
        "display_name": "The Octocat",
        "email": "octo@example.com",
        "avatar_url": "https://avatars/101",
        "access_token": "gho_first",
    }
    data.update(overrides)
    return ExternalProfile(**data)


class TestRegisterAndAuthenticate:
    def test_register_stores_hash_not_password(self, accounts: AccountService) -> None:
        user = accounts.register("alice", "a@x.com", "pw123456", "Alice")

        assert user["password_hash"] != "pw123456"
        assert accounts.hasher.verify("pw123456", user["password_hash"])

    def test_register_requires_fields(self, accounts: AccountService) -> None:
        with pytest.raises(ValidationError):
            accounts.register("alice", None, "pw123456", None)

    def test_name_is_optional(self, accounts: AccountService) -> None:
        user = accounts.register("alice", "a@x.com", "pw123456", None)

        assert user["name"] is None

    def test_authenticate_wrong_password(self, accounts: AccountService) -> None:
        accounts.register("alice", "a@x.com", "pw123456", None)

        with pytest.raises(InvalidCredentialsError):
            accounts.authenticate("alice", "nope")

    def test_authenticate_by_email(self, accounts: AccountService) -> None:
        created = accounts.register("alice", "a@x.com", "pw123456", None)

        assert accounts.authenticate("a@x.com", "pw123456")["id"] == created["id"]


class TestLinkExternalProfile:
    def test_first_login_creates_user(self, accounts: AccountService, fake_db) -> None:
        user = accounts.link_external_profile(github_profile())

        assert user["username"] == "octocat"
        assert user["name"] == "The Octocat"
        assert user["email"] == "octo@example.com"
        assert user["github_id"] == 101
        assert user["github_access_token"] == "gho_first"
        assert user.get("password_hash") is None
        assert len(fake_db.tables["users"]) == 1

    def test_repeat_login_updates_in_place(self, accounts: AccountService, fake_db) -> None:
        first = accounts.link_external_profile(github_profile())

        second = accounts.link_external_profile(
            github_profile(access_token="gho_second", avatar_url="https://avatars/new")
        )

        assert second["id"] == first["id"]
        assert second["github_access_token"] == "gho_second"
        assert second["github_avatar"] == "https://avatars/new"
        assert len(fake_db.tables["users"]) == 1

    def test_merges_with_local_account_by_email(self, accounts: AccountService, fake_db) -> None:
        local = accounts.register("alice", "octo@example.com", "pw123456", "Alice")

        linked = accounts.link_external_profile(github_profile())

        assert linked["id"] == local["id"]
        assert linked["username"] == "alice"
        assert linked["github_username"] == "octocat"
        assert accounts.authenticate("alice", "pw123456")["id"] == local["id"]
        assert len(fake_db.tables["users"]) == 1

    def test_github_id_match_wins_over_email(self, accounts: AccountService, fake_db) -> None:
        linked = accounts.link_external_profile(github_profile())

        relinked = accounts.link_external_profile(github_profile(email="changed@example.com"))

        assert relinked["id"] == linked["id"]

    def test_missing_email_gets_placeholder(self, accounts: AccountService) -> None:
        user = accounts.link_external_profile(github_profile(email=None, display_name=None))

        assert user["email"] == "octocat@github.local"
        assert user["name"] == "octocat"
