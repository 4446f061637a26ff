"""Pytest configuration and shared fixtures."""

import itertools
from datetime import UTC, datetime, timedelta
from typing import Any, Callable
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.vault.config import Settings
from src.vault.exceptions import ConflictError
from src.vault.main import create_app
from src.vault.services.database import get_query_builder

UNIQUE_COLUMNS = {
    "users": ("username", "email", "github_id"),
    "projects": (),
    "files": (),
}


class InMemoryQueryBuilder:
    """
    Dict-backed stand-in for SupabaseQueryBuilder.

    Mirrors the methods the application uses, assigns ids and strictly
    increasing created_at values, and enforces the users table's unique
    columns the way the database would.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {name: [] for name in UNIQUE_COLUMNS}
        self._clock = itertools.count()
        self._epoch = datetime(2024, 1, 1, tzinfo=UTC)

    def _project(self, row: dict[str, Any], columns: str) -> dict[str, Any]:
        if columns == "*":
            return dict(row)
        return {col.strip(): row.get(col.strip()) for col in columns.split(",")}

    def get_by_id(self, table: str, record_id: Any, columns: str = "*") -> dict[str, Any] | None:
        return self.get_by_field(table, "id", str(record_id), columns)

    def get_by_field(
        self, table: str, field: str, value: Any, columns: str = "*"
    ) -> dict[str, Any] | None:
        for row in self.tables[table]:
            if row.get(field) is not None and str(row.get(field)) == str(value):
                return self._project(row, columns)
        return None

    def list_records(
        self,
        table: str,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        order_desc: bool = True,
    ) -> list[dict[str, Any]]:
        rows = [
            row
            for row in self.tables[table]
            if all(str(row.get(k)) == str(v) for k, v in (filters or {}).items())
        ]
        if order_by:
            rows = sorted(rows, key=lambda row: row[order_by], reverse=order_desc)
        return [self._project(row, columns) for row in rows]

    def _check_unique(self, table: str, data: dict[str, Any], exclude_id: str | None = None) -> None:
        for column in UNIQUE_COLUMNS[table]:
            value = data.get(column)
            if value is None:
                continue
            for row in self.tables[table]:
                if row["id"] != exclude_id and row.get(column) == value:
                    raise ConflictError()

    def insert_record(self, table: str, data: dict[str, Any]) -> dict[str, Any]:
        self._check_unique(table, data)
        created_at = self._epoch + timedelta(seconds=next(self._clock))
        row = {"id": str(uuid4()), "created_at": created_at.isoformat(), **data}
        self.tables[table].append(row)
        return dict(row)

    def update_record(self, table: str, record_id: Any, data: dict[str, Any]) -> dict[str, Any]:
        self._check_unique(table, data, exclude_id=str(record_id))
        for row in self.tables[table]:
            if row["id"] == str(record_id):
                row.update(data)
                return dict(row)
        raise AssertionError(f"No {table} row with id {record_id}")


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a known secret, cheap bcrypt and no rate limiting."""
    return Settings(
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        rate_limit_enabled=False,
        client_origin="http://localhost:5173",
        github_client_id="client-id",
        github_client_secret="client-secret",
        posthog_api_key=None,
    )


@pytest.fixture
def fake_db() -> InMemoryQueryBuilder:
    return InMemoryQueryBuilder()


@pytest.fixture
def app(test_settings: Settings, fake_db: InMemoryQueryBuilder) -> FastAPI:
    """Application wired to the in-memory database."""
    application = create_app(test_settings)
    application.dependency_overrides[get_query_builder] = lambda: fake_db
    return application


@pytest.fixture
def make_client(app: FastAPI) -> Callable[[], TestClient]:
    """Factory for independent clients, each with its own cookie jar."""

    def _make() -> TestClient:
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client: Callable[[], TestClient]) -> TestClient:
    """
    Provide FastAPI test client for API testing.

    Example:
        >>> def test_health(client):
        >>>     response = client.get("/health")
        >>>     assert response.status_code == 200
    """
    return make_client()


@pytest.fixture
def signup(make_client: Callable[[], TestClient]) -> Callable[..., TestClient]:
    """Sign a new user up and return a client holding their session cookie."""

    def _signup(username: str, password: str = "pw123456", email: str | None = None) -> TestClient:
        user_client = make_client()
        response = user_client.post(
            "/api/auth/signup",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
                "name": username.title(),
            },
        )
        assert response.status_code == 200, response.text
        return user_client

    return _signup
