"""Generic database utility functions for Supabase interactions."""

import logging
from typing import Any, NoReturn

from fastapi import Request
from postgrest.exceptions import APIError
from supabase import Client

from src.vault.exceptions import ConflictError, UpstreamError
from src.vault.services.database.connection import get_supabase_admin_client

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATEs
UNIQUE_VIOLATION = "23505"
INVALID_TEXT_REPRESENTATION = "22P02"


class SupabaseQueryBuilder:
    """Helper class for building and executing Supabase queries.

    PostgREST failures are translated into the application error taxonomy so
    callers never see driver-specific exceptions.
    """

    def __init__(self, client: Client) -> None:
        """
        Initialize query builder.

        Args:
            client: Supabase client instance
        """
        self.client = client

    def get_by_id(self, table: str, record_id: Any, columns: str = "*") -> dict[str, Any] | None:
        """
        Fetch a single record by ID.

        Args:
            table: Table name
            record_id: Record ID
            columns: Columns to select (default: "*")

        Returns:
            Record dictionary or None if not found

        Example:
            >>> builder = SupabaseQueryBuilder(client)
            >>> project = builder.get_by_id("projects", project_id, "id, user_id")
        """
        return self.get_by_field(table, "id", str(record_id), columns)

    def get_by_field(
        self, table: str, field: str, value: Any, columns: str = "*"
    ) -> dict[str, Any] | None:
        """
        Fetch a single record by field value.

        Args:
            table: Table name
            field: Field name to filter by
            value: Field value
            columns: Columns to select (default: "*")

        Returns:
            First matching record, or None when nothing matches or the value
            cannot be cast to the column type (e.g. a malformed UUID)

        Example:
            >>> builder = SupabaseQueryBuilder(client)
            >>> user = builder.get_by_field("users", "email", "user@example.com")
        """
        try:
            response = self.client.table(table).select(columns).eq(field, value).execute()
        except APIError as e:
            if e.code == INVALID_TEXT_REPRESENTATION:
                logger.info(
                    f"Malformed {field} value for {table} lookup",
                    extra={"table": table, "field": field},
                )
                return None
            self._raise_upstream(table, "select", e)
        return response.data[0] if response.data else None

    def list_records(
        self,
        table: str,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        order_desc: bool = True,
    ) -> list[dict[str, Any]]:
        """
        List records with optional filtering and ordering.

        Args:
            table: Table name
            columns: Columns to select (default: "*")
            filters: Dictionary of field:value pairs for filtering
            order_by: Column to order by
            order_desc: Order descending (default: True)

        Returns:
            List of record dictionaries

        Example:
            >>> builder = SupabaseQueryBuilder(client)
            >>> files = builder.list_records(
            ...     "files",
            ...     filters={"project_id": project_id},
            ...     order_by="created_at",
            ...     order_desc=False,
            ... )
        """
        query = self.client.table(table).select(columns)

        if filters:
            for field, value in filters.items():
                query = query.eq(field, value)

        if order_by:
            query = query.order(order_by, desc=order_desc)

        try:
            response = query.execute()
        except APIError as e:
            self._raise_upstream(table, "list", e)
        return response.data

    def insert_record(self, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a single record.

        Args:
            table: Table name
            data: Record data dictionary

        Returns:
            Inserted record dictionary

        Raises:
            ConflictError: If a unique constraint is violated
            UpstreamError: If the insert fails for any other reason

        Example:
            >>> builder = SupabaseQueryBuilder(client)
            >>> project = builder.insert_record(
            ...     "projects", {"name": "dotfiles", "description": "", "user_id": user_id}
            ... )
        """
        try:
            response = self.client.table(table).insert(data).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.info(
                    f"Unique constraint violated on insert into {table}",
                    extra={"table": table, "db_message": e.message},
                )
                raise ConflictError() from e
            self._raise_upstream(table, "insert", e)

        if not response.data:
            logger.error(f"Insert into {table} returned no rows", extra={"table": table})
            raise UpstreamError()
        return response.data[0]

    def update_record(self, table: str, record_id: Any, data: dict[str, Any]) -> dict[str, Any]:
        """
        Update a record by ID.

        Args:
            table: Table name
            record_id: Record ID
            data: Fields to update

        Returns:
            Updated record dictionary

        Raises:
            ConflictError: If the update violates a unique constraint
            UpstreamError: If the record vanished or the update failed

        Example:
            >>> builder = SupabaseQueryBuilder(client)
            >>> updated = builder.update_record("users", user_id, {"github_avatar": url})
        """
        try:
            response = self.client.table(table).update(data).eq("id", str(record_id)).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise ConflictError() from e
            self._raise_upstream(table, "update", e)

        if not response.data:
            logger.error(
                f"Update of {table} record {record_id} returned no rows",
                extra={"table": table, "record_id": str(record_id)},
            )
            raise UpstreamError()
        return response.data[0]

    def _raise_upstream(self, table: str, operation: str, error: APIError) -> NoReturn:
        logger.error(
            f"Supabase {operation} on {table} failed: {error.message}",
            extra={"table": table, "operation": operation, "code": error.code},
        )
        raise UpstreamError() from error


def get_query_builder(request: Request) -> SupabaseQueryBuilder:
    """
    FastAPI dependency returning a query builder bound to the admin client.

    Returns:
        SupabaseQueryBuilder built from the application's settings
    """
    return SupabaseQueryBuilder(get_supabase_admin_client(request.app.state.settings))
