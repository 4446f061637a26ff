"""Business logic for projects and their files."""

import logging
from typing import Any

from src.vault.exceptions import ValidationError
from src.vault.services.auth.models import SessionUser
from src.vault.services.auth.ownership import require_ownership
from src.vault.services.database import SupabaseQueryBuilder
from src.vault.services.database.models import FILES_TABLE, PROJECTS_TABLE

logger = logging.getLogger(__name__)


class ProjectService:
    """Project and file operations scoped to the signed-in user."""

    def __init__(self, db: SupabaseQueryBuilder):
        self.db = db

    def create_project(
        self, user: SessionUser, name: str | None, description: str | None
    ) -> dict[str, Any]:
        if not name:
            raise ValidationError("Project name is required")

        project = self.db.insert_record(
            PROJECTS_TABLE,
            {"name": name, "description": description or "", "user_id": user.id},
        )
        logger.info(f"Project {project['id']} created by user {user.id}")
        return project

    def list_projects(self, user: SessionUser) -> list[dict[str, Any]]:
        """The user's projects, newest first."""
        return self.db.list_records(
            PROJECTS_TABLE,
            filters={"user_id": user.id},
            order_by="created_at",
            order_desc=True,
        )

    def get_owned_project(self, user: SessionUser, project_id: str) -> dict[str, Any]:
        """
        Load a project the user owns.

        Raises:
            NotFoundError: 404 if the project does not exist
            AuthorizationError: 403 if another user owns it
        """
        return require_ownership(
            project_id,
            lambda pid: self.db.get_by_id(PROJECTS_TABLE, pid, "id, user_id"),
            lambda project: project["user_id"],
            user.id,
            resource_name="Project",
        )

    def list_files(self, user: SessionUser, project_id: str) -> list[dict[str, Any]]:
        """Files of an owned project in insertion order."""
        self.get_owned_project(user, project_id)
        return self.db.list_records(
            FILES_TABLE,
            filters={"project_id": project_id},
            order_by="created_at",
            order_desc=False,
        )

    def add_file(
        self,
        user: SessionUser,
        project_id: str,
        path: str | None,
        language: str | None,
        content: str | None,
    ) -> dict[str, Any]:
        if not path or not content:
            raise ValidationError("path and content are required")

        self.get_owned_project(user, project_id)
        return self.db.insert_record(
            FILES_TABLE,
            {
                "project_id": project_id,
                "path": path,
                "language": language or None,
                "content": content,
            },
        )
