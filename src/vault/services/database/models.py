"""Pydantic models for database entities."""

from typing import Any

from pydantic import BaseModel, ConfigDict

USERS_TABLE = "users"
PROJECTS_TABLE = "projects"
FILES_TABLE = "files"

PUBLIC_USER_COLUMNS = "id, email, username, name, github_username, github_avatar"


class UserResponse(BaseModel):
    """Public view of a user row. Secrets are never part of it."""

    model_config = ConfigDict(extra="ignore")

    id: Any
    username: str
    email: str
    name: str | None = None
    github_username: str | None = None
    github_avatar: str | None = None


class ProjectResponse(BaseModel):
    """Project record."""

    model_config = ConfigDict(extra="ignore")

    id: Any
    name: str
    description: str = ""
    user_id: Any
    created_at: str | None = None


class FileResponse(BaseModel):
    """File record stored under a project."""

    model_config = ConfigDict(extra="ignore")

    id: Any
    project_id: Any
    path: str
    language: str | None = None
    content: str
    created_at: str | None = None


class GitHubRepoResponse(BaseModel):
    """Subset of GitHub's repository fields exposed to the client."""

    id: int
    name: str
    fullName: str
    private: bool
    description: str | None = None
    language: str | None = None
    url: str
    defaultBranch: str | None = None
    pushedAt: str | None = None
