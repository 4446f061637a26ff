"""API handlers for projects and project files."""

import logging

from fastapi import APIRouter, Depends, Request

from src.vault.exceptions import UpstreamError, VaultError
from src.vault.features.projects.schemas import (
    FileCreateRequest,
    FileEnvelope,
    FileListEnvelope,
    ProjectCreateRequest,
    ProjectEnvelope,
    ProjectListEnvelope,
)
from src.vault.features.projects.services import ProjectService
from src.vault.services.auth.dependencies import get_current_user
from src.vault.services.auth.models import SessionUser
from src.vault.services.database import SupabaseQueryBuilder, get_query_builder
from src.vault.services.database.models import FileResponse, ProjectResponse
from src.vault.services.rate_limiter import default_rate_limit, write_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects")


def get_project_service(db: SupabaseQueryBuilder = Depends(get_query_builder)) -> ProjectService:
    return ProjectService(db)


@router.post("", response_model=ProjectEnvelope)
@write_rate_limit
async def create_project(
    request: Request,
    body: ProjectCreateRequest,
    current_user: SessionUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectEnvelope:
    """
    Create a project owned by the current user.

    Raises:
        ValidationError: 400 if name is missing
        UpstreamError: 500 if the database fails
    """
    try:
        project = projects.create_project(current_user, body.name, body.description)
    except VaultError:
        raise
    except Exception as e:
        logger.error(f"Error creating project for user {current_user.id}: {e}", exc_info=True)
        raise UpstreamError("Failed to create project") from e

    return ProjectEnvelope(project=ProjectResponse.model_validate(project))


@router.get("", response_model=ProjectListEnvelope)
@default_rate_limit
async def list_projects(
    request: Request,
    current_user: SessionUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectListEnvelope:
    """List the current user's projects, newest first."""
    try:
        rows = projects.list_projects(current_user)
    except VaultError:
        raise
    except Exception as e:
        logger.error(f"Error fetching projects for user {current_user.id}: {e}", exc_info=True)
        raise UpstreamError("Failed to fetch projects") from e

    return ProjectListEnvelope(projects=[ProjectResponse.model_validate(row) for row in rows])


@router.get("/{project_id}/files", response_model=FileListEnvelope)
@default_rate_limit
async def list_files(
    request: Request,
    project_id: str,
    current_user: SessionUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
) -> FileListEnvelope:
    """
    List a project's files, oldest first.

    Raises:
        NotFoundError: 404 if the project does not exist
        AuthorizationError: 403 if the project belongs to another user
    """
    try:
        rows = projects.list_files(current_user, project_id)
    except VaultError:
        raise
    except Exception as e:
        logger.error(f"Error fetching files of project {project_id}: {e}", exc_info=True)
        raise UpstreamError("Failed to fetch files") from e

    return FileListEnvelope(files=[FileResponse.model_validate(row) for row in rows])


@router.post("/{project_id}/files", response_model=FileEnvelope)
@write_rate_limit
async def add_file(
    request: Request,
    project_id: str,
    body: FileCreateRequest,
    current_user: SessionUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
) -> FileEnvelope:
    """
    Paste a file into a project.

    Raises:
        ValidationError: 400 if path or content is missing
        NotFoundError: 404 if the project does not exist
        AuthorizationError: 403 if the project belongs to another user
    """
    try:
        file = projects.add_file(
            current_user, project_id, body.path, body.language, body.content
        )
    except VaultError:
        raise
    except Exception as e:
        logger.error(f"Error adding file to project {project_id}: {e}", exc_info=True)
        raise UpstreamError("Failed to add file") from e

    return FileEnvelope(file=FileResponse.model_validate(file))
