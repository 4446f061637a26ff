from pydantic import BaseModel

from src.vault.services.database.models import FileResponse, ProjectResponse


class ProjectCreateRequest(BaseModel):
    name: str | None = None
    description: str | None = None


class FileCreateRequest(BaseModel):
    path: str | None = None
    language: str | None = None
    content: str | None = None


class ProjectEnvelope(BaseModel):
    project: ProjectResponse


class ProjectListEnvelope(BaseModel):
    projects: list[ProjectResponse]


class FileEnvelope(BaseModel):
    file: FileResponse


class FileListEnvelope(BaseModel):
    files: list[FileResponse]
