"""API handlers proxying the user's GitHub repositories."""

import logging

import httpx
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError

from src.vault.exceptions import UpstreamError, ValidationError, VaultError
from src.vault.services.auth.dependencies import get_current_user
from src.vault.services.auth.models import SessionUser
from src.vault.services.database import SupabaseQueryBuilder, get_query_builder
from src.vault.services.database.models import USERS_TABLE, GitHubRepoResponse
from src.vault.services.github import GitHubClient
from src.vault.services.rate_limiter import default_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/github")


def get_github_client(request: Request) -> GitHubClient:
    return request.app.state.github_client


def to_repo_response(repo: dict) -> GitHubRepoResponse:
    return GitHubRepoResponse(
        id=repo["id"],
        name=repo["name"],
        fullName=repo["full_name"],
        private=repo["private"],
        description=repo.get("description"),
        language=repo.get("language"),
        url=repo["html_url"],
        defaultBranch=repo.get("default_branch"),
        pushedAt=repo.get("pushed_at"),
    )


@router.get("/repos")
@default_rate_limit
async def list_repos(
    request: Request,
    current_user: SessionUser = Depends(get_current_user),
    db: SupabaseQueryBuilder = Depends(get_query_builder),
    github: GitHubClient = Depends(get_github_client),
) -> dict[str, list[GitHubRepoResponse]]:
    """
    List the user's GitHub repositories, most recently updated first.

    Raises:
        ValidationError: 400 if the user has not connected GitHub
        UpstreamError: 500 if GitHub or the database fails
    """
    try:
        user = db.get_by_id(USERS_TABLE, current_user.id, "github_access_token, github_username")
    except VaultError:
        raise
    except Exception as e:
        logger.error(f"Error loading GitHub token for user {current_user.id}: {e}", exc_info=True)
        raise UpstreamError("Failed to fetch GitHub repos") from e

    if not user or not user.get("github_access_token"):
        raise ValidationError("GitHub not connected for this user")

    try:
        repos = await github.get_repos(user["github_access_token"])
        return {"repos": [to_repo_response(repo) for repo in repos]}
    except httpx.HTTPStatusError as e:
        logger.error(
            f"GitHub repo listing failed: {e.response.status_code} {e.response.text}",
            extra={"user_id": current_user.id},
        )
        raise UpstreamError("Failed to fetch GitHub repos") from e
    except httpx.HTTPError as e:
        logger.error(f"GitHub repo listing failed: {e}", extra={"user_id": current_user.id})
        raise UpstreamError("Failed to fetch GitHub repos") from e
    except (KeyError, TypeError, ValueError, PydanticValidationError) as e:
        logger.error(
            f"Unexpected GitHub repo payload: {e}",
            extra={"user_id": current_user.id},
            exc_info=True,
        )
        raise UpstreamError("Failed to fetch GitHub repos") from e
