"""FastAPI application entry point."""

import logging
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.vault.config import Settings, settings
from src.vault.exceptions import VaultError
from src.vault.features.auth import router as auth_router
from src.vault.features.github import router as github_router
from src.vault.features.oauth import router as oauth_router
from src.vault.features.projects import router as projects_router
from src.vault.services.analytics.posthog import PostHogService
from src.vault.services.auth.oauth import GitHubOAuthProvider
from src.vault.services.auth.passwords import PasswordHasher
from src.vault.services.auth.tokens import SessionTokenCodec
from src.vault.services.github import GitHubClient
from src.vault.services.rate_limiter import limiter

logger = logging.getLogger(__name__)


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def vault_error_handler(request: Request, exc: VaultError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _error(exc.status_code, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return _error(400, "Invalid request body")


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return _error(429, f"Rate limit exceeded: {exc.detail}")


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
    Build the application and every component it depends on.

    All components are constructed once from the given settings and stored on
    ``app.state``; handlers reach them through FastAPI dependencies.

    The rate limiter is the exception: the route decorators bind to the
    module-level ``limiter``, so its ``enabled`` flag is process-wide and the
    most recently built app decides it. Run one app per process.

    Args:
        app_settings: Settings to use (default: loaded from the environment)

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or settings
    logging.basicConfig(level=app_settings.log_level.upper())

    app = FastAPI(
        title="Code Vault API",
        description="Code snippet and project vault with GitHub integration",
        version="0.1.0",
        debug=app_settings.debug,
    )

    app.state.settings = app_settings
    app.state.password_hasher = PasswordHasher(rounds=app_settings.bcrypt_rounds)
    app.state.token_codec = SessionTokenCodec(
        secret=app_settings.jwt_secret,
        algorithm=app_settings.jwt_algorithm,
        ttl=timedelta(days=app_settings.session_ttl_days),
    )
    github_oauth = GitHubOAuthProvider(app_settings)
    app.state.oauth_providers = {github_oauth.name: github_oauth}
    app.state.github_client = GitHubClient(app_settings)
    app.state.analytics = PostHogService(app_settings)

    if limiter.enabled != app_settings.rate_limit_enabled:
        logger.info(f"Rate limiting enabled: {app_settings.rate_limit_enabled}")
    limiter.enabled = app_settings.rate_limit_enabled
    app.state.limiter = limiter

    app.add_exception_handler(VaultError, vault_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

    origins = [origin.strip() for origin in app_settings.cors_origins.split(",") if origin.strip()]
    logger.info(f"Origins : {origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    app.include_router(auth_router, prefix="/api", tags=["auth"])
    app.include_router(projects_router, prefix="/api", tags=["projects"])
    app.include_router(github_router, prefix="/api", tags=["github"])
    app.include_router(oauth_router, tags=["oauth"])

    @app.get("/health", response_model=HealthCheckResponse)
    async def health_check() -> HealthCheckResponse:
        """Health check endpoint."""
        return HealthCheckResponse(status="healthy")

    return app


app = create_app()
