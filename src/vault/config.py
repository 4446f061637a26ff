"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The instance is frozen: it is built once at startup and handed to every
    component that needs it.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True
    )

    # System Configuration
    debug: bool = False
    log_level: str = "INFO"
    client_origin: str = "http://localhost:5173"
    cors_origins: str = "http://localhost:5173"
    rate_limit_enabled: bool = True

    # Session Configuration
    jwt_secret: str = "dev-secret"
    jwt_algorithm: str = "HS256"
    session_ttl_days: int = 7
    session_cookie_name: str = "token"
    cookie_secure: bool = False
    bcrypt_rounds: int = 10

    # Supabase Configuration
    supabase_url: str = "https://test.supabase.co"
    supabase_service_role_key: str = "test-service-role-key"

    # GitHub OAuth Configuration
    github_client_id: str = ""
    github_client_secret: str = ""
    github_callback_url: str = "http://localhost:4000/auth/github/callback"
    github_oauth_scopes: str = "read:user user:email repo"
    github_authorize_url: str = "https://github.com/login/oauth/authorize"
    github_token_url: str = "https://github.com/login/oauth/access_token"
    github_api_url: str = "https://api.github.com"
    http_timeout_seconds: float = 10.0

    # PostHog Configuration
    posthog_api_key: str | None = None
    posthog_host: str = "https://app.posthog.com"

    @property
    def session_ttl_seconds(self) -> int:
        return self.session_ttl_days * 24 * 60 * 60


settings = Settings()
