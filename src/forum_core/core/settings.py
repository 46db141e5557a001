"""Application settings and configuration.

This module defines all configuration options for the forum core.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SEVEN_DAYS_SECONDS = 60 * 60 * 24 * 7


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Forum Core", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    session_ttl_seconds: int = Field(default=SEVEN_DAYS_SECONDS, alias="SESSION_TTL_SECONDS")
    session_cookie_name: str = Field(default="auth_token", alias="SESSION_COOKIE_NAME")
    bcrypt_rounds: int = Field(default=10, ge=4, le=31, alias="BCRYPT_ROUNDS")

    # Database configuration
    database_url: str = Field(default="sqlite:///./forum.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Presentation hints consumed by the orchestration layer
    comments_page_size: int = Field(default=20, ge=1, alias="COMMENTS_PAGE_SIZE")
    gravatar_base_url: str = Field(
        default="https://www.gravatar.com/avatar/",
        alias="GRAVATAR_BASE_URL",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    def avatar_url(self, email_hash: str | None) -> str | None:
        """Return the Gravatar URL for an avatar key, or None when unknown."""
        if not email_hash:
            return None
        return f"{self.gravatar_base_url}{email_hash}?d=identicon"


settings = Settings()  # type: ignore[call-arg]
