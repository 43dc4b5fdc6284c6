"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///./farmarea.db",
        description="SQLAlchemy database URL (sqlite or postgresql+psycopg)"
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL statements to the log"
    )

    # Session identity (stands in for an authenticated user)
    session_user_email: str = Field(
        default="alex@farmarea.com",
        description="Email of the user every request is scoped to"
    )
    session_user_name: str = Field(
        default="Alex Farmer",
        description="Display name used when the session user is first created"
    )
    session_user_role: str = Field(
        default="Farm Manager",
        description="Role used when the session user is first created"
    )
    session_user_avatar: str = Field(
        default="https://github.com/shadcn.png",
        description="Avatar URL used when the session user is first created"
    )
    session_user_bio: str = Field(
        default="Managing operations at North Valley Farm since 2018.",
        description="Bio used when the session user is first created"
    )
    default_farm_name: str = Field(
        default="FarmArea",
        description="Farm name returned before any settings are saved"
    )

    # Client Configuration (used by the view controllers)
    api_base_url: str = Field(
        default="http://localhost:8000/api",
        description="Base URL of the FarmArea REST API"
    )
    api_timeout_seconds: float = Field(
        default=30.0,
        description="Transport timeout for API calls"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Whether per-client rate limiting is applied"
    )
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="FarmArea API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        env_prefix = "FARMAREA_"
        case_sensitive = False


# Global settings instance
settings = Settings()
