"""Runtime settings for the holdings API, read once at import time."""

from enum import Enum
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("json", "text")
_LOCAL_HOSTS = ("localhost", "127.0.0.1")


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class ConfigurationError(Exception):
    """Settings are unusable in the current environment."""


class Settings(BaseSettings):
    """Holdings API settings.

    Every field maps to the upper-cased environment variable of the same
    name (``DATABASE_URL``, ``SEED_SAMPLE_DATA``...). A ``.env`` file in the
    working directory is read as well; real environment variables win.
    """

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="development or production",
    )

    # Comma-separated; the panel client dev servers by default.
    cors_allowed_origins: str = Field(
        default="http://localhost:5173,http://localhost:4568",
        description="Origins allowed to call the API from a browser",
    )

    database_url: str = Field(
        default="sqlite:///./holdings.db",
        description="SQLAlchemy URL of the hierarchy database",
    )
    # Pool settings apply to server databases only.
    db_pool_size: int = Field(default=5, description="Persistent pooled connections")
    db_max_overflow: int = Field(default=10, description="Extra connections under load")
    db_pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    db_pool_recycle: int = Field(default=1800, description="Seconds before a connection is replaced")

    seed_sample_data: bool = Field(
        default=True,
        description="Seed a demo shareholder chain when the database has no shareholders",
    )

    log_level: str = Field(default="INFO", description="Root logger level")
    log_format: str = Field(default="json", description="'json' lines or 'text'")
    slow_request_ms: float = Field(
        default=1000.0,
        description="Requests slower than this are logged at WARNING (0 disables)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.lower()
        if fmt not in _LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(_LOG_FORMATS)}")
        return fmt

    def get_cors_origins(self) -> List[str]:
        """Configured origins as a list. A wildcard origin is refused."""
        origins = [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]
        if "*" in origins:
            raise ValueError("Wildcard CORS origin is not allowed; list origins in CORS_ALLOWED_ORIGINS")
        return origins

    def localhost_origins(self) -> List[str]:
        return [o for o in self.get_cors_origins() if any(h in o for h in _LOCAL_HOSTS)]

    def validate_production_config(self) -> None:
        """Refuse to start in production while local dev origins are allowed.

        Raises:
            ConfigurationError: production environment with localhost CORS origins.
        """
        if self.environment != Environment.PRODUCTION:
            return
        local = self.localhost_origins()
        if local:
            raise ConfigurationError(
                f"CORS allows localhost origins in production: {local}. "
                "Set CORS_ALLOWED_ORIGINS to the deployed client origins."
            )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


settings = Settings()
