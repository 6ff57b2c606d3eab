import logging
import os
from typing import List, Literal, Optional, Tuple

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_PG_SCHEMES = ("postgres://", "postgresql://")


class InvalidEnvironmentError(RuntimeError):
    """Raised when the process environment does not describe a usable configuration."""

    def __init__(self, issues: List[Tuple[str, str]]):
        self.issues = issues
        super().__init__("Invalid environment variables.")


class Settings(BaseSettings):
    NODE_ENV: Literal["development", "production", "test"] = "production"

    # Database configuration
    DATABASE_CLIENT: Literal["sqlite", "pg"]  # REQUIRED
    DATABASE_URL: str  # REQUIRED - file path for sqlite, connection URL for pg

    API_HOST: str = "0.0.0.0"
    PORT: int = 3333
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    METRICS_ENABLED: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # Ignore extra environment variables not defined in the model
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL derived from DATABASE_CLIENT and DATABASE_URL."""
        url = self.DATABASE_URL.strip()
        if self.DATABASE_CLIENT == "sqlite":
            if url.startswith("sqlite:"):
                return url
            if url == ":memory:":
                return "sqlite://"
            return f"sqlite:///{url}"

        for scheme in _PG_SCHEMES:
            if url.startswith(scheme):
                return "postgresql+psycopg2://" + url[len(scheme):]
        return url

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


def resolve_env_file() -> str:
    """Pick the dotenv file for the current process: `.env.test` under NODE_ENV=test."""
    if os.environ.get("NODE_ENV") == "test":
        return ".env.test"
    return ".env"


def load_settings(env_file: Optional[str] = None, **overrides) -> Settings:
    """
    Build and validate the process settings.

    Every validation issue is logged as ``• <field>: <message>`` before
    InvalidEnvironmentError is raised, so operators see all problems at once.

    Args:
        env_file: dotenv file to read; defaults to resolve_env_file()
        **overrides: explicit field values, taking precedence over the environment

    Returns:
        Validated Settings
    """
    try:
        return Settings(_env_file=env_file or resolve_env_file(), **overrides)
    except ValidationError as exc:
        issues = [
            (".".join(str(part) for part in error["loc"]), error["msg"])
            for error in exc.errors()
        ]
        logger.error("Invalid environment variables:")
        for path, message in issues:
            logger.error(f"• {path}: {message}")
        raise InvalidEnvironmentError(issues) from exc
