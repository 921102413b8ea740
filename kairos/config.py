"""Application configuration management."""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from kairos.utils.exceptions import ConfigurationError

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    PROJECT_NAME: str = "Kairos"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: Optional[str] = Field(
        None, description="Full SQLAlchemy database URL; overrides the PG* variables"
    )

    # Discrete connection settings, used when DATABASE_URL is not given
    PGHOST: Optional[str] = None
    PGPORT: str = "5432"
    PGUSER: Optional[str] = None
    PGPASSWORD: Optional[str] = None
    KAIROS_DB: Optional[str] = Field(None, description="Name of the flashcard database")
    PGSSLMODE: str = "require"

    DB_POOL_SIZE: int = Field(10, ge=1)
    DB_MAX_OVERFLOW: int = Field(20, ge=0)
    DB_POOL_TIMEOUT_SECONDS: float = Field(10.0, gt=0)
    DB_CONNECT_TIMEOUT_SECONDS: int = Field(10, ge=1)
    DB_STATEMENT_TIMEOUT_MS: int = Field(5000, ge=0, description="0 disables the limit")

    FSRS_DESIRED_RETENTION: float = Field(0.9, gt=0, lt=1)
    FSRS_MAXIMUM_INTERVAL_DAYS: int = Field(36500, ge=1)
    FSRS_ENABLE_FUZZING: bool = False
    FSRS_LEARNING_STEPS_MINUTES: List[float] = Field(default_factory=lambda: [1.0, 10.0])
    FSRS_RELEARNING_STEPS_MINUTES: List[float] = Field(default_factory=lambda: [10.0])

    TEMPLATES_DIR: Path = PACKAGE_DIR / "templates"

    model_config = SettingsConfigDict(
        env_file=PACKAGE_DIR.parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def resolve_database_url(self) -> str:
        """Return the database URL, assembling it from PG* variables if needed."""

        if self.DATABASE_URL:
            return self.DATABASE_URL

        required = {
            "PGHOST": self.PGHOST,
            "PGUSER": self.PGUSER,
            "PGPASSWORD": self.PGPASSWORD,
            "KAIROS_DB": self.KAIROS_DB,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigurationError(
                "Missing required environment variables: " + ", ".join(missing),
                details={"missing": missing},
            )
        try:
            port = int(self.PGPORT)
        except ValueError as exc:
            raise ConfigurationError(f"PGPORT must be an integer, got {self.PGPORT!r}") from exc

        url = URL.create(
            "postgresql+psycopg2",
            username=self.PGUSER,
            password=self.PGPASSWORD,
            host=self.PGHOST,
            port=port,
            database=self.KAIROS_DB,
            query={"sslmode": self.PGSSLMODE},
        )
        return url.render_as_string(hide_password=False)


def load_settings(**overrides) -> Settings:
    """Build settings, converting validation failures into ConfigurationError."""

    try:
        return Settings(**overrides)
    except PydanticValidationError as exc:
        raise ConfigurationError("Invalid configuration", details={"errors": exc.errors()}) from exc


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return load_settings()
