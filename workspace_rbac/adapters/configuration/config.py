# workspace_rbac/adapters/configuration/config.py

"""
Application Settings Configuration
"""

from pathlib import Path
from dotenv import load_dotenv

# .env na raiz do projeto
env_path = Path(__file__).parent.parent.parent.parent / ".env"
load_dotenv(env_path)

from pydantic import SecretStr, Field, field_validator, ConfigDict
from pydantic_settings import BaseSettings
from typing import Optional, List, Union
from logging import getLevelName


class Settings(BaseSettings):
    """
    Application Settings for environment configuration, database, auth, logging
    and the permission / impersonation core.
    """
    model_config = ConfigDict(
        env_file=str(env_path),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # General Project Info
    PROJECT_NAME: str = Field(default="Workspace RBAC", description="Name of the project")
    VERSION: str = Field(default="1.0.0", description="Application version")
    ENVIRONMENT: str = Field(default="development", description="Environment: development, production, testing")
    DEBUG: bool = Field(default=False, description="Enable debug mode (detailed error logs)")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")

    # Database
    DB_DRIVER: str = Field(default="asyncpg", description="Database driver (asyncpg)")
    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: str = Field(default="postgres")
    POSTGRES_DB: str = Field(default="workspace_rbac")
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)
    DATABASE_URL: Optional[str] = Field(default=None, description="Database connection URL")
    DB_ECHO: bool = Field(default=False, description="Echo SQL statements")

    # Auth Settings
    SECRET_KEY: SecretStr = Field(default=SecretStr("change-me"), description="JWT signing key")
    ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=120, description="Access token expiration time (minutes)")

    # Permission core
    GRANT_WRITE_MAX_RETRIES: int = Field(
        default=3, description="Attempts for a grant read-modify-write before giving up on contention"
    )
    IMPERSONATION_SWEEP_MODE: str = Field(
        default="overdue", description="Impersonation sweep strategy: overdue or all"
    )
    IMPERSONATION_HISTORY_LIMIT: int = Field(default=50, description="Default size of impersonation history")

    # Security (CORS)
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:8000", "http://127.0.0.1:8000"],
                                    description="Allowed CORS origins")

    # API Documentation
    SCHEMA_VISIBILITY: bool = Field(default=True, description="Show API docs (Swagger UI and Redoc)")

    def model_post_init(self, __context) -> None:
        """Assemble DATABASE_URL from the POSTGRES_* parts when not given directly."""
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f"postgresql+{self.DB_DRIVER}://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

    @field_validator("DEBUG", "DB_ECHO", "SCHEMA_VISIBILITY", mode="before")
    def parse_boolean(cls, v: Union[str, bool]) -> bool:
        """Convert string boolean values to proper boolean."""
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.lower() in ("true", "1", "yes", "y", "on")
        return bool(v)

    @field_validator("CORS_ORIGINS", mode="before")
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """
        Assemble CORS origins if provided as comma-separated string.
        """
        if isinstance(v, str) and not v.startswith("["):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, list):
            return v
        raise ValueError(f"Invalid CORS_ORIGINS format: {v!r}")

    @field_validator("LOG_LEVEL", mode="before")
    def validate_log_level(cls, v: str) -> str:
        """
        Validate that the log level is a valid level name.
        """
        lvl = v.upper()
        if getLevelName(lvl) == "Level %s" % lvl:
            raise ValueError(f"Invalid LOG_LEVEL: {v}")
        return lvl

    @field_validator("GRANT_WRITE_MAX_RETRIES", mode="before")
    def validate_max_retries(cls, v: Union[str, int]) -> int:
        """At least one attempt is always made."""
        if isinstance(v, str):
            try:
                v = int(v)
            except ValueError:
                raise ValueError(f"GRANT_WRITE_MAX_RETRIES must be an integer, got: {v}")
        if v < 1:
            raise ValueError(f"GRANT_WRITE_MAX_RETRIES must be >= 1, got: {v}")
        return v

    @field_validator("IMPERSONATION_SWEEP_MODE", mode="before")
    def validate_sweep_mode(cls, v: str) -> str:
        if v.lower() not in ("overdue", "all"):
            raise ValueError(f"IMPERSONATION_SWEEP_MODE must be 'overdue' or 'all', got: {v}")
        return v.lower()


# Create settings instance
settings = Settings()

# Quick debug if run directly
if __name__ == "__main__":
    import json

    print(json.dumps(settings.model_dump(mode="json"), indent=4))
