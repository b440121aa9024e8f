# workspace_rbac/test/unit/test_config.py

# Para Rodar o Script:
# pytest workspace_rbac/test/unit/test_config.py -v

import pytest
from pydantic import ValidationError

from workspace_rbac.adapters.configuration.config import Settings


def test_database_url_assembled_from_parts():
    s = Settings(
        DATABASE_URL=None,
        POSTGRES_USER="u",
        POSTGRES_PASSWORD="p",
        POSTGRES_HOST="db",
        POSTGRES_PORT=5433,
        POSTGRES_DB="rbac",
    )
    assert s.DATABASE_URL == "postgresql+asyncpg://u:p@db:5433/rbac"


def test_explicit_database_url_wins():
    s = Settings(DATABASE_URL="sqlite+aiosqlite:///:memory:")
    assert s.DATABASE_URL == "sqlite+aiosqlite:///:memory:"


def test_grant_retries_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(GRANT_WRITE_MAX_RETRIES=0)


def test_sweep_mode_validation():
    assert Settings(IMPERSONATION_SWEEP_MODE="ALL").IMPERSONATION_SWEEP_MODE == "all"
    with pytest.raises(ValidationError):
        Settings(IMPERSONATION_SWEEP_MODE="never")


def test_cors_origins_from_comma_separated_string():
    s = Settings(CORS_ORIGINS="http://a.test, http://b.test")
    assert s.CORS_ORIGINS == ["http://a.test", "http://b.test"]


def test_invalid_log_level():
    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="loud")
