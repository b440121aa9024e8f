# migrations/env.py

"""
Alembic environment for the RBAC schema.

The application talks to the database through an async driver; Alembic
runs with the matching sync driver built from the same DATABASE_URL.
"""

import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# raiz do projeto no path para importar o pacote
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from workspace_rbac.adapters.configuration.config import settings
from workspace_rbac.adapters.outbound.persistence.models import Base

# driver async -> driver sync usado pelo Alembic
_SYNC_DRIVERS = {
    "+asyncpg": "+psycopg2",
    "+aiosqlite": "",
}

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _sync_url() -> str:
    url = str(settings.DATABASE_URL)
    for async_driver, sync_driver in _SYNC_DRIVERS.items():
        url = url.replace(async_driver, sync_driver)
    return url


SYNC_DB_URL = _sync_url()

# SQLite has no ALTER for most column changes; batch mode rebuilds the table
_OPTIONS = {
    "target_metadata": Base.metadata,
    "compare_type": True,
    "render_as_batch": SYNC_DB_URL.startswith("sqlite"),
}


def run_migrations_offline() -> None:
    """Emit the SQL script without a connection (alembic upgrade --sql)."""
    context.configure(
        url=SYNC_DB_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_OPTIONS,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = context.config.get_section(context.config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = SYNC_DB_URL

    connectable = engine_from_config(configuration, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, **_OPTIONS)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
