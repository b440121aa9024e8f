# workspace_rbac/adapters/outbound/persistence/seeds/permissions.py

"""
Script de seed para o catálogo de permissões.

Para rodar:
    python -m workspace_rbac.adapters.outbound.persistence.seeds.permissions
"""

import logging
from sqlalchemy import create_engine, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from workspace_rbac.adapters.configuration.config import settings
from workspace_rbac.adapters.outbound.persistence.models import Permission
from workspace_rbac.adapters.outbound.persistence.models.base_model import register_all_events
from workspace_rbac.domain.services.permission_generator import permission_generator

logger = logging.getLogger(__name__)

# Constrói a URL síncrona para o SQLAlchemy
SYNC_DB_URL = str(settings.DATABASE_URL).replace("+asyncpg", "+psycopg2").replace("+aiosqlite", "")


def run_permissions_seed(db_url: str = SYNC_DB_URL) -> int:
    """Insert the missing catalog entries. Returns how many were created."""
    register_all_events()
    engine = create_engine(db_url, future=True)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    session = SessionLocal()
    try:
        candidates = permission_generator.generate_all_permissions()
        existing = set(
            session.execute(
                select(Permission.name).where(Permission.name.in_([c.name for c in candidates]))
            ).scalars()
        )

        created = 0
        for candidate in candidates:
            if candidate.name in existing:
                logger.info(f"🟡 Permissão '{candidate.name}' já existe.")
                continue
            session.add(Permission(
                name=candidate.name,
                description=candidate.description,
                resource=candidate.resource.value,
                action=candidate.action.value,
                is_active=True,
            ))
            created += 1
            logger.info(f"🟢 Permissão '{candidate.name}' criada.")

        session.commit()
        logger.info(f"✅ Seed de permissões concluído: {created} criada(s).")
        return created

    except IntegrityError:
        # outro processo semeou ao mesmo tempo; o catálogo já está completo
        session.rollback()
        logger.warning("⚠️ Seed concorrente detectado; permissões já existentes foram mantidas.")
        return 0
    except Exception as e:
        session.rollback()
        logger.error(f"❌ Erro ao executar seed de permissões: {e}")
        raise
    finally:
        session.close()
        engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    run_permissions_seed()
