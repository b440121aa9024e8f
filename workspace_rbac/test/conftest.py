# workspace_rbac/test/conftest.py

# Para Rodar os testes:
# pytest workspace_rbac/test -v

import os

# Banco em memória para os testes; precisa estar definido antes de importar a aplicação
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("IMPERSONATION_SWEEP_MODE", "overdue")

from typing import Iterable, Optional
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from workspace_rbac.adapters.outbound.persistence.database import get_db
from workspace_rbac.adapters.outbound.persistence.models import Base, User, UserWorkspace, Workspace
from workspace_rbac.adapters.outbound.persistence.models.base_model import register_all_events
from workspace_rbac.adapters.outbound.security.token_manager import TokenManager
from workspace_rbac.application.use_cases.permission_catalog_use_cases import AsyncPermissionCatalogService
from workspace_rbac.domain.models.workspace import WorkspaceAccessLevel
from workspace_rbac.main import app

register_all_events()


@pytest_asyncio.fixture
async def engine():
    """Banco novo e isolado para cada teste."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db_session: AsyncSession):
    """Factory: cria um usuário persistido."""

    async def _create(email: Optional[str] = None, is_superuser: bool = False, is_active: bool = True) -> User:
        user = User(
            id=uuid4(),
            email=email or f"usertest-{uuid4()}@example.com",
            first_name="Test",
            last_name="User",
            is_active=is_active,
            is_superuser=is_superuser,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _create


@pytest.fixture
def create_workspace(db_session: AsyncSession):
    """
    Factory: cria um workspace sem bootstrap (sem permissões), opcionalmente
    com vínculos de membros.
    """

    async def _create(owner: User, members: Iterable[tuple] = (), name: str = "Test Workspace") -> Workspace:
        workspace = Workspace(id=uuid4(), name=name, owner_id=owner.id, is_active=True, created_by=owner.id)
        db_session.add(workspace)
        await db_session.flush()

        db_session.add(UserWorkspace(
            user_id=owner.id, workspace_id=workspace.id, access_level=WorkspaceAccessLevel.OWNER, is_active=True
        ))
        for user, level in members:
            db_session.add(UserWorkspace(
                user_id=user.id, workspace_id=workspace.id, access_level=level, is_active=True
            ))
        await db_session.commit()
        return workspace

    return _create


@pytest_asyncio.fixture
async def seeded_catalog(db_session: AsyncSession) -> int:
    return await AsyncPermissionCatalogService(db_session).seed_all_permissions()


def auth_headers(user: User, workspace_id=None) -> dict:
    headers = {"Authorization": f"Bearer {TokenManager.create_access_token(str(user.id))}"}
    if workspace_id is not None:
        headers["X-Workspace-Id"] = str(workspace_id)
    return headers


@pytest.fixture
def make_headers():
    return auth_headers
