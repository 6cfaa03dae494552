"""Service test fixtures — async DB, gateway, service + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the users table
    - app.state.db_manager swapped for a manager bound to the test engine
    - broken_manager points at an empty database: every query fails

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for CRUD paths
    - StaticPool: one shared connection so every session sees the same in-memory DB
    - db_manager built with __new__: bypasses pool_size/max_overflow, which StaticPool rejects
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from app.db.base import Base
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.user_repository import SqlUserRepository
from app.models.user import User  # noqa: F401
from app.services.user_service import UserService
from app.main import app


def _manager_for(engine) -> DatabaseSessionManager:
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = engine
    manager._session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
    return manager


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return _manager_for(test_engine)


@pytest.fixture
async def broken_manager():
    """Manager over a database without the users table."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    yield _manager_for(engine)
    await engine.dispose()


@pytest.fixture
def repo(db_manager):
    return SqlUserRepository(db_manager)


@pytest.fixture
def service(repo):
    return UserService(repo)


@pytest.fixture
async def client(db_manager):
    """FastAPI test client with the pool handle pointed at the test DB."""
    original_manager = getattr(app.state, "db_manager", None)
    app.state.db_manager = db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.state.db_manager = original_manager


@pytest.fixture
async def broken_client(broken_manager):
    """FastAPI test client whose database rejects every query."""
    original_manager = getattr(app.state, "db_manager", None)
    app.state.db_manager = broken_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.state.db_manager = original_manager
