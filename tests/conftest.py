import asyncio
import os
import uuid

# must be set before db_async / auth are imported
os.environ["ASYNC_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret"

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from db_async import Base, enable_sqlite_foreign_keys, get_async_session
import models_park  # noqa: F401
from models_user import User


def make_engine(path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)
    enable_sqlite_foreign_keys(engine)
    return engine


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(tmp_path / "photopark.db")

    async def _create():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create())
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    asyncio.run(engine.dispose())


@pytest.fixture
def seed(session_factory):
    def _seed(*rows):
        async def _add():
            async with session_factory() as session:
                session.add_all(rows)
                await session.commit()

        asyncio.run(_add())

    return _seed


@pytest.fixture
def admin():
    return User(
        id=uuid.uuid4(),
        email="admin@example.com",
        hashed_password="x",
        is_active=True,
        is_superuser=True,
        is_verified=True,
    )


@pytest.fixture
def client(session_factory, admin):
    from fastapi.testclient import TestClient

    from auth import current_superuser
    from main import app

    async def _session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session
    app.dependency_overrides[current_superuser] = lambda: admin
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
