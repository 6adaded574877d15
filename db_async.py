# db_async.py — async engine, declarative base and session helpers
from __future__ import annotations
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, AsyncIterator

from dotenv import load_dotenv
from sqlalchemy import MetaData, event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

# Load .env from project root
load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

ASYNC_DATABASE_URL = os.getenv("ASYNC_DATABASE_URL")
if not ASYNC_DATABASE_URL:
    raise RuntimeError("ASYNC_DATABASE_URL not set in .env")

SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in {"1", "true", "yes"}


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless asked per connection."""
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _fk_pragma(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(ASYNC_DATABASE_URL, pool_pre_ping=True, echo=SQL_ECHO)
enable_sqlite_foreign_keys(engine)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

# Stable constraint names so Alembic diffs and IntegrityError messages line up
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session

@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Session for CLI scripts (outside FastAPI dependency injection)."""
    async with SessionLocal() as session:
        yield session
