"""Async database engine and session management."""

import os
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

# Database path from environment or default to data/parlor.db relative to server/
_default_db_path = Path(__file__).parent.parent.parent.parent / "data" / "parlor.db"
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite+aiosqlite:///{_default_db_path}")


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite only enforces foreign keys (and so cascades) per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine, turning on foreign keys for SQLite."""
    new_engine = create_async_engine(url, echo=False, **kwargs)
    if new_engine.dialect.name == "sqlite":
        event.listen(new_engine.sync_engine, "connect", _enable_foreign_keys)
    return new_engine


engine = make_engine(DATABASE_URL)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncSession:
    """Get a new async database session."""
    async with async_session() as session:
        yield session


def upsert(db: AsyncSession, model):
    """Return a dialect-specific INSERT supporting ON CONFLICT for model."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise ValueError(f"Upserts are not supported for the {dialect} dialect")
