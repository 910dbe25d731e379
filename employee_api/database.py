# database.py
import logging
from typing import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy import event
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

logger = logging.getLogger(__name__)


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def register_sqlite_functions(dbapi_connection, connection_record) -> None:
    # SQLite lower() and LIKE only fold ASCII; filters.casefold renders to this.
    dbapi_connection.create_function("casefold", 1, _casefold)


class Database:
    """Long-lived storage handle: one engine and its session factory."""

    def __init__(self, url: str, echo: bool = False):
        is_sqlite = url.startswith("sqlite+")
        connect_args = {"check_same_thread": False} if is_sqlite else {}
        self.engine = create_async_engine(url, echo=echo, future=True, connect_args=connect_args)
        if is_sqlite:
            event.listen(self.engine.sync_engine, "connect", register_sqlite_functions)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Initializes the database tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables ready at %s", self.engine.url.render_as_string(hide_password=True))

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the storage handle built at startup."""
    return request.app.state.database


async def get_async_session(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency to get an async database session."""
    async with database.session_factory() as session:
        yield session
