import os
import sqlite3
from contextlib import contextmanager
from typing import Final

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from ...constants import TABLE_NAME
from ...domain.constants import DEFAULT_TEA_NAME
from ...domain.entities import TeaVariety
from ...domain.exceptions import ArgumentError, StorageError
from ...logging_config import get_logger
from ...logging_utils import log_database_operation
from .models import TeaRecord

logger: Final = get_logger(__name__)


def normalize_database_path(locator: str) -> str:
    """Turn a database locator into the absolute file path it names.

    Raises:
        ArgumentError: If the locator is empty, in-memory, or a directory
    """
    if not locator or not locator.strip():
        raise ArgumentError("locator", "A database file path must be provided")

    path = locator.strip()
    if path == ":memory:":
        # Every call opens its own connection, so an in-memory store would be empty
        raise ArgumentError("locator", "In-memory databases are not supported")

    path = os.path.abspath(os.path.expanduser(path))
    if os.path.isdir(path):
        raise ArgumentError("locator", f"Path points to a directory, expected file: {path}")
    return path


def storage_error_from(exc: Exception, action: str) -> StorageError:
    """Wrap a SQLAlchemy or sqlite3 failure with the engine's result codes."""
    original = getattr(exc, "orig", None) or exc
    extended_code = getattr(original, "sqlite_errorcode", None)
    primary_code = extended_code & 0xFF if extended_code is not None else None

    return StorageError(
        f"Could not {action}: {original}",
        primary_code=primary_code,
        extended_code=extended_code if extended_code != primary_code else None,
    )


@contextmanager
def translate_storage_errors(action: str):
    """Re-raise any storage engine failure inside the block as StorageError."""
    try:
        yield
    except (SQLAlchemyError, sqlite3.Error) as exc:
        error = storage_error_from(exc, action)
        log_database_operation(
            operation=action,
            table=TABLE_NAME,
            success=False,
            error_message=str(exc),
            primary_code=error.primary_code,
            extended_code=error.extended_code,
        )
        raise error from exc


class SqliteStore:
    """Handle on one SQLite database file.

    The engine uses ``NullPool``, so every session opens its own connection
    and closes it when the session ends; nothing stays open between calls.
    """

    def __init__(self, locator: str):
        self.path = normalize_database_path(locator)
        self.engine: AsyncEngine = create_async_engine(
            f"sqlite+aiosqlite:///{self.path}", poolclass=NullPool
        )

    def session(self) -> AsyncSession:
        return AsyncSession(self.engine, expire_on_commit=False)

    async def ensure_schema(self) -> bool:
        """Create the table if absent and seed it when empty.

        Returns:
            True if the default tea was inserted
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(
                SQLModel.metadata.create_all,
                tables=[TeaRecord.__table__],  # type: ignore[attr-defined]
            )

        async with self.session() as session:
            count = await session.scalar(select(func.count()).select_from(TeaRecord))
            if count:
                return False

            session.add(TeaRecord.from_domain(TeaVariety(DEFAULT_TEA_NAME)))
            await session.commit()

        log_database_operation(
            operation="seed", table=TABLE_NAME, success=True, tea_name=DEFAULT_TEA_NAME
        )
        logger.info("Seeded empty tea database", path=self.path, tea_name=DEFAULT_TEA_NAME)
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()
