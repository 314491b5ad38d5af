"""Embedded-store backend on a local SQLite file."""

from typing import Final

from sqlalchemy import func, select

from ...application.data_service import DataService, parse_tea_id, require_saved_id
from ...constants import TABLE_NAME
from ...domain.entities import TeaVariety, validate_tea
from ...domain.exceptions import (
    ArgumentError,
    ConflictError,
    NotFoundError,
    TeaDataError,
)
from ...logging_config import get_logger
from ...logging_utils import log_database_operation
from .database import SqliteStore, normalize_database_path, translate_storage_errors
from .models import TeaRecord

logger: Final = get_logger(__name__)


class SqliteTeaService(DataService[TeaVariety]):
    """Tea data service backed by a single-table SQLite database.

    ``initialize`` creates the TeaVarieties table when missing and seeds
    "Earl Grey" into an empty table. Add, update and delete validate the tea
    first; delete refuses to remove the last remaining row. Storage engine
    failures surface as StorageError.
    """

    def __init__(self) -> None:
        self._store: SqliteStore | None = None

    @property
    def store(self) -> SqliteStore:
        if self._store is None:
            raise TeaDataError("SQLite tea service is not initialized")
        return self._store

    async def initialize_async(self, locator: str) -> None:
        path = normalize_database_path(locator)

        if self._store is not None:
            if self._store.path == path:
                logger.debug("Tea database already initialized", path=path)
                return None
            raise ArgumentError(
                "locator", f"Already initialized against {self._store.path}"
            )

        store = SqliteStore(path)
        with translate_storage_errors("initialize the tea database"):
            try:
                await store.ensure_schema()
            except BaseException:
                await store.dispose()
                raise

        self._store = store
        logger.info("Tea database initialized", path=path)
        return None

    async def find_all_async(self) -> list[TeaVariety]:
        with translate_storage_errors("list teas"):
            async with self.store.session() as session:
                result = await session.execute(
                    select(TeaRecord).order_by(TeaRecord.id)  # type: ignore[arg-type]
                )
                records = result.scalars().all()

        return [record.to_domain() for record in records]

    async def find_by_id_async(self, tea_id: object) -> TeaVariety:
        key = parse_tea_id(tea_id)

        with translate_storage_errors("find tea"):
            async with self.store.session() as session:
                record = await session.get(TeaRecord, key)

        if record is None:
            logger.warning("Tea lookup failed - not found", tea_id=key)
            raise NotFoundError(f"No tea with id {key}")
        return record.to_domain()

    async def add_async(self, tea: TeaVariety) -> TeaVariety:
        logger.debug("Adding tea", tea_name=tea.name)
        validate_tea(tea)

        record = TeaRecord.from_domain(tea)
        # The store assigns identities
        record.id = None

        with translate_storage_errors("add tea"):
            async with self.store.session() as session:
                session.add(record)
                await session.commit()

        tea.id = record.id
        log_database_operation(
            operation="create",
            table=TABLE_NAME,
            success=True,
            tea_name=tea.name,
            tea_id=tea.id,
        )
        logger.info("Tea added successfully", tea_name=tea.name, tea_id=tea.id)
        return tea

    async def update_async(self, tea: TeaVariety) -> TeaVariety:
        key = require_saved_id(tea)
        logger.debug("Updating tea", tea_id=key)
        validate_tea(tea)

        with translate_storage_errors("update tea"):
            async with self.store.session() as session:
                record = await session.get(TeaRecord, key)
                if record is None:
                    logger.warning("Tea update failed - not found", tea_id=key)
                    raise NotFoundError(f"No tea with id {key}")

                record.update_from_domain(tea)
                await session.commit()

        log_database_operation(
            operation="update", table=TABLE_NAME, success=True, tea_id=key
        )
        logger.info("Tea updated successfully", tea_name=tea.name, tea_id=key)
        return tea

    async def delete_async(self, tea: TeaVariety) -> bool:
        key = require_saved_id(tea)
        logger.debug("Deleting tea", tea_id=key)
        validate_tea(tea)

        # The count and the delete are separate statements; two concurrent
        # deletes against a two-row table can both pass this check.
        with translate_storage_errors("delete tea"):
            async with self.store.session() as session:
                count = await session.scalar(
                    select(func.count()).select_from(TeaRecord)
                )
                if (count or 0) <= 1:
                    logger.warning("Tea deletion refused - last tea", tea_id=key)
                    raise ConflictError("Cannot delete the only tea in the database")

                record = await session.get(TeaRecord, key)
                if record is None:
                    logger.warning("Tea deletion failed - not found", tea_id=key)
                    raise NotFoundError(f"No tea with id {key}")

                await session.delete(record)
                await session.commit()

        log_database_operation(
            operation="delete", table=TABLE_NAME, success=True, tea_id=key
        )
        logger.info("Tea deleted successfully", tea_id=key)
        return True
