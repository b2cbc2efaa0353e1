"""
Shared repository plumbing.

Repositories own every SQL statement; services never build queries. Each
repository works on the AsyncSession it was given, so a service can run
several repositories inside one transaction.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Generic, List, Optional, Sequence, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import backend.app.db.registry  # noqa: F401  (mapper configuration needs every model)
from backend.app.core.exceptions import ConflictError, StorageError
from backend.app.db.session import utcnow

logger = logging.getLogger("fleet.storage")

ModelT = TypeVar("ModelT")


@asynccontextmanager
async def storage_errors(operation: str, resource: str = "Record") -> AsyncIterator[None]:
    """Map SQLAlchemy failures onto the domain taxonomy."""
    try:
        yield
    except IntegrityError as exc:
        logger.warning("Integrity violation during %s: %s", operation, exc.orig)
        raise ConflictError(resource, reason=f"{resource} conflicts with an existing record") from exc
    except SQLAlchemyError as exc:
        logger.error("Storage failure during %s", operation, exc_info=True)
        raise StorageError(operation, exc) from exc


@asynccontextmanager
async def transaction(db: AsyncSession, operation: str, resource: str = "Record") -> AsyncIterator[None]:
    """
    All-or-nothing write scope.

    Commits when the block finishes; rolls back on any exception so a
    failed create/update/delete never leaves a partial mutation behind.
    """
    try:
        async with storage_errors(operation, resource):
            yield
            await db.commit()
    except BaseException:
        await db.rollback()
        raise


class SoftDeleteRepository(Generic[ModelT]):
    """
    CRUD over a table with a deleted_at column.

    Reads exclude soft-deleted rows unless include_deleted is passed.
    """

    model: Any = None
    resource: str = "Record"

    def __init__(self, db: AsyncSession):
        self.db = db

    def load_options(self) -> Sequence[Any]:
        """Eager-load options applied to every read."""
        return ()

    def live(self) -> Select:
        return select(self.model).where(self.model.deleted_at.is_(None))

    def _with_options(self, stmt: Select) -> Select:
        return stmt.options(*self.load_options()).execution_options(populate_existing=True)

    async def fetch_all(self, stmt: Select) -> List[ModelT]:
        async with storage_errors(f"list {self.resource}", self.resource):
            result = await self.db.execute(self._with_options(stmt))
            return list(result.scalars().unique().all())

    async def fetch_one(self, stmt: Select) -> Optional[ModelT]:
        async with storage_errors(f"load {self.resource}", self.resource):
            result = await self.db.execute(self._with_options(stmt))
            return result.scalars().unique().one_or_none()

    async def scalar(self, stmt: Select) -> Any:
        async with storage_errors(f"query {self.resource}", self.resource):
            result = await self.db.execute(stmt)
            return result.scalar()

    async def get(self, entity_id: int, include_deleted: bool = False) -> Optional[ModelT]:
        stmt = select(self.model) if include_deleted else self.live()
        return await self.fetch_one(stmt.where(self.model.id == entity_id))

    async def add(self, entity: ModelT) -> ModelT:
        async with storage_errors(f"create {self.resource}", self.resource):
            self.db.add(entity)
            await self.db.flush()
        return entity

    async def apply(self, entity: ModelT, changes: Dict[str, Any]) -> ModelT:
        async with storage_errors(f"update {self.resource}", self.resource):
            for field, value in changes.items():
                setattr(entity, field, value)
            await self.db.flush()
        return entity

    async def soft_delete(self, entity: ModelT) -> ModelT:
        return await self.apply(entity, {"deleted_at": utcnow()})
