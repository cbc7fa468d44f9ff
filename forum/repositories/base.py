"""Generic SQLAlchemy repository shared by every table."""
import logging
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from forum.database import Base
from forum.errors import DuplicateRecordError, PersistenceError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class SQLRepository(Generic[ModelT]):
    """
    CRUD helpers wrapping the request's AsyncSession.

    Reads return ``None`` (single row) or an empty list when nothing
    matches; deciding whether that is an error is the service's job.
    """

    model: type[ModelT]

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_all(self) -> list[ModelT]:
        result = await self._execute(select(self.model).order_by(self.model.id))
        return list(result.scalars().all())

    async def get_by_id(self, entity_id: int) -> ModelT | None:
        try:
            return await self.db.get(self.model, entity_id)
        except SQLAlchemyError as exc:
            raise self._wrap(exc) from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        await self._flush()
        return entity

    async def update(self, entity_id: int, **fields: Any) -> ModelT | None:
        """Apply *fields* to the row and flush; None when the row is absent."""
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return None
        for name, value in fields.items():
            setattr(entity, name, value)
        await self._flush()
        return entity

    async def delete(self, entity_id: int) -> bool:
        """Delete the row; False when it does not exist."""
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.db.delete(entity)
        await self._flush()
        return True

    # ------------------------------------------------------------------
    # Error wrapping
    # ------------------------------------------------------------------

    async def _execute(self, statement):
        try:
            return await self.db.execute(statement)
        except SQLAlchemyError as exc:
            raise self._wrap(exc) from exc

    async def _flush(self) -> None:
        try:
            await self.db.flush()
        except SQLAlchemyError as exc:
            raise self._wrap(exc) from exc

    def _wrap(self, exc: SQLAlchemyError) -> PersistenceError:
        context = {"table": self.model.__tablename__}
        if isinstance(exc, IntegrityError):
            logger.info("Integrity violation on %s: %s", context["table"], exc.orig)
            return DuplicateRecordError(context=context)
        logger.error("Database error on %s: %s", context["table"], exc)
        return PersistenceError(context=context)
