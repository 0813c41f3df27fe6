import logging
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from backoffice.core.exceptions import NotFoundError, UniqueConstraintConflict

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def is_unique_violation(
    error: IntegrityError, constraint: str, table: str, columns: Sequence[str]
) -> bool:
    """
    Checks whether an IntegrityError was caused by the given compound key.

    PostgreSQL reports the constraint name, SQLite only the column list
    ("UNIQUE constraint failed: sales.store_id, sales.currency, sales.date").
    """
    message = str(error.orig) if error.orig is not None else str(error)
    if constraint in message:
        return True
    if "UNIQUE constraint failed" in message:
        failed = message.split("UNIQUE constraint failed:", 1)[1]
        failed_columns = {part.strip() for part in failed.split(",")}
        return failed_columns == {f"{table}.{column}" for column in columns}
    return False


class BaseRepository(Generic[ModelT]):
    model: Type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, entity_id: int) -> Optional[ModelT]:
        return await self.session.get(self.model, entity_id)

    async def get_or_raise(self, entity_id: int) -> ModelT:
        entity = await self.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.model.__name__, entity_id)
        return entity

    async def get_all(self) -> List[ModelT]:
        result = await self.session.execute(select(self.model).order_by(self.model.id))
        return result.scalars().all()

    async def count(self, **filters: Any) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(self.model).filter_by(**filters)
        )
        return result.scalar() or 0

    async def create(self, **fields: Any) -> ModelT:
        entity = self.model(**fields)
        self.session.add(entity)
        await self._commit()
        await self.session.refresh(entity)
        return entity

    async def update(self, entity: ModelT, **fields: Any) -> ModelT:
        for name, value in fields.items():
            setattr(entity, name, value)
        self.session.add(entity)
        await self._commit()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: ModelT) -> None:
        await self.session.delete(entity)
        await self._commit()

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to write {self.model.__tablename__}: {e}")
            raise

    async def _commit_unique(
        self, constraint: str, columns: Sequence[str], key: Dict[str, Any]
    ) -> None:
        """Commit, translating a violation of `constraint` into UniqueConstraintConflict."""
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if is_unique_violation(e, constraint, self.model.__tablename__, columns):
                logger.warning(f"Unique key {constraint} conflict for {key}")
                raise UniqueConstraintConflict(constraint, key) from e
            logger.error(f"Integrity error on {self.model.__tablename__}: {e}")
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to write {self.model.__tablename__}: {e}")
            raise
