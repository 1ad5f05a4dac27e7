"""
Alpha Tower Backend — Repository Contract and Shared Variants
===============================================================

What:  The data-access contract every entity repository honors, plus the two
       generic implementations the entity repositories specialize.
How:   Services only talk to the abstract `Repository` methods:

           find_one(id)   -> entity | None
           find()         -> list of entities
           create(**f)    -> entity (not yet persisted)
           save(entity)   -> None
           remove(entity) -> None
           commit()       -> None

       `InMemoryRepository` keeps records in a dict (unit tests).
       `SqlAlchemyRepository` flushes through a request-scoped AsyncSession.

Uniqueness:
    Both variants enforce `unique_fields` at the store level. The SQLAlchemy
    variant relies on the table's UNIQUE constraints and turns IntegrityError
    into ConflictError; the in-memory variant checks on save.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from alpha_tower.exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class Repository(ABC, Generic[ModelT]):
    """Abstract per-entity store."""

    @abstractmethod
    async def find_one(self, entity_id: uuid.UUID) -> Optional[ModelT]:
        ...

    @abstractmethod
    async def find(self) -> List[ModelT]:
        ...

    @abstractmethod
    def create(self, **fields: Any) -> ModelT:
        """Build an entity from field values without persisting it."""
        ...

    @abstractmethod
    async def save(self, entity: ModelT) -> None:
        """Insert or update the entity. Raises ConflictError on a unique clash."""
        ...

    @abstractmethod
    async def remove(self, entity: ModelT) -> None:
        ...

    @abstractmethod
    async def commit(self) -> None:
        """
        Make pending saves and removals durable.

        Services call this before side effects that must not run for a
        write that is later rolled back (deleting a replaced avatar file).
        """
        ...


class InMemoryRepository(Repository[ModelT]):
    """
    Dict-backed store keyed by id.

    Records are kept by reference, so a service mutating a found entity and
    calling save() behaves like an ORM unit of work. Iteration order is
    insertion order.

    The column values of each successful save are kept as well. A save
    rejected with ConflictError puts them back on the entity, the way a
    rolled-back session discards unflushed changes.
    """

    model: Type[ModelT]
    unique_fields: Tuple[str, ...] = ()
    conflict_message: str = "Record already exists."

    def __init__(self) -> None:
        self._records: Dict[uuid.UUID, ModelT] = {}
        self._saved: Dict[uuid.UUID, Dict[str, Any]] = {}

    def _snapshot(self, entity: ModelT) -> Dict[str, Any]:
        return {column.key: getattr(entity, column.key) for column in self.model.__table__.columns}

    def _restore(self, entity: ModelT, saved: Optional[Dict[str, Any]]) -> None:
        if saved is None:
            # Never saved: back to a transient entity
            entity.id = None
            entity.created_at = None
            return
        for key, value in saved.items():
            setattr(entity, key, value)

    async def find_one(self, entity_id: uuid.UUID) -> Optional[ModelT]:
        return self._records.get(entity_id)

    async def find(self) -> List[ModelT]:
        return list(self._records.values())

    async def _find_by(self, field: str, value: Any) -> Optional[ModelT]:
        for record in self._records.values():
            if getattr(record, field) == value:
                return record
        return None

    def create(self, **fields: Any) -> ModelT:
        return self.model(**fields)

    async def save(self, entity: ModelT) -> None:
        now = datetime.now(timezone.utc)
        saved = None
        if getattr(entity, "id", None) is None:
            entity.id = uuid.uuid4()
            entity.created_at = now
        else:
            saved = self._saved.get(entity.id)

        for field in self.unique_fields:
            clash = await self._find_by(field, getattr(entity, field))
            if clash is not None and clash.id != entity.id:
                self._restore(entity, saved)
                raise ConflictError(self.conflict_message, context={"field": field})

        entity.updated_at = now
        self._records[entity.id] = entity
        self._saved[entity.id] = self._snapshot(entity)

    async def remove(self, entity: ModelT) -> None:
        self._records.pop(entity.id, None)
        self._saved.pop(entity.id, None)

    async def commit(self) -> None:
        # Every save() is already final
        pass


class SqlAlchemyRepository(Repository[ModelT]):
    """
    Store backed by the request's AsyncSession.

    save()/remove() flush immediately so constraint violations surface inside
    the service call; the commit happens in `get_db_session`.
    """

    model: Type[ModelT]
    conflict_message: str = "Record already exists."

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_one(self, entity_id: uuid.UUID) -> Optional[ModelT]:
        try:
            return await self.session.get(self.model, entity_id)
        except SQLAlchemyError as e:
            raise self._database_error("find_one", e) from e

    async def find(self) -> List[ModelT]:
        try:
            result = await self.session.execute(
                select(self.model).order_by(self.model.created_at)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._database_error("find", e) from e

    async def _find_by(self, column: Any, value: Any) -> Optional[ModelT]:
        try:
            result = await self.session.execute(select(self.model).where(column == value))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._database_error("find_by", e) from e

    def create(self, **fields: Any) -> ModelT:
        return self.model(**fields)

    async def save(self, entity: ModelT) -> None:
        self.session.add(entity)
        try:
            await self.session.flush()
        except IntegrityError as e:
            logger.warning("Unique constraint rejected %s: %s", self.model.__name__, e.orig)
            raise ConflictError(
                self.conflict_message,
                context={"table": self.model.__tablename__},
            ) from e
        except SQLAlchemyError as e:
            raise self._database_error("save", e) from e

    async def remove(self, entity: ModelT) -> None:
        try:
            await self.session.delete(entity)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise self._database_error("remove", e) from e

    async def commit(self) -> None:
        """
        Commit the request's transaction early. `get_db_session` still
        commits on exit; with nothing pending that second commit is a no-op.
        """
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            raise self._database_error("commit", e) from e

    def _database_error(self, operation: str, error: Exception) -> DatabaseError:
        logger.error(
            "Database error in %s.%s: %s",
            type(self).__name__,
            operation,
            str(error),
            exc_info=True,
        )
        return DatabaseError(
            context={"operation": operation, "error_type": type(error).__name__},
        )
