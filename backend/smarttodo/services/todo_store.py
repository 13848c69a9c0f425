"""
SmartTodo Backend - Todo Store (Persistence Collaborator)
==========================================================

What:  The narrow persistence interface the todo handlers depend on, and
       its SQLAlchemy implementation.
How:   Handlers receive a TodoStore through DispatchContext.store. The
       SQLAlchemy store wraps one AsyncSession (one per HTTP request);
       tests substitute an in-memory store.

Error Handling Strategy:
    SQLAlchemy errors are logged with details and re-raised as DatabaseError
    with a generic message, so driver internals never reach a response.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from smarttodo.exceptions import DatabaseError
from smarttodo.models.todo_item import TodoItem

logger = logging.getLogger(__name__)


class TodoStore(ABC):
    """
    Persistence operations for TodoItem.

    add() and remove() stage changes; save_changes() makes them durable.
    """

    @abstractmethod
    async def find_by_id(self, item_id: uuid.UUID) -> Optional[TodoItem]:
        """Return the item or None."""
        ...

    @abstractmethod
    async def list_items(self, status: Optional[int] = None) -> List[TodoItem]:
        """All items (optionally one status), newest created first."""
        ...

    @abstractmethod
    def add(self, item: TodoItem) -> None:
        ...

    @abstractmethod
    async def remove(self, item: TodoItem) -> None:
        ...

    @abstractmethod
    async def save_changes(self) -> None:
        ...


class SqlAlchemyTodoStore(TodoStore):
    """TodoStore over a request-scoped AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_id(self, item_id: uuid.UUID) -> Optional[TodoItem]:
        try:
            result = await self._session.execute(
                select(TodoItem).where(TodoItem.id == item_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching todo item %s: %s", item_id, e)
            raise DatabaseError(
                message="Could not retrieve the todo item. Please try again.",
                context={"todo_item_id": str(item_id), "error_type": type(e).__name__},
            ) from e

    async def list_items(self, status: Optional[int] = None) -> List[TodoItem]:
        try:
            query = select(TodoItem)
            if status is not None:
                query = query.where(TodoItem.status == status)
            query = query.order_by(desc(TodoItem.created_at))
            result = await self._session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing todo items: %s", e, exc_info=True)
            raise DatabaseError(
                message="Could not retrieve todo items. Please try again.",
                context={"status": status, "error_type": type(e).__name__},
            ) from e

    def add(self, item: TodoItem) -> None:
        self._session.add(item)

    async def remove(self, item: TodoItem) -> None:
        await self._session.delete(item)

    async def save_changes(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("Database error saving changes: %s", e, exc_info=True)
            raise DatabaseError(
                message="Could not save changes. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e
