"""
SmartTodo Backend - TodoItem SQLAlchemy Model
==============================================

What:  ORM model for the `todo_items` table and the entity's own rules.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for
       migrations. State changes go through create(), mark_complete() and
       update_details() so the invariants below always hold.
Who:   Used by the todo handlers (through TodoStore) and by Alembic.

Entity Invariants:
    - title is trimmed, non-blank and at most 200 characters
    - status only moves Pending → Completed, never twice
    - updated_at changes on every mutation; created_at never changes

Query Patterns:
    - List newest first:          ORDER BY created_at DESC → idx_todo_items_created_at
    - Filter by status:           WHERE status = :s        → idx_todo_items_status
    - Pending items due soonest:  WHERE status = :s ORDER BY due_date
                                  → idx_todo_items_status_due_date
"""

import enum
import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Date, DateTime, Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from smarttodo.database import Base
from smarttodo.exceptions import DomainRuleError

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


class TodoStatus(enum.IntEnum):
    """Stored and serialized as its integer value."""

    PENDING = 0
    COMPLETED = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _validate_title(title: Optional[str]) -> str:
    if title is None or not title.strip():
        raise DomainRuleError("Title cannot be empty.", context={"field": "title"})
    trimmed = title.strip()
    if len(trimmed) > TITLE_MAX_LENGTH:
        raise DomainRuleError(
            f"Title must not exceed {TITLE_MAX_LENGTH} characters.",
            context={"field": "title", "length": len(trimmed)},
        )
    return trimmed


class TodoItem(Base):
    """
    A single todo item.

    Lifecycle:
        1. create() → status Pending, created_at == updated_at
        2. update_details() any number of times
        3. mark_complete() once → status Completed
        4. Deleted through the store
    """

    __tablename__ = "todo_items"

    # App-generated so the id is known before the insert is flushed
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
    )

    description: Mapped[Optional[str]] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH),
        nullable=True,
        default=None,
    )

    # 0 = Pending, 1 = Completed
    status: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=int(TodoStatus.PENDING),
        server_default=text("0"),
    )

    due_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        default=None,
    )

    # Always UTC; conversion to local time happens in the frontend
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_todo_items_status", "status"),
        Index("idx_todo_items_created_at", "created_at"),
        Index("idx_todo_items_status_due_date", "status", "due_date"),
    )

    # ── Domain operations ─────────────────────────────────────────────────

    @classmethod
    def create(
        cls,
        title: Optional[str],
        description: Optional[str] = None,
        due_date: Optional[date] = None,
    ) -> "TodoItem":
        """New Pending item with a fresh id and matching timestamps."""
        trimmed = _validate_title(title)
        now = _utcnow()
        return cls(
            id=uuid.uuid4(),
            title=trimmed,
            description=description,
            status=int(TodoStatus.PENDING),
            due_date=due_date,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_completed(self) -> bool:
        return self.status == TodoStatus.COMPLETED

    def mark_complete(self) -> None:
        """
        Raises:
            DomainRuleError: The item is already completed.
        """
        if self.is_completed:
            raise DomainRuleError(
                "Todo item is already completed.",
                context={"todo_item_id": str(self.id)},
            )
        self.status = int(TodoStatus.COMPLETED)
        self.updated_at = _utcnow()

    def update_details(
        self,
        title: Optional[str],
        description: Optional[str] = None,
        due_date: Optional[date] = None,
    ) -> None:
        self.title = _validate_title(title)
        self.description = description
        self.due_date = due_date
        self.updated_at = _utcnow()

    def __repr__(self) -> str:
        return (
            f"<TodoItem(id={self.id}, status={self.status}, "
            f"title='{self.title}')>"
        )
