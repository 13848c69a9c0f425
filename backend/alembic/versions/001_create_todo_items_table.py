"""Create todo_items table

Revision ID: 001
Revises: None
Create Date: 2026-02-11 00:00:00.000000+00:00

What:  Creates the `todo_items` table and its three indexes.
How:   Column definitions mirror smarttodo/models/todo_item.py.

Rollback: downgrade() drops the table entirely (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "todo_items",

        # App-generated UUID
        sa.Column("id", sa.Uuid(), nullable=False),

        # Trimmed, 1-200 characters
        sa.Column("title", sa.String(200), nullable=False),

        sa.Column("description", sa.String(1000), nullable=True),

        # 0 = Pending, 1 = Completed
        sa.Column(
            "status",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
        ),

        sa.Column("due_date", sa.Date(), nullable=True),

        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),

        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("idx_todo_items_status", "todo_items", ["status"])
    op.create_index("idx_todo_items_created_at", "todo_items", ["created_at"])
    # Filtered-by-status lists sorted by due date
    op.create_index("idx_todo_items_status_due_date", "todo_items", ["status", "due_date"])


def downgrade() -> None:
    """
    Drop the todo_items table entirely.

    WARNING: destructive. In production prefer a forward migration that
    archives data first.
    """
    op.drop_index("idx_todo_items_status_due_date", table_name="todo_items")
    op.drop_index("idx_todo_items_created_at", table_name="todo_items")
    op.drop_index("idx_todo_items_status", table_name="todo_items")
    op.drop_table("todo_items")
