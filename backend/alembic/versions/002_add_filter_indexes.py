"""Add indexes for the board's priority and assignee filters

Revision ID: 002
Revises: 001
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
from sqlalchemy import text

revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    conn = op.get_bind()
    conn.execute(text("CREATE INDEX IF NOT EXISTS idx_tasks_priority ON tasks(priority)"))
    conn.execute(text("CREATE INDEX IF NOT EXISTS idx_tasks_assignee ON tasks(assignee)"))


def downgrade() -> None:
    conn = op.get_bind()
    conn.execute(text("DROP INDEX IF EXISTS idx_tasks_assignee"))
    conn.execute(text("DROP INDEX IF EXISTS idx_tasks_priority"))
