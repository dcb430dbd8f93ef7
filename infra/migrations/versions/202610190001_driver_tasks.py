"""driver tasks table

Revision ID: 202610190001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "202610190001"
down_revision = None
branch_labels = None
depends_on = None

DRIVER_TASK_TYPES = ("PICKUP", "DELIVER", "OTHER", "NONE")


def upgrade() -> None:
    op.create_table(
        "driver_tasks",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("driver_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.Enum(*DRIVER_TASK_TYPES, name="drivertasktype"), nullable=False),
        sa.Column("start", sa.Integer(), nullable=False),
        sa.Column("end", sa.Integer(), nullable=False),
        sa.Column("day", sa.Integer(), nullable=False),
        sa.Column("week", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_driver_tasks_driver_id", "driver_tasks", ["driver_id"])
    op.create_index("ix_driver_tasks_driver_week", "driver_tasks", ["driver_id", "week"])


def downgrade() -> None:
    op.drop_index("ix_driver_tasks_driver_week", table_name="driver_tasks")
    op.drop_index("ix_driver_tasks_driver_id", table_name="driver_tasks")
    op.drop_table("driver_tasks")
    sa.Enum(name="drivertasktype").drop(op.get_bind(), checkfirst=True)
