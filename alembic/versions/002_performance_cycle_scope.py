"""Tie performance records to the mesocycle run they were logged in

Revision ID: 002
Revises: 001
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Existing rows stay NULL and no longer feed progression for any run.
    op.add_column("performance_records", sa.Column("cycle_id", sa.Uuid(), nullable=True))
    op.create_index(
        "ix_performance_records_cycle",
        "performance_records",
        ["cycle_id", "week_number", "day_number"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_performance_records_cycle", table_name="performance_records")
    op.drop_column("performance_records", "cycle_id")
