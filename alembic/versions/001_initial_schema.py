"""Initial schema: plans, active cycles, performance history, feedback, archives.

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "workout_plans",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("program_type", sa.String(length=50), nullable=False),
        sa.Column("duration_weeks", sa.Integer(), nullable=False),
        sa.Column("days_per_week", sa.Integer(), nullable=False),
        sa.Column("structure", postgresql.JSONB(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_workout_plans_user_id"), "workout_plans", ["user_id"], unique=False)

    op.create_table(
        "active_cycles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("plan_id", sa.Uuid(), nullable=False),
        sa.Column("current_week", sa.Integer(), nullable=False),
        sa.Column("current_day", sa.Integer(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["plan_id"], ["workout_plans.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "performance_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("plan_id", sa.Uuid(), nullable=False),
        sa.Column("workout_name", sa.String(length=255), nullable=False),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("day_number", sa.Integer(), nullable=False),
        sa.Column("exercise_name", sa.String(length=255), nullable=False),
        sa.Column("muscle_group", sa.String(length=100), nullable=False),
        sa.Column("planned_sets", sa.Integer(), nullable=False),
        sa.Column("planned_reps", sa.Integer(), nullable=False),
        sa.Column("actual_sets", sa.Integer(), nullable=False),
        sa.Column("actual_reps", postgresql.JSONB(), nullable=False),
        sa.Column("weight_used", postgresql.JSONB(), nullable=False),
        sa.Column("intensity", postgresql.JSONB(), nullable=False),
        sa.Column("weight_unit", sa.String(length=10), nullable=False),
        sa.Column("pump_level", sa.String(length=20), nullable=True),
        sa.Column("is_sore", sa.Boolean(), nullable=False),
        sa.Column("can_add_sets", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_performance_records_lookup",
        "performance_records",
        ["user_id", "plan_id", "exercise_name", "muscle_group"],
        unique=False,
    )
    op.create_index(
        "ix_performance_records_week",
        "performance_records",
        ["user_id", "plan_id", "week_number", "day_number"],
        unique=False,
    )

    op.create_table(
        "muscle_soreness",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("workout_date", sa.Date(), nullable=False),
        sa.Column("muscle_group", sa.String(length=100), nullable=False),
        sa.Column("soreness_level", sa.String(length=20), nullable=False),
        sa.Column("healed", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_muscle_soreness_user_group",
        "muscle_soreness",
        ["user_id", "muscle_group", "created_at"],
        unique=False,
    )

    op.create_table(
        "pump_feedback",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("workout_date", sa.Date(), nullable=False),
        sa.Column("muscle_group", sa.String(length=100), nullable=False),
        sa.Column("pump_level", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_pump_feedback_user_group",
        "pump_feedback",
        ["user_id", "muscle_group", "created_at"],
        unique=False,
    )

    op.create_table(
        "workout_calendar",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("workout_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("workout_summary", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_workout_calendar_user_id"), "workout_calendar", ["user_id"], unique=False)

    op.create_table(
        "completed_mesocycles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("plan_id", sa.Uuid(), nullable=True),
        sa.Column("plan_name", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("total_weeks", sa.Integer(), nullable=False),
        sa.Column("total_days", sa.Integer(), nullable=False),
        sa.Column("mesocycle_data", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_completed_mesocycles_user_id"), "completed_mesocycles", ["user_id"], unique=False)

    op.create_table(
        "personal_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("exercise_name", sa.String(length=255), nullable=False),
        sa.Column("muscle_group", sa.String(length=100), nullable=False),
        sa.Column("max_weight", sa.Float(), nullable=False),
        sa.Column("max_reps", sa.Integer(), nullable=False),
        sa.Column("weight_unit", sa.String(length=10), nullable=False),
        sa.Column("achieved_date", sa.Date(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "exercise_name", name="uq_personal_records_user_exercise"),
    )
    op.create_index(op.f("ix_personal_records_user_id"), "personal_records", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_table("personal_records")
    op.drop_table("completed_mesocycles")
    op.drop_table("workout_calendar")
    op.drop_table("pump_feedback")
    op.drop_table("muscle_soreness")
    op.drop_table("performance_records")
    op.drop_table("active_cycles")
    op.drop_table("workout_plans")
