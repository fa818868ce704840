"""create workout_sessions, exercise_logs and set_logs tables

Revision ID: e27a5b9f13c8
Revises: 8c4e91d05a6f
Create Date: 2026-09-03 18:05:44.930271

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'e27a5b9f13c8'
down_revision: Union[str, Sequence[str], None] = '8c4e91d05a6f'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "workout_sessions",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("trainee_id", sa.Integer(), sa.ForeignKey("trainee_profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("workout_id", sa.Integer(), sa.ForeignKey("workouts.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("workout_version", sa.Integer(), nullable=False),
        sa.Column("prescribed_exercise_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("prescription", sa.JSON(), nullable=False),
        sa.Column("training_plan_id", sa.Integer(), sa.ForeignKey("training_plans.id", ondelete="SET NULL"), nullable=True),
        sa.Column("training_plan_week_number", sa.Integer(), nullable=True),
        sa.Column("training_plan_day_number", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="started"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_duration_seconds", sa.Integer(), nullable=True),
        sa.Column("total_volume_kg", sa.Numeric(12, 2), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_workout_sessions_trainee_id", "workout_sessions", ["trainee_id"])
    op.create_index("ix_workout_sessions_workout_id", "workout_sessions", ["workout_id"])
    op.create_index("ix_workout_sessions_training_plan_id", "workout_sessions", ["training_plan_id"])
    op.create_index("ix_workout_sessions_status", "workout_sessions", ["status"])
    op.create_index("ix_workout_sessions_started_at", "workout_sessions", ["started_at"])

    op.create_table(
        "exercise_logs",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("workout_session_id", sa.Uuid(), sa.ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("workout_exercise_id", sa.Integer(), nullable=False),
        sa.Column("exercise_id", sa.Integer(), sa.ForeignKey("exercises.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("target_sets", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("target_reps", sa.Integer(), nullable=True),
        sa.Column("target_duration_seconds", sa.Integer(), nullable=True),
        sa.Column("target_distance_meters", sa.Integer(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_exercise_logs_workout_session_id", "exercise_logs", ["workout_session_id"])

    op.create_table(
        "set_logs",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("exercise_log_id", sa.Uuid(), sa.ForeignKey("exercise_logs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("set_number", sa.Integer(), nullable=False),
        sa.Column("target_reps", sa.Integer(), nullable=True),
        sa.Column("actual_reps", sa.Integer(), nullable=True),
        sa.Column("target_duration_seconds", sa.Integer(), nullable=True),
        sa.Column("actual_duration_seconds", sa.Integer(), nullable=True),
        sa.Column("target_distance_meters", sa.Integer(), nullable=True),
        sa.Column("actual_distance_meters", sa.Integer(), nullable=True),
        sa.Column("weight_kg", sa.Numeric(7, 2), nullable=True),
        sa.Column("rpe", sa.Integer(), nullable=True),
        sa.Column("is_warmup", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_failure", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("exercise_log_id", "set_number", name="uq_set_logs_exercise_log_set_number"),
    )
    op.create_index("ix_set_logs_exercise_log_id", "set_logs", ["exercise_log_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_set_logs_exercise_log_id", table_name="set_logs")
    op.drop_table("set_logs")
    op.drop_index("ix_exercise_logs_workout_session_id", table_name="exercise_logs")
    op.drop_table("exercise_logs")
    for name in ("started_at", "status", "training_plan_id", "workout_id", "trainee_id"):
        op.drop_index(f"ix_workout_sessions_{name}", table_name="workout_sessions")
    op.drop_table("workout_sessions")
