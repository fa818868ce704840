"""create workout catalog and training plan tables

Revision ID: 8c4e91d05a6f
Revises: 3b1f0c2a7d41
Create Date: 2026-09-02 10:40:07.118395

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c4e91d05a6f'
down_revision: Union[str, Sequence[str], None] = '3b1f0c2a7d41'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "exercises",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
    )

    op.create_table(
        "workouts",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("total_exercises", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_sets", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "workout_exercises",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("workout_id", sa.Integer(), sa.ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("exercise_id", sa.Integer(), sa.ForeignKey("exercises.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sets", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("target_reps", sa.Integer(), nullable=True),
        sa.Column("target_duration_seconds", sa.Integer(), nullable=True),
        sa.Column("target_distance_meters", sa.Integer(), nullable=True),
        sa.Column("rest_seconds", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("is_optional", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_workout_exercises_workout_id", "workout_exercises", ["workout_id"])
    op.create_index("ix_workout_exercises_exercise_id", "workout_exercises", ["exercise_id"])

    op.create_table(
        "training_plans",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("duration_weeks", sa.Integer(), nullable=False),
        sa.Column("days_per_week", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("duration_weeks >= 1", name="ck_training_plans_duration_weeks"),
        sa.CheckConstraint("days_per_week BETWEEN 1 AND 7", name="ck_training_plans_days_per_week"),
    )

    op.create_table(
        "training_plan_days",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("training_plan_id", sa.Integer(), sa.ForeignKey("training_plans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("day_number", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("is_rest_day", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("training_plan_id", "week_number", "day_number", name="uq_training_plan_day"),
    )
    op.create_index("ix_training_plan_days_training_plan_id", "training_plan_days", ["training_plan_id"])

    op.create_table(
        "training_plan_day_workouts",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("training_plan_day_id", sa.Integer(), sa.ForeignKey("training_plan_days.id", ondelete="CASCADE"), nullable=False),
        sa.Column("workout_id", sa.Integer(), sa.ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_training_plan_day_workouts_training_plan_day_id", "training_plan_day_workouts", ["training_plan_day_id"])
    op.create_index("ix_training_plan_day_workouts_workout_id", "training_plan_day_workouts", ["workout_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_training_plan_day_workouts_workout_id", table_name="training_plan_day_workouts")
    op.drop_index("ix_training_plan_day_workouts_training_plan_day_id", table_name="training_plan_day_workouts")
    op.drop_table("training_plan_day_workouts")
    op.drop_index("ix_training_plan_days_training_plan_id", table_name="training_plan_days")
    op.drop_table("training_plan_days")
    op.drop_table("training_plans")
    op.drop_index("ix_workout_exercises_exercise_id", table_name="workout_exercises")
    op.drop_index("ix_workout_exercises_workout_id", table_name="workout_exercises")
    op.drop_table("workout_exercises")
    op.drop_table("workouts")
    op.drop_table("exercises")
