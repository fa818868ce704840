"""create trainee_active_plans table

Revision ID: f90d3c6e2b17
Revises: e27a5b9f13c8
Create Date: 2026-09-06 09:21:13.507730

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'f90d3c6e2b17'
down_revision: Union[str, Sequence[str], None] = 'e27a5b9f13c8'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "trainee_active_plans",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("trainee_id", sa.Integer(), sa.ForeignKey("trainee_profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("training_plan_id", sa.Integer(), sa.ForeignKey("training_plans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("current_week", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("current_day", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("trainee_id", "training_plan_id", name="uq_trainee_active_plans_trainee_plan"),
    )
    op.create_index("ix_trainee_active_plans_trainee_id", "trainee_active_plans", ["trainee_id"])
    op.create_index("ix_trainee_active_plans_status", "trainee_active_plans", ["status"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_trainee_active_plans_status", table_name="trainee_active_plans")
    op.drop_index("ix_trainee_active_plans_trainee_id", table_name="trainee_active_plans")
    op.drop_table("trainee_active_plans")
