from __future__ import annotations

import uuid
from datetime import datetime
from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from trainlog.core.db import Base, enum_column
from trainlog.domain.statuses import TrackerStatus


class TraineeActivePlan(Base):
    """Week/day pointer of one trainee through one training plan."""

    __tablename__ = "trainee_active_plans"
    __table_args__ = (
        UniqueConstraint("trainee_id", "training_plan_id", name="uq_trainee_active_plans_trainee_plan"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    trainee_id: Mapped[int] = mapped_column(
        ForeignKey("trainee_profiles.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    training_plan_id: Mapped[int] = mapped_column(
        ForeignKey("training_plans.id", ondelete="CASCADE"),
        nullable=False,
    )

    current_week: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    current_day: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    status: Mapped[TrackerStatus] = mapped_column(
        enum_column(TrackerStatus),
        nullable=False,
        default=TrackerStatus.ACTIVE,
        index=True,
    )

    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
