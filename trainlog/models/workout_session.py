from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Numeric, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from trainlog.core.db import Base, enum_column
from trainlog.domain.metrics import format_duration, seconds_to_minutes
from trainlog.domain.statuses import SessionStatus


class WorkoutSession(Base):
    __tablename__ = "workout_sessions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    trainee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("trainee_profiles.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    workout_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("workouts.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )

    # pinned when the session starts, never written again
    workout_version: Mapped[int] = mapped_column(Integer, nullable=False)
    prescribed_exercise_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # ordered list of prescribed exercises as they were when the session started
    prescription: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)

    training_plan_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("training_plans.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    training_plan_week_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    training_plan_day_number: Mapped[int | None] = mapped_column(Integer, nullable=True)

    status: Mapped[SessionStatus] = mapped_column(
        enum_column(SessionStatus),
        nullable=False,
        default=SessionStatus.STARTED,
        index=True,
    )

    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # only filled in by complete(); abandoned sessions keep them null
    total_duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_volume_kg: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    notes: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def is_logs_immutable(self) -> bool:
        return self.status is SessionStatus.COMPLETED

    def is_part_of_training_plan(self) -> bool:
        return self.training_plan_id is not None

    @property
    def total_duration_minutes(self) -> float | None:
        return seconds_to_minutes(self.total_duration_seconds)

    @property
    def formatted_duration(self) -> str | None:
        return format_duration(self.total_duration_seconds)
