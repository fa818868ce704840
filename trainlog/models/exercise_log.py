from __future__ import annotations

import uuid
from datetime import datetime
from sqlalchemy import DateTime, ForeignKey, Integer, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from trainlog.core.clock import as_utc
from trainlog.core.db import Base, enum_column
from trainlog.domain.metrics import seconds_to_minutes
from trainlog.domain.statuses import ExerciseLogStatus


class ExerciseLog(Base):
    __tablename__ = "exercise_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    workout_session_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("workout_sessions.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    # points into the session's pinned prescription, not the live workout
    workout_exercise_id: Mapped[int] = mapped_column(Integer, nullable=False)
    exercise_id: Mapped[int] = mapped_column(
        ForeignKey("exercises.id", ondelete="RESTRICT"),
        nullable=False,
    )

    status: Mapped[ExerciseLogStatus] = mapped_column(
        enum_column(ExerciseLogStatus),
        nullable=False,
        default=ExerciseLogStatus.PENDING,
    )

    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # prescription copied from the workout when the log is created
    target_sets: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    target_reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_distance_meters: Mapped[int | None] = mapped_column(Integer, nullable=True)

    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    @property
    def duration_seconds(self) -> int | None:
        if self.started_at and self.completed_at:
            return int((as_utc(self.completed_at) - as_utc(self.started_at)).total_seconds())
        return None

    @property
    def duration_minutes(self) -> float | None:
        return seconds_to_minutes(self.duration_seconds)
