from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from trainlog.core.db import Base
from trainlog.domain import performance
from trainlog.domain.metrics import kg_to_pounds, meters_to_kilometers, seconds_to_minutes, set_volume


class SetLog(Base):
    __tablename__ = "set_logs"
    __table_args__ = (
        UniqueConstraint("exercise_log_id", "set_number", name="uq_set_logs_exercise_log_set_number"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    exercise_log_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("exercise_logs.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    set_number: Mapped[int] = mapped_column(Integer, nullable=False)

    target_reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actual_reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actual_duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_distance_meters: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actual_distance_meters: Mapped[int | None] = mapped_column(Integer, nullable=True)

    weight_kg: Mapped[Decimal | None] = mapped_column(Numeric(7, 2), nullable=True)
    rpe: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 1-10

    is_warmup: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_failure: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # presence marks the set as performed
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def volume(self) -> Decimal | None:
        return set_volume(self.weight_kg, self.actual_reps)

    def target_met(self) -> bool:
        return performance.target_met(self)

    def performance_percentage(self) -> float | None:
        return performance.performance_percentage(self)

    @property
    def actual_duration_minutes(self) -> float | None:
        return seconds_to_minutes(self.actual_duration_seconds)

    @property
    def actual_distance_kilometers(self) -> float | None:
        return meters_to_kilometers(self.actual_distance_meters)

    @property
    def weight_pounds(self) -> float | None:
        return kg_to_pounds(self.weight_kg)

    def summary(self) -> str:
        parts = []
        if self.weight_kg:
            parts.append(f"{self.weight_kg}kg")
        if self.actual_reps:
            parts.append(f"{self.actual_reps} reps")
        elif self.actual_duration_seconds:
            parts.append(f"{self.actual_duration_minutes}min")
        elif self.actual_distance_meters:
            parts.append(f"{self.actual_distance_meters}m")
        if self.rpe:
            parts.append(f"RPE {self.rpe}")
        if self.is_warmup:
            parts.append("(Warmup)")
        if self.is_failure:
            parts.append("(Failure)")
        return " x ".join(parts)
