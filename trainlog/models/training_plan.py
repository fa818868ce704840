from __future__ import annotations

from datetime import datetime
from sqlalchemy import CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from trainlog.core.db import Base


class TrainingPlan(Base):
    __tablename__ = "training_plans"
    __table_args__ = (
        CheckConstraint("duration_weeks >= 1", name="ck_training_plans_duration_weeks"),
        CheckConstraint("days_per_week BETWEEN 1 AND 7", name="ck_training_plans_days_per_week"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    duration_weeks: Mapped[int] = mapped_column(Integer, nullable=False)
    days_per_week: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    @property
    def total_days(self) -> int:
        return self.duration_weeks * self.days_per_week
