from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from trainlog.core.db import Base


class TrainingPlanDay(Base):
    __tablename__ = "training_plan_days"
    __table_args__ = (
        UniqueConstraint("training_plan_id", "week_number", "day_number", name="uq_training_plan_day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    training_plan_id: Mapped[int] = mapped_column(
        ForeignKey("training_plans.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    day_number: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_rest_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class TrainingPlanDayWorkout(Base):
    __tablename__ = "training_plan_day_workouts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    training_plan_day_id: Mapped[int] = mapped_column(
        ForeignKey("training_plan_days.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    workout_id: Mapped[int] = mapped_column(
        ForeignKey("workouts.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
