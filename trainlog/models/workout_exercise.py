from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from trainlog.core.db import Base


class WorkoutExercise(Base):
    """One prescribed exercise inside a workout."""

    __tablename__ = "workout_exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    workout_id: Mapped[int] = mapped_column(
        ForeignKey("workouts.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    exercise_id: Mapped[int] = mapped_column(
        ForeignKey("exercises.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )

    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sets: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # at least one of these is set; it decides which metric family the sets use
    target_reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_distance_meters: Mapped[int | None] = mapped_column(Integer, nullable=True)

    rest_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    is_optional: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
