import uuid
from datetime import datetime

from pydantic import BaseModel

from trainlog.domain.statuses import TrackerStatus


class PlanProgressOut(BaseModel):
    id: uuid.UUID
    trainee_id: int
    training_plan_id: int
    current_week: int
    current_day: int
    status: TrackerStatus
    started_at: datetime
    completed_at: datetime | None
    days_into_plan: int
    total_days: int
    completion_percentage: float
    is_on_last_week: bool
    is_on_last_day_of_week: bool

    @classmethod
    def build(cls, tracker, progress) -> "PlanProgressOut":
        return cls(
            id=tracker.id,
            trainee_id=tracker.trainee_id,
            training_plan_id=tracker.training_plan_id,
            current_week=tracker.current_week,
            current_day=tracker.current_day,
            status=tracker.status,
            started_at=tracker.started_at,
            completed_at=tracker.completed_at,
            days_into_plan=progress.days_into_plan,
            total_days=progress.total_days,
            completion_percentage=progress.completion_percentage,
            is_on_last_week=progress.is_on_last_week,
            is_on_last_day_of_week=progress.is_on_last_day_of_week,
        )


class PlanWorkoutOut(BaseModel):
    id: int
    name: str
    version: int
    total_exercises: int
    total_sets: int


class PlanDayOut(BaseModel):
    week_number: int
    day_number: int
    name: str | None = None
    is_rest_day: bool = False
    workouts: list[PlanWorkoutOut] = []
