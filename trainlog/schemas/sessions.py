import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from trainlog.domain.statuses import ExerciseLogStatus, SessionStatus


class StartSessionIn(BaseModel):
    workout_id: int
    training_plan_id: int | None = None
    training_plan_week_number: int | None = Field(default=None, ge=1)
    training_plan_day_number: int | None = Field(default=None, ge=1, le=7)

class CompleteSessionIn(BaseModel):
    notes: str | None = Field(default=None, max_length=2000)
    rating: int | None = Field(default=None, ge=1, le=5)

class CreateExerciseLogIn(BaseModel):
    workout_exercise_id: int
    notes: str | None = None

class ExerciseLogNotesIn(BaseModel):
    notes: str | None = None

class CreateSetLogIn(BaseModel):
    set_number: int = Field(ge=1)
    target_reps: int | None = Field(default=None, ge=1, le=1000)
    actual_reps: int | None = Field(default=None, ge=1, le=1000)
    target_duration_seconds: int | None = Field(default=None, ge=1, le=86400)
    actual_duration_seconds: int | None = Field(default=None, ge=1, le=86400)
    target_distance_meters: int | None = Field(default=None, ge=1, le=100000)
    actual_distance_meters: int | None = Field(default=None, ge=1, le=100000)
    weight_kg: Decimal | None = Field(default=None, ge=0, le=5000, decimal_places=2)
    rpe: int | None = Field(default=None, ge=1, le=10)
    is_warmup: bool = False
    is_failure: bool = False
    notes: str | None = None
    # log and mark performed in one call
    completed: bool = False

class UpdateSetLogIn(BaseModel):
    actual_reps: int | None = Field(default=None, ge=1, le=1000)
    actual_duration_seconds: int | None = Field(default=None, ge=1, le=86400)
    actual_distance_meters: int | None = Field(default=None, ge=1, le=100000)
    weight_kg: Decimal | None = Field(default=None, ge=0, le=5000, decimal_places=2)
    rpe: int | None = Field(default=None, ge=1, le=10)
    is_warmup: bool | None = None
    is_failure: bool | None = None
    notes: str | None = None


class SetLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    exercise_log_id: uuid.UUID
    set_number: int
    target_reps: int | None
    actual_reps: int | None
    target_duration_seconds: int | None
    actual_duration_seconds: int | None
    target_distance_meters: int | None
    actual_distance_meters: int | None
    weight_kg: Decimal | None
    rpe: int | None
    is_warmup: bool
    is_failure: bool
    notes: str | None
    completed_at: datetime | None
    weight_pounds: float | None
    actual_duration_minutes: float | None
    actual_distance_kilometers: float | None
    volume: Decimal | None
    target_met: bool
    performance_percentage: float | None
    summary: str

    @classmethod
    def build(cls, s) -> "SetLogOut":
        return cls(
            id=s.id,
            exercise_log_id=s.exercise_log_id,
            set_number=s.set_number,
            target_reps=s.target_reps,
            actual_reps=s.actual_reps,
            target_duration_seconds=s.target_duration_seconds,
            actual_duration_seconds=s.actual_duration_seconds,
            target_distance_meters=s.target_distance_meters,
            actual_distance_meters=s.actual_distance_meters,
            weight_kg=s.weight_kg,
            rpe=s.rpe,
            is_warmup=s.is_warmup,
            is_failure=s.is_failure,
            notes=s.notes,
            completed_at=s.completed_at,
            weight_pounds=s.weight_pounds,
            actual_duration_minutes=s.actual_duration_minutes,
            actual_distance_kilometers=s.actual_distance_kilometers,
            volume=s.volume,
            target_met=s.target_met(),
            performance_percentage=s.performance_percentage(),
            summary=s.summary(),
        )


class ExerciseLogOut(BaseModel):
    id: uuid.UUID
    workout_session_id: uuid.UUID
    workout_exercise_id: int
    exercise_id: int
    status: ExerciseLogStatus
    target_sets: int
    target_reps: int | None
    target_duration_seconds: int | None
    target_distance_meters: int | None
    started_at: datetime | None
    completed_at: datetime | None
    duration_seconds: int | None
    notes: str | None
    total_volume: Decimal | None = None
    average_rpe: float | None = None
    sets_completed: int | None = None
    all_sets_completed: bool | None = None
    sets: list[SetLogOut] | None = None

    @classmethod
    def build(cls, log, sets=None, stats=None) -> "ExerciseLogOut":
        out = cls(
            id=log.id,
            workout_session_id=log.workout_session_id,
            workout_exercise_id=log.workout_exercise_id,
            exercise_id=log.exercise_id,
            status=log.status,
            target_sets=log.target_sets,
            target_reps=log.target_reps,
            target_duration_seconds=log.target_duration_seconds,
            target_distance_meters=log.target_distance_meters,
            started_at=log.started_at,
            completed_at=log.completed_at,
            duration_seconds=log.duration_seconds,
            notes=log.notes,
        )
        if sets is not None:
            out.sets = [SetLogOut.build(s) for s in sets]
        if stats is not None:
            out.total_volume = stats.total_volume
            out.average_rpe = stats.average_rpe
            out.sets_completed = stats.sets_completed
            out.all_sets_completed = stats.all_sets_completed
        return out


class CompletionOut(BaseModel):
    percentage: float
    completed_exercises: int
    prescribed_exercises: int
    # only true once the session is completed; abandoned sessions report partial numbers
    metrics_final: bool


class SessionOut(BaseModel):
    id: uuid.UUID
    trainee_id: int
    workout_id: int
    workout_version: int
    training_plan_id: int | None
    training_plan_week_number: int | None
    training_plan_day_number: int | None
    status: SessionStatus
    started_at: datetime
    completed_at: datetime | None
    total_duration_seconds: int | None
    total_duration_minutes: float | None
    formatted_duration: str | None
    total_volume_kg: Decimal | None
    notes: str | None
    rating: int | None
    completion: CompletionOut | None = None
    exercise_logs: list[ExerciseLogOut] | None = None

    @classmethod
    def build(cls, session, progress=None, exercise_logs=None) -> "SessionOut":
        out = cls(
            id=session.id,
            trainee_id=session.trainee_id,
            workout_id=session.workout_id,
            workout_version=session.workout_version,
            training_plan_id=session.training_plan_id,
            training_plan_week_number=session.training_plan_week_number,
            training_plan_day_number=session.training_plan_day_number,
            status=session.status,
            started_at=session.started_at,
            completed_at=session.completed_at,
            total_duration_seconds=session.total_duration_seconds,
            total_duration_minutes=session.total_duration_minutes,
            formatted_duration=session.formatted_duration,
            total_volume_kg=session.total_volume_kg,
            notes=session.notes,
            rating=session.rating,
            exercise_logs=exercise_logs,
        )
        if progress is not None:
            out.completion = CompletionOut(
                percentage=progress.percentage,
                completed_exercises=progress.completed_exercises,
                prescribed_exercises=progress.prescribed_exercises,
                metrics_final=progress.is_final,
            )
        return out


class SessionSummaryOut(BaseModel):
    total_duration_seconds: int
    total_volume_kg: Decimal
    completion_percentage: float


class SessionCompletedOut(BaseModel):
    session: SessionOut
    summary: SessionSummaryOut
