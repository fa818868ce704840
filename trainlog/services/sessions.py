"""Workout session lifecycle: start, complete, abandon, read.

A session is the root of its exercise and set logs. Every write to a child
record first locks the session row through ``lock_session_for_write`` and
re-reads its status there, so a concurrent ``complete_session`` cannot slip
in between the immutability check and the write.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from trainlog.core.clock import Clock, as_utc
from trainlog.core.errors import DomainValidationError, ImmutabilityViolationError, NotFoundError
from trainlog.domain.metrics import percentage, total_volume
from trainlog.domain.progression import is_within_plan
from trainlog.domain.statuses import ExerciseLogStatus, SessionStatus, require_transition
from trainlog.models.exercise_log import ExerciseLog
from trainlog.models.set_log import SetLog
from trainlog.models.trainee_profile import TraineeProfile
from trainlog.models.training_plan import TrainingPlan
from trainlog.models.workout_session import WorkoutSession
from trainlog.services.catalog import get_workout, prescription_snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionCompleted:
    session_id: uuid.UUID
    total_duration_seconds: int
    total_volume_kg: Decimal
    completion_percentage: float


@dataclass(frozen=True)
class CompletionProgress:
    percentage: float
    completed_exercises: int
    prescribed_exercises: int
    # False for sessions that are still open or were abandoned
    is_final: bool


async def get_trainee_profile(db: AsyncSession, trainee_id: int) -> TraineeProfile:
    trainee = await db.get(TraineeProfile, trainee_id)
    if trainee is None:
        raise NotFoundError("Trainee profile", trainee_id)
    return trainee


async def get_owned_session(
    db: AsyncSession,
    session_id: uuid.UUID,
    trainee_id: int,
    *,
    for_update: bool = False,
    entity: str = "Workout session",
    entity_id=None,
) -> WorkoutSession:
    stmt = select(WorkoutSession).where(WorkoutSession.id == session_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    res = await db.execute(stmt)
    session = res.scalar_one_or_none()
    # another trainee's session is reported exactly like a missing one
    if session is None or session.trainee_id != trainee_id:
        raise NotFoundError(entity, entity_id if entity_id is not None else session_id)
    return session


async def lock_session_for_write(
    db: AsyncSession,
    session_id: uuid.UUID,
    trainee_id: int,
    action: str,
    *,
    entity: str = "Workout session",
    entity_id=None,
) -> WorkoutSession:
    session = await get_owned_session(
        db, session_id, trainee_id, for_update=True, entity=entity, entity_id=entity_id
    )
    if session.is_logs_immutable():
        logger.warning("rejected %s on locked session %s", action, session.id)
        raise ImmutabilityViolationError(session.id, action)
    return session


def mark_in_progress(session: WorkoutSession) -> None:
    if session.status is SessionStatus.STARTED:
        require_transition(session.status, "progress")
        session.status = SessionStatus.IN_PROGRESS


async def _validate_plan_position(
    db: AsyncSession,
    training_plan_id: int | None,
    week_number: int | None,
    day_number: int | None,
) -> None:
    given = [v is not None for v in (training_plan_id, week_number, day_number)]
    if not any(given):
        return
    if not all(given):
        raise DomainValidationError(
            "A plan position needs training_plan_id, training_plan_week_number and training_plan_day_number",
            field="training_plan_id",
        )
    plan = await db.get(TrainingPlan, training_plan_id)
    if plan is None:
        raise NotFoundError("Training plan", training_plan_id)
    if not is_within_plan(week_number, day_number, plan.duration_weeks, plan.days_per_week):
        raise DomainValidationError(
            f"Week {week_number}, day {day_number} is outside the plan "
            f"({plan.duration_weeks} weeks x {plan.days_per_week} days)",
            field="training_plan_week_number",
        )


async def start_session(
    db: AsyncSession,
    trainee_id: int,
    workout_id: int,
    clock: Clock,
    *,
    training_plan_id: int | None = None,
    training_plan_week_number: int | None = None,
    training_plan_day_number: int | None = None,
) -> WorkoutSession:
    await get_trainee_profile(db, trainee_id)
    workout = await get_workout(db, workout_id)
    await _validate_plan_position(db, training_plan_id, training_plan_week_number, training_plan_day_number)

    prescription = await prescription_snapshot(db, workout.id)
    session = WorkoutSession(
        trainee_id=trainee_id,
        workout_id=workout.id,
        workout_version=workout.version,
        prescription=prescription,
        prescribed_exercise_count=len(prescription),
        training_plan_id=training_plan_id,
        training_plan_week_number=training_plan_week_number,
        training_plan_day_number=training_plan_day_number,
        status=SessionStatus.STARTED,
        started_at=clock.now(),
    )
    db.add(session)
    await db.commit()
    await db.refresh(session)

    logger.info(
        "trainee %s started session %s (workout %s v%s)",
        trainee_id, session.id, workout.id, session.workout_version,
    )
    return session


async def _session_volume(db: AsyncSession, session_id: uuid.UUID) -> Decimal:
    res = await db.execute(
        select(SetLog.weight_kg, SetLog.actual_reps)
        .join(ExerciseLog, SetLog.exercise_log_id == ExerciseLog.id)
        .where(ExerciseLog.workout_session_id == session_id)
    )
    return total_volume(res.all())


async def count_completed_exercises(db: AsyncSession, session_id: uuid.UUID) -> int:
    res = await db.execute(
        select(func.count(ExerciseLog.id)).where(
            ExerciseLog.workout_session_id == session_id,
            ExerciseLog.status == ExerciseLogStatus.COMPLETED,
        )
    )
    return int(res.scalar_one() or 0)


async def completion_progress(db: AsyncSession, session: WorkoutSession) -> CompletionProgress:
    completed = await count_completed_exercises(db, session.id)
    prescribed = session.prescribed_exercise_count
    return CompletionProgress(
        percentage=percentage(completed, prescribed) if prescribed else 0.0,
        completed_exercises=completed,
        prescribed_exercises=prescribed,
        is_final=session.status is SessionStatus.COMPLETED,
    )


async def complete_session(
    db: AsyncSession,
    session_id: uuid.UUID,
    trainee_id: int,
    clock: Clock,
    *,
    notes: str | None = None,
    rating: int | None = None,
) -> tuple[WorkoutSession, SessionCompleted]:
    session = await get_owned_session(db, session_id, trainee_id, for_update=True)
    require_transition(session.status, "complete")
    if rating is not None and not 1 <= rating <= 5:
        raise DomainValidationError("Rating must be between 1 and 5", field="rating", value=rating)

    completed_at = clock.now()
    duration = int((as_utc(completed_at) - as_utc(session.started_at)).total_seconds())
    volume = await _session_volume(db, session.id)

    session.completed_at = completed_at
    session.total_duration_seconds = max(duration, 0)
    session.total_volume_kg = volume
    if notes is not None:
        session.notes = notes
    if rating is not None:
        session.rating = rating
    session.status = SessionStatus.COMPLETED

    progress = await completion_progress(db, session)
    await db.commit()
    await db.refresh(session)

    event = SessionCompleted(
        session_id=session.id,
        total_duration_seconds=session.total_duration_seconds,
        total_volume_kg=volume,
        completion_percentage=progress.percentage,
    )
    logger.info(
        "session %s completed: %ss, %s kg, %s%% of prescription",
        session.id, event.total_duration_seconds, event.total_volume_kg, event.completion_percentage,
    )
    return session, event


async def abandon_session(
    db: AsyncSession,
    session_id: uuid.UUID,
    trainee_id: int,
    clock: Clock,
) -> WorkoutSession:
    session = await get_owned_session(db, session_id, trainee_id, for_update=True)
    require_transition(session.status, "abandon")

    session.status = SessionStatus.ABANDONED
    session.completed_at = clock.now()
    await db.commit()
    await db.refresh(session)

    logger.info("session %s abandoned", session.id)
    return session


async def list_sessions(
    db: AsyncSession,
    trainee_id: int,
    *,
    status: SessionStatus | None = None,
    workout_id: int | None = None,
    started_from: datetime | None = None,
    started_to: datetime | None = None,
) -> list[WorkoutSession]:
    stmt = select(WorkoutSession).where(WorkoutSession.trainee_id == trainee_id)
    if status is not None:
        stmt = stmt.where(WorkoutSession.status == status)
    if workout_id is not None:
        stmt = stmt.where(WorkoutSession.workout_id == workout_id)
    if started_from is not None:
        stmt = stmt.where(WorkoutSession.started_at >= as_utc(started_from))
    if started_to is not None:
        stmt = stmt.where(WorkoutSession.started_at <= as_utc(started_to))
    res = await db.execute(stmt.order_by(WorkoutSession.started_at.desc()))
    return list(res.scalars().all())


async def load_session_logs(
    db: AsyncSession, session_id: uuid.UUID
) -> tuple[list[ExerciseLog], dict[uuid.UUID, list[SetLog]]]:
    ex_res = await db.execute(
        select(ExerciseLog)
        .where(ExerciseLog.workout_session_id == session_id)
        .order_by(ExerciseLog.order_index.asc(), ExerciseLog.created_at.asc())
    )
    exercise_logs = list(ex_res.scalars().all())

    sets_by_log: dict[uuid.UUID, list[SetLog]] = {log.id: [] for log in exercise_logs}
    if exercise_logs:
        set_res = await db.execute(
            select(SetLog)
            .where(SetLog.exercise_log_id.in_(list(sets_by_log)))
            .order_by(SetLog.exercise_log_id.asc(), SetLog.set_number.asc())
        )
        for s in set_res.scalars().all():
            sets_by_log[s.exercise_log_id].append(s)
    return exercise_logs, sets_by_log
