import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trainlog.core.clock import Clock
from trainlog.core.errors import NotFoundError
from trainlog.domain.metrics import average, total_volume
from trainlog.domain.statuses import ExerciseLogStatus, require_transition
from trainlog.models.exercise_log import ExerciseLog
from trainlog.models.set_log import SetLog
from trainlog.models.workout_session import WorkoutSession
from trainlog.services.sessions import get_owned_session, lock_session_for_write, mark_in_progress

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExerciseLogStats:
    total_volume: Decimal
    average_rpe: float | None
    sets_logged: int
    sets_completed: int
    target_sets: int

    @property
    def all_sets_completed(self) -> bool:
        return self.sets_completed >= self.target_sets

    @classmethod
    def from_sets(cls, log: ExerciseLog, sets: list[SetLog]) -> "ExerciseLogStats":
        return cls(
            total_volume=total_volume((s.weight_kg, s.actual_reps) for s in sets),
            average_rpe=average(s.rpe for s in sets),
            sets_logged=len(sets),
            sets_completed=sum(1 for s in sets if s.is_completed()),
            target_sets=log.target_sets,
        )


async def _find_log(db: AsyncSession, exercise_log_id: uuid.UUID, session_id: uuid.UUID | None) -> ExerciseLog:
    log = await db.get(ExerciseLog, exercise_log_id)
    if log is None or (session_id is not None and log.workout_session_id != session_id):
        raise NotFoundError("Exercise log", exercise_log_id)
    return log


async def get_owned_exercise_log(
    db: AsyncSession,
    exercise_log_id: uuid.UUID,
    trainee_id: int,
    session_id: uuid.UUID | None = None,
) -> tuple[WorkoutSession, ExerciseLog]:
    log = await _find_log(db, exercise_log_id, session_id)
    session = await get_owned_session(
        db, log.workout_session_id, trainee_id, entity="Exercise log", entity_id=exercise_log_id
    )
    return session, log


async def lock_exercise_log_for_write(
    db: AsyncSession,
    exercise_log_id: uuid.UUID,
    trainee_id: int,
    action: str,
    session_id: uuid.UUID | None = None,
) -> tuple[WorkoutSession, ExerciseLog]:
    log = await _find_log(db, exercise_log_id, session_id)
    session = await lock_session_for_write(
        db, log.workout_session_id, trainee_id, action, entity="Exercise log", entity_id=exercise_log_id
    )
    # re-read under the session lock so the status check sees the latest write
    res = await db.execute(
        select(ExerciseLog)
        .where(ExerciseLog.id == exercise_log_id)
        .execution_options(populate_existing=True)
    )
    return session, res.scalar_one()


async def create_exercise_log(
    db: AsyncSession,
    session_id: uuid.UUID,
    trainee_id: int,
    workout_exercise_id: int,
    *,
    notes: str | None = None,
) -> ExerciseLog:
    session = await lock_session_for_write(db, session_id, trainee_id, "create exercise log")

    prescribed = next(
        (item for item in session.prescription if item["workout_exercise_id"] == workout_exercise_id),
        None,
    )
    if prescribed is None:
        raise NotFoundError("Prescribed exercise", workout_exercise_id)

    log = ExerciseLog(
        workout_session_id=session.id,
        workout_exercise_id=workout_exercise_id,
        exercise_id=prescribed["exercise_id"],
        order_index=prescribed.get("order_index", 0),
        status=ExerciseLogStatus.PENDING,
        target_sets=prescribed["sets"],
        target_reps=prescribed.get("target_reps"),
        target_duration_seconds=prescribed.get("target_duration_seconds"),
        target_distance_meters=prescribed.get("target_distance_meters"),
        notes=notes,
    )
    db.add(log)
    mark_in_progress(session)
    await db.commit()
    await db.refresh(log)

    logger.info("session %s: exercise log %s created for prescribed exercise %s", session.id, log.id, workout_exercise_id)
    return log


async def start_exercise_log(
    db: AsyncSession,
    exercise_log_id: uuid.UUID,
    trainee_id: int,
    clock: Clock,
    *,
    session_id: uuid.UUID | None = None,
) -> ExerciseLog:
    session, log = await lock_exercise_log_for_write(db, exercise_log_id, trainee_id, "start exercise", session_id)
    require_transition(log.status, "start")

    log.status = ExerciseLogStatus.IN_PROGRESS
    log.started_at = clock.now()
    mark_in_progress(session)
    await db.commit()
    await db.refresh(log)
    return log


async def _finish_exercise_log(
    db: AsyncSession,
    exercise_log_id: uuid.UUID,
    trainee_id: int,
    clock: Clock,
    action: str,
    status: ExerciseLogStatus,
    notes: str | None,
    session_id: uuid.UUID | None,
) -> ExerciseLog:
    session, log = await lock_exercise_log_for_write(db, exercise_log_id, trainee_id, f"{action} exercise", session_id)
    require_transition(log.status, action)

    log.status = status
    # skipping also stamps completed_at so per-exercise timings stay consistent
    log.completed_at = clock.now()
    if notes is not None:
        log.notes = notes
    mark_in_progress(session)
    await db.commit()
    await db.refresh(log)

    logger.info("exercise log %s %s", log.id, status.value)
    return log


async def complete_exercise_log(
    db: AsyncSession,
    exercise_log_id: uuid.UUID,
    trainee_id: int,
    clock: Clock,
    *,
    notes: str | None = None,
    session_id: uuid.UUID | None = None,
) -> ExerciseLog:
    return await _finish_exercise_log(
        db, exercise_log_id, trainee_id, clock, "complete", ExerciseLogStatus.COMPLETED, notes, session_id
    )


async def skip_exercise_log(
    db: AsyncSession,
    exercise_log_id: uuid.UUID,
    trainee_id: int,
    clock: Clock,
    *,
    notes: str | None = None,
    session_id: uuid.UUID | None = None,
) -> ExerciseLog:
    return await _finish_exercise_log(
        db, exercise_log_id, trainee_id, clock, "skip", ExerciseLogStatus.SKIPPED, notes, session_id
    )


async def load_set_logs(db: AsyncSession, exercise_log_id: uuid.UUID) -> list[SetLog]:
    res = await db.execute(
        select(SetLog)
        .where(SetLog.exercise_log_id == exercise_log_id)
        .order_by(SetLog.set_number.asc())
    )
    return list(res.scalars().all())


async def exercise_log_stats(db: AsyncSession, log: ExerciseLog) -> ExerciseLogStats:
    return ExerciseLogStats.from_sets(log, await load_set_logs(db, log.id))
