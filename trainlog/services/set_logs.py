import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trainlog.core.clock import Clock
from trainlog.core.errors import ConflictError, DomainValidationError, NotFoundError
from trainlog.domain.metrics import quantize
from trainlog.domain.performance import FAMILIES, has_actual, prescribed_families
from trainlog.models.exercise_log import ExerciseLog
from trainlog.models.set_log import SetLog
from trainlog.models.workout_session import WorkoutSession
from trainlog.services.exercise_logs import lock_exercise_log_for_write
from trainlog.services.sessions import lock_session_for_write, mark_in_progress

logger = logging.getLogger(__name__)

TARGET_FIELDS = tuple(f"target_{family}" for family in FAMILIES)
ACTUAL_FIELDS = tuple(f"actual_{family}" for family in FAMILIES)
UPDATABLE_FIELDS = frozenset(ACTUAL_FIELDS) | {"weight_kg", "rpe", "is_warmup", "is_failure", "notes"}


def validate_set_values(values: dict[str, Any]) -> None:
    for field in TARGET_FIELDS + ACTUAL_FIELDS:
        value = values.get(field)
        if value is not None and value <= 0:
            raise DomainValidationError(f"{field} must be positive", field=field, value=value)

    weight = values.get("weight_kg")
    if weight is not None and weight < 0:
        raise DomainValidationError("weight_kg cannot be negative", field="weight_kg", value=str(weight))

    rpe = values.get("rpe")
    if rpe is not None and not 1 <= rpe <= 10:
        raise DomainValidationError("RPE must be between 1 and 10", field="rpe", value=rpe)


def _resolve_targets(log: ExerciseLog, targets: dict[str, int | None]) -> dict[str, int | None]:
    """Targets given by the caller, or the ones pinned on the exercise log.

    Caller-supplied targets have to stay inside the metric families the
    prescription uses.
    """
    allowed = prescribed_families(log)
    supplied = {field: value for field, value in targets.items() if value is not None}

    if not supplied:
        supplied = {f"target_{family}": getattr(log, f"target_{family}") for family in allowed}
    elif allowed:
        for field in supplied:
            family = field.removeprefix("target_")
            if family not in allowed:
                raise DomainValidationError(
                    f"{field} is not prescribed for this exercise (uses {', '.join(sorted(allowed))})",
                    field=field,
                )

    if not supplied:
        raise DomainValidationError(
            "At least one of target_reps, target_duration_seconds or target_distance_meters is required",
            field="targets",
        )
    return {field: supplied.get(field) for field in TARGET_FIELDS}


async def _commit_or_conflict(db: AsyncSession, log: ExerciseLog, set_number: int | None) -> None:
    log_id = log.id
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(
            f"Set {set_number} was logged concurrently for this exercise",
            exercise_log_id=str(log_id),
            set_number=set_number,
        )


async def create_set_log(
    db: AsyncSession,
    exercise_log_id: uuid.UUID,
    trainee_id: int,
    clock: Clock,
    *,
    set_number: int,
    target_reps: int | None = None,
    target_duration_seconds: int | None = None,
    target_distance_meters: int | None = None,
    actual_reps: int | None = None,
    actual_duration_seconds: int | None = None,
    actual_distance_meters: int | None = None,
    weight_kg=None,
    rpe: int | None = None,
    is_warmup: bool = False,
    is_failure: bool = False,
    notes: str | None = None,
    completed: bool = False,
    session_id: uuid.UUID | None = None,
) -> SetLog:
    session, log = await lock_exercise_log_for_write(db, exercise_log_id, trainee_id, "create set", session_id)

    if set_number is None or set_number < 1:
        raise DomainValidationError("set_number must be a positive integer", field="set_number", value=set_number)
    values = {
        "target_reps": target_reps,
        "target_duration_seconds": target_duration_seconds,
        "target_distance_meters": target_distance_meters,
        "actual_reps": actual_reps,
        "actual_duration_seconds": actual_duration_seconds,
        "actual_distance_meters": actual_distance_meters,
        "weight_kg": weight_kg,
        "rpe": rpe,
    }
    validate_set_values(values)
    targets = _resolve_targets(log, {field: values[field] for field in TARGET_FIELDS})

    existing = await db.execute(
        select(SetLog.id).where(SetLog.exercise_log_id == log.id, SetLog.set_number == set_number)
    )
    if existing.first() is not None:
        raise DomainValidationError(
            f"Set {set_number} is already logged for this exercise", field="set_number", value=set_number
        )

    set_log = SetLog(
        exercise_log_id=log.id,
        set_number=set_number,
        **targets,
        actual_reps=actual_reps,
        actual_duration_seconds=actual_duration_seconds,
        actual_distance_meters=actual_distance_meters,
        weight_kg=quantize(weight_kg) if weight_kg is not None else None,
        rpe=rpe,
        is_warmup=is_warmup,
        is_failure=is_failure,
        notes=notes,
    )
    if completed:
        _require_actual(set_log)
        set_log.completed_at = clock.now()

    db.add(set_log)
    mark_in_progress(session)
    await _commit_or_conflict(db, log, set_number)
    await db.refresh(set_log)

    logger.info("exercise log %s: set %s logged (%s)", log.id, set_number, set_log.summary() or "no actuals yet")
    return set_log


async def lock_set_log_for_write(
    db: AsyncSession,
    set_log_id: uuid.UUID,
    trainee_id: int,
    action: str,
    *,
    exercise_log_id: uuid.UUID | None = None,
    session_id: uuid.UUID | None = None,
) -> tuple[WorkoutSession, SetLog]:
    res = await db.execute(
        select(SetLog, ExerciseLog.workout_session_id)
        .join(ExerciseLog, SetLog.exercise_log_id == ExerciseLog.id)
        .where(SetLog.id == set_log_id)
    )
    row = res.first()
    if row is None:
        raise NotFoundError("Set log", set_log_id)
    set_log, parent_session_id = row
    if exercise_log_id is not None and set_log.exercise_log_id != exercise_log_id:
        raise NotFoundError("Set log", set_log_id)
    if session_id is not None and parent_session_id != session_id:
        raise NotFoundError("Set log", set_log_id)

    session = await lock_session_for_write(
        db, parent_session_id, trainee_id, action, entity="Set log", entity_id=set_log_id
    )
    res = await db.execute(
        select(SetLog).where(SetLog.id == set_log_id).execution_options(populate_existing=True)
    )
    set_log = res.scalar_one_or_none()
    if set_log is None:
        raise NotFoundError("Set log", set_log_id)
    return session, set_log


async def get_owned_set_log(db: AsyncSession, set_log_id: uuid.UUID, trainee_id: int) -> SetLog:
    res = await db.execute(
        select(SetLog, WorkoutSession.trainee_id)
        .join(ExerciseLog, SetLog.exercise_log_id == ExerciseLog.id)
        .join(WorkoutSession, ExerciseLog.workout_session_id == WorkoutSession.id)
        .where(SetLog.id == set_log_id)
    )
    row = res.first()
    if row is None or row[1] != trainee_id:
        raise NotFoundError("Set log", set_log_id)
    return row[0]


async def update_set_log(
    db: AsyncSession,
    set_log_id: uuid.UUID,
    trainee_id: int,
    changes: dict[str, Any],
    **scope,
) -> SetLog:
    """Apply a partial update; only keys present in ``changes`` are written."""
    _, set_log = await lock_set_log_for_write(db, set_log_id, trainee_id, "update set", **scope)

    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        field = sorted(unknown)[0]
        raise DomainValidationError(f"{field} cannot be updated", field=field)
    validate_set_values(changes)
    for flag in ("is_warmup", "is_failure"):
        if flag in changes and changes[flag] is None:
            raise DomainValidationError(f"{flag} cannot be null", field=flag)

    if set_log.is_completed() and not any(changes.get(f, getattr(set_log, f)) for f in ACTUAL_FIELDS):
        raise DomainValidationError(
            "A completed set must keep at least one actual value", field="actual_reps"
        )

    for field, value in changes.items():
        if field == "weight_kg" and value is not None:
            value = quantize(value)
        setattr(set_log, field, value)

    await db.commit()
    await db.refresh(set_log)
    return set_log


def _require_actual(set_log: SetLog) -> None:
    if not has_actual(set_log):
        raise DomainValidationError(
            "At least one of actual_reps, actual_duration_seconds or actual_distance_meters "
            "must be recorded before the set is completed",
            field="actual_reps",
        )


async def complete_set_log(
    db: AsyncSession,
    set_log_id: uuid.UUID,
    trainee_id: int,
    clock: Clock,
    **scope,
) -> SetLog:
    _, set_log = await lock_set_log_for_write(db, set_log_id, trainee_id, "complete set", **scope)
    _require_actual(set_log)

    set_log.completed_at = clock.now()
    await db.commit()
    await db.refresh(set_log)
    return set_log


async def delete_set_log(db: AsyncSession, set_log_id: uuid.UUID, trainee_id: int, **scope) -> None:
    _, set_log = await lock_set_log_for_write(db, set_log_id, trainee_id, "delete set", **scope)
    await db.delete(set_log)
    await db.commit()
    logger.info("set log %s deleted", set_log_id)
