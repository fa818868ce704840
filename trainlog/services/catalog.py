"""Workout prescription upkeep.

Every change to a workout's prescribed exercises bumps ``Workout.version``
and finishes by recomputing the workout totals. Sessions pin the version
and a copy of the prescription when they start, so these edits never reach
back into sessions already underway or finished.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from trainlog.core.errors import DomainValidationError, NotFoundError
from trainlog.models.exercise import Exercise
from trainlog.models.workout import Workout
from trainlog.models.workout_exercise import WorkoutExercise

logger = logging.getLogger(__name__)

TARGET_FIELDS = ("target_reps", "target_duration_seconds", "target_distance_meters")
EDITABLE_FIELDS = frozenset(TARGET_FIELDS) | {"sets", "rest_seconds", "is_optional", "order_index"}


async def get_workout(db: AsyncSession, workout_id: int) -> Workout:
    workout = await db.get(Workout, workout_id)
    if workout is None:
        raise NotFoundError("Workout", workout_id)
    return workout


async def create_workout(db: AsyncSession, name: str) -> Workout:
    workout = Workout(name=name, version=1, total_exercises=0, total_sets=0)
    db.add(workout)
    await db.commit()
    await db.refresh(workout)
    return workout


def _validate_prescription(values: dict) -> None:
    if not any(values.get(field) for field in TARGET_FIELDS):
        raise DomainValidationError(
            "A prescribed exercise needs target_reps, target_duration_seconds or target_distance_meters",
            field="targets",
        )
    for field in ("sets", "rest_seconds"):
        if field in values and values[field] is None:
            raise DomainValidationError(f"{field} cannot be null", field=field)
    for field in ("sets", *TARGET_FIELDS):
        value = values.get(field)
        if value is not None and value < 1:
            raise DomainValidationError(f"{field} must be positive", field=field, value=value)
    if values.get("rest_seconds") is not None and values["rest_seconds"] < 0:
        raise DomainValidationError("rest_seconds cannot be negative", field="rest_seconds")


async def recompute_workout_totals(db: AsyncSession, workout: Workout) -> Workout:
    res = await db.execute(
        select(
            func.count(WorkoutExercise.id),
            func.coalesce(func.sum(WorkoutExercise.sets), 0),
        ).where(WorkoutExercise.workout_id == workout.id)
    )
    exercises, sets = res.one()
    workout.total_exercises = int(exercises)
    workout.total_sets = int(sets)
    return workout


async def add_workout_exercise(
    db: AsyncSession,
    workout_id: int,
    exercise_id: int,
    *,
    sets: int = 1,
    target_reps: int | None = None,
    target_duration_seconds: int | None = None,
    target_distance_meters: int | None = None,
    rest_seconds: int = 60,
    is_optional: bool = False,
    order_index: int | None = None,
) -> WorkoutExercise:
    workout = await get_workout(db, workout_id)
    if await db.get(Exercise, exercise_id) is None:
        raise NotFoundError("Exercise", exercise_id)

    values = {
        "sets": sets,
        "target_reps": target_reps,
        "target_duration_seconds": target_duration_seconds,
        "target_distance_meters": target_distance_meters,
        "rest_seconds": rest_seconds,
    }
    _validate_prescription(values)

    if order_index is None:
        res = await db.execute(
            select(func.count(WorkoutExercise.id)).where(WorkoutExercise.workout_id == workout.id)
        )
        order_index = int(res.scalar_one())

    item = WorkoutExercise(
        workout_id=workout.id,
        exercise_id=exercise_id,
        order_index=order_index,
        is_optional=is_optional,
        **values,
    )
    db.add(item)
    await db.flush()

    workout.version += 1
    await recompute_workout_totals(db, workout)
    await db.commit()
    await db.refresh(item)
    logger.info("workout %s now at version %s (%s exercises)", workout.id, workout.version, workout.total_exercises)
    return item


async def update_workout_exercise(db: AsyncSession, workout_exercise_id: int, **changes) -> WorkoutExercise:
    item = await db.get(WorkoutExercise, workout_exercise_id)
    if item is None:
        raise NotFoundError("Prescribed exercise", workout_exercise_id)

    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise DomainValidationError(f"Cannot change {', '.join(sorted(unknown))}", field=sorted(unknown)[0])

    merged = {
        "sets": item.sets,
        "target_reps": item.target_reps,
        "target_duration_seconds": item.target_duration_seconds,
        "target_distance_meters": item.target_distance_meters,
        "rest_seconds": item.rest_seconds,
    }
    merged.update({k: v for k, v in changes.items() if k in merged})
    _validate_prescription(merged)

    for key, value in changes.items():
        setattr(item, key, value)
    await db.flush()

    workout = await get_workout(db, item.workout_id)
    workout.version += 1
    await recompute_workout_totals(db, workout)
    await db.commit()
    await db.refresh(item)
    return item


async def remove_workout_exercise(db: AsyncSession, workout_exercise_id: int) -> None:
    item = await db.get(WorkoutExercise, workout_exercise_id)
    if item is None:
        raise NotFoundError("Prescribed exercise", workout_exercise_id)
    workout = await get_workout(db, item.workout_id)

    await db.delete(item)
    await db.flush()

    workout.version += 1
    await recompute_workout_totals(db, workout)
    await db.commit()


async def prescription_snapshot(db: AsyncSession, workout_id: int) -> list[dict]:
    """Ordered, JSON-ready copy of a workout's prescribed exercises."""
    res = await db.execute(
        select(WorkoutExercise)
        .where(WorkoutExercise.workout_id == workout_id)
        .order_by(WorkoutExercise.order_index.asc(), WorkoutExercise.id.asc())
    )
    return [
        {
            "workout_exercise_id": we.id,
            "exercise_id": we.exercise_id,
            "order_index": we.order_index,
            "sets": we.sets,
            "target_reps": we.target_reps,
            "target_duration_seconds": we.target_duration_seconds,
            "target_distance_meters": we.target_distance_meters,
            "rest_seconds": we.rest_seconds,
            "is_optional": we.is_optional,
        }
        for we in res.scalars().all()
    ]
