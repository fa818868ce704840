"""Trainee progression through a multi-week training plan.

One ``TraineeActivePlan`` row exists per (trainee, plan) pair; the storage
unique constraint backs the one-active-instance rule against concurrent
starts.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trainlog.core.clock import Clock
from trainlog.core.errors import ConflictError, NotFoundError
from trainlog.domain.metrics import percentage
from trainlog.domain.progression import days_into_plan, next_position
from trainlog.domain.statuses import TrackerStatus, require_transition
from trainlog.models.trainee_active_plan import TraineeActivePlan
from trainlog.models.training_plan import TrainingPlan
from trainlog.models.training_plan_day import TrainingPlanDay, TrainingPlanDayWorkout
from trainlog.models.workout import Workout
from trainlog.services.sessions import get_trainee_profile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanAdvanced:
    tracker_id: uuid.UUID
    current_week: int
    current_day: int
    status: TrackerStatus
    completed_at: datetime | None


@dataclass(frozen=True)
class TrackerProgress:
    days_into_plan: int
    total_days: int
    completion_percentage: float
    is_on_last_week: bool
    is_on_last_day_of_week: bool


def is_on_last_week(tracker: TraineeActivePlan, plan: TrainingPlan) -> bool:
    return tracker.current_week == plan.duration_weeks


def is_on_last_day_of_week(tracker: TraineeActivePlan, plan: TrainingPlan) -> bool:
    return tracker.current_day == plan.days_per_week


def tracker_progress(tracker: TraineeActivePlan, plan: TrainingPlan) -> TrackerProgress:
    done = days_into_plan(tracker.current_week, tracker.current_day, plan.days_per_week)
    return TrackerProgress(
        days_into_plan=done,
        total_days=plan.total_days,
        completion_percentage=percentage(done, plan.total_days),
        is_on_last_week=is_on_last_week(tracker, plan),
        is_on_last_day_of_week=is_on_last_day_of_week(tracker, plan),
    )


async def get_plan(db: AsyncSession, plan_id: int) -> TrainingPlan:
    plan = await db.get(TrainingPlan, plan_id)
    if plan is None:
        raise NotFoundError("Training plan", plan_id)
    return plan


async def get_owned_tracker(
    db: AsyncSession,
    tracker_id: uuid.UUID,
    trainee_id: int,
    *,
    for_update: bool = False,
) -> TraineeActivePlan:
    stmt = select(TraineeActivePlan).where(TraineeActivePlan.id == tracker_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    res = await db.execute(stmt)
    tracker = res.scalar_one_or_none()
    if tracker is None or tracker.trainee_id != trainee_id:
        raise NotFoundError("Plan progress", tracker_id)
    return tracker


async def list_trackers(
    db: AsyncSession,
    trainee_id: int,
    *,
    status: TrackerStatus | None = None,
) -> list[TraineeActivePlan]:
    stmt = select(TraineeActivePlan).where(TraineeActivePlan.trainee_id == trainee_id)
    if status is not None:
        stmt = stmt.where(TraineeActivePlan.status == status)
    res = await db.execute(stmt.order_by(TraineeActivePlan.started_at.desc()))
    return list(res.scalars().all())


def _reset(tracker: TraineeActivePlan, now: datetime) -> None:
    tracker.current_week = 1
    tracker.current_day = 1
    tracker.status = TrackerStatus.ACTIVE
    tracker.started_at = now
    tracker.completed_at = None


async def _commit(db: AsyncSession, tracker: TraineeActivePlan) -> TraineeActivePlan:
    await db.commit()
    await db.refresh(tracker)
    return tracker


async def start_plan(db: AsyncSession, trainee_id: int, plan_id: int, clock: Clock) -> TraineeActivePlan:
    await get_trainee_profile(db, trainee_id)
    plan = await get_plan(db, plan_id)

    res = await db.execute(
        select(TraineeActivePlan)
        .where(
            TraineeActivePlan.trainee_id == trainee_id,
            TraineeActivePlan.training_plan_id == plan.id,
        )
        .with_for_update()
    )
    tracker = res.scalar_one_or_none()

    if tracker is not None:
        if not tracker.status.is_terminal:
            raise ConflictError(
                "This plan is already being followed",
                tracker_id=str(tracker.id),
                status=tracker.status.value,
            )
        # a finished or abandoned run is reopened in place; the pair stays unique
        _reset(tracker, clock.now())
        logger.info("trainee %s restarted plan %s (tracker %s)", trainee_id, plan.id, tracker.id)
        return await _commit(db, tracker)

    tracker = TraineeActivePlan(trainee_id=trainee_id, training_plan_id=plan.id)
    _reset(tracker, clock.now())
    db.add(tracker)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("This plan is already being followed", training_plan_id=plan_id)
    await db.refresh(tracker)

    logger.info("trainee %s started plan %s (tracker %s)", trainee_id, plan.id, tracker.id)
    return tracker


async def advance_day(
    db: AsyncSession,
    tracker_id: uuid.UUID,
    trainee_id: int,
    clock: Clock,
) -> tuple[TraineeActivePlan, PlanAdvanced]:
    tracker = await get_owned_tracker(db, tracker_id, trainee_id, for_update=True)
    require_transition(tracker.status, "advance")
    plan = await get_plan(db, tracker.training_plan_id)

    position = next_position(tracker.current_week, tracker.current_day, plan.duration_weeks, plan.days_per_week)
    tracker.current_week = position.week
    tracker.current_day = position.day
    if position.finished:
        tracker.status = TrackerStatus.COMPLETED
        tracker.completed_at = clock.now()

    await _commit(db, tracker)
    event = PlanAdvanced(
        tracker_id=tracker.id,
        current_week=tracker.current_week,
        current_day=tracker.current_day,
        status=tracker.status,
        completed_at=tracker.completed_at,
    )
    if position.finished:
        logger.info("tracker %s completed plan %s", tracker.id, plan.id)
    else:
        logger.info("tracker %s advanced to week %s day %s", tracker.id, event.current_week, event.current_day)
    return tracker, event


async def pause_plan(db: AsyncSession, tracker_id: uuid.UUID, trainee_id: int) -> TraineeActivePlan:
    tracker = await get_owned_tracker(db, tracker_id, trainee_id, for_update=True)
    require_transition(tracker.status, "pause")
    tracker.status = TrackerStatus.PAUSED
    return await _commit(db, tracker)


async def resume_plan(db: AsyncSession, tracker_id: uuid.UUID, trainee_id: int) -> TraineeActivePlan:
    tracker = await get_owned_tracker(db, tracker_id, trainee_id, for_update=True)
    require_transition(tracker.status, "resume")
    tracker.status = TrackerStatus.ACTIVE
    return await _commit(db, tracker)


async def abandon_plan(
    db: AsyncSession, tracker_id: uuid.UUID, trainee_id: int, clock: Clock
) -> TraineeActivePlan:
    tracker = await get_owned_tracker(db, tracker_id, trainee_id, for_update=True)
    require_transition(tracker.status, "abandon")
    tracker.status = TrackerStatus.ABANDONED
    tracker.completed_at = clock.now()
    logger.info("tracker %s abandoned", tracker.id)
    return await _commit(db, tracker)


async def restart_plan(
    db: AsyncSession, tracker_id: uuid.UUID, trainee_id: int, clock: Clock
) -> TraineeActivePlan:
    tracker = await get_owned_tracker(db, tracker_id, trainee_id, for_update=True)
    require_transition(tracker.status, "restart")
    _reset(tracker, clock.now())
    logger.info("tracker %s restarted", tracker.id)
    return await _commit(db, tracker)


async def current_plan_day(
    db: AsyncSession, tracker: TraineeActivePlan
) -> tuple[TrainingPlanDay | None, list[Workout]]:
    """The plan day under the pointer and the workouts assigned to it."""
    res = await db.execute(
        select(TrainingPlanDay).where(
            TrainingPlanDay.training_plan_id == tracker.training_plan_id,
            TrainingPlanDay.week_number == tracker.current_week,
            TrainingPlanDay.day_number == tracker.current_day,
        )
    )
    day = res.scalar_one_or_none()
    if day is None:
        return None, []

    w_res = await db.execute(
        select(Workout)
        .join(TrainingPlanDayWorkout, TrainingPlanDayWorkout.workout_id == Workout.id)
        .where(TrainingPlanDayWorkout.training_plan_day_id == day.id)
        .order_by(TrainingPlanDayWorkout.order_index.asc(), Workout.id.asc())
    )
    return day, list(w_res.scalars().all())
