import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trainlog.core.clock import Clock
from trainlog.core.db import get_db
from trainlog.core.deps import get_clock, get_current_trainee
from trainlog.domain.statuses import TrackerStatus
from trainlog.models.trainee_profile import TraineeProfile
from trainlog.schemas.plans import PlanDayOut, PlanProgressOut, PlanWorkoutOut
from trainlog.services import plan_progress

router = APIRouter(prefix="/plan-progress", tags=["plans"])


async def _out(db: AsyncSession, tracker) -> PlanProgressOut:
    plan = await plan_progress.get_plan(db, tracker.training_plan_id)
    return PlanProgressOut.build(tracker, plan_progress.tracker_progress(tracker, plan))


@router.get("", response_model=list[PlanProgressOut])
async def list_plan_progress(
    status: TrackerStatus | None = None,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
):
    trackers = await plan_progress.list_trackers(db, trainee.id, status=status)
    return [await _out(db, t) for t in trackers]


@router.post("/plans/{plan_id}/start", response_model=PlanProgressOut, status_code=201)
async def start_plan(
    plan_id: int,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    tracker = await plan_progress.start_plan(db, trainee.id, plan_id, clock)
    return await _out(db, tracker)


@router.get("/{tracker_id}", response_model=PlanProgressOut)
async def get_plan_progress(
    tracker_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
):
    tracker = await plan_progress.get_owned_tracker(db, tracker_id, trainee.id)
    return await _out(db, tracker)


@router.get("/{tracker_id}/today", response_model=PlanDayOut)
async def get_today(
    tracker_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
):
    tracker = await plan_progress.get_owned_tracker(db, tracker_id, trainee.id)
    day, workouts = await plan_progress.current_plan_day(db, tracker)
    return PlanDayOut(
        week_number=tracker.current_week,
        day_number=tracker.current_day,
        name=day.name if day else None,
        is_rest_day=day.is_rest_day if day else False,
        workouts=[
            PlanWorkoutOut(
                id=w.id,
                name=w.name,
                version=w.version,
                total_exercises=w.total_exercises,
                total_sets=w.total_sets,
            )
            for w in workouts
        ],
    )


@router.post("/{tracker_id}/advance", response_model=PlanProgressOut)
async def advance(
    tracker_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    tracker, _ = await plan_progress.advance_day(db, tracker_id, trainee.id, clock)
    return await _out(db, tracker)


@router.post("/{tracker_id}/pause", response_model=PlanProgressOut)
async def pause(
    tracker_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
):
    tracker = await plan_progress.pause_plan(db, tracker_id, trainee.id)
    return await _out(db, tracker)


@router.post("/{tracker_id}/resume", response_model=PlanProgressOut)
async def resume(
    tracker_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
):
    tracker = await plan_progress.resume_plan(db, tracker_id, trainee.id)
    return await _out(db, tracker)


@router.post("/{tracker_id}/abandon", response_model=PlanProgressOut)
async def abandon(
    tracker_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    tracker = await plan_progress.abandon_plan(db, tracker_id, trainee.id, clock)
    return await _out(db, tracker)


@router.post("/{tracker_id}/restart", response_model=PlanProgressOut)
async def restart(
    tracker_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    tracker = await plan_progress.restart_plan(db, tracker_id, trainee.id, clock)
    return await _out(db, tracker)
