import uuid
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trainlog.core.clock import Clock
from trainlog.core.db import get_db
from trainlog.core.deps import get_clock, get_current_trainee
from trainlog.domain.statuses import SessionStatus
from trainlog.models.trainee_profile import TraineeProfile
from trainlog.schemas.sessions import (
    CompleteSessionIn,
    CreateExerciseLogIn,
    CreateSetLogIn,
    ExerciseLogNotesIn,
    ExerciseLogOut,
    SessionCompletedOut,
    SessionOut,
    SessionSummaryOut,
    SetLogOut,
    StartSessionIn,
    UpdateSetLogIn,
)
from trainlog.services import exercise_logs, set_logs, sessions
from trainlog.services.exercise_logs import ExerciseLogStats

router = APIRouter(prefix="/sessions", tags=["sessions"])


async def _session_detail(db: AsyncSession, session) -> SessionOut:
    logs, sets_by_log = await sessions.load_session_logs(db, session.id)
    progress = await sessions.completion_progress(db, session)
    exercise_log_out = [
        ExerciseLogOut.build(
            log,
            sets=sets_by_log[log.id],
            stats=ExerciseLogStats.from_sets(log, sets_by_log[log.id]),
        )
        for log in logs
    ]
    return SessionOut.build(session, progress=progress, exercise_logs=exercise_log_out)


@router.get("", response_model=list[SessionOut])
async def list_sessions(
    status: SessionStatus | None = None,
    workout_id: int | None = None,
    started_from: datetime | None = None,
    started_to: datetime | None = None,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
):
    rows = await sessions.list_sessions(
        db,
        trainee.id,
        status=status,
        workout_id=workout_id,
        started_from=started_from,
        started_to=started_to,
    )
    return [SessionOut.build(s) for s in rows]


@router.post("", response_model=SessionOut, status_code=201)
async def start_session(
    payload: StartSessionIn,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    session = await sessions.start_session(
        db,
        trainee.id,
        payload.workout_id,
        clock,
        training_plan_id=payload.training_plan_id,
        training_plan_week_number=payload.training_plan_week_number,
        training_plan_day_number=payload.training_plan_day_number,
    )
    return SessionOut.build(session)


@router.get("/{session_id}", response_model=SessionOut)
async def get_session(
    session_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
):
    session = await sessions.get_owned_session(db, session_id, trainee.id)
    return await _session_detail(db, session)


@router.post("/{session_id}/complete", response_model=SessionCompletedOut)
async def complete_session(
    session_id: uuid.UUID,
    payload: CompleteSessionIn,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    session, event = await sessions.complete_session(
        db, session_id, trainee.id, clock, notes=payload.notes, rating=payload.rating
    )
    return SessionCompletedOut(
        session=await _session_detail(db, session),
        summary=SessionSummaryOut(
            total_duration_seconds=event.total_duration_seconds,
            total_volume_kg=event.total_volume_kg,
            completion_percentage=event.completion_percentage,
        ),
    )


@router.post("/{session_id}/abandon", response_model=SessionOut)
async def abandon_session(
    session_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    session = await sessions.abandon_session(db, session_id, trainee.id, clock)
    return await _session_detail(db, session)


# Exercise logs

@router.post("/{session_id}/exercises", response_model=ExerciseLogOut, status_code=201)
async def create_exercise_log(
    session_id: uuid.UUID,
    payload: CreateExerciseLogIn,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
):
    log = await exercise_logs.create_exercise_log(
        db, session_id, trainee.id, payload.workout_exercise_id, notes=payload.notes
    )
    return ExerciseLogOut.build(log)


@router.get("/{session_id}/exercises/{log_id}", response_model=ExerciseLogOut)
async def get_exercise_log(
    session_id: uuid.UUID,
    log_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
):
    _, log = await exercise_logs.get_owned_exercise_log(db, log_id, trainee.id, session_id)
    sets = await exercise_logs.load_set_logs(db, log.id)
    return ExerciseLogOut.build(log, sets=sets, stats=ExerciseLogStats.from_sets(log, sets))


@router.post("/{session_id}/exercises/{log_id}/start", response_model=ExerciseLogOut)
async def start_exercise_log(
    session_id: uuid.UUID,
    log_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    log = await exercise_logs.start_exercise_log(db, log_id, trainee.id, clock, session_id=session_id)
    return ExerciseLogOut.build(log)


@router.post("/{session_id}/exercises/{log_id}/complete", response_model=ExerciseLogOut)
async def complete_exercise_log(
    session_id: uuid.UUID,
    log_id: uuid.UUID,
    payload: ExerciseLogNotesIn,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    log = await exercise_logs.complete_exercise_log(
        db, log_id, trainee.id, clock, notes=payload.notes, session_id=session_id
    )
    return ExerciseLogOut.build(log)


@router.post("/{session_id}/exercises/{log_id}/skip", response_model=ExerciseLogOut)
async def skip_exercise_log(
    session_id: uuid.UUID,
    log_id: uuid.UUID,
    payload: ExerciseLogNotesIn,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    log = await exercise_logs.skip_exercise_log(
        db, log_id, trainee.id, clock, notes=payload.notes, session_id=session_id
    )
    return ExerciseLogOut.build(log)


# Set logs

@router.post("/{session_id}/exercises/{log_id}/sets", response_model=SetLogOut, status_code=201)
async def create_set_log(
    session_id: uuid.UUID,
    log_id: uuid.UUID,
    payload: CreateSetLogIn,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    set_log = await set_logs.create_set_log(
        db, log_id, trainee.id, clock, session_id=session_id, **payload.model_dump()
    )
    return SetLogOut.build(set_log)


@router.patch("/{session_id}/exercises/{log_id}/sets/{set_id}", response_model=SetLogOut)
async def update_set_log(
    session_id: uuid.UUID,
    log_id: uuid.UUID,
    set_id: uuid.UUID,
    payload: UpdateSetLogIn,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
):
    set_log = await set_logs.update_set_log(
        db,
        set_id,
        trainee.id,
        payload.model_dump(exclude_unset=True),
        exercise_log_id=log_id,
        session_id=session_id,
    )
    return SetLogOut.build(set_log)


@router.post("/{session_id}/exercises/{log_id}/sets/{set_id}/complete", response_model=SetLogOut)
async def complete_set_log(
    session_id: uuid.UUID,
    log_id: uuid.UUID,
    set_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    set_log = await set_logs.complete_set_log(
        db, set_id, trainee.id, clock, exercise_log_id=log_id, session_id=session_id
    )
    return SetLogOut.build(set_log)


@router.delete("/{session_id}/exercises/{log_id}/sets/{set_id}", status_code=204)
async def delete_set_log(
    session_id: uuid.UUID,
    log_id: uuid.UUID,
    set_id: uuid.UUID,
    trainee: TraineeProfile = Depends(get_current_trainee),
    db: AsyncSession = Depends(get_db),
):
    await set_logs.delete_set_log(db, set_id, trainee.id, exercise_log_id=log_id, session_id=session_id)
    return None
