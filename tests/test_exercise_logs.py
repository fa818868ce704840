from decimal import Decimal

import pytest

from trainlog.core.errors import InvalidStateTransitionError, NotFoundError
from trainlog.domain.statuses import ExerciseLogStatus
from trainlog.services import exercise_logs, sessions, set_logs


@pytest.mark.asyncio
async def test_log_copies_the_pinned_prescription(db, clock, trainee, workout):
    wk, items = workout
    session = await sessions.start_session(db, trainee.id, wk.id, clock)
    log = await exercise_logs.create_exercise_log(db, session.id, trainee.id, items["plank"].id, notes="elbows")

    assert log.status is ExerciseLogStatus.PENDING
    assert log.exercise_id == items["plank"].exercise_id
    assert log.target_sets == 3
    assert log.target_duration_seconds == 60
    assert log.target_reps is None
    assert log.notes == "elbows"


@pytest.mark.asyncio
async def test_unknown_prescribed_exercise(db, clock, trainee, workout):
    session = await sessions.start_session(db, trainee.id, workout[0].id, clock)
    with pytest.raises(NotFoundError):
        await exercise_logs.create_exercise_log(db, session.id, trainee.id, 424242)


@pytest.mark.asyncio
async def test_start_then_complete_records_timing(db, clock, trainee, workout):
    wk, items = workout
    session = await sessions.start_session(db, trainee.id, wk.id, clock)
    log = await exercise_logs.create_exercise_log(db, session.id, trainee.id, items["bench"].id)

    log = await exercise_logs.start_exercise_log(db, log.id, trainee.id, clock)
    assert log.status is ExerciseLogStatus.IN_PROGRESS
    clock.advance(240)
    log = await exercise_logs.complete_exercise_log(db, log.id, trainee.id, clock, notes="solid")

    assert log.status is ExerciseLogStatus.COMPLETED
    assert log.duration_seconds == 240
    assert log.duration_minutes == 4.0
    assert log.notes == "solid"


@pytest.mark.asyncio
async def test_pending_log_can_be_skipped_or_completed_directly(db, clock, trainee, workout):
    wk, items = workout
    session = await sessions.start_session(db, trainee.id, wk.id, clock)
    skipped = await exercise_logs.create_exercise_log(db, session.id, trainee.id, items["run"].id)
    done = await exercise_logs.create_exercise_log(db, session.id, trainee.id, items["bench"].id)

    skipped = await exercise_logs.skip_exercise_log(db, skipped.id, trainee.id, clock, notes="knee")
    done = await exercise_logs.complete_exercise_log(db, done.id, trainee.id, clock)

    assert skipped.status is ExerciseLogStatus.SKIPPED
    assert skipped.completed_at is not None
    assert skipped.duration_seconds is None
    assert done.status is ExerciseLogStatus.COMPLETED


@pytest.mark.asyncio
@pytest.mark.parametrize("finish", ["complete", "skip"])
@pytest.mark.parametrize("action", ["start", "complete", "skip"])
async def test_finished_logs_are_final(db, clock, trainee, workout, finish, action):
    wk, items = workout
    session = await sessions.start_session(db, trainee.id, wk.id, clock)
    log = await exercise_logs.create_exercise_log(db, session.id, trainee.id, items["bench"].id)
    if finish == "complete":
        await exercise_logs.complete_exercise_log(db, log.id, trainee.id, clock)
    else:
        await exercise_logs.skip_exercise_log(db, log.id, trainee.id, clock)

    with pytest.raises(InvalidStateTransitionError):
        if action == "start":
            await exercise_logs.start_exercise_log(db, log.id, trainee.id, clock)
        elif action == "complete":
            await exercise_logs.complete_exercise_log(db, log.id, trainee.id, clock)
        else:
            await exercise_logs.skip_exercise_log(db, log.id, trainee.id, clock)


@pytest.mark.asyncio
async def test_cannot_start_twice(db, clock, trainee, workout):
    wk, items = workout
    session = await sessions.start_session(db, trainee.id, wk.id, clock)
    log = await exercise_logs.create_exercise_log(db, session.id, trainee.id, items["bench"].id)
    await exercise_logs.start_exercise_log(db, log.id, trainee.id, clock)
    with pytest.raises(InvalidStateTransitionError):
        await exercise_logs.start_exercise_log(db, log.id, trainee.id, clock)


@pytest.mark.asyncio
async def test_stats_cover_logged_sets(db, clock, trainee, workout):
    wk, items = workout
    session = await sessions.start_session(db, trainee.id, wk.id, clock)
    log = await exercise_logs.create_exercise_log(db, session.id, trainee.id, items["bench"].id)
    for n, (reps, rpe) in enumerate([(10, 7), (9, 8), (8, 9)], start=1):
        await set_logs.create_set_log(
            db, log.id, trainee.id, clock,
            set_number=n, actual_reps=reps, weight_kg=Decimal("60"), rpe=rpe, completed=n < 3,
        )

    stats = await exercise_logs.exercise_log_stats(db, log)
    assert stats.total_volume == Decimal("1620.00")
    assert stats.average_rpe == 8.0
    assert stats.sets_logged == 3
    assert stats.sets_completed == 2
    assert stats.all_sets_completed is False


@pytest.mark.asyncio
async def test_log_must_belong_to_the_given_session(db, clock, trainee, workout):
    wk, items = workout
    first = await sessions.start_session(db, trainee.id, wk.id, clock)
    second = await sessions.start_session(db, trainee.id, wk.id, clock)
    log = await exercise_logs.create_exercise_log(db, first.id, trainee.id, items["bench"].id)

    with pytest.raises(NotFoundError):
        await exercise_logs.start_exercise_log(db, log.id, trainee.id, clock, session_id=second.id)
    with pytest.raises(NotFoundError):
        await exercise_logs.get_owned_exercise_log(db, log.id, trainee.id, second.id)
