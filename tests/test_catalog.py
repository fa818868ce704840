import pytest

from trainlog.core.errors import DomainValidationError, NotFoundError
from trainlog.models.exercise import Exercise
from trainlog.services import catalog


@pytest.mark.asyncio
async def test_totals_and_version_follow_every_edit(db, workout):
    wk, items = workout
    assert wk.version == 4
    assert (wk.total_exercises, wk.total_sets) == (3, 7)

    await catalog.update_workout_exercise(db, items["run"].id, sets=2)
    await db.refresh(wk)
    assert (wk.version, wk.total_sets) == (5, 8)

    await catalog.remove_workout_exercise(db, items["plank"].id)
    await db.refresh(wk)
    assert (wk.version, wk.total_exercises, wk.total_sets) == (6, 2, 5)


@pytest.mark.asyncio
async def test_snapshot_is_ordered_and_json_ready(db, workout):
    wk, items = workout
    snapshot = await catalog.prescription_snapshot(db, wk.id)
    assert [p["order_index"] for p in snapshot] == [0, 1, 2]
    assert snapshot[0] == {
        "workout_exercise_id": items["bench"].id,
        "exercise_id": items["bench"].exercise_id,
        "order_index": 0,
        "sets": 3,
        "target_reps": 10,
        "target_duration_seconds": None,
        "target_distance_meters": None,
        "rest_seconds": 60,
        "is_optional": False,
    }


@pytest.mark.asyncio
async def test_prescription_needs_a_target(db, workout):
    wk, _ = workout
    squat = Exercise(name="Squat")
    db.add(squat)
    await db.commit()

    with pytest.raises(DomainValidationError):
        await catalog.add_workout_exercise(db, wk.id, squat.id, sets=3)
    with pytest.raises(DomainValidationError):
        await catalog.add_workout_exercise(db, wk.id, squat.id, sets=0, target_reps=5)
    with pytest.raises(NotFoundError):
        await catalog.add_workout_exercise(db, wk.id, 9999, target_reps=5)


@pytest.mark.asyncio
async def test_only_prescription_fields_are_editable(db, workout):
    _, items = workout
    with pytest.raises(DomainValidationError):
        await catalog.update_workout_exercise(db, items["bench"].id, workout_id=2)
    with pytest.raises(DomainValidationError):
        await catalog.update_workout_exercise(db, items["bench"].id, target_reps=None)


@pytest.mark.asyncio
async def test_sets_and_rest_cannot_be_cleared(db, workout):
    _, items = workout
    with pytest.raises(DomainValidationError) as exc:
        await catalog.update_workout_exercise(db, items["bench"].id, rest_seconds=None)
    assert exc.value.context["field"] == "rest_seconds"
    with pytest.raises(DomainValidationError) as exc:
        await catalog.update_workout_exercise(db, items["bench"].id, sets=None)
    assert exc.value.context["field"] == "sets"
    with pytest.raises(DomainValidationError):
        await catalog.update_workout_exercise(db, items["bench"].id, rest_seconds=-5)

    bench = await catalog.update_workout_exercise(db, items["bench"].id, rest_seconds=0)
    assert bench.rest_seconds == 0
    assert bench.sets == 3
