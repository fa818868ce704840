from decimal import Decimal

import pytest

from conftest import create_full_body_workout, create_plan, schedule


async def signup(client, email="athlete@example.com", with_profile=True):
    res = await client.post("/auth/register", json={"email": email, "password": "correct-horse"})
    assert res.status_code == 201
    headers = {"Authorization": f"Bearer {res.json()['access_token']}"}
    if with_profile:
        res = await client.post("/me/trainee-profile", json={"display_name": "Athlete"}, headers=headers)
        assert res.status_code == 201
    return headers


async def seed_workout(session_factory):
    async with session_factory() as s:
        wk, items = await create_full_body_workout(s)
        return wk.id, {name: item.id for name, item in items.items()}


@pytest.mark.asyncio
async def test_health(client):
    res = await client.get("/health")
    assert res.json() == {"ok": True}


@pytest.mark.asyncio
async def test_auth_round_trip(client):
    res = await client.post("/auth/register", json={"email": "a@example.com", "password": "correct-horse"})
    tokens = res.json()
    assert tokens["token_type"] == "bearer"

    dup = await client.post("/auth/register", json={"email": "a@example.com", "password": "correct-horse"})
    assert dup.status_code == 409

    bad = await client.post("/auth/login", json={"email": "a@example.com", "password": "wrong-horse"})
    assert bad.status_code == 401
    good = await client.post("/auth/login", json={"email": "a@example.com", "password": "correct-horse"})
    assert good.status_code == 200

    refreshed = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200
    wrong_type = await client.post("/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert wrong_type.status_code == 401


@pytest.mark.asyncio
async def test_me_and_trainee_profile(client):
    headers = await signup(client, with_profile=False)
    me = (await client.get("/me", headers=headers)).json()
    assert me["trainee_profile_id"] is None

    res = await client.get("/sessions", headers=headers)
    assert res.status_code == 403

    created = await client.post("/me/trainee-profile", json={}, headers=headers)
    assert created.status_code == 201
    again = await client.post("/me/trainee-profile", json={}, headers=headers)
    assert again.status_code == 409

    me = (await client.get("/me", headers=headers)).json()
    assert me["trainee_profile_id"] == created.json()["id"]


@pytest.mark.asyncio
async def test_requires_a_token(client):
    assert (await client.get("/sessions")).status_code == 401
    res = await client.get("/sessions", headers={"Authorization": "Bearer nonsense"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_full_session_flow(client, session_factory, clock):
    headers = await signup(client)
    workout_id, items = await seed_workout(session_factory)

    res = await client.post("/sessions", json={"workout_id": workout_id}, headers=headers)
    assert res.status_code == 201
    session = res.json()
    assert session["status"] == "started"
    assert session["workout_version"] == 4
    base = f"/sessions/{session['id']}"

    res = await client.post(f"{base}/exercises", json={"workout_exercise_id": items["bench"]}, headers=headers)
    assert res.status_code == 201
    log = res.json()
    assert log["target_reps"] == 10

    for n in (1, 2, 3):
        res = await client.post(
            f"{base}/exercises/{log['id']}/sets",
            json={"set_number": n, "actual_reps": 10, "weight_kg": 100, "rpe": 8, "completed": True},
            headers=headers,
        )
        assert res.status_code == 201
        assert res.json()["target_met"] is True
        assert Decimal(res.json()["volume"]) == Decimal("1000")

    res = await client.post(f"{base}/exercises/{log['id']}/complete", json={}, headers=headers)
    assert res.json()["status"] == "completed"

    clock.advance(125)
    res = await client.post(f"{base}/complete", json={"rating": 5, "notes": "PR day"}, headers=headers)
    assert res.status_code == 200
    body = res.json()
    assert body["summary"]["total_duration_seconds"] == 125
    assert Decimal(body["summary"]["total_volume_kg"]) == Decimal("3000")
    assert body["summary"]["completion_percentage"] == 33.33
    assert body["session"]["status"] == "completed"
    assert body["session"]["formatted_duration"] == "2m 5s"
    assert body["session"]["completion"]["metrics_final"] is True

    detail = (await client.get(base, headers=headers)).json()
    bench = detail["exercise_logs"][0]
    assert [s["set_number"] for s in bench["sets"]] == [1, 2, 3]
    assert bench["sets_completed"] == 3
    assert bench["all_sets_completed"] is True
    assert bench["average_rpe"] == 8.0


@pytest.mark.asyncio
async def test_completed_session_is_locked(client, session_factory):
    headers = await signup(client)
    workout_id, items = await seed_workout(session_factory)
    session = (await client.post("/sessions", json={"workout_id": workout_id}, headers=headers)).json()
    base = f"/sessions/{session['id']}"
    log = (await client.post(f"{base}/exercises", json={"workout_exercise_id": items["bench"]}, headers=headers)).json()
    set_log = (
        await client.post(f"{base}/exercises/{log['id']}/sets", json={"set_number": 1, "actual_reps": 5}, headers=headers)
    ).json()
    await client.post(f"{base}/complete", json={}, headers=headers)

    res = await client.post(f"{base}/exercises/{log['id']}/sets", json={"set_number": 2, "actual_reps": 5}, headers=headers)
    assert res.status_code == 423
    assert res.json()["code"] == "workout_locked"

    res = await client.patch(f"{base}/exercises/{log['id']}/sets/{set_log['id']}", json={"actual_reps": 6}, headers=headers)
    assert res.status_code == 423
    res = await client.delete(f"{base}/exercises/{log['id']}/sets/{set_log['id']}", headers=headers)
    assert res.status_code == 423

    res = await client.post(f"{base}/complete", json={}, headers=headers)
    assert res.status_code == 409
    assert res.json()["code"] == "invalid_state_transition"


@pytest.mark.asyncio
async def test_request_validation_and_domain_errors(client, session_factory):
    headers = await signup(client)
    workout_id, items = await seed_workout(session_factory)
    session = (await client.post("/sessions", json={"workout_id": workout_id}, headers=headers)).json()
    base = f"/sessions/{session['id']}"
    log = (await client.post(f"{base}/exercises", json={"workout_exercise_id": items["bench"]}, headers=headers)).json()
    sets_url = f"{base}/exercises/{log['id']}/sets"

    assert (await client.post(sets_url, json={"set_number": 1, "rpe": 11}, headers=headers)).status_code == 422
    assert (await client.post(sets_url, json={"set_number": 1, "weight_kg": -1}, headers=headers)).status_code == 422
    assert (await client.post(f"{base}/complete", json={"rating": 0}, headers=headers)).status_code == 422

    await client.post(sets_url, json={"set_number": 1, "actual_reps": 5}, headers=headers)
    dup = await client.post(sets_url, json={"set_number": 1, "actual_reps": 5}, headers=headers)
    assert dup.status_code == 422
    assert dup.json()["code"] == "validation_error"
    assert dup.json()["context"]["field"] == "set_number"


@pytest.mark.asyncio
async def test_sessions_of_others_are_not_found(client, session_factory):
    mine = await signup(client, "mine@example.com")
    theirs = await signup(client, "theirs@example.com")
    workout_id, _ = await seed_workout(session_factory)
    session = (await client.post("/sessions", json={"workout_id": workout_id}, headers=mine)).json()

    res = await client.get(f"/sessions/{session['id']}", headers=theirs)
    assert res.status_code == 404
    assert res.json()["code"] == "not_found"
    assert (await client.get("/sessions", headers=theirs)).json() == []


@pytest.mark.asyncio
async def test_list_sessions_by_status(client, session_factory):
    headers = await signup(client)
    workout_id, _ = await seed_workout(session_factory)
    first = (await client.post("/sessions", json={"workout_id": workout_id}, headers=headers)).json()
    await client.post(f"/sessions/{first['id']}/abandon", headers=headers)
    await client.post("/sessions", json={"workout_id": workout_id}, headers=headers)

    res = await client.get("/sessions", params={"status": "abandoned"}, headers=headers)
    assert [s["id"] for s in res.json()] == [first["id"]]
    assert res.json()[0]["total_volume_kg"] is None


@pytest.mark.asyncio
async def test_plan_progress_flow(client, session_factory):
    headers = await signup(client)
    workout_id, _ = await seed_workout(session_factory)
    async with session_factory() as s:
        plan = await create_plan(s, weeks=2, days=2)
        await schedule(s, plan, 1, 2, [workout_id])
        plan_id = plan.id

    res = await client.post(f"/plan-progress/plans/{plan_id}/start", headers=headers)
    assert res.status_code == 201
    tracker = res.json()
    assert (tracker["current_week"], tracker["current_day"]) == (1, 1)
    assert tracker["completion_percentage"] == 25.0
    base = f"/plan-progress/{tracker['id']}"

    conflict = await client.post(f"/plan-progress/plans/{plan_id}/start", headers=headers)
    assert conflict.status_code == 409

    today = (await client.get(f"{base}/today", headers=headers)).json()
    assert today["workouts"] == []

    tracker = (await client.post(f"{base}/advance", headers=headers)).json()
    assert tracker["current_day"] == 2
    today = (await client.get(f"{base}/today", headers=headers)).json()
    assert [w["id"] for w in today["workouts"]] == [workout_id]

    assert (await client.post(f"{base}/pause", headers=headers)).json()["status"] == "paused"
    blocked = await client.post(f"{base}/advance", headers=headers)
    assert blocked.status_code == 409
    assert (await client.post(f"{base}/resume", headers=headers)).json()["status"] == "active"

    for _ in range(3):
        tracker = (await client.post(f"{base}/advance", headers=headers)).json()
    assert tracker["status"] == "completed"
    assert (tracker["current_week"], tracker["current_day"]) == (2, 2)

    restarted = (await client.post(f"{base}/restart", headers=headers)).json()
    assert restarted["status"] == "active"
    assert (restarted["current_week"], restarted["current_day"]) == (1, 1)

    listed = (await client.get("/plan-progress", headers=headers)).json()
    assert [t["id"] for t in listed] == [tracker["id"]]
