from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.pool import StaticPool

import trainlog.models  # noqa: F401
from trainlog.core.clock import FixedClock
from trainlog.core.db import Base, build_engine, get_db
from trainlog.core.deps import get_clock
from trainlog.models.exercise import Exercise
from trainlog.models.trainee_profile import TraineeProfile
from trainlog.models.training_plan import TrainingPlan
from trainlog.models.training_plan_day import TrainingPlanDay, TrainingPlanDayWorkout
from trainlog.models.user import User
from trainlog.services import catalog

START = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def engine():
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FixedClock(START)


async def create_trainee(db, email: str = "lifter@example.com") -> TraineeProfile:
    user = User(email=email, password_hash="not-a-real-hash")
    db.add(user)
    await db.flush()
    profile = TraineeProfile(user_id=user.id, display_name=email.split("@")[0])
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


async def create_full_body_workout(db):
    """Bench (3x10 reps), plank (3x60s) and a 5 km run."""
    bench = Exercise(name="Bench Press")
    plank = Exercise(name="Plank")
    run = Exercise(name="Run")
    db.add_all([bench, plank, run])
    await db.commit()

    workout = await catalog.create_workout(db, "Full Body A")
    items = {
        "bench": await catalog.add_workout_exercise(db, workout.id, bench.id, sets=3, target_reps=10),
        "plank": await catalog.add_workout_exercise(db, workout.id, plank.id, sets=3, target_duration_seconds=60),
        "run": await catalog.add_workout_exercise(db, workout.id, run.id, sets=1, target_distance_meters=5000),
    }
    await db.refresh(workout)
    return workout, items


async def create_plan(db, weeks: int, days: int, name: str = "Base Block") -> TrainingPlan:
    plan = TrainingPlan(name=name, duration_weeks=weeks, days_per_week=days)
    db.add(plan)
    await db.commit()
    await db.refresh(plan)
    return plan


async def schedule(db, plan: TrainingPlan, week: int, day: int, workout_ids=(), *, is_rest_day: bool = False):
    plan_day = TrainingPlanDay(
        training_plan_id=plan.id,
        week_number=week,
        day_number=day,
        name=f"W{week}D{day}",
        is_rest_day=is_rest_day,
    )
    db.add(plan_day)
    await db.flush()
    for order, workout_id in enumerate(workout_ids):
        db.add(TrainingPlanDayWorkout(training_plan_day_id=plan_day.id, workout_id=workout_id, order_index=order))
    await db.commit()
    return plan_day


@pytest_asyncio.fixture
async def trainee(db):
    return await create_trainee(db)


@pytest_asyncio.fixture
async def other_trainee(db):
    return await create_trainee(db, "someone-else@example.com")


@pytest_asyncio.fixture
async def workout(db):
    return await create_full_body_workout(db)


@pytest_asyncio.fixture
async def client(session_factory, clock):
    from trainlog.main import app

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
