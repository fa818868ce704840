from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trainlog.core.db import get_db
from trainlog.core.deps import get_current_user
from trainlog.models.trainee_profile import TraineeProfile
from trainlog.models.user import User
from trainlog.schemas.user import TraineeProfileIn, TraineeProfileOut, UserOut

router = APIRouter(prefix="/me", tags=["me"])


async def _profile_for(db: AsyncSession, user_id: int) -> TraineeProfile | None:
    res = await db.execute(select(TraineeProfile).where(TraineeProfile.user_id == user_id))
    return res.scalar_one_or_none()


@router.get("", response_model=UserOut)
async def me(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    profile = await _profile_for(db, user.id)
    return UserOut(
        id=user.id,
        email=user.email,
        created_at=user.created_at,
        trainee_profile_id=profile.id if profile else None,
    )


@router.post("/trainee-profile", response_model=TraineeProfileOut, status_code=201)
async def create_trainee_profile(
    payload: TraineeProfileIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if await _profile_for(db, user.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Trainee profile already exists")

    profile = TraineeProfile(user_id=user.id, display_name=payload.display_name)
    db.add(profile)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Trainee profile already exists")
    await db.refresh(profile)

    return TraineeProfileOut(
        id=profile.id,
        user_id=profile.user_id,
        display_name=profile.display_name,
        created_at=profile.created_at,
    )
