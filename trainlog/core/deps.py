from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trainlog.core.clock import Clock, SystemClock
from trainlog.core.security import decode_token
from trainlog.core.db import get_db
from trainlog.models.trainee_profile import TraineeProfile
from trainlog.models.user import User

bearer = HTTPBearer(auto_error=False)
_system_clock = SystemClock()


def get_clock() -> Clock:
    return _system_clock


async def get_current_user(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    db: AsyncSession = Depends(get_db),
) -> User:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    token = creds.credentials
    try:
        data = decode_token(token)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    if data.get("type") != "access":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type")

    user_id = int(data["sub"])
    res = await db.execute(select(User).where(User.id == user_id))
    user = res.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return user


async def get_current_trainee(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> TraineeProfile:
    res = await db.execute(select(TraineeProfile).where(TraineeProfile.user_id == user.id))
    trainee = res.scalar_one_or_none()
    if not trainee:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must have a trainee profile",
        )
    return trainee
