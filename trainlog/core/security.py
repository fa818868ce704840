from datetime import datetime, timedelta, timezone
from typing import Literal
from jose import JWTError
from jose import jwt
from passlib.context import CryptContext

from trainlog.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
TokenType = Literal["access", "refresh"]

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)

def create_token(*, user_id: int, token_type: TokenType, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "type": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)

def issue_token_pair(user_id: int) -> dict[str, str]:
    return {
        "access_token": create_token(
            user_id=user_id,
            token_type="access",
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_MINUTES),
        ),
        "refresh_token": create_token(
            user_id=user_id,
            token_type="refresh",
            expires_delta=timedelta(days=settings.REFRESH_TOKEN_DAYS),
        ),
    }

def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError:
        raise ValueError("Invalid token")
