from pydantic import BaseModel, EmailStr, Field
from datetime import datetime

class UserOut(BaseModel):
    id: int
    email: EmailStr
    created_at: datetime
    trainee_profile_id: int | None = None

class TraineeProfileIn(BaseModel):
    display_name: str | None = Field(default=None, max_length=100)

class TraineeProfileOut(BaseModel):
    id: int
    user_id: int
    display_name: str | None
    created_at: datetime
