# credstore/schemas/user.py
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from credstore.models.user import UserRole, UserStatus


# Payload for creating a user. No length policy on password here; that
# belongs to whoever collects it. No role either: new users get the default
# role and anything higher is granted by the caller.
class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=1, max_length=255)
    password: str
    name: Optional[str] = None


# What may leave the service. Never carries hash, salt or token fields.
class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    name: Optional[str] = None
    status: UserStatus
    role: UserRole
    settings: Dict[str, Any] = {}
    created: datetime
    last_login: datetime
