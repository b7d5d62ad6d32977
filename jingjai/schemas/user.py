from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr

from jingjai.models.user import UserRole


class UserCreate(BaseModel):
    """Admin-created account."""
    email: EmailStr
    password: str
    full_name: Optional[str] = None
    roles: Optional[List[UserRole]] = None


class UserUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    full_name: Optional[str] = None
    password: Optional[str] = None


class UserRead(BaseModel):
    """Public view of an account; never carries the password hash."""
    id: str
    email: EmailStr
    full_name: Optional[str] = None
    roles: List[UserRole] = []
    created_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
