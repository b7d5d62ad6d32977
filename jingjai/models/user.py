"""
User Model Module

Staff accounts that sign in to the console. A user's id is what business
records store in created_by / updated_by.
"""
from enum import Enum
from typing import List, Optional
from sqlmodel import SQLModel, Field, JSON, Column

from jingjai.models.base import new_id, utcnow_iso


class UserRole(str, Enum):
    STAFF = "staff"  # may read and write every business record
    ADMIN = "admin"  # additionally manages user accounts


class User(SQLModel, table=True):
    """
    Attributes:
        email: Login name, unique
        password: bcrypt hash; None for accounts that cannot log in with a password
        roles: UserRole values, stored as a JSON array
    """
    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(unique=True, index=True, nullable=False)
    password: Optional[str] = None
    full_name: Optional[str] = None
    roles: List[UserRole] = Field(default_factory=lambda: [UserRole.STAFF], sa_column=Column(JSON))
    created_at: Optional[str] = Field(default_factory=utcnow_iso)

    @property
    def is_privileged(self) -> bool:
        return UserRole.ADMIN in (self.roles or [])
