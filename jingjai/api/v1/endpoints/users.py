"""
User Endpoints Module

Staff accounts. Everyone can read and edit their own profile under /me;
listing and creating accounts needs the admin role.
"""
import logging
from typing import Any, List
from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from jingjai.api import deps
from jingjai.core.errors import AlreadyExistsError
from jingjai.core.security import get_password_hash
from jingjai.db.session import get_db
from jingjai.models.user import User, UserRole
from jingjai.schemas.user import UserCreate, UserRead, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[UserRead])
def list_users(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    admin: User = Depends(deps.get_current_active_superuser),
) -> Any:
    """All staff accounts ordered by email."""
    return db.exec(select(User).order_by(User.email).offset(skip).limit(limit)).all()


@router.post("", response_model=UserRead)
def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(deps.get_current_active_superuser),
) -> Any:
    """
    Create a staff account on someone's behalf, optionally granting roles.

    Raises:
        AlreadyExistsError: The email is already registered
    """
    if db.exec(select(User).where(User.email == user_in.email)).first():
        raise AlreadyExistsError("User with this email already exists.", {"email": "Already registered."})

    user = User(
        email=user_in.email,
        password=get_password_hash(user_in.password),
        full_name=user_in.full_name,
        roles=user_in.roles or [UserRole.STAFF],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Admin %s created user %s", admin.email, user.email)
    return user


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(deps.get_current_active_user)) -> Any:
    return current_user


@router.put("/me", response_model=UserRead)
def update_me(
    user_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
) -> Any:
    """Change the caller's display name and/or password."""
    if user_in.full_name is not None:
        current_user.full_name = user_in.full_name
    if user_in.password is not None:
        current_user.password = get_password_hash(user_in.password)

    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return current_user
