"""
Authentication Endpoints Module

Self-service registration, password login and logout. Login returns the JWT
in the body and also sets it as an HTTP-only cookie for the browser console.
"""
import logging
from datetime import timedelta
from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import RedirectResponse
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select

from jingjai.api.deps import COOKIE_NAME
from jingjai.core.config import settings
from jingjai.core.errors import AlreadyExistsError, UnauthenticatedError
from jingjai.core.security import create_access_token, get_password_hash, verify_password
from jingjai.db.session import get_db
from jingjai.models.user import User, UserRole
from jingjai.schemas.auth import Token, UserRegister
from jingjai.schemas.user import UserRead

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserRead)
def register(user_in: UserRegister, db: Session = Depends(get_db)):
    """
    Open a staff account. New accounts only get the staff role; admins are
    seeded with scripts/create_first_user.py.

    Raises:
        AlreadyExistsError: The email is already registered
    """
    if db.exec(select(User).where(User.email == user_in.email)).first():
        raise AlreadyExistsError("User with this email already exists.", {"email": "Already registered."})

    user = User(
        email=user_in.email,
        password=get_password_hash(user_in.password),
        full_name=user_in.full_name,
        roles=[UserRole.STAFF],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.email)
    return user


@router.post("/login", response_model=Token)
def login(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """
    Exchange email (sent as the form's ``username``) and password for a token.

    Raises:
        UnauthenticatedError: Unknown email or wrong password
    """
    user = db.exec(select(User).where(User.email == form_data.username)).first()
    if user is None or not verify_password(form_data.password, user.password):
        logger.info("Failed login for %s", form_data.username)
        raise UnauthenticatedError("Incorrect email or password")

    lifetime = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = create_access_token(user.email, expires_delta=lifetime)
    response.set_cookie(
        key=COOKIE_NAME,
        value=f"Bearer {token}",
        httponly=True,
        max_age=int(lifetime.total_seconds()),
        samesite="lax",
    )
    return Token(access_token=token)


@router.get("/logout")
def logout():
    """Clear the login cookie. Bearer-token callers just drop their token."""
    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(COOKIE_NAME)
    return response
