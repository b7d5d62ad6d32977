"""
Request Dependencies

Resolves the signed-in user for every business endpoint. API callers send a
bearer token; the browser console relies on the ``access_token`` cookie set
at login. Either way the token is a JWT whose ``sub`` is the user's email.
"""
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from pydantic import ValidationError
from sqlmodel import Session, select

from jingjai.core.config import settings
from jingjai.core.errors import PermissionDeniedError, UnauthenticatedError
from jingjai.db.session import get_db
from jingjai.models.user import User
from jingjai.schemas.auth import TokenData

# auto_error=False so a missing header falls through to the cookie
bearer_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login",
    auto_error=False,
)

COOKIE_NAME = "access_token"


def _cookie_token(request: Request) -> Optional[str]:
    raw = request.cookies.get(COOKIE_NAME)
    if raw and raw.startswith("Bearer "):
        return raw[len("Bearer "):]
    return raw


def _email_from_token(token: str) -> str:
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        email = TokenData(email=claims.get("sub")).email
    except (JWTError, ValidationError):
        raise UnauthenticatedError("Could not validate credentials.")
    if not email:
        raise UnauthenticatedError("Could not validate credentials.")
    return email


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(bearer_scheme),
) -> User:
    """
    The user named by the request's token.

    Raises:
        UnauthenticatedError: No token, a bad or expired token, or a token for
            a user that has since been removed
    """
    token = token or _cookie_token(request)
    if not token:
        raise UnauthenticatedError("Sign in required.")

    email = _email_from_token(token)
    user = db.exec(select(User).where(User.email == email)).first()
    if user is None:
        raise UnauthenticatedError("Sign in required.")
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Any signed-in staff member. Business endpoints depend on this."""
    return current_user


def get_current_active_superuser(current_user: User = Depends(get_current_active_user)) -> User:
    """Signed-in user holding the admin role; used by user administration."""
    if not current_user.is_privileged:
        raise PermissionDeniedError("Admin role required.")
    return current_user
