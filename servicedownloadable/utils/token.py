from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlmodel import Session

from servicedownloadable.config import settings
from servicedownloadable.database import get_session
from servicedownloadable.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Signed token whose subject is the user id."""
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": str(user_id),
        "exp": datetime.utcnow() + lifetime,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[int]:
    """User id carried by the token, or None if it is invalid or expired."""
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> User:
    user_id = decode_access_token(token)
    if user_id is None:
        raise _unauthorized("Could not validate credentials")

    user = session.get(User, user_id)
    if user is None:
        raise _unauthorized("User not found")

    if not user.can_login:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "User account is disabled")

    return user
