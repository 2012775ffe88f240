from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from servicedownloadable.database import get_session
from servicedownloadable.models.user import User
from servicedownloadable.schemas.user_schemas import UserLogin, Token
from servicedownloadable.utils.hash import verify_password
from servicedownloadable.utils.token import create_access_token


router = APIRouter()


@router.post("/login", response_model=Token)
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.email == payload.email)).first()

    if not user or not verify_password(payload.password, user.password):
        raise HTTPException(401, "Invalid email or password")

    if not user.can_login:
        raise HTTPException(403, "User account is disabled")

    token = create_access_token(user.id)
    return Token(access_token=token, token_type="bearer")
