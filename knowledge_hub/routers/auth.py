import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from .. import store
from ..config import get_settings
from ..database import get_db
from ..models import User
from ..schemas import LoginRequest, MessageOut, UserCreate, UserOut
from ..security import authenticate, get_current_user, get_session_token, hash_password
from ..sessions import SessionStore, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    user = store.create_user(
        db,
        username=payload.username,
        password_hash=hash_password(payload.password),
        email=payload.email,
        full_name=payload.full_name,
        role=payload.role,
    )
    logger.info("Registered user %s", user.username)
    return user


@router.post("/login", response_model=UserOut)
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
):
    user = authenticate(db, payload.username, payload.password)

    settings = get_settings()
    token = sessions.create(user.id)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=sessions.ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    logger.info("User %s logged in", user.username)
    return user


@router.post("/logout", response_model=MessageOut)
def logout(request: Request, response: Response, sessions: SessionStore = Depends(get_session_store)):
    sessions.destroy(get_session_token(request))
    response.delete_cookie(get_settings().session_cookie_name)
    return MessageOut()


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
