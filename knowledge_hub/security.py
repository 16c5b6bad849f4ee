import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from . import store
from .config import get_settings
from .database import get_db
from .exceptions import AuthenticationError
from .models import User
from .sessions import SessionStore, get_session_store

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def authenticate(db: Session, username: str, password: str) -> User:
    user = store.get_user_by_username(db, username)
    if not user or not verify_password(user.password, password):
        logger.warning("Failed login for username %r", username)
        raise AuthenticationError("Invalid credentials")
    return user


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(get_settings().session_cookie_name)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
) -> User:
    """Admit only requests carrying a live session for an existing user."""
    user_id = sessions.get(get_session_token(request))
    if user_id is None:
        raise AuthenticationError("Not authenticated")

    user = store.get_user(db, user_id)
    if not user:
        raise AuthenticationError("User not found")
    return user
