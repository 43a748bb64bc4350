# backend/auth.py
"""
Email/password auth service.

- Passwords hashed with bcrypt
- Sessions are signed bearer tokens (PyJWT, HS256)
- Failures raise AuthError with a provider-style code; callers turn the code
  into a user-readable message with auth_error_message()
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from . import config
from .crud import ensure_artisan_profile
from .db import get_db
from .models import User

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
JWT_ALGORITHM = "HS256"

AUTH_MESSAGES = {
    "auth/email-already-in-use": "This email is already registered. Please log in.",
    "auth/weak-password": "The password is too weak. Please use at least 6 characters.",
    "auth/invalid-credential": "Invalid email or password.",
    "auth/invalid-session": "Your session has expired. Please log in again.",
}
GENERIC_MESSAGE = "An unexpected error occurred."

bearer_scheme = HTTPBearer(auto_error=False)


class AuthError(Exception):
    def __init__(self, code: str):
        self.code = code
        super().__init__(code)

    @property
    def message(self) -> str:
        return auth_error_message(self.code)


def auth_error_message(code: Optional[str]) -> str:
    return AUTH_MESSAGES.get(code or "", GENERIC_MESSAGE)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        return False


def create_token(user: User) -> Tuple[str, datetime]:
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(hours=config.JWT_EXPIRY_HOURS)
    payload = {"sub": user.id, "email": user.email, "iat": now, "exp": expires_at}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=JWT_ALGORITHM), expires_at


def session_for(user: User) -> dict:
    token, expires_at = create_token(user)
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_at": expires_at,
        "user_id": user.id,
        "email": user.email,
    }


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def sign_up(db: Session, email: str, password: str) -> User:
    email = _normalize_email(email)
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise AuthError("auth/weak-password")
    if db.query(User).filter(User.email == email).first():
        raise AuthError("auth/email-already-in-use")

    user = User(email=email, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    ensure_artisan_profile(db, user.id, user.email)
    log.info("New user signed up: %s", user.id)
    return user


def sign_in(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == _normalize_email(email)).first()
    if not user or not verify_password(password, user.password_hash):
        raise AuthError("auth/invalid-credential")
    ensure_artisan_profile(db, user.id, user.email)
    return user


def update_password(db: Session, user: User, new_password: str) -> None:
    if len(new_password or "") < MIN_PASSWORD_LENGTH:
        raise AuthError("auth/weak-password")
    user.password_hash = hash_password(new_password)
    db.add(user)
    db.commit()


def user_from_token(db: Session, token: str) -> User:
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError:
        raise AuthError("auth/invalid-session")
    user = db.get(User, payload.get("sub") or "")
    if not user:
        raise AuthError("auth/invalid-session")
    return user


def current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """FastAPI dependency for dashboard routes."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthError("auth/invalid-session")
    return user_from_token(db, credentials.credentials)
