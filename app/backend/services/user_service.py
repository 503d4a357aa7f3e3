from __future__ import annotations

import logging
from typing import Optional

from sqlmodel import Session, or_, select

from app.backend.core.security import DEFAULT_ITERATIONS, hash_password, verify_password
from app.backend.models.user import User

log = logging.getLogger(__name__)


def get_user_by_login(db: Session, login: str) -> Optional[User]:
    """Look a user up by username or email."""
    stmt = select(User).where(or_(User.username == login, User.email == login))
    return db.exec(stmt).first()


def authenticate_user(db: Session, login: str, password: str) -> Optional[User]:
    """Credential verification against the identity store; None on any mismatch."""
    if not login or not password:
        return None
    user = get_user_by_login(db, login)
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def create_user(
    db: Session,
    *,
    username: str,
    email: str,
    password: str,
    display_name: Optional[str] = None,
    is_active: bool = True,
    iterations: int = DEFAULT_ITERATIONS,
) -> User:
    user = User(
        username=username,
        email=email,
        display_name=display_name or username,
        password_hash=hash_password(password, iterations=iterations),
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    log.info("user created id=%s username=%s", user.id, user.username)
    return user
