from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Response
from jose import JWTError, jwt

from app.backend.core.config import Settings


# ---- 공통 ----
def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def _make_jwt(payload: Dict[str, Any], secret: str, algorithm: str, exp: datetime) -> str:
    to_encode = payload.copy()
    to_encode["iat"] = int(_utcnow().timestamp())
    to_encode["exp"] = int(exp.timestamp())
    return jwt.encode(to_encode, secret, algorithm=algorithm)


# ---- Access Token ----
def create_access_token(
    user_id: int,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    exp = _utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload = {"sub": str(user_id), "typ": "access"}
    return _make_jwt(payload, settings.jwt_secret_key, settings.jwt_algorithm, exp)


def verify_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Return the payload of a valid access token.
    Raises JWTError on bad signature, expiry or wrong token type.
    """
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    if payload.get("typ") != "access":
        raise JWTError("Invalid token type")
    if "sub" not in payload:
        raise JWTError("Missing sub")
    return payload


def decode_access_token(token: str, settings: Settings) -> Optional[Dict[str, Any]]:
    """verify_access_token, returning None instead of raising."""
    try:
        return verify_access_token(token, settings)
    except JWTError:
        return None


# ---- 쿠키 ----
def set_access_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.access_cookie_name,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=60 * settings.access_token_expire_minutes,
        path="/",
    )


def clear_access_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(key=settings.access_cookie_name, path="/")
