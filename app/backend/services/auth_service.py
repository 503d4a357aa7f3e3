from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from fastapi.security import HTTPBasicCredentials
from fastapi.security.utils import get_authorization_scheme_param
from sqlmodel import Session

from app.backend.core.config import Settings
from app.backend.core.tokens import decode_access_token
from app.backend.models.user import User
from app.backend.services.user_service import authenticate_user

log = logging.getLogger(__name__)

SOURCE_SESSION = "session"
SOURCE_TRANSPORT = "transport"
SOURCE_AUTH_HEADER = "authorization_header"


@dataclass(frozen=True)
class Identity:
    """The user principal resolved for one request."""
    user_id: int
    username: str
    source: str


@dataclass
class AuthResolution:
    """Resolver outcome plus the state the /auth-test diagnostic reports."""
    identity: Optional[Identity] = None
    branch: str = "anonymous"
    session_present: bool = False
    session_valid: bool = False
    transport_credentials_present: bool = False
    auth_header_present: bool = False
    fallback_header_present: bool = False
    auth_header_status: str = "No Authorization header found"
    authentication_test: str = "No credentials provided"
    authenticated_user: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    def _bind(self, user: User, source: str) -> None:
        self.identity = Identity(user_id=user.id, username=user.username, source=source)
        self.branch = source
        self.authenticated_user = user.username


def _session_user(db: Session, token: str, settings: Settings) -> Optional[User]:
    payload = decode_access_token(token, settings)
    if payload is None:
        return None
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        return None
    user = db.get(User, user_id)
    if user is None or not user.is_active:
        return None
    return user


def parse_basic_credentials(header_value: str) -> Optional[Tuple[str, str]]:
    """
    Decode a `Basic <base64>` header value into (username, password),
    split on the first ':'. None when the scheme or payload is not usable.
    """
    scheme, param = get_authorization_scheme_param(header_value)
    if scheme.lower() != "basic" or not param:
        return None
    try:
        decoded = base64.b64decode(param, validate=True).decode("utf-8")
    except ValueError:
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


def resolve_identity(
    db: Session,
    settings: Settings,
    *,
    session_token: Optional[str],
    transport_credentials: Optional[HTTPBasicCredentials],
    headers: Mapping[str, str],
) -> AuthResolution:
    """
    Ordered resolution, first match wins:
    1. session token (cookie or bearer) naming an active user
    2. Basic credentials parsed by the transport layer
    3. raw Authorization header, or the fallback header when it is empty
    """
    res = AuthResolution()

    # 1) session
    if session_token:
        res.session_present = True
        user = _session_user(db, session_token, settings)
        if user is not None:
            res.session_valid = True
            res._bind(user, SOURCE_SESSION)
            res.authentication_test = "SUCCESS - Valid session"
            return res

    # 2) transport-level credentials
    if transport_credentials is not None:
        res.transport_credentials_present = True
        user = authenticate_user(db, transport_credentials.username, transport_credentials.password)
        if user is not None:
            res._bind(user, SOURCE_TRANSPORT)
            res.authentication_test = "SUCCESS - Valid credentials"
            return res
        res.authentication_test = "FAILED - Invalid username or password"

    # 3) Authorization header, fallback header when empty
    header_value = headers.get("authorization", "")
    from_fallback = False
    if header_value:
        res.auth_header_present = True
        res.auth_header_status = "Authorization header found"
    else:
        header_value = headers.get(settings.auth_fallback_header.lower(), "")
        if header_value:
            from_fallback = True
            res.fallback_header_present = True
            res.auth_header_status = f"{settings.auth_fallback_header} header found"

    # the primary header was already verified in step 2
    already_tried = res.transport_credentials_present and not from_fallback
    if header_value and not already_tried:
        scheme, _ = get_authorization_scheme_param(header_value)
        if scheme.lower() == "basic":
            creds = parse_basic_credentials(header_value)
            if creds is None:
                res.authentication_test = "FAILED - Malformed Basic credentials"
            else:
                user = authenticate_user(db, *creds)
                if user is not None:
                    res._bind(user, SOURCE_AUTH_HEADER)
                    res.authentication_test = "SUCCESS - Valid credentials"
                    return res
                res.authentication_test = "FAILED - Invalid username or password"

    if res.session_present and res.authentication_test == "No credentials provided":
        res.authentication_test = "FAILED - Invalid or expired session"
    log.debug("request resolved anonymous (%s)", res.authentication_test)
    return res
