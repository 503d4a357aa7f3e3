from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials, OAuth2PasswordBearer
from sqlmodel import Session

from app.backend.core.config import Settings
from app.backend.core.errors import Unauthorized
from app.backend.services.auth_service import (
    SOURCE_SESSION,
    AuthResolution,
    Identity,
    resolve_identity,
)
from app.db.session import get_session

oauth2_optional_scheme = OAuth2PasswordBearer(
    tokenUrl="/auth/token", auto_error=False
)


class LenientHTTPBasic(HTTPBasic):
    """HTTPBasic that yields None for malformed credentials instead of a 401."""

    async def __call__(self, request: Request) -> Optional[HTTPBasicCredentials]:
        try:
            return await super().__call__(request)
        except HTTPException:
            return None


basic_optional_scheme = LenientHTTPBasic(auto_error=False)


def app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _extract_jwt(request: Request, token: str | None, settings: Settings) -> str | None:
    return token or request.cookies.get(settings.access_cookie_name)


def get_auth_resolution(
    request: Request,
    db: Session = Depends(get_session),
    settings: Settings = Depends(app_settings),
    token: str | None = Depends(oauth2_optional_scheme),
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_optional_scheme),
) -> AuthResolution:
    """Resolved once per request (FastAPI caches dependencies per request)."""
    return resolve_identity(
        db,
        settings,
        session_token=_extract_jwt(request, token, settings),
        transport_credentials=credentials,
        headers=request.headers,
    )


def get_current_identity(
    resolution: AuthResolution = Depends(get_auth_resolution),
) -> Optional[Identity]:
    """Lenient: the identity when one resolved, else None."""
    return resolution.identity


def require_identity(
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    """Strict: raises Unauthorized when nothing resolved."""
    if identity is None:
        raise Unauthorized()
    return identity


def require_session_identity(
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    """Strict, session/cookie only; credential-based identities are rejected."""
    if identity is None or identity.source != SOURCE_SESSION:
        raise Unauthorized()
    return identity
