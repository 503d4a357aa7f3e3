import platform

from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from app.backend.core.config import Settings
from app.backend.core.errors import Unauthorized
from app.backend.dependencies.auth import (
    app_settings,
    get_auth_resolution,
    require_session_identity,
)
from app.backend.models.user import User
from app.backend.routers.task import API_NAMESPACE
from app.backend.schemas.user import CurrentUserRead
from app.backend.services.auth_service import AuthResolution, Identity
from app.db.session import get_session

user_router = APIRouter(prefix=API_NAMESPACE, tags=["Auth"])


@user_router.get("/auth-test")
def auth_test(
    request: Request,
    resolution: AuthResolution = Depends(get_auth_resolution),
    settings: Settings = Depends(app_settings),
):
    """
    Public diagnostic of the authentication resolver. Not a security boundary:
    it reports what was seen and which branch matched, never the secrets.
    """
    identity = resolution.identity
    return {
        "app_version": settings.app_version,
        "python_version": platform.python_version(),
        "is_https": request.url.scheme == "https",
        "ownership_enforced": settings.ownership_enforced,
        "is_user_logged_in": resolution.session_valid,
        "current_user_id": identity.user_id if identity else 0,
        "matched_branch": resolution.branch,
        "session_present": resolution.session_present,
        "auth_header_present": "Yes" if resolution.auth_header_present else "No",
        "fallback_header_present": "Yes" if resolution.fallback_header_present else "No",
        "transport_credentials_present": "Yes" if resolution.transport_credentials_present else "No",
        "auth_header_status": resolution.auth_header_status,
        "authentication_test": resolution.authentication_test,
        "authenticated_user": resolution.authenticated_user,
        "rest_url": str(request.url_for("get_tasks")),
    }


@user_router.get("/current-user", response_model=CurrentUserRead)
def current_user(
    identity: Identity = Depends(require_session_identity),
    db: Session = Depends(get_session),
):
    user = db.get(User, identity.user_id)
    if user is None:
        raise Unauthorized()
    return user
