from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from app.backend.core.config import Settings
from app.backend.core.errors import Unauthorized
from app.backend.core.tokens import clear_access_cookie, create_access_token, set_access_cookie
from app.backend.dependencies.auth import app_settings
from app.backend.schemas.user import AuthTokenModel, CurrentUserRead
from app.backend.services.user_service import authenticate_user
from app.db.session import get_session

log = logging.getLogger(__name__)

auth_router = APIRouter()


@auth_router.post("/auth/token", response_model=AuthTokenModel, tags=["auth"])
def login_for_access_token(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_session),
    settings: Settings = Depends(app_settings),
):
    """
    Password login. Issues an access token and sets it as the HttpOnly session
    cookie, which the resolver accepts on later requests.
    """
    user = authenticate_user(db, form_data.username, form_data.password)
    if user is None:
        log.info("login failed for %s", form_data.username)
        raise Unauthorized("Invalid username or password", code="invalid_credentials")

    access_token = create_access_token(user.id, settings)
    set_access_cookie(response, access_token, settings)
    log.info("login ok user_id=%s", user.id)
    return AuthTokenModel(
        access_token=access_token,
        expires_in=60 * settings.access_token_expire_minutes,
        user=CurrentUserRead.model_validate(user),
    )


@auth_router.post("/auth/logout", tags=["auth"])
def logout(response: Response, settings: Settings = Depends(app_settings)):
    clear_access_cookie(response, settings)
    return {"ok": True}
