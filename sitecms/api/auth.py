"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from sitecms.api.dependencies import (
    get_optional_user,
    get_password_reset_service,
    get_session_id,
    require_auth,
)
from sitecms.config import get_settings
from sitecms.database import get_db
from sitecms.models.user import User
from sitecms.schemas.auth import (
    ChangePasswordRequest,
    ChangeProfileRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileResponse,
    ResetPasswordRequest,
    SessionCheckResponse,
    UserResponse,
)
from sitecms.services.auth import (
    authenticate_user,
    change_password,
    change_profile,
    create_session,
    delete_session,
    sign_session_id,
)
from sitecms.services.password_reset import PasswordResetService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a reset link has been sent"


def _set_session_cookie(response: Response, session_id: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sign_session_id(session_id),
        max_age=settings.session_max_age_hours * 3600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with username or email and password."""
    user = authenticate_user(db, credentials.identifier, credentials.password)
    session_id = create_session(db, user)
    _set_session_cookie(response, session_id)
    logger.info(f"User {user.id} logged in")

    return LoginResponse(user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse, response_model_exclude_none=True)
def logout(
    response: Response,
    session_id: Annotated[str | None, Depends(get_session_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Destroy the current session. Safe to call repeatedly."""
    if session_id is not None:
        delete_session(db, session_id)
    _clear_session_cookie(response)
    return MessageResponse()


@router.get("/check", response_model=SessionCheckResponse, response_model_exclude_none=True)
def check(
    user: Annotated[User | None, Depends(get_optional_user)],
):
    """Report whether the request carries a live session."""
    if user is None:
        return SessionCheckResponse(authenticated=False)
    return SessionCheckResponse(authenticated=True, user=UserResponse.model_validate(user))


@router.post("/change-password", response_model=MessageResponse)
def change_password_route(
    data: ChangePasswordRequest,
    current_user: Annotated[User, Depends(require_auth)],
    db: Annotated[Session, Depends(get_db)],
):
    """Change the signed-in user's password."""
    change_password(db, current_user, data.current_password, data.new_password)
    return MessageResponse(message="Password changed successfully")


@router.post("/change-profile", response_model=ProfileResponse)
def change_profile_route(
    data: ChangeProfileRequest,
    current_user: Annotated[User, Depends(require_auth)],
    db: Annotated[Session, Depends(get_db)],
):
    """Change the signed-in user's username and email."""
    user = change_profile(db, current_user, data.username, data.email)
    return ProfileResponse(
        message="Profile updated successfully", user=UserResponse.model_validate(user)
    )


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    data: ForgotPasswordRequest,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
):
    """Start a password reset. The response never reveals whether the email exists."""
    service.request_reset(data.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    data: ResetPasswordRequest,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
):
    """Set a new password using a reset token."""
    service.reset_password(data.token, data.new_password)
    return MessageResponse(message="Password has been reset successfully")
