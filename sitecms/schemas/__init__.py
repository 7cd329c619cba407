"""Pydantic schemas for API requests and responses."""

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
from sitecms.schemas.settings import FieldDescription, SettingResponse, SettingUpdate
from sitecms.schemas.upload import UploadResponse

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "UserResponse",
    "SessionCheckResponse",
    "ChangePasswordRequest",
    "ChangeProfileRequest",
    "ProfileResponse",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "MessageResponse",
    "SettingUpdate",
    "SettingResponse",
    "FieldDescription",
    "UploadResponse",
]
