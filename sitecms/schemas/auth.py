"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


class LoginRequest(BaseModel):
    """Login request. Either username or email identifies the account."""

    username: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=255)
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def require_identifier(self) -> "LoginRequest":
        if not (self.username or self.email):
            raise ValueError("Username or email is required")
        return self

    @property
    def identifier(self) -> str:
        return self.username or self.email or ""


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: str


class LoginResponse(BaseModel):
    success: bool = True
    user: UserResponse


class SessionCheckResponse(BaseModel):
    authenticated: bool
    user: UserResponse | None = None


class ChangePasswordRequest(BaseModel):
    """Password change for the signed-in user."""

    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", max_length=128)


class ChangeProfileRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    email: EmailStr = Field(..., max_length=255)


class ProfileResponse(BaseModel):
    success: bool = True
    message: str
    user: UserResponse


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)


class ResetPasswordRequest(BaseModel):
    """Reset password with a token from the reset link."""

    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., alias="newPassword", max_length=128)


class MessageResponse(BaseModel):
    success: bool = True
    message: str | None = None
