"""Domain errors raised by services and rendered by the API layer.

Each error carries a stable machine-readable ``code`` and the HTTP status the
API responds with, so callers never have to parse the message.
"""


class ServiceError(Exception):
    """Base class for all expected, user-facing failures."""

    code = "error"
    status_code = 400
    message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


# --- Authentication ---


class InvalidCredentials(ServiceError):
    code = "invalid_credentials"
    status_code = 401
    message = "Invalid username or password"


class Unauthorized(ServiceError):
    code = "unauthorized"
    status_code = 401
    message = "Unauthorized"


class InvalidCurrentPassword(ServiceError):
    code = "invalid_current_password"
    status_code = 401
    message = "Current password is incorrect"


class WeakPassword(ServiceError):
    code = "weak_password"
    message = "Password is too short"


class UsernameTaken(ServiceError):
    code = "username_taken"
    message = "This username is already taken"


class EmailTaken(ServiceError):
    code = "email_taken"
    message = "This email is already in use"


# --- Password reset ---

# Both token failures show the same message; only the code differs.
RESET_TOKEN_REJECTED = "Invalid or expired reset token"


class InvalidToken(ServiceError):
    code = "invalid_token"
    message = RESET_TOKEN_REJECTED


class ExpiredToken(ServiceError):
    code = "expired_token"
    message = RESET_TOKEN_REJECTED


# --- Settings ---


class UnknownField(ServiceError):
    code = "unknown_field"
    message = "Unknown setting"


class NotMediaField(ServiceError):
    code = "not_media_field"
    message = "This setting does not hold a media URL"


# --- Uploads ---


class MissingFile(ServiceError):
    code = "missing_file"
    message = "No file uploaded"


class FileTooLarge(ServiceError):
    code = "file_too_large"
    message = "File too large"


class UnsupportedType(ServiceError):
    code = "unsupported_type"
    message = "Unsupported file type"


class StorageError(ServiceError):
    code = "storage_error"
    status_code = 500
    message = "Failed to store the uploaded file"
