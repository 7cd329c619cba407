"""FastAPI dependencies for sessions, services and storage."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from sitecms.config import get_settings
from sitecms.database import get_db
from sitecms.models.user import User
from sitecms.services.auth import resolve_session, unsign_session_id
from sitecms.services.errors import Unauthorized
from sitecms.services.media import MediaUploadService
from sitecms.services.media_storage import CloudinaryStorage, MediaStore
from sitecms.services.password_reset import PasswordResetService
from sitecms.services.settings_store import SettingsStore


def get_session_id(request: Request) -> str | None:
    """Session id carried by the signed session cookie, if any."""
    cookie = request.cookies.get(get_settings().session_cookie_name)
    if not cookie:
        return None
    return unsign_session_id(cookie)


def get_optional_user(
    session_id: Annotated[str | None, Depends(get_session_id)],
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """The signed-in user, or None for anonymous requests."""
    if session_id is None:
        return None
    return resolve_session(db, session_id)


def require_auth(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> User:
    """Reject the request unless a live session is present."""
    if user is None:
        raise Unauthorized()
    return user


def get_media_store() -> MediaStore:
    """Get the remote media store."""
    return CloudinaryStorage.from_settings(get_settings())


def get_media_service(
    store: Annotated[MediaStore, Depends(get_media_store)],
) -> MediaUploadService:
    """Get media upload service with dependencies."""
    return MediaUploadService(store)


def get_settings_store(
    db: Annotated[Session, Depends(get_db)],
) -> SettingsStore:
    return SettingsStore(db)


def get_password_reset_service(
    db: Annotated[Session, Depends(get_db)],
) -> PasswordResetService:
    return PasswordResetService(db)
