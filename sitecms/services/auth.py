"""Authentication service for password handling and server-side sessions."""

import logging
import secrets
from datetime import timedelta

from itsdangerous import BadSignature, URLSafeTimedSerializer
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sitecms.config import get_settings
from sitecms.models.auth_session import AuthSession
from sitecms.models.mixins import as_utc, utcnow
from sitecms.models.user import User
from sitecms.services.errors import (
    EmailTaken,
    InvalidCredentials,
    InvalidCurrentPassword,
    UsernameTaken,
    WeakPassword,
)

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password with a fresh random salt."""
    return pwd_context.hash(password)


def validate_new_password(password: str) -> None:
    """Reject passwords below the configured minimum length."""
    if len(password) < settings.password_min_length:
        raise WeakPassword(
            f"Password must be at least {settings.password_min_length} characters long"
        )


# --- Users ---


def get_user_by_identifier(db: Session, identifier: str) -> User | None:
    """Find a user by exact username, falling back to exact email."""
    user = db.query(User).filter(User.username == identifier).first()
    if user is None:
        user = db.query(User).filter(User.email == identifier).first()
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def authenticate_user(db: Session, identifier: str, password: str) -> User:
    """Check credentials and record the login time.

    Unknown users and wrong passwords raise the same error, and both paths
    perform one hash verification.
    """
    user = get_user_by_identifier(db, identifier) if identifier else None

    if user is None:
        pwd_context.dummy_verify()
        logger.info("Failed login for unknown identifier")
        raise InvalidCredentials()

    if not verify_password(password, user.password_hash):
        logger.info(f"Failed login for user {user.id}")
        raise InvalidCredentials()

    user.last_login = utcnow()
    db.commit()
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    """Replace a user's password after confirming the current one.

    Other sessions of the same user stay valid.
    """
    validate_new_password(new_password)

    if not verify_password(current_password, user.password_hash):
        raise InvalidCurrentPassword()

    user.password_hash = get_password_hash(new_password)
    db.commit()
    logger.info(f"Password changed for user {user.id}")


def change_profile(db: Session, user: User, username: str, email: str) -> User:
    """Update username and email, keeping both unique across users."""
    taken = (
        db.query(User.id).filter(User.username == username, User.id != user.id).first()
    )
    if taken:
        raise UsernameTaken()

    taken = db.query(User.id).filter(User.email == email, User.id != user.id).first()
    if taken:
        raise EmailTaken()

    user.username = username
    user.email = email
    db.query(AuthSession).filter(AuthSession.user_id == user.id).update(
        {AuthSession.username: username}, synchronize_session=False
    )

    try:
        db.commit()
    except IntegrityError as e:
        # Another request claimed the value between the check and the commit
        db.rollback()
        clash = db.query(User.id).filter(User.username == username, User.id != user.id).first()
        if clash:
            raise UsernameTaken() from e
        raise EmailTaken() from e

    db.refresh(user)
    return user


# --- Sessions ---


def _cookie_serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.session_secret, salt="session-cookie")


def sign_session_id(session_id: str) -> str:
    """Produce the cookie value for a session id."""
    return _cookie_serializer().dumps(session_id)


def unsign_session_id(cookie_value: str) -> str | None:
    """Recover the session id from a cookie value, or None if it was tampered with."""
    try:
        return _cookie_serializer().loads(
            cookie_value, max_age=settings.session_max_age_hours * 3600
        )
    except BadSignature:
        return None


def create_session(db: Session, user: User) -> str:
    """Create a new server-side session for the user and return its id."""
    session_id = secrets.token_urlsafe(32)
    record = AuthSession(
        session_id=session_id,
        user_id=user.id,
        username=user.username,
        role=user.role,
        expires_at=utcnow() + timedelta(hours=settings.session_max_age_hours),
    )
    db.add(record)
    db.commit()
    return session_id


def resolve_session(db: Session, session_id: str) -> User | None:
    """Return the user behind a live session.

    Expired sessions and sessions whose user no longer exists resolve to None.
    """
    record = db.query(AuthSession).filter(AuthSession.session_id == session_id).first()
    if record is None:
        return None

    if as_utc(record.expires_at) <= utcnow():
        return None

    return db.get(User, record.user_id)


def delete_session(db: Session, session_id: str) -> bool:
    """Delete a session (logout).

    Returns True if a session was deleted, False if it did not exist.
    """
    deleted = (
        db.query(AuthSession)
        .filter(AuthSession.session_id == session_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0


def cleanup_expired_sessions(db: Session) -> int:
    """Remove expired sessions and return how many were removed."""
    deleted = (
        db.query(AuthSession)
        .filter(AuthSession.expires_at <= utcnow())
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
