"""Startup tasks: migrate, purge stale sessions, make sure an admin exists."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sitecms.config import Settings, get_settings
from sitecms.database import Database
from sitecms.models.enums import UserRole
from sitecms.models.user import User
from sitecms.services.auth import (
    cleanup_expired_sessions,
    get_password_hash,
    get_user_by_identifier,
    validate_new_password,
)
from sitecms.services.errors import EmailTaken, UsernameTaken

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_PASSWORD = "admin123"  # noqa: S105


def initialize_database(database: Database, settings: Settings | None = None) -> None:
    """Bring the store up to date before the app serves traffic."""
    settings = settings or get_settings()

    logger.info("Applying database migrations")
    database.migrate()

    with database.session() as db:
        purged = cleanup_expired_sessions(db)
        if purged:
            logger.info(f"Removed {purged} expired sessions")
        ensure_admin_user(db, settings)


def ensure_admin_user(db: Session, settings: Settings) -> User | None:
    """Create the default administrator when the users table is empty.

    Returns the created user, or None when users already exist.
    """
    if db.query(User.id).first() is not None:
        return None

    admin = User(
        username=settings.default_admin_username,
        email=settings.default_admin_email,
        password_hash=get_password_hash(settings.default_admin_password),
        role=UserRole.ADMIN.value,
    )
    db.add(admin)
    try:
        db.commit()
    except IntegrityError:
        # Another process bootstrapped the same store first
        db.rollback()
        return None

    logger.info(f"Created default admin user '{admin.username}'")
    if settings.default_admin_password == DEFAULT_ADMIN_PASSWORD:
        logger.warning("Default admin password is in use; change it after the first login")
    return admin


def create_admin(db: Session, username: str, email: str, password: str) -> User:
    """Create an additional administrator account."""
    validate_new_password(password)

    if db.query(User.id).filter(User.username == username).first():
        raise UsernameTaken()
    if db.query(User.id).filter(User.email == email).first():
        raise EmailTaken()

    user = User(
        username=username,
        email=email,
        password_hash=get_password_hash(password),
        role=UserRole.ADMIN.value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise UsernameTaken() from e

    db.refresh(user)
    logger.info(f"Created admin user '{username}'")
    return user


def reset_password(db: Session, identifier: str, password: str) -> User | None:
    """Set a new password for an existing user, clearing any reset token.

    Returns None when no user matches the username or email.
    """
    validate_new_password(password)

    user = get_user_by_identifier(db, identifier)
    if user is None:
        return None

    user.password_hash = get_password_hash(password)
    user.reset_token = None
    user.reset_token_expires = None
    db.commit()
    logger.info(f"Password reset from the command line for user {user.id}")
    return user
