"""Password reset token issuance and redemption."""

import logging
import secrets
from datetime import timedelta

from sqlalchemy.orm import Session

from sitecms.config import Settings, get_settings
from sitecms.models.mixins import as_utc, utcnow
from sitecms.models.user import User
from sitecms.services.auth import get_password_hash, get_user_by_email, validate_new_password
from sitecms.services.errors import ExpiredToken, InvalidToken

logger = logging.getLogger(__name__)

# 32 bytes of entropy, hex encoded
RESET_TOKEN_BYTES = 32


class PasswordResetService:
    """Issues single-use, time-boxed reset tokens and consumes them.

    A user holds at most one outstanding token. Issuing a new one overwrites the
    previous token; consuming or expiring a token clears both token columns.
    """

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()

    def request_reset(self, email: str) -> None:
        """Issue a reset token if the email belongs to a user.

        Always returns normally so callers cannot learn whether the email exists.
        """
        user = get_user_by_email(self.db, email)
        if user is None:
            logger.info("Password reset requested for an unknown email")
            return

        token = secrets.token_hex(RESET_TOKEN_BYTES)
        expires = utcnow() + timedelta(minutes=self.settings.reset_token_ttl_minutes)

        # Clear-and-set in one statement
        self.db.query(User).filter(User.id == user.id).update(
            {User.reset_token: token, User.reset_token_expires: expires},
            synchronize_session=False,
        )
        self.db.commit()

        self._deliver(user, token)

    def reset_password(self, token: str, new_password: str) -> User:
        """Set a new password using a reset token.

        Raises:
            WeakPassword: the new password is too short
            InvalidToken: no user holds this token (never issued, or already used)
            ExpiredToken: the token exists but its lifetime has passed
        """
        validate_new_password(new_password)

        if not token:
            raise InvalidToken()

        user = self.db.query(User).filter(User.reset_token == token).first()
        if user is None:
            raise InvalidToken()

        if user.reset_token_expires is None or as_utc(user.reset_token_expires) < utcnow():
            self._clear_token(user.id, token)
            raise ExpiredToken()

        # The token guard makes a concurrent second redemption update nothing
        updated = (
            self.db.query(User)
            .filter(User.id == user.id, User.reset_token == token)
            .update(
                {
                    User.password_hash: get_password_hash(new_password),
                    User.reset_token: None,
                    User.reset_token_expires: None,
                },
                synchronize_session=False,
            )
        )
        if updated == 0:
            self.db.rollback()
            raise InvalidToken()

        self.db.commit()
        logger.info(f"Password reset completed for user {user.id}")
        return user

    def _clear_token(self, user_id: int, token: str) -> None:
        self.db.query(User).filter(User.id == user_id, User.reset_token == token).update(
            {User.reset_token: None, User.reset_token_expires: None},
            synchronize_session=False,
        )
        self.db.commit()

    def _deliver(self, user: User, token: str) -> None:
        """Hand the token to the user.

        Email delivery is not wired up; development logs the link instead.
        """
        if self.settings.is_development:
            link = f"{self.settings.public_base_url}/admin/reset-password.html?token={token}"
            logger.info(f"Reset token for {user.email}: {token}")
            logger.info(f"Reset link: {link}")
        else:
            logger.info(f"Password reset token issued for user {user.id}")
