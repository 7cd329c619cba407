"""Server-side login session model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from sitecms.database import Base
from sitecms.models.mixins import CreatedAtMixin


class AuthSession(Base, CreatedAtMixin):
    """Login session referenced by the signed session cookie.

    The cookie only carries the opaque session_id; everything else stays here.
    """

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(64), unique=True, nullable=False, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    username = Column(String(150), nullable=False)
    role = Column(String(20), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<AuthSession(id={self.id}, user_id={self.user_id})>"
