"""User model."""

from sqlalchemy import Column, DateTime, Integer, String

from sitecms.database import Base
from sitecms.models.enums import UserRole
from sitecms.models.mixins import CreatedAtMixin


class User(Base, CreatedAtMixin):
    """Administrative account used to sign in to the admin surface."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.USER.value, server_default="user")

    # Set together or cleared together
    reset_token = Column(String(128), nullable=True, index=True)
    reset_token_expires = Column(DateTime(timezone=True), nullable=True)

    last_login = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
