"""SQLAlchemy models."""

from sitecms.models.auth_session import AuthSession
from sitecms.models.site_setting import SiteSetting
from sitecms.models.user import User

__all__ = [
    "User",
    "AuthSession",
    "SiteSetting",
]
