"""Site settings model."""

from sqlalchemy import Column, DateTime, String, Text, func

from sitecms.database import Base


class SiteSetting(Base):
    """One configuration value, keyed by its setting name."""

    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False, default="", server_default="")
    description = Column(String(255), nullable=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True
    )
