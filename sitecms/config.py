"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(default="sqlite:///./site.db")

    # Sessions
    session_secret: str = Field(default="change-me-in-production")
    session_cookie_name: str = Field(default="sid")
    session_max_age_hours: int = Field(default=24, gt=0)

    # Passwords
    bcrypt_rounds: int = Field(default=10, ge=10, le=15)
    password_min_length: int = Field(default=6, ge=1)
    reset_token_ttl_minutes: int = Field(default=60, gt=0)

    # First-run administrator
    default_admin_username: str = Field(default="admin")
    default_admin_email: str = Field(default="admin@example.com")
    default_admin_password: str = Field(default="admin123")

    # Public URLs
    public_base_url: str = Field(default="http://localhost:8000")
    frontend_url: str | None = Field(default=None)

    # Cloudinary (remote media storage)
    cloudinary_cloud_name: str | None = Field(default=None)
    cloudinary_api_key: str | None = Field(default=None)
    cloudinary_api_secret: str | None = Field(default=None)
    cloudinary_folder: str = Field(default="site-media")
    media_upload_timeout_seconds: float = Field(default=60.0, gt=0)

    # Upload limits
    max_image_upload_bytes: int = Field(default=10 * 1024 * 1024, gt=0)  # 10MB
    max_video_upload_bytes: int = Field(default=100 * 1024 * 1024, gt=0)  # 100MB
    image_max_width: int = Field(default=2000, gt=0)

    # API
    environment: str = Field(default="development")

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.environment == "production":
            if self.session_secret == "change-me-in-production":  # noqa: S105
                raise ValueError("SESSION_SECRET must be changed in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def cookie_secure(self) -> bool:
        """Session cookies require HTTPS everywhere except development."""
        return not self.is_development


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
