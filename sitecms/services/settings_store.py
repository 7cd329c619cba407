"""Settings store over the key/value settings table."""

import logging
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from sitecms.models.enums import SettingField
from sitecms.models.site_setting import SiteSetting
from sitecms.services.errors import NotMediaField, UnknownField
from sitecms.services.media import MediaKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSpec:
    """Catalog entry describing one recognized setting."""

    name: SettingField
    category: str
    description: str
    media_kind: MediaKind | None = None


FIELD_SPECS: dict[SettingField, FieldSpec] = {
    spec.name: spec
    for spec in (
        FieldSpec(SettingField.SITE_TITLE, "identity", "Site title"),
        FieldSpec(SettingField.SITE_DESCRIPTION, "identity", "Site description for search engines"),
        FieldSpec(SettingField.SITE_KEYWORDS, "identity", "Keywords for search engines"),
        FieldSpec(SettingField.SITE_PHONE, "contact", "Contact phone"),
        FieldSpec(SettingField.SITE_EMAIL, "contact", "Contact email"),
        FieldSpec(SettingField.ADDRESS, "contact", "Office address"),
        FieldSpec(SettingField.WORKING_HOURS, "contact", "Working hours"),
        FieldSpec(SettingField.WHATSAPP_PHONE, "contact", "WhatsApp number"),
        FieldSpec(SettingField.INSTAGRAM_URL, "social", "Instagram link"),
        FieldSpec(SettingField.FACEBOOK_URL, "social", "Facebook link"),
        FieldSpec(SettingField.LINKEDIN_URL, "social", "LinkedIn link"),
        FieldSpec(SettingField.YOUTUBE_URL, "social", "YouTube link"),
        FieldSpec(SettingField.TELEGRAM_URL, "social", "Telegram link"),
        FieldSpec(SettingField.VK_URL, "social", "VK link"),
        FieldSpec(SettingField.WEBSITE_URL, "social", "External website link"),
        FieldSpec(SettingField.GOOGLE_ANALYTICS_ID, "analytics", "Google Analytics ID"),
        FieldSpec(SettingField.GOOGLE_TAG_MANAGER_ID, "analytics", "Google Tag Manager ID"),
        FieldSpec(SettingField.YANDEX_METRIKA_ID, "analytics", "Yandex Metrika ID"),
        FieldSpec(SettingField.FACEBOOK_PIXEL_ID, "analytics", "Facebook Pixel ID"),
        FieldSpec(SettingField.VK_PIXEL_ID, "analytics", "VK Pixel ID"),
        FieldSpec(SettingField.CUSTOM_HEAD_CODE, "custom_code", "Custom code injected into <head>"),
        FieldSpec(SettingField.CUSTOM_BODY_CODE, "custom_code", "Custom code injected into <body>"),
        FieldSpec(SettingField.FAVICON_URL, "branding", "Favicon URL", MediaKind.FAVICON),
        FieldSpec(SettingField.LOGO_URL, "branding", "Logo URL", MediaKind.IMAGE),
        FieldSpec(SettingField.PRIVACY_POLICY, "content", "Privacy policy"),
        FieldSpec(SettingField.TERMS_OF_SERVICE, "content", "Terms of service"),
        FieldSpec(SettingField.ABOUT_COMPANY, "content", "About the company"),
    )
}


def parse_field(name: str) -> SettingField:
    """Map a raw key to a recognized setting or raise UnknownField."""
    try:
        return SettingField(name)
    except ValueError:
        raise UnknownField(f"Unknown setting: {name[:100]}") from None


def media_kind_for(field: SettingField) -> MediaKind:
    """Media kind for a branding field, or NotMediaField for anything else."""
    kind = FIELD_SPECS[field].media_kind
    if kind is None:
        raise NotMediaField(f"Setting {field.value} does not hold a media URL")
    return kind


class SettingsStore:
    """Reads and writes site-wide configuration values."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> dict[str, str]:
        """Every recognized field with its current value; missing ones are empty."""
        rows = self.db.execute(select(SiteSetting.key, SiteSetting.value)).all()
        stored = {key: value for key, value in rows}
        return {field.value: stored.get(field.value) or "" for field in SettingField}

    def get(self, name: str | SettingField) -> str:
        """Current value of one recognized field."""
        field = name if isinstance(name, SettingField) else parse_field(name)
        value = self.db.execute(
            select(SiteSetting.value).where(SiteSetting.key == field.value)
        ).scalar_one_or_none()
        return value or ""

    def set_field(self, name: str | SettingField, value: str | None) -> str:
        """Set one recognized field and return the stored value."""
        field = name if isinstance(name, SettingField) else parse_field(name)
        stored = value or ""
        self._upsert(field, stored)
        logger.info(f"Setting {field.value} updated")
        return stored

    def clear_field(self, name: str | SettingField) -> None:
        """Reset a recognized field to the empty string."""
        self.set_field(name, "")

    def describe_fields(self) -> list[FieldSpec]:
        """Catalog of recognized fields in declaration order."""
        return [FIELD_SPECS[field] for field in SettingField]

    def _upsert(self, field: SettingField, value: str) -> None:
        """Insert or update the row in a single statement."""
        dialect = self.db.get_bind().dialect.name
        description = FIELD_SPECS[field].description

        if dialect in ("sqlite", "postgresql"):
            insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
            stmt = insert(SiteSetting).values(
                key=field.value, value=value, description=description, updated_at=func.now()
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["key"],
                set_={"value": stmt.excluded.value, "updated_at": func.now()},
            )
            self.db.execute(stmt)
        else:
            self.db.merge(SiteSetting(key=field.value, value=value, description=description))

        self.db.commit()
