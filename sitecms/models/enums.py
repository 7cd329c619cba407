"""Enums for model fields."""

from enum import Enum


class UserRole(str, Enum):
    """Roles a user account can hold."""

    ADMIN = "admin"
    USER = "user"


class SettingField(str, Enum):
    """Every configuration key the settings table recognizes.

    Request input is parsed into this enum before it can reach a query.
    """

    # Identity
    SITE_TITLE = "site_title"
    SITE_DESCRIPTION = "site_description"
    SITE_KEYWORDS = "site_keywords"

    # Contact
    SITE_PHONE = "site_phone"
    SITE_EMAIL = "site_email"
    ADDRESS = "address"
    WORKING_HOURS = "working_hours"
    WHATSAPP_PHONE = "whatsapp_phone"

    # Social
    INSTAGRAM_URL = "instagram_url"
    FACEBOOK_URL = "facebook_url"
    LINKEDIN_URL = "linkedin_url"
    YOUTUBE_URL = "youtube_url"
    TELEGRAM_URL = "telegram_url"
    VK_URL = "vk_url"
    WEBSITE_URL = "website_url"

    # Analytics
    GOOGLE_ANALYTICS_ID = "google_analytics_id"
    GOOGLE_TAG_MANAGER_ID = "google_tag_manager_id"
    YANDEX_METRIKA_ID = "yandex_metrika_id"
    FACEBOOK_PIXEL_ID = "facebook_pixel_id"
    VK_PIXEL_ID = "vk_pixel_id"

    # Injected code
    CUSTOM_HEAD_CODE = "custom_head_code"
    CUSTOM_BODY_CODE = "custom_body_code"

    # Branding media
    FAVICON_URL = "favicon_url"
    LOGO_URL = "logo_url"

    # Long-form text
    PRIVACY_POLICY = "privacy_policy"
    TERMS_OF_SERVICE = "terms_of_service"
    ABOUT_COMPANY = "about_company"
