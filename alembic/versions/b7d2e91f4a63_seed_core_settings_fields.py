"""Seed core settings fields

Revision ID: b7d2e91f4a63
Revises: 8c4e2d6a9b51
Create Date: 2026-09-14 11:02:55.190347

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "b7d2e91f4a63"
down_revision: str | None = "8c4e2d6a9b51"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# key -> (placeholder for a brand-new store, description)
CORE_FIELDS = {
    "site_title": ("My Company", "Site title"),
    "site_description": ("Professional services for your business", "Site description for search engines"),
    "site_keywords": ("", "Keywords for search engines"),
    "site_phone": ("+1 (000) 000-0000", "Contact phone"),
    "site_email": ("info@example.com", "Contact email"),
    "address": ("123 Main Street", "Office address"),
    "working_hours": ("Mon-Fri 9:00-18:00", "Working hours"),
    "instagram_url": ("", "Instagram link"),
    "facebook_url": ("", "Facebook link"),
    "linkedin_url": ("", "LinkedIn link"),
    "youtube_url": ("", "YouTube link"),
    "telegram_url": ("", "Telegram link"),
    "vk_url": ("", "VK link"),
    "google_analytics_id": ("", "Google Analytics ID"),
    "yandex_metrika_id": ("", "Yandex Metrika ID"),
    "privacy_policy": ("", "Privacy policy"),
    "terms_of_service": ("", "Terms of service"),
    "about_company": ("", "About the company"),
}

# Written by the settings layout conversion when it found a legacy single-row table
BACKUP_TABLE = "settings_legacy"

settings_table = sa.table(
    "settings",
    sa.column("key", sa.String),
    sa.column("value", sa.Text),
    sa.column("description", sa.String),
)


def upgrade() -> None:
    bind = op.get_bind()
    existing = set(bind.execute(sa.select(settings_table.c.key)).scalars())

    # Placeholders only when no settings record existed; existing stores get empty strings
    fresh = not existing and BACKUP_TABLE not in sa.inspect(bind).get_table_names()

    rows = [
        {"key": key, "value": placeholder if fresh else "", "description": description}
        for key, (placeholder, description) in CORE_FIELDS.items()
        if key not in existing
    ]
    if rows:
        op.bulk_insert(settings_table, rows)


def downgrade() -> None:
    # Values may have been edited since; leave the rows in place
    pass
