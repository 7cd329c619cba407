"""Add tracking and branding fields

Revision ID: e15f0c8d3a27
Revises: b7d2e91f4a63
Create Date: 2026-09-21 16:47:12.835501

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "e15f0c8d3a27"
down_revision: str | None = "b7d2e91f4a63"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

NEW_FIELDS = {
    "whatsapp_phone": "WhatsApp number",
    "website_url": "External website link",
    "google_tag_manager_id": "Google Tag Manager ID",
    "facebook_pixel_id": "Facebook Pixel ID",
    "vk_pixel_id": "VK Pixel ID",
    "custom_head_code": "Custom code injected into <head>",
    "custom_body_code": "Custom code injected into <body>",
    "favicon_url": "Favicon URL",
    "logo_url": "Logo URL",
}

settings_table = sa.table(
    "settings",
    sa.column("key", sa.String),
    sa.column("value", sa.Text),
    sa.column("description", sa.String),
)


def upgrade() -> None:
    bind = op.get_bind()
    existing = set(bind.execute(sa.select(settings_table.c.key)).scalars())

    rows = [
        {"key": key, "value": "", "description": description}
        for key, description in NEW_FIELDS.items()
        if key not in existing
    ]
    if rows:
        op.bulk_insert(settings_table, rows)


def downgrade() -> None:
    op.execute(settings_table.delete().where(settings_table.c.key.in_(list(NEW_FIELDS))))
