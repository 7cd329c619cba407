"""Convert settings to key/value rows

Revision ID: 8c4e2d6a9b51
Revises: 3f9a1c2b7d10
Create Date: 2026-09-14 10:31:07.664029

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8c4e2d6a9b51"
down_revision: str | None = "3f9a1c2b7d10"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

BACKUP_TABLE = "settings_legacy"

# Wide-layout columns that are bookkeeping, not settings
SKIPPED_COLUMNS = {"id", "created_at", "updated_at"}

settings_table = sa.table(
    "settings",
    sa.column("key", sa.String),
    sa.column("value", sa.Text),
    sa.column("description", sa.String),
)


def _create_key_value_table() -> None:
    op.create_table(
        "settings",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("value", sa.Text(), nullable=False, server_default=""),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True
        ),
    )


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if "settings" not in inspector.get_table_names():
        _create_key_value_table()
        return

    columns = {column["name"] for column in inspector.get_columns("settings")}

    if {"key", "value"} <= columns:
        # Already key/value; fill in what older versions of the table lacked
        if "description" not in columns:
            op.add_column("settings", sa.Column("description", sa.String(255), nullable=True))
        if "updated_at" not in columns:
            op.add_column("settings", sa.Column("updated_at", sa.DateTime(timezone=True)))
        op.execute(settings_table.update().where(settings_table.c.value.is_(None)).values(value=""))
        return

    # Wide single-row layout: keep it as a backup and copy each value over
    legacy_rows = bind.execute(sa.text("SELECT * FROM settings")).mappings().all()
    op.rename_table("settings", BACKUP_TABLE)
    _create_key_value_table()

    migrated: dict[str, str] = {}
    for row in legacy_rows:
        for name, value in row.items():
            if name in SKIPPED_COLUMNS or value is None or name in migrated:
                continue
            migrated[name] = str(value)

    if migrated:
        op.bulk_insert(
            settings_table,
            [
                {"key": key, "value": value, "description": None}
                for key, value in migrated.items()
            ],
        )


def downgrade() -> None:
    bind = op.get_bind()
    if BACKUP_TABLE in sa.inspect(bind).get_table_names():
        op.drop_table("settings")
        op.rename_table(BACKUP_TABLE, "settings")
    else:
        op.drop_table("settings")
