"""Site settings API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from sitecms.api.dependencies import get_media_service, get_settings_store, require_auth
from sitecms.api.uploads import read_upload
from sitecms.database import get_db
from sitecms.models.user import User
from sitecms.schemas.settings import FieldDescription, SettingResponse, SettingUpdate
from sitecms.services.media import MediaUploadService
from sitecms.services.settings_store import SettingsStore, media_kind_for, parse_field

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=dict[str, str])
def get_settings_values(
    store: Annotated[SettingsStore, Depends(get_settings_store)],
):
    """Public read of every recognized setting."""
    return store.get_all()


@router.get("/fields", response_model=list[FieldDescription])
def list_fields(
    current_user: Annotated[User, Depends(require_auth)],
    store: Annotated[SettingsStore, Depends(get_settings_store)],
):
    """Catalog of recognized settings for building admin forms."""
    return [
        FieldDescription(
            name=spec.name.value,
            category=spec.category,
            description=spec.description,
            media_kind=spec.media_kind.value if spec.media_kind else None,
        )
        for spec in store.describe_fields()
    ]


@router.put("/{key}", response_model=SettingResponse)
def update_setting(
    key: str,
    data: SettingUpdate,
    current_user: Annotated[User, Depends(require_auth)],
    store: Annotated[SettingsStore, Depends(get_settings_store)],
):
    """Set one setting."""
    field = parse_field(key)
    value = store.set_field(field, data.value)
    return SettingResponse(key=field.value, value=value)


@router.delete("/{key}", response_model=SettingResponse)
def clear_setting(
    key: str,
    current_user: Annotated[User, Depends(require_auth)],
    store: Annotated[SettingsStore, Depends(get_settings_store)],
):
    """Reset one setting to empty."""
    field = parse_field(key)
    store.clear_field(field)
    return SettingResponse(key=field.value, value="")


@router.post("/{key}/media", response_model=SettingResponse)
async def upload_setting_media(
    key: str,
    current_user: Annotated[User, Depends(require_auth)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[MediaUploadService, Depends(get_media_service)],
    file: Annotated[UploadFile | None, File()] = None,
):
    """Upload a branding file and store its URL in the setting."""
    field = parse_field(key)
    kind = media_kind_for(field)

    # No connection is held while the remote store is awaited
    db.close()
    result = await read_upload(service, file, kind)

    value = SettingsStore(db).set_field(field, result.url)
    return SettingResponse(key=field.value, value=value)
