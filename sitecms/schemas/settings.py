"""Settings schemas."""

from pydantic import BaseModel, Field


class SettingUpdate(BaseModel):
    """New value for one setting. Null clears it."""

    value: str | None = Field(None, max_length=100_000)


class SettingResponse(BaseModel):
    success: bool = True
    key: str
    value: str


class FieldDescription(BaseModel):
    """One entry of the settings catalog."""

    name: str
    category: str
    description: str
    media_kind: str | None = None
