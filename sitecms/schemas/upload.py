"""Upload schemas."""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    """Public URL of a stored media object."""

    url: str
