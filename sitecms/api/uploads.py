"""Media upload API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from sitecms.api.dependencies import get_media_service, require_auth
from sitecms.database import get_db
from sitecms.models.user import User
from sitecms.schemas.upload import UploadResponse
from sitecms.services.errors import MissingFile
from sitecms.services.media import MediaKind, MediaUploadService, UploadResult

router = APIRouter(prefix="/api", tags=["uploads"])


async def read_upload(
    service: MediaUploadService, file: UploadFile | None, kind: MediaKind
) -> UploadResult:
    """Validate a multipart upload, then read it and hand it to the store."""
    if file is None or not file.filename:
        raise MissingFile()

    # Reject on declared size and type before reading the spooled body
    service.validate(file.filename, file.size, file.content_type, kind)
    data = await file.read()
    return await service.upload(data, file.filename, file.size, file.content_type, kind)


@router.post("/upload-image", response_model=UploadResponse)
async def upload_image(
    current_user: Annotated[User, Depends(require_auth)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[MediaUploadService, Depends(get_media_service)],
    image: Annotated[UploadFile | None, File()] = None,
):
    """Upload an image and return its public URL."""
    db.close()
    result = await read_upload(service, image, MediaKind.IMAGE)
    return UploadResponse(url=result.url)


@router.post("/upload-favicon", response_model=UploadResponse)
async def upload_favicon(
    current_user: Annotated[User, Depends(require_auth)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[MediaUploadService, Depends(get_media_service)],
    image: Annotated[UploadFile | None, File()] = None,
):
    """Upload a favicon and return its public URL."""
    db.close()
    result = await read_upload(service, image, MediaKind.FAVICON)
    return UploadResponse(url=result.url)


@router.post("/upload-video", response_model=UploadResponse)
async def upload_video(
    current_user: Annotated[User, Depends(require_auth)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[MediaUploadService, Depends(get_media_service)],
    video: Annotated[UploadFile | None, File()] = None,
):
    """Upload a video and return its public URL."""
    db.close()
    result = await read_upload(service, video, MediaKind.VIDEO)
    return UploadResponse(url=result.url)
