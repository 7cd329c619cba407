"""Media upload pipeline: validate, then hand off to remote storage."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath

from sitecms.config import Settings, get_settings
from sitecms.services.errors import FileTooLarge, UnsupportedType
from sitecms.services.media_storage import MediaStore

logger = logging.getLogger(__name__)


class MediaKind(str, Enum):
    """Kinds of media the pipeline accepts."""

    IMAGE = "image"
    VIDEO = "video"
    FAVICON = "favicon"


ICON_MIME_TYPES = {"image/x-icon", "image/vnd.microsoft.icon"}

IMAGE_EXTENSIONS = frozenset({"jpeg", "jpg", "png", "gif", "webp", "svg", "ico"})
IMAGE_MIME_TYPES = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp", "image/svg+xml"}
    | ICON_MIME_TYPES
)

FAVICON_EXTENSIONS = frozenset({"ico", "png", "svg"})
FAVICON_MIME_TYPES = frozenset({"image/png", "image/svg+xml"} | ICON_MIME_TYPES)

VIDEO_EXTENSIONS = frozenset({"mp4", "mov", "avi", "webm"})
VIDEO_MIME_TYPES = frozenset(
    {"video/mp4", "video/quicktime", "video/x-msvideo", "video/avi", "video/webm"}
)


@dataclass(frozen=True)
class MediaPolicy:
    """What one media kind accepts and how the remote store should treat it."""

    extensions: frozenset[str]
    mime_types: frozenset[str]
    max_bytes: int
    resource_type: str
    transformation: str | None

    def accepts(self, filename: str | None, mime_type: str | None) -> bool:
        """Accept on a known extension OR a known MIME type.

        A MIME subtype that contains an allowed extension also counts, so
        variants such as image/pjpeg or image/x-png are accepted.
        """
        extension = PurePath(filename or "").suffix.lower().lstrip(".")
        if extension in self.extensions:
            return True

        mime = (mime_type or "").split(";")[0].strip().lower()
        if mime in self.mime_types:
            return True

        major, _, subtype = mime.partition("/")
        return major == self.resource_type and any(ext in subtype for ext in self.extensions)


@dataclass(frozen=True)
class UploadResult:
    """A stored media object."""

    url: str
    kind: MediaKind
    size_bytes: int


def build_policies(settings: Settings) -> dict[MediaKind, MediaPolicy]:
    """Per-kind limits and transformations from configuration."""
    return {
        MediaKind.IMAGE: MediaPolicy(
            extensions=IMAGE_EXTENSIONS,
            mime_types=IMAGE_MIME_TYPES,
            max_bytes=settings.max_image_upload_bytes,
            resource_type="image",
            transformation=f"c_limit,w_{settings.image_max_width}/q_auto:good",
        ),
        MediaKind.FAVICON: MediaPolicy(
            extensions=FAVICON_EXTENSIONS,
            mime_types=FAVICON_MIME_TYPES,
            max_bytes=settings.max_image_upload_bytes,
            resource_type="image",
            transformation="c_limit,w_512",
        ),
        MediaKind.VIDEO: MediaPolicy(
            extensions=VIDEO_EXTENSIONS,
            mime_types=VIDEO_MIME_TYPES,
            max_bytes=settings.max_video_upload_bytes,
            resource_type="video",
            transformation="q_auto",
        ),
    }


class MediaUploadService:
    """Turns an uploaded buffer into a permanent public URL.

    Validation runs before the remote store is contacted. Nothing is persisted
    locally; callers store the returned URL only after a successful upload.
    Identical bytes uploaded twice produce two objects and two URLs.
    """

    def __init__(self, store: MediaStore, settings: Settings | None = None):
        self.store = store
        self.policies = build_policies(settings or get_settings())

    def validate(
        self,
        filename: str | None,
        size_bytes: int | None,
        mime_type: str | None,
        kind: MediaKind,
    ) -> MediaPolicy:
        """Check type and declared size without touching the network."""
        policy = self.policies[kind]

        if size_bytes is not None and size_bytes > policy.max_bytes:
            limit_mb = policy.max_bytes // (1024 * 1024)
            raise FileTooLarge(f"File too large. Maximum size is {limit_mb}MB.")

        if not policy.accepts(filename, mime_type):
            allowed = ", ".join(sorted(policy.extensions))
            raise UnsupportedType(f"Unsupported file type. Allowed types: {allowed}")

        return policy

    async def upload(
        self,
        data: bytes,
        filename: str,
        size_bytes: int | None,
        mime_type: str | None,
        kind: MediaKind,
    ) -> UploadResult:
        """Validate and store one file.

        Raises:
            FileTooLarge: declared or actual size exceeds the kind's ceiling
            UnsupportedType: neither extension nor MIME type is allowed
            StorageError: the remote store failed, timed out or is not configured
        """
        actual_size = len(data)
        declared = actual_size if size_bytes is None else max(size_bytes, actual_size)
        policy = self.validate(filename, declared, mime_type, kind)

        url = await self.store.store(
            data,
            filename=PurePath(filename).name or "upload",
            content_type=mime_type,
            resource_type=policy.resource_type,
            transformation=policy.transformation,
        )
        logger.info(f"Stored {kind.value} upload ({actual_size} bytes)")
        return UploadResult(url=url, kind=kind, size_bytes=actual_size)
