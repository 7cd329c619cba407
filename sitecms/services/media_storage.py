"""Remote media storage backed by the Cloudinary upload API."""

import hashlib
import logging
import time
from typing import Protocol

import httpx

from sitecms.config import Settings
from sitecms.services.errors import StorageError

logger = logging.getLogger(__name__)


class MediaStore(Protocol):
    """Anything that can persist bytes remotely and return a public URL."""

    async def store(
        self,
        data: bytes,
        *,
        filename: str,
        content_type: str | None,
        resource_type: str,
        transformation: str | None,
    ) -> str: ...


class CloudinaryStorage:
    """Signed uploads to Cloudinary.

    Resizing and re-encoding happen on Cloudinary's side through an incoming
    transformation, so the stored object is already normalized.
    """

    UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/{resource_type}/upload"

    # Parameters Cloudinary leaves out of the signature
    UNSIGNED_PARAMS = {"file", "cloud_name", "resource_type", "api_key"}

    def __init__(
        self,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        folder: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudinaryStorage":
        """Build a client from application settings."""
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            folder=settings.cloudinary_folder,
            timeout=settings.media_upload_timeout_seconds,
        )

    @property
    def is_configured(self) -> bool:
        """Check if Cloudinary credentials are configured."""
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def sign(self, params: dict[str, str]) -> str:
        """Compute the Cloudinary request signature for the given parameters."""
        to_sign = "&".join(
            f"{key}={params[key]}"
            for key in sorted(params)
            if key not in self.UNSIGNED_PARAMS and params[key] not in (None, "")
        )
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode()).hexdigest()  # noqa: S324

    async def store(
        self,
        data: bytes,
        *,
        filename: str,
        content_type: str | None,
        resource_type: str,
        transformation: str | None,
    ) -> str:
        """Upload bytes and return the permanent HTTPS URL."""
        if not self.is_configured:
            raise StorageError("Media storage is not configured")

        params: dict[str, str] = {"timestamp": str(int(time.time()))}
        if self.folder:
            params["folder"] = self.folder
        if transformation:
            params["transformation"] = transformation
        params["signature"] = self.sign(params)
        params["api_key"] = self.api_key

        url = self.UPLOAD_URL.format(cloud_name=self.cloud_name, resource_type=resource_type)
        files = {"file": (filename, data, content_type or "application/octet-stream")}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, data=params, files=files)
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Cloudinary upload timed out after {self.timeout}s: {e}")
            raise StorageError("Media storage timed out") from e
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Cloudinary rejected upload ({e.response.status_code}): {e.response.text[:500]}"
            )
            raise StorageError() from e
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling Cloudinary: {e}")
            raise StorageError() from e
        except ValueError as e:
            logger.error(f"Cloudinary returned a non-JSON response: {e}")
            raise StorageError() from e

        secure_url = payload.get("secure_url") if isinstance(payload, dict) else None
        if not secure_url:
            logger.error(f"Cloudinary response had no secure_url: {payload}")
            raise StorageError()

        return secure_url
