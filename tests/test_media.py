"""Media upload pipeline tests."""

import hashlib

import httpx
import pytest

from sitecms.api.dependencies import get_media_service
from sitecms.config import Settings
from sitecms.main import app
from sitecms.services.errors import FileTooLarge, StorageError, UnsupportedType
from sitecms.services.media import MediaKind, MediaUploadService
from sitecms.services.media_storage import CloudinaryStorage

LIMIT = 1024
PNG_HEADER = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def small_settings():
    return Settings(max_image_upload_bytes=LIMIT, max_video_upload_bytes=4 * LIMIT)


@pytest.fixture
def service(media_store, small_settings):
    return MediaUploadService(media_store, small_settings)


class TestValidation:
    @pytest.mark.asyncio
    async def test_exact_ceiling_passes(self, service, media_store):
        data = b"x" * LIMIT
        result = await service.upload(data, "photo.jpg", LIMIT, "image/jpeg", MediaKind.IMAGE)
        assert result.size_bytes == LIMIT
        assert result.kind == MediaKind.IMAGE
        assert result.url.startswith("https://")
        assert len(media_store.calls) == 1

    @pytest.mark.asyncio
    async def test_one_byte_over_fails_without_store_call(self, service, media_store):
        data = b"x" * (LIMIT + 1)
        with pytest.raises(FileTooLarge):
            await service.upload(data, "photo.jpg", LIMIT + 1, "image/jpeg", MediaKind.IMAGE)
        assert media_store.calls == []

    @pytest.mark.asyncio
    async def test_understated_size_is_caught(self, service, media_store):
        data = b"x" * (LIMIT + 1)
        with pytest.raises(FileTooLarge):
            await service.upload(data, "photo.jpg", 10, "image/jpeg", MediaKind.IMAGE)
        assert media_store.calls == []

    @pytest.mark.asyncio
    async def test_unsupported_type(self, service, media_store):
        with pytest.raises(UnsupportedType):
            await service.upload(b"MZ", "setup.exe", 2, "application/x-msdownload", MediaKind.IMAGE)
        assert media_store.calls == []

    def test_extension_or_mime_type_is_enough(self, service):
        service.validate("logo", 10, "image/png", MediaKind.IMAGE)
        service.validate("logo.PNG", 10, "application/octet-stream", MediaKind.IMAGE)
        service.validate("icon.ico", 10, None, MediaKind.FAVICON)
        with pytest.raises(UnsupportedType):
            service.validate("photo.gif", 10, "image/gif", MediaKind.FAVICON)

    def test_mime_subtype_variants(self, service):
        service.validate("upload", 10, "image/pjpeg", MediaKind.IMAGE)
        service.validate("upload", 10, "image/x-png", MediaKind.FAVICON)
        with pytest.raises(UnsupportedType):
            service.validate("upload", 10, "application/x-png", MediaKind.IMAGE)
        with pytest.raises(UnsupportedType):
            service.validate("upload", 10, "image/pjpeg", MediaKind.VIDEO)

    def test_video_has_its_own_ceiling(self, service):
        service.validate("clip.mp4", 4 * LIMIT, "video/mp4", MediaKind.VIDEO)
        with pytest.raises(FileTooLarge):
            service.validate("clip.mp4", 4 * LIMIT + 1, "video/mp4", MediaKind.VIDEO)
        with pytest.raises(UnsupportedType):
            service.validate("photo.png", 10, "image/png", MediaKind.VIDEO)

    @pytest.mark.asyncio
    async def test_transformations_per_kind(self, service, media_store):
        await service.upload(PNG_HEADER, "a.png", None, "image/png", MediaKind.IMAGE)
        await service.upload(PNG_HEADER, "b.png", None, "image/png", MediaKind.FAVICON)
        await service.upload(b"\x00" * 8, "c.mp4", None, "video/mp4", MediaKind.VIDEO)

        assert [call["resource_type"] for call in media_store.calls] == ["image", "image", "video"]
        assert [call["transformation"] for call in media_store.calls] == [
            "c_limit,w_2000/q_auto:good",
            "c_limit,w_512",
            "q_auto",
        ]

    @pytest.mark.asyncio
    async def test_no_deduplication(self, service):
        first = await service.upload(PNG_HEADER, "a.png", None, "image/png", MediaKind.IMAGE)
        second = await service.upload(PNG_HEADER, "a.png", None, "image/png", MediaKind.IMAGE)
        assert first.url != second.url

    @pytest.mark.asyncio
    async def test_storage_error_propagates(self, service, media_store):
        media_store.error = StorageError()
        with pytest.raises(StorageError):
            await service.upload(PNG_HEADER, "a.png", None, "image/png", MediaKind.IMAGE)


def _storage(handler) -> CloudinaryStorage:
    return CloudinaryStorage(
        cloud_name="demo",
        api_key="key-123",
        api_secret="secret-456",
        folder="site-media",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


async def _store_png(storage: CloudinaryStorage) -> str:
    return await storage.store(
        PNG_HEADER,
        filename="a.png",
        content_type="image/png",
        resource_type="image",
        transformation=None,
    )


class TestCloudinaryStorage:
    @pytest.mark.asyncio
    async def test_successful_upload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.read()
            return httpx.Response(
                200, json={"secure_url": "https://res.cloudinary.com/demo/image/upload/a.png"}
            )

        url = await _storage(handler).store(
            PNG_HEADER,
            filename="a.png",
            content_type="image/png",
            resource_type="image",
            transformation="c_limit,w_2000/q_auto:good",
        )

        assert url == "https://res.cloudinary.com/demo/image/upload/a.png"
        assert seen["url"] == "https://api.cloudinary.com/v1_1/demo/image/upload"
        assert b'name="signature"' in seen["body"]
        assert b'name="api_key"' in seen["body"]
        assert b"c_limit,w_2000/q_auto:good" in seen["body"]
        assert PNG_HEADER in seen["body"]

    def test_signature(self):
        storage = _storage(lambda request: httpx.Response(200))
        expected = hashlib.sha1(b"folder=site-media&timestamp=1700000000secret-456").hexdigest()  # noqa: S324
        assert storage.sign({"timestamp": "1700000000", "folder": "site-media", "file": "x"}) == expected

    @pytest.mark.asyncio
    async def test_rejected_upload(self):
        storage = _storage(lambda request: httpx.Response(401, json={"error": {"message": "bad"}}))
        with pytest.raises(StorageError):
            await _store_png(storage)

    @pytest.mark.asyncio
    async def test_missing_secure_url(self):
        storage = _storage(lambda request: httpx.Response(200, json={"public_id": "a"}))
        with pytest.raises(StorageError):
            await _store_png(storage)

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(StorageError):
            await _store_png(_storage(handler))

    @pytest.mark.asyncio
    async def test_not_configured(self):
        storage = CloudinaryStorage(cloud_name=None, api_key=None, api_secret=None)
        assert not storage.is_configured
        with pytest.raises(StorageError):
            await _store_png(storage)


class TestUploadApi:
    @pytest.fixture(autouse=True)
    def small_limits(self, client, media_store, small_settings):
        app.dependency_overrides[get_media_service] = lambda: MediaUploadService(
            media_store, small_settings
        )

    def test_requires_session(self, client, media_store):
        response = client.post(
            "/api/upload-image", files={"image": ("a.png", PNG_HEADER, "image/png")}
        )
        assert response.status_code == 401
        assert media_store.calls == []

    def test_upload_image(self, auth_client, media_store):
        response = auth_client.post(
            "/api/upload-image", files={"image": ("a.png", PNG_HEADER, "image/png")}
        )
        assert response.status_code == 200
        assert response.json()["url"].startswith("https://media.example.com/image/")
        assert media_store.calls[0]["data"] == PNG_HEADER

    def test_upload_at_ceiling(self, auth_client):
        response = auth_client.post(
            "/api/upload-image", files={"image": ("a.png", b"x" * LIMIT, "image/png")}
        )
        assert response.status_code == 200

    def test_upload_too_large(self, auth_client, media_store):
        response = auth_client.post(
            "/api/upload-image", files={"image": ("a.png", b"x" * (LIMIT + 1), "image/png")}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "file_too_large"
        assert media_store.calls == []

    def test_upload_wrong_type(self, auth_client, media_store):
        response = auth_client.post(
            "/api/upload-image", files={"image": ("notes.txt", b"hello", "text/plain")}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "unsupported_type"
        assert media_store.calls == []

    def test_missing_file(self, auth_client):
        response = auth_client.post("/api/upload-image", files={"other": ("a.png", PNG_HEADER)})
        assert response.status_code == 400
        assert response.json()["code"] == "missing_file"

    def test_upload_favicon(self, auth_client, media_store):
        response = auth_client.post(
            "/api/upload-favicon", files={"image": ("favicon.ico", b"\x00\x00\x01\x00", "image/x-icon")}
        )
        assert response.status_code == 200
        assert media_store.calls[0]["transformation"] == "c_limit,w_512"

    def test_upload_video(self, auth_client, media_store):
        response = auth_client.post(
            "/api/upload-video", files={"video": ("clip.mp4", b"\x00" * 32, "video/mp4")}
        )
        assert response.status_code == 200
        assert media_store.calls[0]["resource_type"] == "video"

    def test_storage_failure(self, auth_client, media_store):
        media_store.error = StorageError()
        response = auth_client.post(
            "/api/upload-image", files={"image": ("a.png", PNG_HEADER, "image/png")}
        )
        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to store the uploaded file",
            "code": "storage_error",
        }
