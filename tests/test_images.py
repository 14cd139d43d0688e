from unittest.mock import patch

import pytest

from app.core.exceptions import AuthorizationError, InputError, NotFoundError
from app.services.images import ImageUploadService, validate_image

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def uploads(blob_storage):
    return ImageUploadService(blob_storage)


def test_validate_image_allow_list_and_size():
    assert validate_image("IMAGE/PNG", 10) == "image/png"
    with pytest.raises(InputError):
        validate_image("application/pdf", 10)
    with pytest.raises(InputError):
        validate_image("image/jpeg", 0)
    with pytest.raises(InputError):
        validate_image("image/jpeg", 5 * 1024 * 1024 + 1)


@pytest.mark.asyncio
async def test_upload_lands_in_owner_scope(uploads, blob_storage):
    url = await uploads.upload_image(PNG_BYTES, "image/png", "user-1")

    path = blob_storage.path_from_url(url)
    assert path.startswith("listings/user-1/")
    assert path.endswith(".png")
    assert blob_storage.blobs[path] == (PNG_BYTES, "image/png")


@pytest.mark.asyncio
async def test_batch_is_rejected_before_any_upload(uploads, blob_storage):
    with pytest.raises(InputError):
        await uploads.upload_images([(PNG_BYTES, "image/png"), (b"%PDF", "application/pdf")], "user-1")
    assert blob_storage.blobs == {}

    with pytest.raises(InputError):
        await uploads.upload_images([(PNG_BYTES, "image/png")] * 11, "user-1")


@pytest.mark.asyncio
async def test_delete_only_own_images(uploads, blob_storage):
    url = await uploads.upload_image(PNG_BYTES, "image/png", "user-1")

    with pytest.raises(AuthorizationError):
        await uploads.delete_image(url, "user-2")
    with pytest.raises(InputError):
        await uploads.delete_image("https://elsewhere.example/x.png", "user-1")

    await uploads.delete_image(url, "user-1")
    assert blob_storage.blobs == {}
    with pytest.raises(NotFoundError):
        await uploads.delete_image(url, "user-1")


@pytest.mark.asyncio
async def test_upload_endpoint_uses_sniffed_type(client, auth_headers, blob_storage):
    with patch("app.api.upload.detect_mime_type", return_value="image/png") as sniff:
        response = await client.post(
            "/api/upload/image",
            files={"file": ("photo.jpg", PNG_BYTES, "image/jpeg")},
            headers=auth_headers("user-1"),
        )
    assert response.status_code == 201
    assert response.json()["url"].endswith(".png")
    sniff.assert_called_once()

    with patch("app.api.upload.detect_mime_type", return_value="text/plain"):
        response = await client.post(
            "/api/upload/image",
            files={"file": ("photo.png", b"hello", "image/png")},
            headers=auth_headers("user-1"),
        )
    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_IMAGE"


@pytest.mark.asyncio
async def test_upload_requires_authentication(client):
    response = await client.post("/api/upload/image", files={"file": ("a.png", PNG_BYTES, "image/png")})
    assert response.status_code == 401
