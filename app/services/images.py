"""
Listing image uploads. The service only validates type and size and picks
a storage path in the owner's scope; bytes go to the blob storage.
"""

import logging
import secrets
from typing import List, Sequence, Tuple

from app.core import error_codes
from app.core.config import settings
from app.core.exceptions import AuthorizationError, InputError, NotFoundError
from app.utils.file_handling import BlobStorage

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_MIME_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def validate_image(content_type: str, size: int) -> str:
    """Normalised MIME type of an acceptable image, else InputError."""
    mime_type = (content_type or "").lower()
    if mime_type not in ALLOWED_IMAGE_MIME_TYPES:
        raise InputError(
            "Invalid file type. Only JPEG, PNG, WebP, and GIF images are allowed.",
            error_codes.INVALID_IMAGE
        )
    if size <= 0:
        raise InputError("Uploaded file is empty.", error_codes.INVALID_IMAGE)
    if size > settings.MAX_LISTING_IMAGE_SIZE:
        raise InputError(
            f"File size exceeds {settings.MAX_LISTING_IMAGE_SIZE // (1024 * 1024)}MB limit.",
            error_codes.INVALID_IMAGE
        )
    return mime_type


def owner_prefix(owner_id: str) -> str:
    return settings.GCS_LISTING_IMAGE_BASE_PATH.format(user_id=owner_id).rstrip("/") + "/"


class ImageUploadService:
    def __init__(self, storage: BlobStorage):
        self.storage = storage

    async def upload_image(self, data: bytes, content_type: str, owner_id: str) -> str:
        mime_type = validate_image(content_type, len(data))
        blob_path = f"{owner_prefix(owner_id)}{secrets.token_hex(16)}.{ALLOWED_IMAGE_MIME_TYPES[mime_type]}"
        url = await self.storage.upload(data, mime_type, blob_path)
        logger.info(f"Uploaded listing image for {owner_id}: {blob_path}")
        return url

    async def upload_images(self, files: Sequence[Tuple[bytes, str]], owner_id: str) -> List[str]:
        if not files:
            raise InputError("No files uploaded", error_codes.INVALID_IMAGE)
        if len(files) > settings.MAX_IMAGES_PER_UPLOAD:
            raise InputError(
                f"Maximum {settings.MAX_IMAGES_PER_UPLOAD} images per upload",
                error_codes.INVALID_IMAGE
            )
        # Reject the whole batch before storing anything.
        for data, content_type in files:
            validate_image(content_type, len(data))
        return [await self.upload_image(data, content_type, owner_id) for data, content_type in files]

    async def delete_image(self, url: str, owner_id: str) -> None:
        try:
            blob_path = self.storage.path_from_url(url)
        except ValueError:
            raise InputError("Invalid image URL", error_codes.INVALID_IMAGE)
        if not blob_path.startswith(owner_prefix(owner_id)):
            raise AuthorizationError("You can only delete your own images")
        if not await self.storage.delete(url):
            raise NotFoundError("Image not found")
