import asyncio
import json
import logging
from abc import ABC, abstractmethod
from functools import lru_cache

from google.cloud import storage
from google.oauth2 import service_account

from app.core import error_codes
from app.core.config import settings
from app.core.exceptions import DependencyError

logger = logging.getLogger(__name__)


def detect_mime_type(data: bytes) -> str:
    """Sniff the real content type from the leading bytes."""
    import magic

    return magic.from_buffer(data[:2048], mime=True)


class BlobStorage(ABC):
    """Stores uploaded files and serves them from public URLs."""

    @abstractmethod
    async def upload(self, data: bytes, content_type: str, blob_path: str) -> str:
        """Store `data` at `blob_path` and return its public URL."""

    @abstractmethod
    async def delete(self, url: str) -> bool:
        """Delete the file behind a public URL; False if it does not exist."""

    @abstractmethod
    def path_from_url(self, url: str) -> str:
        """Bucket-relative path for a public URL; ValueError if foreign."""


class GCSBlobStorage(BlobStorage):
    def __init__(self):
        try:
            if settings.GCS_CREDENTIALS_JSON:
                credentials = service_account.Credentials.from_service_account_info(
                    json.loads(settings.GCS_CREDENTIALS_JSON)
                )
                client = storage.Client(credentials=credentials, project=settings.GCS_PROJECT_ID)
            else:
                client = storage.Client(project=settings.GCS_PROJECT_ID)
            self.bucket = client.bucket(settings.GCS_BUCKET_NAME)
        except Exception as e:
            logger.error(f"Failed to initialize GCS client: {str(e)}")
            raise DependencyError("Cloud storage is unavailable", error_codes.STORAGE_UNAVAILABLE)

    def path_from_url(self, url: str) -> str:
        prefix = f"{settings.GCS_PUBLIC_BASE_URL}/"
        if not url.startswith(prefix):
            raise ValueError(f"Not a URL in bucket {settings.GCS_BUCKET_NAME}")
        return url[len(prefix):]

    async def upload(self, data: bytes, content_type: str, blob_path: str) -> str:
        blob = self.bucket.blob(blob_path)
        blob.cache_control = "public, max-age=31536000"
        try:
            await asyncio.to_thread(blob.upload_from_string, data, content_type=content_type)
        except Exception as e:
            logger.error(f"File upload to {blob_path} failed: {str(e)}", exc_info=True)
            raise DependencyError("Failed to store image", error_codes.STORAGE_UNAVAILABLE)
        return f"{settings.GCS_PUBLIC_BASE_URL}/{blob_path}"

    async def delete(self, url: str) -> bool:
        blob_path = self.path_from_url(url)
        blob = self.bucket.blob(blob_path)
        try:
            if not await asyncio.to_thread(blob.exists):
                logger.warning(f"File not found: {blob_path}")
                return False
            await asyncio.to_thread(blob.delete)
            logger.info(f"Deleted file: {blob_path}")
            return True
        except Exception as e:
            logger.error(f"File deletion of {blob_path} failed: {str(e)}", exc_info=True)
            raise DependencyError("Failed to delete image", error_codes.STORAGE_UNAVAILABLE)


@lru_cache
def get_blob_storage() -> BlobStorage:
    return GCSBlobStorage()
