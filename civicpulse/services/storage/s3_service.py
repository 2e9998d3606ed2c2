# Standard library imports
from datetime import UTC, datetime
from io import BytesIO
import re
from uuid import UUID

# Third-party imports
from fastapi.concurrency import run_in_threadpool
from minio import Minio
from minio.error import S3Error
from urllib3.exceptions import HTTPError as Urllib3HTTPError

# Local application imports
from civicpulse.core.exceptions import BackendError, ValidationFailedError
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.settings import settings

logger = get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

STORAGE_ERRORS = (S3Error, Urllib3HTTPError)


def validate_image(content_type: str | None, size: int) -> None:
    if content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise ValidationFailedError("Invalid file type. Only JPEG, PNG and GIF images are allowed")
    if size > settings.MAX_IMAGE_SIZE:
        raise ValidationFailedError(
            f"Please select an image smaller than {settings.MAX_IMAGE_SIZE // (1024 * 1024)}MB"
        )


def build_image_key(user_id: UUID, filename: str | None) -> str:
    safe_name = _UNSAFE_FILENAME_CHARS.sub("-", filename or "image").strip("-") or "image"
    timestamp = int(datetime.now(UTC).timestamp() * 1000)
    return f"{user_id}/{timestamp}-{safe_name}"


class S3Service:
    """Public bucket holding issue photos."""

    def __init__(self):
        self.client = Minio(
            settings.S3_URL.replace("http://", "").replace("https://", ""),
            access_key=settings.S3_ACCESS_KEY_ID,
            secret_key=settings.S3_SECRET_ACCESS_KEY,
            secure=settings.S3_SECURE,
        )
        self.bucket_name = settings.S3_PUBLIC_BUCKET_NAME
        self._ensure_bucket_exists()

    def _ensure_bucket_exists(self):
        """Ensure the bucket exists, create if not"""
        try:
            if not self.client.bucket_exists(self.bucket_name):
                self.client.make_bucket(self.bucket_name)
        except STORAGE_ERRORS as e:
            logger.error(f"Error reaching bucket {self.bucket_name}: {e}")
            raise BackendError("Image storage is unavailable") from e

    def public_url(self, file_key: str) -> str:
        return f"{settings.S3_URL.rstrip('/')}/{self.bucket_name}/{file_key}"

    async def upload_file(self, file_data: bytes, file_key: str, content_type: str | None = None) -> str:
        """Upload file and return its public URL"""
        try:
            await run_in_threadpool(
                self.client.put_object,
                self.bucket_name,
                file_key,
                BytesIO(file_data),
                len(file_data),
                content_type=content_type or "application/octet-stream",
            )
        except STORAGE_ERRORS as e:
            logger.error(f"Error uploading image {file_key}: {e}")
            raise BackendError("Could not upload the image") from e

        return self.public_url(file_key)


def get_storage_service() -> S3Service:
    """FastAPI dependency; overridden in tests."""
    return S3Service()
