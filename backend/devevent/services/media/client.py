"""Async wrapper for the Cloudinary upload SDK."""

import asyncio
import io
import logging
from typing import Any

import cloudinary.exceptions
import cloudinary.uploader
from pydantic import ValidationError

from .config import MediaConfig
from .exceptions import MediaConfigError, MediaResponseError, MediaUploadError
from .models import UploadResult

logger = logging.getLogger(__name__)


class MediaClient:
    """Uploads event images to Cloudinary and validates the response."""

    def __init__(self, config: MediaConfig | None = None):
        self.config = config or MediaConfig()
        logger.info("Initialized MediaClient")

    @property
    def is_configured(self) -> bool:
        return bool(
            self.config.cloud_name and self.config.api_key and self.config.api_secret
        )

    def _upload_sync(self, data: bytes, options: dict[str, Any]) -> Any:
        return cloudinary.uploader.upload(io.BytesIO(data), **options)

    async def upload_image(
        self,
        data: bytes,
        filename: str | None = None,
        folder: str | None = None,
    ) -> UploadResult:
        """
        Upload an image buffer.

        Args:
            data: Raw image bytes
            filename: Original filename, kept for the media host's records
            folder: Target folder, defaults to the configured one

        Raises:
            MediaConfigError: credentials are missing
            MediaUploadError: the SDK call failed
            MediaResponseError: the response carries no usable URL
        """
        if not self.is_configured:
            raise MediaConfigError("Cloudinary credentials are not configured")

        options: dict[str, Any] = {
            "resource_type": self.config.resource_type,
            "folder": folder or self.config.folder,
            "cloud_name": self.config.cloud_name,
            "api_key": self.config.api_key,
            "api_secret": self.config.api_secret,
            "secure": self.config.secure,
        }
        if filename:
            options["filename_override"] = filename

        logger.info(f"Uploading image ({len(data)} bytes) to folder '{options['folder']}'")

        try:
            raw = await asyncio.to_thread(self._upload_sync, data, options)
        except cloudinary.exceptions.Error as e:
            status_code = getattr(e, "http_code", None)
            raise MediaUploadError(f"Image upload failed: {e}", status_code=status_code) from e

        return parse_upload_response(raw)


def parse_upload_response(raw: Any) -> UploadResult:
    """Validate an untrusted upload response."""
    if not isinstance(raw, dict):
        raise MediaResponseError(
            f"Unexpected upload response type: {type(raw).__name__}"
        )
    try:
        return UploadResult.model_validate(raw)
    except ValidationError as e:
        raise MediaResponseError(f"Invalid upload response: {e}") from e


def create_media_client(
    cloud_name: str | None = None,
    api_key: str | None = None,
    api_secret: str | None = None,
    folder: str | None = None,
) -> MediaClient:
    """Create a MediaClient from individual credentials."""
    config = MediaConfig()
    if cloud_name:
        config.cloud_name = cloud_name
    if api_key:
        config.api_key = api_key
    if api_secret:
        config.api_secret = api_secret
    if folder:
        config.folder = folder
    return MediaClient(config=config)
