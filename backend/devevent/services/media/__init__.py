"""Media host (image upload) service."""

from .client import MediaClient, create_media_client, parse_upload_response
from .config import MediaConfig
from .exceptions import (
    MediaConfigError,
    MediaError,
    MediaResponseError,
    MediaUploadError,
)
from .models import UploadResult

__all__ = [
    "MediaClient",
    "create_media_client",
    "parse_upload_response",
    "MediaConfig",
    "UploadResult",
    "MediaError",
    "MediaConfigError",
    "MediaUploadError",
    "MediaResponseError",
]
