"""Events API routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from devevent.api.dependencies import (
    get_event_repository,
    get_media_client,
    get_settings_dep,
)
from devevent.api.responses import envelope
from devevent.config import Settings
from devevent.database import DuplicateSlugError, EventRepository
from devevent.models import EventCreate
from devevent.services.media import MediaClient, MediaError, MediaResponseError
from devevent.utils import SLUG_RULE, is_valid_slug

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["Events"])


def check_slug(slug: Optional[str]) -> Optional[JSONResponse]:
    """Return a 400 response for a blank or malformed slug, else None."""
    if not slug or not slug.strip():
        return envelope(
            status.HTTP_400_BAD_REQUEST,
            "Invalid or missing slug parameter",
        )
    if not is_valid_slug(slug):
        return envelope(
            status.HTTP_400_BAD_REQUEST,
            "Invalid slug format",
            error=SLUG_RULE,
        )
    return None


def format_validation_error(exc: ValidationError) -> str:
    """Flatten pydantic errors into one readable line."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err["loc"]) or "event"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


@router.get("")
async def list_events(events: EventRepository = Depends(get_event_repository)):
    """List all events, newest first."""
    try:
        items = await events.list_all()
    except Exception:
        logger.exception("Error fetching events")
        return envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Event fetching failed")

    return envelope(status.HTTP_200_OK, "Events fetched successfully", events=items)


@router.post("")
async def create_event(
    request: Request,
    settings: Settings = Depends(get_settings_dep),
    events: EventRepository = Depends(get_event_repository),
    media: MediaClient = Depends(get_media_client),
):
    """
    Create an event from a multipart form.

    The form carries the event fields, an `image` file and tags/agenda as
    JSON-encoded strings. The image is validated and uploaded before the
    event is stored.
    """
    try:
        form = await request.form()

        image = form.get("image")
        if not isinstance(image, UploadFile):
            return envelope(status.HTTP_400_BAD_REQUEST, "Image file is required")

        uploads = settings.uploads
        if image.content_type not in uploads.allowed_types:
            return envelope(
                status.HTTP_400_BAD_REQUEST,
                "Invalid file type. Only images are allowed.",
            )

        too_large = f"File size exceeds {uploads.max_bytes // (1024 * 1024)}MB limit."
        # The multipart parser records the size; read only within the limit
        if image.size is not None and image.size > uploads.max_bytes:
            return envelope(status.HTTP_400_BAD_REQUEST, too_large)

        data = await image.read(uploads.max_bytes + 1)
        if len(data) > uploads.max_bytes:
            return envelope(status.HTTP_400_BAD_REQUEST, too_large)

        raw_fields = {
            key: value
            for key, value in form.items()
            if key != "image" and isinstance(value, str)
        }
        try:
            fields = EventCreate.model_validate(raw_fields)
        except ValidationError as e:
            return envelope(
                status.HTTP_400_BAD_REQUEST,
                "Invalid event data",
                error=format_validation_error(e),
            )

        try:
            upload = await media.upload_image(
                data, filename=image.filename, folder=uploads.folder
            )
        except MediaResponseError:
            logger.exception("Image upload returned an invalid response")
            return envelope(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Image upload failed - invalid response",
            )
        except MediaError as e:
            logger.exception("Image upload failed")
            return envelope(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Event Creation Failed",
                error=str(e),
            )

        fields.image = upload.secure_url
        created = await events.create(fields)

        return envelope(
            status.HTTP_201_CREATED, "Event created successfully", event=created
        )

    except DuplicateSlugError as e:
        logger.info(str(e))
        return envelope(
            status.HTTP_409_CONFLICT,
            "Event with this slug already exists",
            error=str(e),
        )
    except Exception as e:
        logger.exception("Event creation failed")
        return envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Event Creation Failed",
            error=str(e) or "Unknown",
        )


@router.get("/{slug}")
async def get_event(slug: str, events: EventRepository = Depends(get_event_repository)):
    """Fetch a single event by its slug."""
    invalid = check_slug(slug)
    if invalid is not None:
        return invalid

    try:
        event = await events.find_by_slug(slug)
    except Exception:
        logger.exception(f"Error fetching event by slug '{slug}'")
        return envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch event")

    if event is None:
        return envelope(
            status.HTTP_404_NOT_FOUND,
            "Event not found",
            error=f"No event exists with slug: {slug}",
        )

    return envelope(status.HTTP_200_OK, "Event fetched successfully", event=event)


@router.get("/{slug}/similar")
async def get_similar_events(
    slug: str,
    events: EventRepository = Depends(get_event_repository),
):
    """Events sharing at least one tag with the given event."""
    invalid = check_slug(slug)
    if invalid is not None:
        return invalid

    try:
        similar = await events.find_similar(slug)
    except Exception:
        logger.exception(f"Error fetching events similar to '{slug}'")
        return envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch similar events"
        )

    return envelope(
        status.HTTP_200_OK, "Similar events fetched successfully", events=similar
    )
