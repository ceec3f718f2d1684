"""Booking API routes."""

import logging

from fastapi import APIRouter, Depends, status

from devevent.api.dependencies import get_booking_repository, get_event_repository
from devevent.api.responses import envelope
from devevent.api.routes.events import check_slug
from devevent.database import BookingRepository, DuplicateBookingError, EventRepository
from devevent.models import BookingCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["Bookings"])


@router.post("/{slug}/bookings")
async def create_booking(
    slug: str,
    payload: BookingCreate,
    events: EventRepository = Depends(get_event_repository),
    bookings: BookingRepository = Depends(get_booking_repository),
):
    """Book a spot on an event for an email address."""
    invalid = check_slug(slug)
    if invalid is not None:
        return invalid

    try:
        event = await events.find_by_slug(slug)
        if event is None:
            return envelope(
                status.HTTP_404_NOT_FOUND,
                "Event not found",
                error=f"No event exists with slug: {slug}",
            )

        booking = await bookings.create(event, payload.email)

    except DuplicateBookingError:
        return envelope(
            status.HTTP_409_CONFLICT,
            "Already booked",
            error="This email has already booked this event",
        )
    except Exception:
        logger.exception(f"Booking creation failed for '{slug}'")
        return envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Booking creation failed")

    return envelope(status.HTTP_201_CREATED, "Booking created successfully", booking=booking)


@router.get("/{slug}/bookings/count")
async def count_bookings(
    slug: str,
    events: EventRepository = Depends(get_event_repository),
    bookings: BookingRepository = Depends(get_booking_repository),
):
    """Number of bookings for an event."""
    invalid = check_slug(slug)
    if invalid is not None:
        return invalid

    try:
        event = await events.find_by_slug(slug)
        if event is None:
            return envelope(
                status.HTTP_404_NOT_FOUND,
                "Event not found",
                error=f"No event exists with slug: {slug}",
            )
        count = await bookings.count_for_event(event)
    except Exception:
        logger.exception(f"Error counting bookings for '{slug}'")
        return envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to count bookings")

    return envelope(status.HTTP_200_OK, "Bookings counted successfully", count=count)
