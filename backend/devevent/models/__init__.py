"""Document and request models."""

from devevent.models.booking import Booking, BookingCreate
from devevent.models.common import BaseSchema, DocumentSchema
from devevent.models.event import (
    DISPLAY_FIELDS,
    Event,
    EventCreate,
    EventFields,
    missing_display_fields,
)

__all__ = [
    "BaseSchema",
    "DocumentSchema",
    "Booking",
    "BookingCreate",
    "DISPLAY_FIELDS",
    "Event",
    "EventCreate",
    "EventFields",
    "missing_display_fields",
]
