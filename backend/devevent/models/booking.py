"""Booking models."""

from typing import Any

from bson import ObjectId
from pydantic import EmailStr, field_validator

from devevent.models.common import BaseSchema, DocumentSchema


class BookingCreate(BaseSchema):
    """Booking request body."""

    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class Booking(DocumentSchema):
    """Stored booking document."""

    event_id: str
    slug: str
    email: str

    @field_validator("event_id", mode="before")
    @classmethod
    def stringify_event_id(cls, v: Any) -> Any:
        if isinstance(v, ObjectId):
            return str(v)
        return v
