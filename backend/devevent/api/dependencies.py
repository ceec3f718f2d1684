"""
FastAPI dependency injection.
Shared services live on app.state and are handed to routes from here.
"""

from fastapi import Request

from devevent.config import Settings
from devevent.database import BookingRepository, EventRepository
from devevent.services.media import MediaClient


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_event_repository(request: Request) -> EventRepository:
    return EventRepository(request.app.state.connections)


def get_booking_repository(request: Request) -> BookingRepository:
    return BookingRepository(request.app.state.connections)


def get_media_client(request: Request) -> MediaClient:
    return request.app.state.media_client
