"""
Integration Test: Events API

Drives the FastAPI app through TestClient with the in-memory MongoDB fake
and a fake media host.

Test cases:
- Create → fetch → list round trip
- Slug validation on lookups
- Image validation on creation (presence, type, size)
- Upload failures and malformed upload responses
- Duplicate slugs, store outages
- Similar events, bookings and booking counts
"""

import json
from datetime import datetime, timezone

import pytest
from bson import ObjectId

from devevent.database import EVENTS_COLLECTION
from devevent.services.media import MediaResponseError, MediaUploadError
from tests.fakes import PNG_BYTES

FORM = {
    "slug": "my-talk",
    "title": "My Talk",
    "description": "A talk about systems languages",
    "overview": "Go and Rust side by side",
    "organizer": "PyLadies Berlin",
    "date": "2026-11-20",
    "time": "18:00",
    "location": "Berlin",
    "mode": "offline",
    "audience": "Developers",
    "tags": json.dumps(["go", "rust"]),
    "agenda": json.dumps(["intro", "demo"]),
}


def post_event(client, form=None, image=None, content_type="image/png"):
    files = None
    if image is not None:
        files = {"image": ("banner.png", image, content_type)}
    return client.post("/api/events", data=form if form is not None else FORM, files=files)


def fail_store(client, error: Exception) -> None:
    connections = client.app.state.connections
    database = connections._database
    database[EVENTS_COLLECTION].fail_with = error


def test_end_to_end_create_and_fetch(client, media) -> None:
    response = post_event(client, image=PNG_BYTES)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Event created successfully"
    assert body["event"]["slug"] == "my-talk"
    assert body["event"]["image"] == media.url
    assert body["event"]["tags"] == ["go", "rust"]
    assert body["event"]["agenda"] == ["intro", "demo"]
    assert body["event"]["_id"]
    assert media.uploads == [{"size": len(PNG_BYTES), "filename": "banner.png", "folder": "DevEvent"}]

    response = client.get("/api/events/my-talk")
    assert response.status_code == 200
    assert response.json()["message"] == "Event fetched successfully"
    assert response.json()["event"]["slug"] == "my-talk"

    response = client.get("/api/events/MY-TALK")
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid slug format"

    response = client.get("/api/events/unknown-slug")
    assert response.status_code == 404
    assert response.json()["message"] == "Event not found"
    assert "unknown-slug" in response.json()["error"]


def test_list_events_newest_first(client) -> None:
    for slug in ("first-event", "second-event"):
        assert post_event(client, form={**FORM, "slug": slug}, image=PNG_BYTES).status_code == 201

    # Pin timestamps so ordering does not depend on clock resolution
    documents = client.app.state.connections._database[EVENTS_COLLECTION].documents
    documents[0]["created_at"] = documents[1]["created_at"].replace(year=2020)

    response = client.get("/api/events")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Events fetched successfully"
    assert [e["slug"] for e in body["events"]] == ["second-event", "first-event"]


def test_list_events_empty(client) -> None:
    response = client.get("/api/events")
    assert response.status_code == 200
    assert response.json()["events"] == []


def test_partial_stored_event_is_served(client) -> None:
    assert post_event(client, image=PNG_BYTES).status_code == 201
    documents = client.app.state.connections._database[EVENTS_COLLECTION].documents
    documents.append(
        {
            "_id": ObjectId(),
            "slug": "partial-event",
            "title": "Partial",
            "description": None,
            "created_at": datetime.now(timezone.utc),
        }
    )

    response = client.get("/api/events")
    assert response.status_code == 200
    assert {e["slug"] for e in response.json()["events"]} == {"my-talk", "partial-event"}

    response = client.get("/api/events/partial-event")
    assert response.status_code == 200
    assert response.json()["event"]["description"] == ""


@pytest.mark.parametrize("slug", ["my_talk", "my--talk", "-my-talk", "my-talk-", "My-Talk"])
def test_malformed_slug_lookup_is_rejected(client, slug) -> None:
    response = client.get(f"/api/events/{slug}")

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid slug format"
    assert "lowercase" in response.json()["error"]


def test_blank_slug_lookup_is_rejected(client) -> None:
    response = client.get("/api/events/%20")

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid or missing slug parameter"


def test_create_without_image_is_rejected(client, media) -> None:
    response = post_event(client)

    assert response.status_code == 400
    assert response.json()["message"] == "Image file is required"
    assert media.uploads == []


def test_create_with_disallowed_type_is_rejected(client, media) -> None:
    response = post_event(client, image=b"%PDF-1.7", content_type="application/pdf")

    assert response.status_code == 400
    assert "Invalid file type" in response.json()["message"]
    assert media.uploads == []


def test_create_with_oversized_image_is_rejected(client, media) -> None:
    response = post_event(client, image=b"\x00" * (6 * 1024 * 1024))

    assert response.status_code == 400
    assert "exceeds" in response.json()["message"]
    assert media.uploads == []


def test_oversized_image_is_rejected_before_reading(client, monkeypatch) -> None:
    from starlette.datastructures import UploadFile

    reads = []
    original_read = UploadFile.read

    async def recording_read(self, size: int = -1) -> bytes:
        reads.append(size)
        return await original_read(self, size)

    monkeypatch.setattr(UploadFile, "read", recording_read)

    response = post_event(client, image=b"\x00" * (5 * 1024 * 1024 + 1))

    assert response.status_code == 400
    assert reads == []


def test_create_at_size_limit_is_accepted(client) -> None:
    response = post_event(client, image=b"\x00" * (5 * 1024 * 1024))
    assert response.status_code == 201


def test_create_with_invalid_fields_is_rejected(client, media) -> None:
    response = post_event(client, form={**FORM, "slug": "Bad Slug"}, image=PNG_BYTES)

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid event data"
    assert media.uploads == []


def test_create_derives_slug_from_title(client) -> None:
    form = {k: v for k, v in FORM.items() if k != "slug"}
    form["title"] = "Rust & Go Night 2026"

    response = post_event(client, form=form, image=PNG_BYTES)

    assert response.status_code == 201
    assert response.json()["event"]["slug"] == "rust-go-night-2026"


def test_create_accepts_csv_tags(client) -> None:
    response = post_event(client, form={**FORM, "tags": "go, rust"}, image=PNG_BYTES)

    assert response.status_code == 201
    assert response.json()["event"]["tags"] == ["go", "rust"]


def test_malformed_upload_response_is_500(client, media) -> None:
    media.error = MediaResponseError("Invalid upload response")

    response = post_event(client, image=PNG_BYTES)

    assert response.status_code == 500
    assert response.json()["message"] == "Image upload failed - invalid response"
    assert client.get("/api/events/my-talk").status_code == 404


def test_upload_failure_is_500_with_detail(client, media) -> None:
    media.error = MediaUploadError("Image upload failed: Invalid Signature")

    response = post_event(client, image=PNG_BYTES)

    assert response.status_code == 500
    assert response.json()["message"] == "Event Creation Failed"
    assert "Invalid Signature" in response.json()["error"]


def test_duplicate_slug_is_409(client) -> None:
    assert post_event(client, image=PNG_BYTES).status_code == 201

    response = post_event(client, form={**FORM, "title": "Another"}, image=PNG_BYTES)

    assert response.status_code == 409
    assert response.json()["message"] == "Event with this slug already exists"


def test_store_failure_on_lookup_hides_details(client) -> None:
    client.get("/api/events")  # connect
    fail_store(client, RuntimeError("connection reset by peer at 10.0.0.12"))

    response = client.get("/api/events/my-talk")

    assert response.status_code == 500
    assert response.json() == {"message": "Failed to fetch event"}


def test_store_failure_on_list_hides_details(client) -> None:
    client.get("/api/events")
    fail_store(client, RuntimeError("connection reset by peer"))

    response = client.get("/api/events")

    assert response.status_code == 500
    assert response.json() == {"message": "Event fetching failed"}


def test_unreachable_store_then_recovery(settings, client_factory, media) -> None:
    from fastapi.testclient import TestClient

    from devevent.api.server import create_app
    from devevent.database import ConnectionManager, ensure_indexes

    client_factory.reachable = False
    connections = ConnectionManager(
        uri=settings.mongodb_uri,
        database_name=settings.mongodb_database,
        client_factory=client_factory,
        on_connect=ensure_indexes,
    )
    app = create_app(settings, connections=connections, media_client=media)

    with TestClient(app) as client:
        assert client.get("/api/events/my-talk").status_code == 500
        assert client.get("/health").json()["database"] == "disconnected"

        client_factory.reachable = True
        assert client.get("/api/events/my-talk").status_code == 404
        assert client.get("/health").json()["status"] == "healthy"


def test_similar_events(client) -> None:
    post_event(client, image=PNG_BYTES)
    post_event(client, form={**FORM, "slug": "go-meetup", "tags": '["go"]'}, image=PNG_BYTES)
    post_event(client, form={**FORM, "slug": "figma-day", "tags": '["figma"]'}, image=PNG_BYTES)

    response = client.get("/api/events/my-talk/similar")

    assert response.status_code == 200
    assert [e["slug"] for e in response.json()["events"]] == ["go-meetup"]


def test_similar_events_rejects_bad_slug(client) -> None:
    assert client.get("/api/events/Bad_Slug/similar").status_code == 400


def test_booking_flow(client) -> None:
    post_event(client, image=PNG_BYTES)

    response = client.post("/api/events/my-talk/bookings", json={"email": "Ada@DevEvent.io"})
    assert response.status_code == 201
    assert response.json()["booking"]["email"] == "ada@devevent.io"
    assert response.json()["booking"]["slug"] == "my-talk"

    response = client.post("/api/events/my-talk/bookings", json={"email": "ada@devevent.io"})
    assert response.status_code == 409
    assert response.json()["message"] == "Already booked"

    response = client.get("/api/events/my-talk/bookings/count")
    assert response.status_code == 200
    assert response.json()["count"] == 1


def test_booking_unknown_event_is_404(client) -> None:
    response = client.post("/api/events/unknown-slug/bookings", json={"email": "ada@devevent.io"})
    assert response.status_code == 404


def test_booking_invalid_email_is_400(client) -> None:
    post_event(client, image=PNG_BYTES)

    response = client.post("/api/events/my-talk/bookings", json={"email": "nope"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request"


def test_health(client) -> None:
    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["service"] == "devevent-api"
