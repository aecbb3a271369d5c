from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from uuid import uuid4

import httpx
import pytest

from tutorhub.integrations.edge_functions import (
    SERVER_ERROR_MESSAGE,
    SLOT_TAKEN_MESSAGE,
    BookingCartItem,
    CreateBookingRequest,
    EdgeFunctionsClient,
    InitiateCheckoutRequest,
)
from tutorhub.modules.scheduling.service import search_remote_slots
from tutorhub.shared.exceptions import (
    AuthenticationException,
    ConflictException,
    NotFoundException,
    UpstreamServerException,
    ValidationException,
)


def make_client(handler, token: str | None = "user-token") -> EdgeFunctionsClient:
    return EdgeFunctionsClient(
        base_url="https://edge.example.test/functions/v1/",
        access_token=token,
        transport=httpx.MockTransport(handler),
    )


def booking_request() -> CreateBookingRequest:
    return CreateBookingRequest(
        cart_items=[
            BookingCartItem(
                id=uuid4(),
                teacher_id=uuid4(),
                subject_id=None,
                scheduled_time="2026-10-20T09:00:00+00:00",
                duration_minutes=30,
                price=Decimal("7.50"),
                lesson_tier="premium",
            )
        ],
        learner_id=uuid4(),
        promo_code="100HONOR",
    )


@pytest.mark.asyncio
async def test_booking_forwards_token_and_serializes_amounts() -> None:
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers.get("Authorization")
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "lessons": [{"id": "l1"}], "message": "ok"})

    async with make_client(handler) as client:
        response = await client.create_booking_with_room(booking_request())

    assert captured["url"] == "https://edge.example.test/functions/v1/create-booking-with-room"
    assert captured["auth"] == "Bearer user-token"
    assert captured["body"]["cart_items"][0]["price"] == 7.5
    assert captured["body"]["promo_code"] == "100HONOR"
    assert "payment_method" not in captured["body"]
    assert response.lessons == [{"id": "l1"}]


@pytest.mark.asyncio
async def test_missing_token_fails_before_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("request must not be sent")

    async with make_client(handler, token=None) as client:
        with pytest.raises(AuthenticationException):
            await client.create_booking_with_room(booking_request())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "exc_type"),
    [(409, ConflictException), (401, AuthenticationException), (404, NotFoundException)],
)
async def test_status_codes_map_to_app_exceptions(status_code: int, exc_type: type[Exception]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"error": "nope"})

    async with make_client(handler) as client:
        with pytest.raises(exc_type):
            await client.create_booking_with_room(booking_request())


@pytest.mark.asyncio
async def test_conflict_uses_slot_taken_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"error": "duplicate key"})

    async with make_client(handler) as client:
        with pytest.raises(ConflictException) as exc:
            await client.create_booking_with_room(booking_request())
    assert exc.value.message == SLOT_TAKEN_MESSAGE


@pytest.mark.asyncio
async def test_server_error_prefers_details() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "boom", "details": "room provider unavailable"})

    async with make_client(handler) as client:
        with pytest.raises(UpstreamServerException) as exc:
            await client.create_booking_with_room(booking_request())
    assert exc.value.message == "room provider unavailable"


@pytest.mark.asyncio
async def test_server_error_without_body_uses_generic_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="<html>bad gateway</html>")

    async with make_client(handler) as client:
        with pytest.raises(UpstreamServerException) as exc:
            await client.create_booking_with_room(booking_request())
    assert exc.value.message == SERVER_ERROR_MESSAGE


@pytest.mark.asyncio
async def test_malformed_success_body_is_upstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json")

    async with make_client(handler) as client:
        with pytest.raises(UpstreamServerException):
            await client.create_booking_with_room(booking_request())


@pytest.mark.asyncio
async def test_unsuccessful_booking_body_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "error": "Teacher unavailable"})

    async with make_client(handler) as client:
        with pytest.raises(UpstreamServerException) as exc:
            await client.create_booking_with_room(booking_request())
    assert exc.value.message == "Teacher unavailable"


@pytest.mark.asyncio
async def test_transport_failure_is_upstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(UpstreamServerException):
            await client.create_booking_with_room(booking_request())


@pytest.mark.asyncio
async def test_checkout_without_url_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": True})

    async with make_client(handler) as client:
        with pytest.raises(UpstreamServerException):
            await client.initiate_booking_checkout(InitiateCheckoutRequest(bookings=[]))


@pytest.mark.asyncio
async def test_remote_slot_search_sends_filters() -> None:
    captured: dict = {}
    teacher_id = uuid4()

    def handler(request: httpx.Request) -> httpx.Response:
        captured["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={
                "success": True,
                "slots": [
                    {
                        "teacher_id": str(teacher_id),
                        "date": "2026-10-20",
                        "time": "09:00",
                        "duration": 30,
                        "price": 7.5,
                    }
                ],
            },
        )

    async with make_client(handler) as client:
        response = await search_remote_slots(client, date(2026, 10, 19), date(2026, 10, 25), teacher_id, "quran")

    assert captured["params"] == {
        "from": "2026-10-19",
        "to": "2026-10-25",
        "teacher_id": str(teacher_id),
        "subject": "quran",
    }
    assert response.slots[0].teacher_id == teacher_id


@pytest.mark.asyncio
async def test_remote_slot_search_rejects_inverted_range() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("request must not be sent")

    async with make_client(handler) as client:
        with pytest.raises(ValidationException):
            await search_remote_slots(client, date(2026, 10, 25), date(2026, 10, 19), None, None)
