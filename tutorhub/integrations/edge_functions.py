"""HTTP client for the remote booking/payment edge functions."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Annotated, Any, TypeVar
from uuid import UUID

import httpx
from fastapi import Depends
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, ValidationError

from tutorhub.core.config import get_settings
from tutorhub.core.security import oauth2_scheme
from tutorhub.shared.exceptions import (
    AuthenticationException,
    ConflictException,
    NotFoundException,
    UpstreamServerException,
)

logger = logging.getLogger(__name__)
settings = get_settings()

CREATE_BOOKING_ENDPOINT = "create-booking-with-room"
INITIATE_CHECKOUT_ENDPOINT = "initiate-booking-checkout"
AVAILABLE_SLOTS_ENDPOINT = "get-available-slots"

SLOT_TAKEN_MESSAGE = "This time slot is no longer available. Another student may have just booked it."
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please refresh the page and try again."
NOT_FOUND_MESSAGE = "The requested resource was not found."
SERVER_ERROR_MESSAGE = "Server error. Please try again in a few moments."
REQUEST_FAILED_MESSAGE = "Request failed. Please try again."

ResponseT = TypeVar("ResponseT", bound=BaseModel)

# Edge functions expect JSON numbers for amounts.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class _EdgeModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class BookingCartItem(_EdgeModel):
    """Cart line as the booking function expects it."""

    id: UUID
    teacher_id: UUID
    subject_id: UUID | None
    scheduled_time: str
    duration_minutes: int
    price: Money
    lesson_tier: str


class CreateBookingRequest(_EdgeModel):
    cart_items: list[BookingCartItem]
    learner_id: UUID
    promo_code: str | None = None
    payment_method: str | None = None


class CreateBookingResponse(_EdgeModel):
    success: bool = False
    lessons: list[dict[str, Any]] = Field(default_factory=list)
    message: str | None = None
    error: str | None = None


class CheckoutBooking(_EdgeModel):
    """Single priced session inside a checkout request."""

    teacher_id: UUID
    subject_id: UUID | None
    date: str
    time: str
    subject: str
    duration: int
    price: Money


class InitiateCheckoutRequest(_EdgeModel):
    bookings: list[CheckoutBooking]
    metadata: dict[str, Any] = Field(default_factory=dict)


class InitiateCheckoutResponse(_EdgeModel):
    success: bool = False
    checkout_url: str | None = None
    session_id: str | None = None
    pending_booking_id: str | None = None
    total_amount: Decimal | None = None
    session_count: int | None = None
    error: str | None = None


class RemoteSlot(_EdgeModel):
    id: str | None = None
    teacher_id: UUID
    teacher_name: str | None = None
    teacher_avatar: str | None = None
    teacher_rating: float | None = None
    date: str
    time: str
    duration: int
    subject: str | None = None
    price: Decimal | None = None


class AvailableSlotsResponse(_EdgeModel):
    success: bool = True
    slots: list[RemoteSlot] = Field(default_factory=list)


def _error_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def raise_for_edge_status(response: httpx.Response) -> None:
    """Translate an unsuccessful edge function response into an app exception."""
    if response.is_success:
        return

    body = _error_body(response)
    status_code = response.status_code
    if status_code == 409:
        raise ConflictException(SLOT_TAKEN_MESSAGE)
    if status_code == 401:
        raise AuthenticationException(SESSION_EXPIRED_MESSAGE)
    if status_code == 404:
        raise NotFoundException(NOT_FOUND_MESSAGE)
    if status_code >= 500:
        raise UpstreamServerException(body.get("details") or body.get("error") or SERVER_ERROR_MESSAGE)
    raise UpstreamServerException(body.get("error") or REQUEST_FAILED_MESSAGE)


class EdgeFunctionsClient:
    """Thin async wrapper over the edge function endpoints.

    The caller's bearer token is forwarded on every request. Calls are never
    retried; transport failures surface as ``UpstreamServerException``.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str | None,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        self._access_token = access_token
        self._client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/",
            headers=headers,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "EdgeFunctionsClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        response_model: type[ResponseT],
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> ResponseT:
        if not self._access_token:
            raise AuthenticationException("User not authenticated. Please log in to continue.")

        try:
            response = await self._client.request(method, endpoint, json=json, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Edge function %s request failed: %s", endpoint, exc)
            raise UpstreamServerException(SERVER_ERROR_MESSAGE) from exc

        raise_for_edge_status(response)

        try:
            return response_model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.error("Edge function %s returned malformed body (status=%s)", endpoint, response.status_code)
            raise UpstreamServerException(f"Malformed response from {endpoint}") from exc

    async def create_booking_with_room(self, request: CreateBookingRequest) -> CreateBookingResponse:
        """Create lessons (and video rooms) for the given cart items."""
        result = await self._request(
            "POST",
            CREATE_BOOKING_ENDPOINT,
            CreateBookingResponse,
            json=request.model_dump(mode="json", exclude_none=True),
        )
        if result.error or not result.success:
            raise UpstreamServerException(result.error or "Failed to create booking")
        return result

    async def initiate_booking_checkout(self, request: InitiateCheckoutRequest) -> InitiateCheckoutResponse:
        """Open a hosted payment session for the priced bookings."""
        result = await self._request(
            "POST",
            INITIATE_CHECKOUT_ENDPOINT,
            InitiateCheckoutResponse,
            json=request.model_dump(mode="json"),
        )
        if not result.success or not result.checkout_url:
            raise UpstreamServerException(result.error or "Failed to initiate checkout")
        return result

    async def get_available_slots(
        self,
        date_from: date | None = None,
        date_to: date | None = None,
        teacher_id: UUID | None = None,
        subject: str | None = None,
    ) -> AvailableSlotsResponse:
        """Query the remote slot search."""
        params: dict[str, str] = {}
        if date_from is not None:
            params["from"] = date_from.isoformat()
        if date_to is not None:
            params["to"] = date_to.isoformat()
        if teacher_id is not None:
            params["teacher_id"] = str(teacher_id)
        if subject:
            params["subject"] = subject
        return await self._request("GET", AVAILABLE_SLOTS_ENDPOINT, AvailableSlotsResponse, params=params)


async def get_edge_functions_client(token: str | None = Depends(oauth2_scheme)):
    """Request-scoped client forwarding the caller's bearer token."""
    client = EdgeFunctionsClient(
        base_url=settings.functions_base_url,
        access_token=token,
        timeout_seconds=settings.functions_timeout_seconds,
    )
    try:
        yield client
    finally:
        await client.aclose()
