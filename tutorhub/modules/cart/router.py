"""Cart API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from tutorhub.modules.cart.schemas import CartItemCreate, CartRead, CartToggleRead
from tutorhub.modules.cart.service import CartService, get_cart_service
from tutorhub.modules.identity.service import get_current_user

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartRead)
async def get_cart(
    dismissed: list[UUID] | None = Query(default=None),
    service: CartService = Depends(get_cart_service),
    current_user=Depends(get_current_user),
) -> CartRead:
    """Refresh cart; ``dismissed`` lists notification ids the client has hidden."""
    summary, notifications = await service.get_cart(current_user, dismissed or ())
    return CartRead.from_summary(summary, notifications)


@router.post("/items", response_model=CartRead, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    payload: CartItemCreate,
    service: CartService = Depends(get_cart_service),
    current_user=Depends(get_current_user),
) -> CartRead:
    """Reserve slot in cart."""
    return CartRead.from_summary(await service.add_to_cart(payload, current_user))


@router.post("/items/toggle", response_model=CartToggleRead)
async def toggle_slot(
    payload: CartItemCreate,
    service: CartService = Depends(get_cart_service),
    current_user=Depends(get_current_user),
) -> CartToggleRead:
    """Add slot, or remove it if already reserved."""
    added, summary = await service.toggle_slot(payload, current_user)
    return CartToggleRead(added=added, cart=CartRead.from_summary(summary))


@router.delete("/items/{item_id}", response_model=CartRead)
async def remove_from_cart(
    item_id: UUID,
    service: CartService = Depends(get_cart_service),
    current_user=Depends(get_current_user),
) -> CartRead:
    return CartRead.from_summary(await service.remove_from_cart(item_id, current_user))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(
    service: CartService = Depends(get_cart_service),
    current_user=Depends(get_current_user),
) -> Response:
    await service.clear_cart(current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
