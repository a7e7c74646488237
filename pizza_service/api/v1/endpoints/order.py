"""
Menu + order endpoints.

- GET /order/menu is public.
- PUT /order/menu requires admin role.
- Orders are always scoped to the authenticated diner.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.api.v1.deps import get_current_user, get_db, get_identity
from pizza_service.core.config import settings
from pizza_service.core.exceptions import BadRequest
from pizza_service.core.permissions import Action, authorize
from pizza_service.core.receipts import create_order_receipt, decode_order_receipt
from pizza_service.crud import menu as menu_crud
from pizza_service.crud import orders as order_crud
from pizza_service.models.order import MenuItem
from pizza_service.models.user import User
from pizza_service.schemas.order import (
    MenuItemRead,
    MenuItemUpsert,
    OrderCreate,
    OrderCreated,
    OrderPage,
    OrderRead,
    ReceiptVerifyRequest,
    ReceiptVerifyResponse,
)
from pizza_service.schemas.token import Identity
from pizza_service.schemas.user import UserRef

router = APIRouter(prefix="/order", tags=["order"])
logger = logging.getLogger(__name__)


# ── Menu ────────────────────────────────────────────────────────────
@router.get("/menu", response_model=list[MenuItemRead])
async def get_menu(db: AsyncSession = Depends(get_db)) -> list[MenuItem]:
    return await menu_crud.list_menu(db)


@router.put("/menu", response_model=list[MenuItemRead])
async def upsert_menu_item(
    body: MenuItemUpsert,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> list[MenuItem]:
    """Add a pizza to the menu, or replace the one with the same title."""
    authorize(identity, Action.UPDATE_MENU)
    return await menu_crud.upsert_menu_item(db, body)


# ── Orders ──────────────────────────────────────────────────────────
@router.get("", response_model=OrderPage)
async def list_orders(
    page: int = Query(1, ge=1, le=settings.MAX_PAGE),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> OrderPage:
    orders = await order_crud.list_orders(db, current_user.id, page, settings.PAGE_SIZE)
    return OrderPage(
        diner_id=current_user.id,
        orders=[OrderRead.model_validate(o) for o in orders],
        page=page,
    )


@router.post("", response_model=OrderCreated)
async def create_order(
    body: OrderCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> OrderCreated:
    """Place an order and hand back a signed receipt for it."""
    order = OrderRead.model_validate(await order_crud.create_order(db, current_user.id, body))
    receipt = create_order_receipt(
        order.model_dump(mode="json", by_alias=True),
        UserRef.model_validate(current_user).model_dump(mode="json"),
    )
    return OrderCreated(order=order, jwt=receipt)


@router.post("/verify", response_model=ReceiptVerifyResponse)
async def verify_receipt(
    body: ReceiptVerifyRequest,
    _identity: Identity = Depends(get_identity),
) -> ReceiptVerifyResponse:
    """Check that a receipt was issued by this service."""
    claims = decode_order_receipt(body.jwt)
    if claims is None:
        raise BadRequest("invalid receipt")
    return ReceiptVerifyResponse(message="valid", payload=claims)
