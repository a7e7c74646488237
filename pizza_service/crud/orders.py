"""
Diner orders — create-only, listed newest-last one page at a time.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.core.exceptions import NotFound
from pizza_service.models.franchise import Store
from pizza_service.models.order import MenuItem, Order, OrderItem
from pizza_service.schemas.order import OrderCreate

logger = logging.getLogger(__name__)


async def list_orders(db: AsyncSession, diner_id: int, page: int, page_size: int) -> list[Order]:
    """Return page *page* (1-based) of a diner's orders in id order."""
    result = await db.execute(
        select(Order)
        .where(Order.diner_id == diner_id)
        .order_by(Order.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(result.scalars().all())


async def create_order(db: AsyncSession, diner_id: int, body: OrderCreate) -> Order:
    """Persist an order after checking the store, franchise and menu items exist."""
    store = (
        await db.execute(select(Store).where(Store.id == body.store_id))
    ).scalar_one_or_none()
    if store is None or store.franchise_id != body.franchise_id:
        raise NotFound("unknown franchise or store")

    menu_ids = sorted({item.menu_id for item in body.items})
    known = set(
        (await db.execute(select(MenuItem.id).where(MenuItem.id.in_(menu_ids)))).scalars().all()
    )
    missing = [m for m in menu_ids if m not in known]
    if missing:
        raise NotFound(f"unknown menu item(s): {', '.join(map(str, missing))}")

    order = Order(
        diner_id=diner_id,
        franchise_id=body.franchise_id,
        store_id=body.store_id,
        items=[
            OrderItem(menu_id=item.menu_id, description=item.description, price=item.price)
            for item in body.items
        ],
    )
    db.add(order)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(order, attribute_names=["items"])
    logger.info(
        "Order %s placed by diner %s at store %s (%d items)",
        order.id, diner_id, body.store_id, len(body.items),
    )
    return order
