"""
Menu catalog — global, not owned by any franchise.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.models.order import MenuItem
from pizza_service.schemas.order import MenuItemUpsert

logger = logging.getLogger(__name__)

DEFAULT_MENU = [
    {"title": "Veggie", "description": "A garden of delight", "image": "pizza1.png", "price": 0.0038},
    {"title": "Pepperoni", "description": "Spicy treat", "image": "pizza2.png", "price": 0.0042},
    {"title": "Margarita", "description": "Essential classic", "image": "pizza3.png", "price": 0.0042},
    {"title": "Crusty", "description": "A dry mouthed favorite", "image": "pizza4.png", "price": 0.0028},
    {"title": "Charred Leopard", "description": "For those with a darker side", "image": "pizza5.png", "price": 0.0099},
]


async def list_menu(db: AsyncSession) -> list[MenuItem]:
    result = await db.execute(select(MenuItem).order_by(MenuItem.id))
    return list(result.scalars().all())


async def upsert_menu_item(db: AsyncSession, body: MenuItemUpsert) -> list[MenuItem]:
    """Insert a menu item, or overwrite the one with the same title.

    Returns the whole menu afterwards.
    """
    result = await db.execute(select(MenuItem).where(MenuItem.title == body.title))
    item = result.scalar_one_or_none()
    if item is None:
        item = MenuItem(**body.model_dump())
        db.add(item)
        logger.info("Menu item added: %s", body.title)
    else:
        item.description = body.description
        item.image = body.image
        item.price = body.price
        logger.info("Menu item updated: %s", body.title)
    await db.commit()
    return await list_menu(db)


async def seed_default_menu(db: AsyncSession) -> int:
    """Populate an empty menu with the house pizzas. Returns rows added."""
    if await list_menu(db):
        return 0
    db.add_all(MenuItem(**entry) for entry in DEFAULT_MENU)
    await db.commit()
    return len(DEFAULT_MENU)
