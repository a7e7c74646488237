"""
Franchises and stores — listing with admins and revenue, plus their lifecycle.

Deleting a franchise or a store removes everything hanging off it inside
a single transaction: order items, orders, stores, franchisee roles.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.core.exceptions import Conflict, NotFound
from pizza_service.models.franchise import Franchise, Store
from pizza_service.models.order import Order, OrderItem
from pizza_service.models.user import Role, User, UserRole
from pizza_service.schemas.franchise import FranchiseCreate, FranchiseRead, StoreRead
from pizza_service.schemas.user import UserRef

logger = logging.getLogger(__name__)


# ── Read side ───────────────────────────────────────────────────────
async def _admins_by_franchise(
    db: AsyncSession, franchise_ids: Sequence[int]
) -> dict[int, list[UserRef]]:
    result = await db.execute(
        select(UserRole.object_id, User.id, User.name, User.email)
        .join(User, User.id == UserRole.user_id)
        .where(
            UserRole.role == Role.FRANCHISEE.value,
            UserRole.object_id.in_(franchise_ids),
        )
        .order_by(User.id)
    )
    admins: dict[int, list[UserRef]] = defaultdict(list)
    for franchise_id, user_id, name, email in result.all():
        admins[franchise_id].append(UserRef(id=user_id, name=name, email=email))
    return admins


async def _revenue_by_store(db: AsyncSession, store_ids: Sequence[int]) -> dict[int, float]:
    if not store_ids:
        return {}
    result = await db.execute(
        select(Order.store_id, func.coalesce(func.sum(OrderItem.price), 0))
        .join(OrderItem, OrderItem.order_id == Order.id)
        .where(Order.store_id.in_(store_ids))
        .group_by(Order.store_id)
    )
    return {store_id: float(total) for store_id, total in result.all()}


async def _describe(db: AsyncSession, franchises: Sequence[Franchise]) -> list[FranchiseRead]:
    """Attach admins and per-store revenue to a batch of franchises."""
    if not franchises:
        return []
    admins = await _admins_by_franchise(db, [f.id for f in franchises])
    revenue = await _revenue_by_store(db, [s.id for f in franchises for s in f.stores])
    return [
        FranchiseRead(
            id=f.id,
            name=f.name,
            admins=admins.get(f.id, []),
            stores=[
                StoreRead(id=s.id, name=s.name, total_revenue=revenue.get(s.id, 0.0))
                for s in f.stores
            ],
        )
        for f in franchises
    ]


async def get_franchise(db: AsyncSession, franchise_id: int) -> Franchise:
    result = await db.execute(select(Franchise).where(Franchise.id == franchise_id))
    franchise = result.scalar_one_or_none()
    if franchise is None:
        raise NotFound("unknown franchise")
    return franchise


async def list_franchises(
    db: AsyncSession, page: int, limit: int, name: str = "*"
) -> list[FranchiseRead]:
    """Page through franchises whose name matches *name* (``*`` is a wildcard)."""
    stmt = select(Franchise).order_by(Franchise.id)
    if name and name != "*":
        stmt = stmt.where(Franchise.name.like(name.replace("*", "%")))
    result = await db.execute(stmt.offset((page - 1) * limit).limit(limit))
    return await _describe(db, result.scalars().all())


async def list_user_franchises(db: AsyncSession, user_id: int) -> list[FranchiseRead]:
    franchise_ids = select(UserRole.object_id).where(
        UserRole.user_id == user_id,
        UserRole.role == Role.FRANCHISEE.value,
    )
    result = await db.execute(
        select(Franchise).where(Franchise.id.in_(franchise_ids)).order_by(Franchise.id)
    )
    return await _describe(db, result.scalars().all())


# ── Franchise lifecycle ─────────────────────────────────────────────
async def create_franchise(db: AsyncSession, body: FranchiseCreate) -> FranchiseRead:
    """Create a franchise and make each listed user one of its admins."""
    existing = await db.execute(select(Franchise.id).where(Franchise.name == body.name))
    if existing.first() is not None:
        raise Conflict("franchise name already in use")

    admins: list[User] = []
    for email in dict.fromkeys(ref.email for ref in body.admins):
        user = (
            await db.execute(select(User).where(User.email == email))
        ).scalar_one_or_none()
        if user is None:
            raise NotFound(f"unknown user for franchise admin {email} provided")
        admins.append(user)

    franchise = Franchise(name=body.name)
    db.add(franchise)
    try:
        await db.flush()
        for user in admins:
            if not user.has_role(Role.FRANCHISEE, franchise.id):
                db.add(
                    UserRole(user_id=user.id, role=Role.FRANCHISEE.value, object_id=franchise.id)
                )
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Franchise %s created with %d admin(s)", franchise.id, len(admins))
    return FranchiseRead(
        id=franchise.id,
        name=franchise.name,
        admins=[UserRef(id=u.id, name=u.name, email=u.email) for u in admins],
        stores=[],
    )


async def delete_franchise(db: AsyncSession, franchise_id: int) -> None:
    await get_franchise(db, franchise_id)
    order_ids = select(Order.id).where(Order.franchise_id == franchise_id)
    try:
        await db.execute(delete(OrderItem).where(OrderItem.order_id.in_(order_ids)))
        await db.execute(delete(Order).where(Order.franchise_id == franchise_id))
        await db.execute(delete(Store).where(Store.franchise_id == franchise_id))
        await db.execute(
            delete(UserRole).where(
                UserRole.role == Role.FRANCHISEE.value,
                UserRole.object_id == franchise_id,
            )
        )
        await db.execute(delete(Franchise).where(Franchise.id == franchise_id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Franchise %s deleted", franchise_id)


# ── Store lifecycle ─────────────────────────────────────────────────
async def create_store(db: AsyncSession, franchise_id: int, name: str) -> Store:
    await get_franchise(db, franchise_id)
    store = Store(franchise_id=franchise_id, name=name)
    db.add(store)
    await db.commit()
    logger.info("Store %s created for franchise %s", store.id, franchise_id)
    return store


async def delete_store(db: AsyncSession, franchise_id: int, store_id: int) -> None:
    result = await db.execute(
        select(Store.id).where(Store.id == store_id, Store.franchise_id == franchise_id)
    )
    if result.first() is None:
        raise NotFound("unknown store")
    order_ids = select(Order.id).where(Order.store_id == store_id)
    try:
        await db.execute(delete(OrderItem).where(OrderItem.order_id.in_(order_ids)))
        await db.execute(delete(Order).where(Order.store_id == store_id))
        await db.execute(delete(Store).where(Store.id == store_id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Store %s deleted from franchise %s", store_id, franchise_id)
