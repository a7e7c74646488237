"""
Franchise + store endpoints.

- GET /franchise is public.
- Creating or deleting a franchise requires admin role.
- Stores are managed by admins or by franchisees of the owning franchise.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.api.v1.deps import get_db, get_identity
from pizza_service.core.config import settings
from pizza_service.core.permissions import Action, Target, authorize
from pizza_service.crud import franchises as franchise_crud
from pizza_service.models.franchise import Store
from pizza_service.schemas.base import MessageResponse
from pizza_service.schemas.franchise import (
    FranchiseCreate,
    FranchiseRead,
    StoreCreate,
    StoreCreated,
)
from pizza_service.schemas.token import Identity

router = APIRouter(prefix="/franchise", tags=["franchise"])


@router.get("", response_model=list[FranchiseRead])
async def list_franchises(
    page: int = Query(1, ge=1, le=settings.MAX_PAGE),
    limit: int = Query(settings.PAGE_SIZE, ge=1, le=100),
    name: str = Query("*", max_length=200),
    db: AsyncSession = Depends(get_db),
) -> list[FranchiseRead]:
    return await franchise_crud.list_franchises(db, page, limit, name)


@router.get("/{user_id}", response_model=list[FranchiseRead])
async def list_user_franchises(
    user_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> list[FranchiseRead]:
    """Franchises administered by *user_id*; empty unless asking about yourself
    or asking as an admin."""
    if identity.id != user_id and not identity.is_admin:
        return []
    return await franchise_crud.list_user_franchises(db, user_id)


@router.post("", response_model=FranchiseRead)
async def create_franchise(
    body: FranchiseCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> FranchiseRead:
    authorize(identity, Action.CREATE_FRANCHISE)
    return await franchise_crud.create_franchise(db, body)


@router.delete("/{franchise_id}", response_model=MessageResponse)
async def delete_franchise(
    franchise_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    authorize(identity, Action.DELETE_FRANCHISE, Target(franchise_id=franchise_id))
    await franchise_crud.delete_franchise(db, franchise_id)
    return MessageResponse(message="franchise deleted")


@router.post("/{franchise_id}/store", response_model=StoreCreated)
async def create_store(
    franchise_id: int,
    body: StoreCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> Store:
    authorize(identity, Action.CREATE_STORE, Target(franchise_id=franchise_id))
    return await franchise_crud.create_store(db, franchise_id, body.name)


@router.delete("/{franchise_id}/store/{store_id}", response_model=MessageResponse)
async def delete_store(
    franchise_id: int,
    store_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    authorize(identity, Action.DELETE_STORE, Target(franchise_id=franchise_id))
    await franchise_crud.delete_store(db, franchise_id, store_id)
    return MessageResponse(message="store deleted")
