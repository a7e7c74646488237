"""
FastAPI dependencies — database session and bearer-token auth guards.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.core.exceptions import NotFound, Unauthenticated
from pizza_service.core.security import decode_access_token
from pizza_service.crud import tokens as token_crud
from pizza_service.crud import users as user_crud
from pizza_service.db.session import async_session_factory
from pizza_service.models.user import User
from pizza_service.schemas.token import Identity, TokenPayload

# auto_error=False so a missing header becomes our own 401, not a 403
bearer_scheme = HTTPBearer(auto_error=False)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Auth dependencies ───────────────────────────────────────────────
async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> TokenPayload:
    """Decode the bearer token and reject it if it has been logged out."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    raw = decode_access_token(credentials.credentials)
    if raw is None:
        raise Unauthenticated()

    try:
        payload = TokenPayload.model_validate(raw)
        int(payload.sub)
    except (ValidationError, ValueError):
        raise Unauthenticated() from None

    if await token_crud.is_token_revoked(db, payload.jti):
        raise Unauthenticated()
    return payload


async def get_identity(
    payload: TokenPayload = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    """Identity and role snapshot of the caller; deleted accounts are rejected."""
    user_id = int(payload.sub)
    exists = await db.execute(select(User.id).where(User.id == user_id))
    if exists.first() is None:
        raise Unauthenticated()
    return Identity(id=user_id, roles=payload.roles)


async def get_current_user(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Load the caller's account; tokens of deleted accounts are rejected."""
    try:
        return await user_crud.get_by_id(db, identity.id)
    except NotFound:
        raise Unauthenticated() from None
