"""
Session revocation list, kept in the database so every worker sees a logout.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.models.token import RevokedToken
from pizza_service.schemas.token import TokenPayload

logger = logging.getLogger(__name__)


async def is_token_revoked(db: AsyncSession, jti: str) -> bool:
    result = await db.execute(select(RevokedToken.jti).where(RevokedToken.jti == jti))
    return result.first() is not None


async def revoke_token(db: AsyncSession, payload: TokenPayload) -> None:
    """Add a token to the revocation list. Revoking twice is a no-op."""
    if await is_token_revoked(db, payload.jti):
        return
    db.add(
        RevokedToken(
            jti=payload.jti,
            user_id=int(payload.sub),
            expires_at=datetime.fromtimestamp(payload.exp, tz=timezone.utc),
        )
    )
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent logout of the same token got there first.
        await db.rollback()
        logger.debug("Token %s already revoked", payload.jti)


async def purge_expired_revocations(db: AsyncSession) -> int:
    """Drop revocation rows whose tokens would be rejected as expired anyway."""
    result = await db.execute(
        delete(RevokedToken).where(RevokedToken.expires_at < datetime.now(timezone.utc))
    )
    await db.commit()
    return result.rowcount or 0
