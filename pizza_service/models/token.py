"""
RevokedToken model — the logout list consulted on every authenticated request.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from pizza_service.db.base import Base


class RevokedToken(Base):
    __tablename__ = "revoked_tokens"

    jti: str = Column(String(64), primary_key=True)  # type: ignore[assignment]
    user_id: int = Column(Integer, nullable=False, index=True)  # type: ignore[assignment]
    revoked_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    expires_at: datetime = Column(DateTime(timezone=True), nullable=False, index=True)  # type: ignore[assignment]
