"""
Franchise & Store models.

Franchise admins are not stored here: they are the users holding a
``franchisee`` role whose ``object_id`` is the franchise id.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from pizza_service.db.base import Base


class Franchise(Base):
    __tablename__ = "franchises"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    stores = relationship(
        "Store",
        back_populates="franchise",
        lazy="selectin",
        order_by="Store.id",
    )


class Store(Base):
    __tablename__ = "stores"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    franchise_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("franchises.id"), nullable=False, index=True
    )
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    franchise = relationship("Franchise", back_populates="stores")
