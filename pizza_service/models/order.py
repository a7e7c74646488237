"""
Menu & Order models — the pizza catalog and diner purchases.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from pizza_service.db.base import Base


class MenuItem(Base):
    __tablename__ = "menu"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    title: str = Column(String(200), unique=True, nullable=False)  # type: ignore[assignment]
    description: str = Column(String(500), nullable=False, default="")  # type: ignore[assignment]
    image: str = Column(String(500), nullable=False, default="")  # type: ignore[assignment]
    price: float = Column(Float, nullable=False)  # type: ignore[assignment]


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (Index("ix_orders_diner_id_id", "diner_id", "id"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    # NULL once the diner's account is deleted
    diner_id: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    franchise_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("franchises.id"), nullable=False, index=True
    )
    store_id: int = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)  # type: ignore[assignment]
    date: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    order_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    menu_id: int = Column(Integer, ForeignKey("menu.id"), nullable=False)  # type: ignore[assignment]
    description: str = Column(String(500), nullable=False)  # type: ignore[assignment]
    price: float = Column(Float, nullable=False)  # type: ignore[assignment]

    order = relationship("Order", back_populates="items")
