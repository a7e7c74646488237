"""Pydantic schemas for the menu and diner orders."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from pizza_service.schemas.base import CamelModel


# ── Menu ────────────────────────────────────────────────────────────
class MenuItemRead(CamelModel):
    id: int
    title: str
    description: str
    image: str
    price: float


class MenuItemUpsert(CamelModel):
    title: str
    description: str = ""
    image: str = ""
    price: float = Field(ge=0)

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title must not be empty")
        if len(v) > 200:
            raise ValueError("Title must not exceed 200 characters")
        return v


# ── Orders ──────────────────────────────────────────────────────────
class OrderItemCreate(CamelModel):
    menu_id: int
    description: str
    price: float = Field(ge=0)


class OrderItemRead(CamelModel):
    id: int
    menu_id: int
    description: str
    price: float


class OrderCreate(CamelModel):
    franchise_id: int
    store_id: int
    items: list[OrderItemCreate] = Field(min_length=1)


class OrderRead(CamelModel):
    id: int
    franchise_id: int
    store_id: int
    date: datetime
    items: list[OrderItemRead]


class OrderCreated(CamelModel):
    order: OrderRead
    jwt: str


class OrderPage(CamelModel):
    diner_id: int
    orders: list[OrderRead]
    page: int


class ReceiptVerifyRequest(CamelModel):
    jwt: str


class ReceiptVerifyResponse(CamelModel):
    message: str
    payload: dict[str, Any]
