"""Pydantic schemas for franchises and their stores."""

from __future__ import annotations

from pydantic import Field, field_validator

from pizza_service.schemas.base import CamelModel
from pizza_service.schemas.user import UserRef


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name must not be empty")
    if len(v) > 200:
        raise ValueError("Name must not exceed 200 characters")
    return v


# ── Store ───────────────────────────────────────────────────────────
class StoreCreate(CamelModel):
    name: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _clean_name(v)


class StoreRead(CamelModel):
    id: int
    name: str
    total_revenue: float = 0.0


class StoreCreated(CamelModel):
    id: int
    franchise_id: int
    name: str


# ── Franchise ───────────────────────────────────────────────────────
class FranchiseAdminRef(CamelModel):
    email: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return v.strip().lower()


class FranchiseCreate(CamelModel):
    name: str
    admins: list[FranchiseAdminRef] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _clean_name(v)


class FranchiseRead(CamelModel):
    id: int
    name: str
    admins: list[UserRef] = Field(default_factory=list)
    stores: list[StoreRead] = Field(default_factory=list)
