"""Pydantic schemas for users, roles and the auth endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator, model_serializer

from pizza_service.models.user import Role
from pizza_service.schemas.base import CamelModel


def _check_password(v: str) -> str:
    if not v:
        raise ValueError("Password must not be empty")
    if "\x00" in v:
        raise ValueError("Password must not contain NUL characters")
    return v


def _normalise_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v or v.startswith("@") or v.endswith("@"):
        raise ValueError("Invalid email address")
    return v


class RoleRead(CamelModel):
    role: Role
    object_id: int | None = None

    @model_serializer(mode="wrap")
    def _drop_empty_scope(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if self.object_id is None:
            data.pop("objectId", None)
            data.pop("object_id", None)
        return data


class UserRead(CamelModel):
    id: int
    name: str
    email: str
    roles: list[RoleRead]


class UserRef(CamelModel):
    id: int
    name: str
    email: str


class UserCreate(CamelModel):
    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _normalise_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return _check_password(v)


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return v.strip().lower()


class UserUpdate(CamelModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None

    @field_validator("email")
    @classmethod
    def _email(cls, v: str | None) -> str | None:
        return _normalise_email(v) if v is not None else None

    @field_validator("password")
    @classmethod
    def _password(cls, v: str | None) -> str | None:
        return _check_password(v) if v is not None else None


class AuthResponse(CamelModel):
    user: UserRead
    token: str
