"""Pydantic schemas for session tokens and the identity they carry."""

from __future__ import annotations

from pydantic import BaseModel

from pizza_service.models.user import Role
from pizza_service.schemas.user import RoleRead


class TokenPayload(BaseModel):
    sub: str
    jti: str
    exp: int
    roles: list[RoleRead] = []
    type: str | None = None


class Identity(BaseModel):
    """Who is calling, as of the moment their token was issued."""

    id: int
    roles: list[RoleRead] = []

    def has_role(self, role: Role, object_id: int | None = None) -> bool:
        return any(
            r.role == role and (object_id is None or r.object_id == object_id)
            for r in self.roles
        )

    @property
    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)
