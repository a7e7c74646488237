"""
User model — authentication & role-based access control.

A user's roles are stored as rows of ``user_roles``.  Only the
franchisee role carries a scope (``object_id`` = franchise id).
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from pizza_service.db.base import Base


class Role(str, enum.Enum):
    DINER = "diner"
    ADMIN = "admin"
    FRANCHISEE = "franchisee"


class User(Base):
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    hashed_password: str = Column(String(128), nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    roles = relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="UserRole.id",
    )

    def has_role(self, role: Role, object_id: int | None = None) -> bool:
        return any(
            r.role == role.value and (object_id is None or r.object_id == object_id)
            for r in self.roles
        )


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (Index("ix_user_roles_role_object", "role", "object_id"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    # diner | admin | franchisee
    object_id: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    # franchise id, franchisee only

    user = relationship("User", back_populates="roles")
