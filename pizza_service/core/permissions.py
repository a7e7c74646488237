"""
Authorization policy — who may act on which user, franchise, store or menu.

Rules are evaluated in order, first match wins:

1. Admins may do anything.
2. A user may update or delete only their own account.
3. Franchise lifecycle and menu changes are admin-only.
4. Store lifecycle is open to franchisees of the owning franchise.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from pizza_service.core.exceptions import Forbidden
from pizza_service.models.user import Role
from pizza_service.schemas.token import Identity

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"
    CREATE_FRANCHISE = "create_franchise"
    DELETE_FRANCHISE = "delete_franchise"
    CREATE_STORE = "create_store"
    DELETE_STORE = "delete_store"
    UPDATE_MENU = "update_menu"


_SELF_SERVICE = {Action.UPDATE_USER, Action.DELETE_USER}
_ADMIN_ONLY = {Action.CREATE_FRANCHISE, Action.DELETE_FRANCHISE, Action.UPDATE_MENU}
_FRANCHISE_SCOPED = {Action.CREATE_STORE, Action.DELETE_STORE}


@dataclass(frozen=True)
class Target:
    user_id: int | None = None
    franchise_id: int | None = None


def can_act(identity: Identity, action: Action, target: Target = Target()) -> bool:
    if identity.is_admin:
        return True
    if action in _SELF_SERVICE:
        return target.user_id is not None and identity.id == target.user_id
    if action in _ADMIN_ONLY:
        return False
    if action in _FRANCHISE_SCOPED:
        return target.franchise_id is not None and identity.has_role(
            Role.FRANCHISEE, target.franchise_id
        )
    return False


def authorize(identity: Identity, action: Action, target: Target = Target()) -> None:
    """Raise :class:`Forbidden` unless *identity* may perform *action* on *target*."""
    if not can_act(identity, action, target):
        logger.info("Denied %s for user %s on %s", action.value, identity.id, target)
        raise Forbidden(f"unable to {action.value.replace('_', ' ')}")
