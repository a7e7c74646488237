"""Unit tests for the authorization policy."""

import pytest

from pizza_service.core.exceptions import Forbidden
from pizza_service.core.permissions import Action, Target, authorize, can_act
from pizza_service.models.user import Role
from pizza_service.schemas.token import Identity
from pizza_service.schemas.user import RoleRead

ADMIN = Identity(id=1, roles=[RoleRead(role=Role.ADMIN)])
DINER = Identity(id=2, roles=[RoleRead(role=Role.DINER)])
FRANCHISEE_OF_7 = Identity(
    id=3, roles=[RoleRead(role=Role.DINER), RoleRead(role=Role.FRANCHISEE, object_id=7)]
)
NO_ROLES = Identity(id=4, roles=[])


@pytest.mark.parametrize("action", list(Action))
def test_admin_may_do_anything(action):
    assert can_act(ADMIN, action, Target(user_id=99, franchise_id=99))


@pytest.mark.parametrize("action", [Action.UPDATE_USER, Action.DELETE_USER])
def test_self_service_only_on_own_account(action):
    assert can_act(DINER, action, Target(user_id=2))
    assert not can_act(DINER, action, Target(user_id=3))
    assert not can_act(DINER, action, Target())


@pytest.mark.parametrize(
    "action", [Action.CREATE_FRANCHISE, Action.DELETE_FRANCHISE, Action.UPDATE_MENU]
)
def test_admin_only_actions_denied_to_everyone_else(action):
    for identity in (DINER, FRANCHISEE_OF_7, NO_ROLES):
        assert not can_act(identity, action, Target(user_id=identity.id, franchise_id=7))


@pytest.mark.parametrize("action", [Action.CREATE_STORE, Action.DELETE_STORE])
def test_store_actions_scoped_to_own_franchise(action):
    assert can_act(FRANCHISEE_OF_7, action, Target(franchise_id=7))
    assert not can_act(FRANCHISEE_OF_7, action, Target(franchise_id=8))
    assert not can_act(DINER, action, Target(franchise_id=7))


def test_user_without_roles_gets_only_self_service():
    assert can_act(NO_ROLES, Action.UPDATE_USER, Target(user_id=4))
    assert not can_act(NO_ROLES, Action.CREATE_STORE, Target(franchise_id=7))


def test_authorize_raises_forbidden():
    with pytest.raises(Forbidden) as exc_info:
        authorize(DINER, Action.UPDATE_MENU)
    assert exc_info.value.status_code == 403

    # no exception when permitted
    authorize(ADMIN, Action.UPDATE_MENU)
