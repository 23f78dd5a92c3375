import pytest

from shopledger.core.exceptions import Forbidden, MissingTarget, Unauthenticated
from shopledger.core.principal import Principal
from shopledger.core.roles import ShopRole
from shopledger.utils.permissions import (
    Action,
    authorize,
    can_reassign_role,
    ensure_allowed,
    ensure_rows_owned,
    resolve_create_target,
    resolve_shop_filter,
)

CEO = Principal(id=1, shop_id=1, role=ShopRole.CEO, name="Head Office")
NORTH = Principal(id=2, shop_id=2, role=ShopRole.SHOP, name="North")
SOUTH_ID = 3


class Row:
    def __init__(self, shop_id):
        self.shop_id = shop_id


@pytest.mark.parametrize("action", [Action.READ_ONE, Action.UPDATE, Action.DELETE])
def test_owner_or_ceo(action):
    assert authorize(CEO, action, SOUTH_ID).allowed
    assert authorize(NORTH, action, NORTH.shop_id).allowed

    decision = authorize(NORTH, action, SOUTH_ID)
    assert not decision.allowed
    assert decision.error is Forbidden
    assert decision.reason


def test_list_all_only_ceo():
    assert authorize(CEO, Action.LIST_ALL).allowed
    assert not authorize(NORTH, Action.LIST_ALL).allowed


def test_manage_shops_and_roles_only_ceo():
    assert authorize(CEO, Action.MANAGE_SHOPS).allowed
    assert not authorize(NORTH, Action.MANAGE_SHOPS).allowed
    assert can_reassign_role(CEO)
    assert not can_reassign_role(NORTH)
    assert not can_reassign_role(None)


def test_unauthenticated():
    decision = authorize(None, Action.READ_ONE, NORTH.shop_id)
    assert not decision.allowed
    assert decision.error is Unauthenticated

    with pytest.raises(Unauthenticated):
        ensure_allowed(None, Action.LIST_ALL)
    with pytest.raises(Unauthenticated):
        resolve_shop_filter(None, None)


def test_create_target():
    assert resolve_create_target(NORTH, SOUTH_ID) == NORTH.shop_id
    assert resolve_create_target(NORTH, None) == NORTH.shop_id
    assert resolve_create_target(CEO, SOUTH_ID) == SOUTH_ID

    with pytest.raises(MissingTarget):
        resolve_create_target(CEO, None)


def test_shop_filter_forced_for_shop():
    assert resolve_shop_filter(NORTH, SOUTH_ID) == NORTH.shop_id
    assert resolve_shop_filter(NORTH, None) == NORTH.shop_id
    assert resolve_shop_filter(CEO, SOUTH_ID) == SOUTH_ID
    assert resolve_shop_filter(CEO, None) is None


def test_rows_rechecked_after_load():
    ensure_rows_owned(NORTH, [Row(NORTH.shop_id), Row(NORTH.shop_id)])
    ensure_rows_owned(CEO, [Row(NORTH.shop_id), Row(SOUTH_ID)])

    with pytest.raises(Forbidden):
        ensure_rows_owned(NORTH, [Row(NORTH.shop_id), Row(SOUTH_ID)])


def test_ensure_allowed_returns_principal():
    assert ensure_allowed(NORTH, Action.UPDATE, NORTH.shop_id) is NORTH

    with pytest.raises(Forbidden):
        ensure_allowed(NORTH, Action.UPDATE, SOUTH_ID)
