"""
Политика доступа к магазинам и дневным записям.

Таблица POLICY - единственный источник правил. Каждая операция учёта
сначала спрашивает её, а после загрузки строк повторно проверяет
владельца через ensure_rows_owned.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Type

from shopledger.core.exceptions import (
    Forbidden,
    LedgerError,
    MissingTarget,
    Unauthenticated,
)
from shopledger.core.principal import Principal

logger = logging.getLogger(__name__)


class Action(str, Enum):
    CREATE = "create"
    READ_ONE = "read_one"
    UPDATE = "update"
    DELETE = "delete"
    LIST_BY_SHOP = "list_by_shop"
    LIST_ALL = "list_all"
    REASSIGN_ROLE = "reassign_role"
    MANAGE_SHOPS = "manage_shops"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None
    error: Type[LedgerError] = Forbidden


ALLOW = Decision(True)


def _create(principal: Principal, owner_shop_id: Optional[int]) -> Decision:
    if principal.is_ceo:
        if owner_shop_id is None:
            return Decision(False, "CEO должен явно указать магазин", MissingTarget)
        return ALLOW
    if owner_shop_id == principal.shop_id:
        return ALLOW
    return Decision(False, "Магазин может создавать записи только для себя")


def _owner_only(principal: Principal, owner_shop_id: Optional[int]) -> Decision:
    if principal.is_ceo or owner_shop_id == principal.shop_id:
        return ALLOW
    return Decision(False, "Нет доступа к данным другого магазина")


def _ceo_only(principal: Principal, owner_shop_id: Optional[int]) -> Decision:
    if principal.is_ceo:
        return ALLOW
    return Decision(False, "Операция доступна только CEO")


POLICY: Dict[Action, Callable[[Principal, Optional[int]], Decision]] = {
    Action.CREATE: _create,
    Action.READ_ONE: _owner_only,
    Action.UPDATE: _owner_only,
    Action.DELETE: _owner_only,
    Action.LIST_BY_SHOP: _owner_only,
    Action.LIST_ALL: _ceo_only,
    Action.REASSIGN_ROLE: _ceo_only,
    Action.MANAGE_SHOPS: _ceo_only,
}


def authorize(
    principal: Optional[Principal],
    action: Action,
    owner_shop_id: Optional[int] = None,
) -> Decision:
    """
    Решает, разрешено ли действие участнику.

    Args:
        principal: Аутентифицированный участник (None - не аутентифицирован)
        action: Вид операции
        owner_shop_id: Магазин-владелец ресурса, если он известен

    Returns:
        Decision: Разрешение или отказ с причиной
    """
    if principal is None:
        return Decision(False, "Требуется аутентификация", Unauthenticated)
    return POLICY[action](principal, owner_shop_id)


def ensure_allowed(
    principal: Optional[Principal],
    action: Action,
    owner_shop_id: Optional[int] = None,
) -> Principal:
    """Как authorize, но при отказе выбрасывает ошибку решения"""
    decision = authorize(principal, action, owner_shop_id)
    if not decision.allowed:
        logger.warning(
            f"Отказ в доступе: action={action.value}, "
            f"principal={getattr(principal, 'id', None)}, owner={owner_shop_id}: "
            f"{decision.reason}"
        )
        raise decision.error(decision.reason)
    return principal


def ensure_authenticated(principal: Optional[Principal]) -> Principal:
    if principal is None:
        raise Unauthenticated("Требуется аутентификация")
    return principal


def resolve_create_target(
    principal: Optional[Principal], requested_shop_id: Optional[int]
) -> int:
    """
    Определяет магазин, для которого создаётся запись.

    Магазину переданный shop_id не доверяется и подменяется его собственным.
    CEO обязан указать магазин явно.
    """
    principal = ensure_authenticated(principal)
    target = requested_shop_id if principal.is_ceo else principal.shop_id
    ensure_allowed(principal, Action.CREATE, target)
    return target


def resolve_shop_filter(
    principal: Optional[Principal], requested_shop_id: Optional[int]
) -> Optional[int]:
    """
    Фильтр по магазину для списков.

    Магазин всегда видит только себя, что бы он ни запросил. CEO получает
    запрошенный фильтр, None означает все магазины.
    """
    principal = ensure_authenticated(principal)
    if not principal.is_ceo:
        ensure_allowed(principal, Action.LIST_BY_SHOP, principal.shop_id)
        return principal.shop_id
    if requested_shop_id is None:
        ensure_allowed(principal, Action.LIST_ALL)
        return None
    ensure_allowed(principal, Action.LIST_BY_SHOP, requested_shop_id)
    return requested_shop_id


def ensure_rows_owned(principal: Principal, rows: Iterable) -> None:
    """Повторная проверка владельца для уже загруженных строк"""
    for row in rows:
        ensure_allowed(principal, Action.READ_ONE, row.shop_id)


def can_reassign_role(principal: Optional[Principal]) -> bool:
    return authorize(principal, Action.REASSIGN_ROLE).allowed
