from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List, Mapping, Optional
from shopledger.core.exceptions import (
    DuplicateEmail,
    Forbidden,
    InvalidShopData,
    NotFound,
    Unauthenticated,
)
from shopledger.core.principal import Principal
from shopledger.core.roles import ShopRole
from shopledger.models.shop import Shop
from shopledger.repositories.daily_record_repository import DailyRecordRepository
from shopledger.repositories.shop_repository import ShopRepository
from shopledger.utils.permissions import Action, can_reassign_role, ensure_allowed
from shopledger.utils.validators import is_valid_email, is_valid_shop_name, is_valid_timer
import logging

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "email", "password_hash", "role", "timer")


def shop_to_dict(shop: Shop) -> Dict[str, Any]:
    """Магазин без хеша пароля"""
    return {
        "id": shop.id,
        "name": shop.name,
        "email": shop.email,
        "role": shop.role,
        "timer": shop.timer,
        "created_at": shop.created_at,
        "updated_at": shop.updated_at,
    }


def _parse_role(role: Any) -> ShopRole:
    try:
        return ShopRole(role)
    except ValueError:
        raise InvalidShopData(f"Неизвестная роль: {role!r}")


def _validate_shop_fields(fields: Mapping[str, Any]) -> None:
    if "name" in fields and not is_valid_shop_name(fields["name"]):
        raise InvalidShopData(f"Недопустимое название магазина: {fields['name']!r}")
    if "email" in fields and not is_valid_email(fields["email"]):
        raise InvalidShopData(f"Недопустимый email: {fields['email']!r}")
    if "password_hash" in fields and not fields["password_hash"]:
        raise InvalidShopData("Хеш пароля не может быть пустым")
    if "role" in fields:
        _parse_role(fields["role"])
    if fields.get("timer") is not None and not is_valid_timer(fields["timer"]):
        raise InvalidShopData("Время напоминания должно быть в формате HH:mm")


class ShopService:
    def __init__(self, session: AsyncSession):
        self.repo = ShopRepository(session)
        self.record_repo = DailyRecordRepository(session)

    async def resolve_principal(self, shop_id: Optional[int]) -> Principal:
        """
        Строит участника запроса по идентификатору из учётных данных.

        Raises:
            Unauthenticated: Идентификатор пуст или магазина больше нет
        """
        if shop_id is None:
            raise Unauthenticated("Требуется аутентификация")
        shop = await self.repo.get_by_id(shop_id)
        if shop is None:
            logger.warning(f"Учётные данные ссылаются на несуществующий магазин {shop_id}")
            raise Unauthenticated("Учётная запись не найдена")
        return Principal.from_shop(shop)

    async def create_shop(
        self,
        principal: Optional[Principal],
        name: str,
        email: str,
        password_hash: str,
        role: ShopRole = ShopRole.SHOP,
        timer: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Создать магазин (только CEO)"""
        ensure_allowed(principal, Action.MANAGE_SHOPS)
        role = _parse_role(role) if role else ShopRole.SHOP
        _validate_shop_fields(
            {"name": name, "email": email, "password_hash": password_hash, "timer": timer}
        )

        if await self.repo.get_by_email(email) is not None:
            raise DuplicateEmail(f"Магазин с email {email} уже существует")

        shop = await self.repo.create(
            name=name,
            email=email,
            password_hash=password_hash,
            role=role.value,
            timer=timer,
        )
        logger.info(f"Создан магазин {shop.name} (id={shop.id}, роль {shop.role})")
        return shop_to_dict(shop)

    async def list_shops(
        self, principal: Optional[Principal], role: Optional[ShopRole] = None
    ) -> List[Dict[str, Any]]:
        """Все магазины по названию (только CEO)"""
        ensure_allowed(principal, Action.LIST_ALL)
        shops = await self.repo.get_all(_parse_role(role).value if role else None)
        return [shop_to_dict(s) for s in shops]

    async def get_by_id(self, principal: Optional[Principal], shop_id: int) -> Dict[str, Any]:
        ensure_allowed(principal, Action.READ_ONE, shop_id)
        shop = await self._load(shop_id)
        return shop_to_dict(shop)

    async def get_by_name(self, principal: Optional[Principal], name: str) -> Dict[str, Any]:
        shop = await self.repo.get_by_name(name)
        if shop is None:
            ensure_allowed(principal, Action.LIST_ALL)
            raise NotFound(f"Магазин с названием {name!r} не найден")
        ensure_allowed(principal, Action.READ_ONE, shop.id)
        return shop_to_dict(shop)

    async def update_shop(
        self, principal: Optional[Principal], shop_id: int, changes: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """
        Частично обновить магазин.

        Магазин может менять только себя, смена роли доступна только CEO.
        Передача timer=None снимает напоминание.
        """
        ensure_allowed(principal, Action.UPDATE, shop_id)

        fields = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        fields = {k: v for k, v in fields.items() if v is not None or k == "timer"}

        if "role" in fields and not can_reassign_role(principal):
            logger.warning(f"Магазин {principal.shop_id} пытался сменить роль {shop_id}")
            raise Forbidden("Менять роль магазина может только CEO")

        _validate_shop_fields(fields)
        shop = await self._load(shop_id)

        if "email" in fields and fields["email"] != shop.email:
            if await self.repo.get_by_email(fields["email"]) is not None:
                raise DuplicateEmail(f"Магазин с email {fields['email']} уже существует")

        for field, value in fields.items():
            if field == "role":
                value = _parse_role(value).value
            setattr(shop, field, value)

        shop = await self.repo.save(shop)
        logger.info(f"Обновлён магазин {shop_id}: {sorted(fields)}")
        return shop_to_dict(shop)

    async def delete_shop(self, principal: Optional[Principal], shop_id: int) -> None:
        """
        Удаляет магазин вместе с его дневными записями.
        """
        ensure_allowed(principal, Action.DELETE, shop_id)
        shop = await self._load(shop_id)

        await self.record_repo.delete_by_shop(shop.id)
        await self.repo.delete_shop(shop)
        logger.info(f"Удалён магазин {shop_id} и его дневные записи")

    async def _load(self, shop_id: int) -> Shop:
        shop = await self.repo.get_by_id(shop_id)
        if shop is None:
            raise NotFound(f"Магазин с id {shop_id} не найден")
        return shop
