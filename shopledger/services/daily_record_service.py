import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.exceptions import DuplicateRecord, InvalidRange, NotFound
from shopledger.core.principal import Principal
from shopledger.models.daily_record import MONEY_FIELDS, DailyRecord
from shopledger.repositories.daily_record_repository import DailyRecordRepository
from shopledger.repositories.shop_repository import ShopRepository
from shopledger.utils.date_utils import format_display_date, parse_display_date
from shopledger.utils.money import from_minor_units, to_minor_units
from shopledger.utils.permissions import (
    Action,
    ensure_allowed,
    ensure_authenticated,
    ensure_rows_owned,
    resolve_create_target,
    resolve_shop_filter,
)

logger = logging.getLogger(__name__)


def record_to_display(record: DailyRecord) -> Dict[str, Any]:
    """
    Переводит запись из хранилища во внешний вид.

    Суммы - десятичные с двумя знаками, дата - DD.MM.YYYY.
    """
    data = {
        "id": record.id,
        "shop_id": record.shop_id,
        "record_date": format_display_date(record.record_date),
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }
    for field in MONEY_FIELDS:
        data[field] = from_minor_units(getattr(record, field))
    return data


class DailyRecordService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = DailyRecordRepository(session)
        self.shop_repo = ShopRepository(session)

    async def create(
        self, principal: Optional[Principal], data: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """
        Создаёт дневную запись магазина.

        Args:
            principal: Аутентифицированный участник
            data: Поля записи: shop_id (только для CEO), record_date (DD.MM.YYYY)
                и шесть денежных сумм в десятичном виде

        Returns:
            Dict[str, Any]: Созданная запись во внешнем виде

        Raises:
            MissingTarget: CEO не указал магазин
            NotFound: Магазин не существует
            InvalidDate: Дата в неверном формате
            DuplicateRecord: Запись на эту дату уже есть
            InvalidAmount: Отрицательная или нечисловая сумма
        """
        shop_id = resolve_create_target(principal, data.get("shop_id"))
        await self._ensure_shop_exists(shop_id)

        record_date = parse_display_date(data.get("record_date"))

        if await self.repo.get_by_shop_and_date(shop_id, record_date) is not None:
            raise DuplicateRecord(
                f"Запись для магазина {shop_id} на {data.get('record_date')} уже существует"
            )

        amounts = {
            field: to_minor_units(data.get(field), field) for field in MONEY_FIELDS
        }

        record = await self.repo.create(shop_id, record_date, **amounts)
        logger.info(
            f"Создана дневная запись {record.id} для магазина {shop_id} "
            f"на {record_date.isoformat()}"
        )
        return record_to_display(record)

    async def get_by_id(
        self, principal: Optional[Principal], record_id: int
    ) -> Dict[str, Any]:
        ensure_authenticated(principal)
        record = await self._load(record_id)
        ensure_allowed(principal, Action.READ_ONE, record.shop_id)
        return record_to_display(record)

    async def list_by_date_range(
        self,
        principal: Optional[Principal],
        from_date: Optional[str],
        to_date: Optional[str],
        shop_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Записи за период [from_date, to_date] включительно по возрастанию даты.

        Магазину фильтр всегда принудительно ставится на него самого.
        """
        ensure_authenticated(principal)
        if not from_date or not to_date:
            raise InvalidRange("Нужно указать обе даты: from_date и to_date")

        shop_filter = resolve_shop_filter(principal, shop_id)
        if shop_filter is not None:
            await self._ensure_shop_exists(shop_filter)

        start = parse_display_date(from_date)
        end = parse_display_date(to_date)
        if start > end:
            raise InvalidRange(
                f"Начало периода {from_date} позже его конца {to_date}"
            )

        records = await self.repo.list_between(start, end, shop_filter)
        ensure_rows_owned(principal, records)
        return [record_to_display(r) for r in records]

    async def list_all(
        self, principal: Optional[Principal], shop_id: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        shop_filter = resolve_shop_filter(principal, shop_id)
        if shop_filter is not None:
            await self._ensure_shop_exists(shop_filter)

        records = await self.repo.list_all(shop_filter)
        ensure_rows_owned(principal, records)
        return [record_to_display(r) for r in records]

    async def update_by_id(
        self, principal: Optional[Principal], record_id: int, data: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """
        Частично обновляет запись.

        Применяются только переданные поля со значением, отличным от None.
        Ноль - это явное значение, а не пропуск поля.
        """
        ensure_authenticated(principal)
        record = await self._load(record_id)
        ensure_allowed(principal, Action.UPDATE, record.shop_id)

        # Сначала валидируем всё, запись меняем только после этого
        changes = {
            field: to_minor_units(data[field], field)
            for field in MONEY_FIELDS
            if data.get(field) is not None
        }

        if data.get("record_date") is not None:
            new_date = parse_display_date(data["record_date"])
            if new_date != record.record_date:
                occupied = await self.repo.get_by_shop_and_date(record.shop_id, new_date)
                if occupied is not None:
                    raise DuplicateRecord(
                        f"Запись для магазина {record.shop_id} на "
                        f"{data['record_date']} уже существует"
                    )
            changes["record_date"] = new_date

        for field, value in changes.items():
            setattr(record, field, value)

        record = await self.repo.save(record)
        logger.info(f"Обновлена дневная запись {record_id}: {sorted(changes)}")
        return record_to_display(record)

    async def delete_by_id(self, principal: Optional[Principal], record_id: int) -> None:
        ensure_authenticated(principal)
        record = await self._load(record_id)
        ensure_allowed(principal, Action.DELETE, record.shop_id)
        await self.repo.delete(record)
        logger.info(f"Удалена дневная запись {record_id}")

    async def _load(self, record_id: int) -> DailyRecord:
        record = await self.repo.get_by_id(record_id)
        if record is None:
            logger.warning(f"Дневная запись {record_id} не найдена")
            raise NotFound(f"Дневная запись с id {record_id} не найдена")
        return record

    async def _ensure_shop_exists(self, shop_id: int) -> None:
        if not await self.shop_repo.exists(shop_id):
            logger.warning(f"Магазин {shop_id} не найден")
            raise NotFound(f"Магазин с id {shop_id} не найден")
