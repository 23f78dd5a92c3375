import datetime
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.config import REMINDER_TIMEZONE
from shopledger.core.roles import ShopRole
from shopledger.repositories.daily_record_repository import DailyRecordRepository
from shopledger.repositories.shop_repository import ShopRepository
from shopledger.utils.date_utils import localize

logger = logging.getLogger(__name__)


class ReminderService:
    """Напоминания магазинам закрыть день"""

    def __init__(self, session: AsyncSession, tz_name: str = REMINDER_TIMEZONE):
        self.shop_repo = ShopRepository(session)
        self.record_repo = DailyRecordRepository(session)
        self.tz_name = tz_name

    async def due_shops(
        self, now: Optional[datetime.datetime] = None
    ) -> List[Dict[str, Any]]:
        """
        Магазины, которым пора напомнить о закрытии дня.

        Напоминание нужно, если у магазина задано время timer, оно уже
        наступило по местному времени и за сегодняшний день записи нет.

        Args:
            now: Текущий момент; наивное время считается местным

        Returns:
            List[Dict[str, Any]]: id, name и timer магазинов
        """
        now = localize(now or datetime.datetime.now(datetime.timezone.utc), self.tz_name)
        today = now.date()
        current_time = now.strftime("%H:%M")

        shops = await self.shop_repo.get_all(ShopRole.SHOP.value)
        closed = {
            r.shop_id for r in await self.record_repo.list_between(today, today)
        }

        due = [
            {"id": shop.id, "name": shop.name, "timer": shop.timer}
            for shop in shops
            if shop.timer and shop.timer <= current_time and shop.id not in closed
        ]
        logger.info(
            f"Напоминания на {today.isoformat()} {current_time} ({self.tz_name}): "
            f"{len(due)} магазинов"
        )
        return due
