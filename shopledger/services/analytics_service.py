import datetime
import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.config import ANALYTICS_LOOKBACK_DAYS, GROWTH_WINDOW
from shopledger.core.principal import Principal
from shopledger.services import analytics
from shopledger.services.daily_record_service import DailyRecordService
from shopledger.utils.date_utils import format_display_date

logger = logging.getLogger(__name__)


class AnalyticsService:
    def __init__(
        self,
        session: AsyncSession,
        window: int = GROWTH_WINDOW,
        lookback_days: int = ANALYTICS_LOOKBACK_DAYS,
    ):
        self.ledger = DailyRecordService(session)
        self.window = window
        self.lookback_days = lookback_days

    async def summary(
        self,
        principal: Optional[Principal],
        from_date: str,
        to_date: str,
        shop_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Сводка показателей за период.

        Записи читаются через учётный движок, поэтому действуют те же
        правила доступа: магазин видит только себя, CEO без фильтра
        получает агрегат по всем магазинам.

        Args:
            principal: Аутентифицированный участник
            from_date: Начало периода (DD.MM.YYYY)
            to_date: Конец периода (DD.MM.YYYY)
            shop_id: Фильтр по магазину (учитывается только для CEO)

        Returns:
            Dict[str, Any]: records_count, kpis, stats и advice
        """
        records = await self.ledger.list_by_date_range(
            principal, from_date, to_date, shop_id
        )

        kpis = analytics.compute_kpis(records, self.window)
        logger.info(
            f"Сводка {from_date}-{to_date} (shop={shop_id}) по {len(records)} записям: "
            f"GMROI={kpis['gmroi']:.2f}, маржа={kpis['overall_margin']:.2f}%"
        )

        return {
            "from_date": from_date,
            "to_date": to_date,
            "records_count": len(records),
            "kpis": kpis,
            "stats": analytics.stats_with_baseline(records),
            "advice": analytics.advice(kpis),
        }

    async def recent_summary(
        self,
        principal: Optional[Principal],
        shop_id: Optional[int] = None,
        today: Optional[datetime.date] = None,
    ) -> Dict[str, Any]:
        """Сводка за последние lookback_days дней, включая сегодняшний"""
        today = today or datetime.date.today()
        start = today - datetime.timedelta(days=self.lookback_days - 1)
        return await self.summary(
            principal, format_display_date(start), format_display_date(today), shop_id
        )
