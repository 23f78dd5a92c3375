import io
import logging
from typing import Optional

import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.principal import Principal
from shopledger.models.daily_record import MONEY_FIELDS
from shopledger.repositories.shop_repository import ShopRepository
from shopledger.services import analytics
from shopledger.services.daily_record_service import DailyRecordService

logger = logging.getLogger(__name__)

RECORDS_SHEET = "Records"
SUMMARY_SHEET = "Summary"

RECORD_COLUMNS = ["shop_name", "record_date", *MONEY_FIELDS, "margin"]
SUMMARY_COLUMNS = [
    "shop_id",
    "shop_name",
    "days",
    "revenue_with_margin",
    "revenue_without_margin",
    "overall_margin",
    "gmroi",
]


class ReportService:
    def __init__(self, session: AsyncSession):
        self.ledger = DailyRecordService(session)
        self.shop_repo = ShopRepository(session)

    async def export_records(
        self,
        principal: Optional[Principal],
        from_date: str,
        to_date: str,
        shop_id: Optional[int] = None,
    ) -> bytes:
        """
        Экспортирует дневные записи за период в Excel.

        Returns:
            bytes: Файл Excel с листами Records и Summary
        """
        records = await self.ledger.list_by_date_range(
            principal, from_date, to_date, shop_id
        )
        names = {s.id: s.name for s in await self.shop_repo.get_all()}

        df = pd.DataFrame(records, columns=["shop_id", "record_date", *MONEY_FIELDS])
        df.insert(0, "shop_name", df["shop_id"].map(names))
        df["margin"] = (
            df["revenue_main_with_margin"]
            + df["revenue_order_with_margin"]
            - df["revenue_main_without_margin"]
            - df["revenue_order_without_margin"]
        ).round(2)

        summary_rows = []
        # Названия магазинов не уникальны, группируем по идентификатору
        for shop_id, group in df.groupby("shop_id", sort=False):
            shop_id = int(shop_id)
            shop_records = group.to_dict("records")
            summary_rows.append(
                {
                    "shop_id": shop_id,
                    "shop_name": names.get(shop_id),
                    "days": len(shop_records),
                    "revenue_with_margin": round(
                        sum(analytics.revenue_with_margin(r) for r in shop_records), 2
                    ),
                    "revenue_without_margin": round(
                        sum(analytics.revenue_without_margin(r) for r in shop_records), 2
                    ),
                    "overall_margin": round(analytics.overall_margin(shop_records), 2),
                    "gmroi": round(analytics.gmroi(shop_records), 2),
                }
            )
        summary_rows.sort(key=lambda row: (row["shop_name"] or "", row["shop_id"]))
        summary_df = pd.DataFrame(summary_rows, columns=SUMMARY_COLUMNS)

        excel_buffer = io.BytesIO()
        with pd.ExcelWriter(excel_buffer, engine="openpyxl") as writer:
            df[RECORD_COLUMNS].to_excel(writer, sheet_name=RECORDS_SHEET, index=False)
            summary_df.to_excel(writer, sheet_name=SUMMARY_SHEET, index=False)

        logger.info(
            f"Экспорт {len(df)} записей за {from_date}-{to_date} "
            f"по {len(summary_df)} магазинам"
        )
        return excel_buffer.getvalue()
