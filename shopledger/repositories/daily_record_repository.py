import logging
from typing import List, Optional
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from shopledger.core.exceptions import DuplicateRecord, StorageError
from shopledger.models.daily_record import DailyRecord

logger = logging.getLogger(__name__)


class DailyRecordRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, record_id: int) -> Optional[DailyRecord]:
        try:
            result = await self.session.execute(
                select(DailyRecord).where(DailyRecord.id == record_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Ошибка получения записи {record_id}: {e}")
            raise StorageError(str(e)) from e

    async def get_by_shop_and_date(
        self, shop_id: int, record_date: date
    ) -> Optional[DailyRecord]:
        try:
            result = await self.session.execute(
                select(DailyRecord).filter_by(shop_id=shop_id, record_date=record_date)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Ошибка поиска записи {shop_id}/{record_date}: {e}")
            raise StorageError(str(e)) from e

    async def list_between(
        self, start_date: date, end_date: date, shop_id: Optional[int] = None
    ) -> List[DailyRecord]:
        """Записи с датой в [start_date, end_date] по возрастанию даты"""
        query = select(DailyRecord).where(
            DailyRecord.record_date >= start_date,
            DailyRecord.record_date <= end_date,
        )
        if shop_id is not None:
            query = query.where(DailyRecord.shop_id == shop_id)
        query = query.order_by(DailyRecord.record_date, DailyRecord.shop_id)
        return await self._fetch(query)

    async def list_all(self, shop_id: Optional[int] = None) -> List[DailyRecord]:
        """
        Без фильтра - все записи в порядке создания,
        с фильтром - записи магазина по возрастанию даты.
        """
        if shop_id is None:
            query = select(DailyRecord).order_by(
                DailyRecord.created_at, DailyRecord.id
            )
        else:
            query = (
                select(DailyRecord)
                .where(DailyRecord.shop_id == shop_id)
                .order_by(DailyRecord.record_date)
            )
        return await self._fetch(query)

    async def create(self, shop_id: int, record_date: date, **amounts: int) -> DailyRecord:
        record = DailyRecord(shop_id=shop_id, record_date=record_date, **amounts)
        self.session.add(record)
        await self._commit(record)
        return record

    async def save(self, record: DailyRecord) -> DailyRecord:
        self.session.add(record)
        await self._commit(record)
        return record

    async def delete(self, record: DailyRecord) -> None:
        try:
            await self.session.delete(record)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Ошибка удаления записи {record.id}: {e}")
            raise StorageError(str(e)) from e

    async def delete_by_shop(self, shop_id: int) -> None:
        """Удаляет записи магазина без фиксации транзакции"""
        try:
            await self.session.execute(
                delete(DailyRecord).where(DailyRecord.shop_id == shop_id)
            )
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Ошибка удаления записей магазина {shop_id}: {e}")
            raise StorageError(str(e)) from e

    async def _fetch(self, query) -> List[DailyRecord]:
        try:
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Ошибка чтения дневных записей: {e}")
            raise StorageError(str(e)) from e

    async def _commit(self, record: DailyRecord) -> None:
        shop_id, record_date = record.shop_id, record.record_date
        try:
            await self.session.commit()
            await self.session.refresh(record)
        except IntegrityError as e:
            await self.session.rollback()
            # Уникальность (shop_id, record_date) держит само хранилище:
            # параллельная вставка могла занять слот после нашей проверки
            if await self.get_by_shop_and_date(shop_id, record_date) is not None:
                logger.warning(
                    f"Запись для магазина {shop_id} на {record_date} уже существует"
                )
                raise DuplicateRecord(
                    f"Запись для магазина {shop_id} на {record_date} уже существует"
                ) from e
            logger.error(f"Ошибка целостности при сохранении записи: {e}")
            raise StorageError(str(e)) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Ошибка сохранения записи: {e}")
            raise StorageError(str(e)) from e
