import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from shopledger.core.exceptions import DuplicateEmail, StorageError
from shopledger.models.shop import Shop

logger = logging.getLogger(__name__)


class ShopRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self, role: Optional[str] = None) -> List[Shop]:
        query = select(Shop)
        if role is not None:
            query = query.filter_by(role=role)
        result = await self._execute(query.order_by(Shop.name, Shop.id))
        return list(result.scalars().all())

    async def get_by_id(self, shop_id: int) -> Optional[Shop]:
        result = await self._execute(select(Shop).filter_by(id=shop_id))
        return result.scalars().first()

    async def get_by_name(self, name: str) -> Optional[Shop]:
        result = await self._execute(select(Shop).filter_by(name=name))
        return result.scalars().first()

    async def get_by_email(self, email: str) -> Optional[Shop]:
        result = await self._execute(select(Shop).filter_by(email=email))
        return result.scalars().first()

    async def exists(self, shop_id: int) -> bool:
        result = await self._execute(select(Shop.id).filter_by(id=shop_id))
        return result.scalar_one_or_none() is not None

    async def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: str,
        timer: Optional[str] = None,
    ) -> Shop:
        shop = Shop(
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            timer=timer,
        )
        self.session.add(shop)
        await self._commit(shop)
        return shop

    async def save(self, shop: Shop) -> Shop:
        self.session.add(shop)
        await self._commit(shop)
        return shop

    async def delete_shop(self, shop: Shop) -> None:
        try:
            await self.session.delete(shop)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Ошибка удаления магазина {shop.id}: {e}")
            raise StorageError(str(e)) from e

    async def _execute(self, query):
        try:
            return await self.session.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Ошибка чтения магазинов: {e}")
            raise StorageError(str(e)) from e

    async def _commit(self, shop: Shop) -> None:
        email = shop.email
        try:
            await self.session.commit()
            await self.session.refresh(shop)
        except IntegrityError as e:
            await self.session.rollback()
            logger.error(f"Ошибка целостности при сохранении магазина: {e}")
            raise DuplicateEmail(f"Магазин с email {email} уже существует") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Ошибка сохранения магазина: {e}")
            raise StorageError(str(e)) from e
