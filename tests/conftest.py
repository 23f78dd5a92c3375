import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
import sys
from pathlib import Path


sys.path.append(str(Path(__file__).resolve().parent.parent))

from shopledger.core.principal import Principal
from shopledger.core.roles import ShopRole
from shopledger.main import on_startup
from shopledger.repositories.shop_repository import ShopRepository


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, future=True
    )
    await on_startup(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    async_session = sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def principals(session):
    """CEO и два магазина: north (напоминание в 18:00) и south (без напоминания)"""
    repo = ShopRepository(session)
    ceo = await repo.create("Head Office", "ceo@example.com", "hash", ShopRole.CEO.value)
    north = await repo.create(
        "North", "north@example.com", "hash", ShopRole.SHOP.value, "18:00"
    )
    south = await repo.create("South", "south@example.com", "hash", ShopRole.SHOP.value)
    return {
        "ceo": Principal.from_shop(ceo),
        "north": Principal.from_shop(north),
        "south": Principal.from_shop(south),
    }


@pytest.fixture
def make_payload():
    def _make_payload(record_date: str, **overrides):
        payload = {
            "record_date": record_date,
            "revenue_main_with_margin": 1000.0,
            "revenue_main_without_margin": 800.0,
            "revenue_order_with_margin": 200.0,
            "revenue_order_without_margin": 150.0,
            "main_stock_value": 5000.0,
            "order_stock_value": 1000.0,
        }
        payload.update(overrides)
        return payload

    return _make_payload
