import asyncio
import logging

from shopledger.core.config import LOG_LEVEL
from shopledger.core.database import engine as default_engine, Base

# Регистрация моделей в метаданных
from shopledger import models  # noqa: F401

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def on_startup(engine=default_engine):
    # Создаем таблицы в БД
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Таблицы shops и daily_records готовы")


async def main():
    await on_startup()
    await default_engine.dispose()


if __name__ == "__main__":
    configure_logging()
    asyncio.run(main())
