import asyncio
import logging
from sqlalchemy.ext.asyncio import create_async_engine
from app.models.models import Base
from app.config import Config
from app.repositories.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


async def init_db():
    """Инициализация базы данных и проверка файла каталога"""
    config = Config()

    # Каталог должен читаться до запуска бота
    catalog = CatalogRepository.from_file(config.CATALOG_PATH)
    logger.info(f"Catalog {config.CATALOG_PATH}: {len(catalog.get_all_products())} products")

    # Создаем движок базы данных
    engine = create_async_engine(
        config.DATABASE_URL,
        echo=False
    )

    # Создаем все таблицы (хранилище корзин)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Tables created: {', '.join(Base.metadata.tables)}")

    await engine.dispose()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    asyncio.run(init_db())
