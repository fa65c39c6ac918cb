import asyncio
import logging
import os
import sys
from aiogram import Bot, Dispatcher
from aiogram.enums import ParseMode
from aiogram.client.default import DefaultBotProperties
from aiogram.fsm.storage.memory import MemoryStorage
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine, AsyncSession, AsyncEngine
from aiogram3_di import setup_di

from app.config import Config
from app.middlewares.database import DatabaseMiddleware
from app.repositories.catalog_repository import CatalogRepository
from app.catalog.catalog_router import router as catalog_router
from app.handlers.main_menu import router as main_menu_router
from app.handlers.errors import router as errors_router
from app.models.models import Base

logger = logging.getLogger(__name__)

SQLITE_PREFIX = "sqlite+aiosqlite:///"


def setup_logging(config: Config) -> None:
    """Логи в консоль и в файл LOG_DIR/bot.log"""
    os.makedirs(config.LOG_DIR, exist_ok=True)

    logging.basicConfig(
        level=logging.DEBUG if config.DEBUG else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(os.path.join(config.LOG_DIR, 'bot.log'), encoding='utf-8'),
            logging.StreamHandler()
        ]
    )
    # Запросы к Telegram в DEBUG слишком многословны
    logging.getLogger("aiogram.event").setLevel(logging.INFO)


async def setup_database(config: Config) -> tuple[async_sessionmaker[AsyncSession], AsyncEngine]:
    """Движок, таблицы хранилища и фабрика сессий"""
    if config.DATABASE_URL.startswith(SQLITE_PREFIX) and ":memory:" not in config.DATABASE_URL:
        directory = os.path.dirname(config.DATABASE_URL[len(SQLITE_PREFIX):])
        if directory:
            os.makedirs(directory, exist_ok=True)

    try:
        engine = create_async_engine(config.DATABASE_URL, echo=False, pool_pre_ping=True)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.error(f"Failed to setup database {config.DATABASE_URL}: {e}")
        raise

    return async_sessionmaker(engine, expire_on_commit=False), engine


def create_dispatcher(
    config: Config,
    session_factory: async_sessionmaker[AsyncSession],
    catalog_repository: CatalogRepository
) -> Dispatcher:
    """Диспетчер с DI, middleware и роутерами"""
    dp = Dispatcher(storage=MemoryStorage())

    # aiogram3-di подключается раньше middleware
    setup_di(dp)

    database_middleware = DatabaseMiddleware(session_factory, catalog_repository, config)
    for observer in (dp.message, dp.callback_query):
        observer.middleware(database_middleware)

    for router in (catalog_router, main_menu_router, errors_router):
        dp.include_router(router)
        logger.info(f"✅ Router registered: {router.name}")

    return dp


async def run(config: Config) -> None:
    """Загрузить каталог, подготовить БД и запустить polling"""
    # Каталог загружается один раз и передается сервисам явно
    catalog_repository = CatalogRepository.from_file(config.CATALOG_PATH)
    session_factory, engine = await setup_database(config)

    bot = Bot(token=config.BOT_TOKEN, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    dp = create_dispatcher(config, session_factory, catalog_repository)

    logger.info("🚀 Bot started!")
    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()
        await engine.dispose()
        logger.info("Bot session and database connections closed")


def main() -> None:
    config = Config()
    setup_logging(config)

    if not config.BOT_TOKEN:
        logger.error("BOT_TOKEN is not set!")
        sys.exit(1)

    try:
        asyncio.run(run(config))
    except (KeyboardInterrupt, SystemExit):
        logger.info("Bot stopped!")
    except Exception as e:
        logger.critical(f"Critical error occurred: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
