from typing import Any, Awaitable, Callable, Dict
from aiogram import BaseMiddleware
from aiogram.types import TelegramObject
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import logging

from app.config import Config
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.cart_repository import SqlCartStorage
from app.services.cart import CartService
from app.services.catalog import CatalogService

logger = logging.getLogger(__name__)


class DatabaseMiddleware(BaseMiddleware):
    """
    Middleware для работы с базой данных и предоставления сервисов.

    На каждое обновление открывается сессия, корзина пользователя
    восстанавливается из хранилища, после обработчика транзакция коммитится.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        catalog_repository: CatalogRepository,
        config: Config
    ):
        """Инициализация middleware"""
        self.session_factory = session_factory
        self.catalog_repository = catalog_repository
        self.config = config

    def create_catalog_service(self) -> CatalogService:
        return CatalogService(
            self.catalog_repository,
            page_size=self.config.CATALOG_PAGE_SIZE,
            search_min_length=self.config.SEARCH_MIN_LENGTH,
            suggestions_limit=self.config.SEARCH_SUGGESTIONS_LIMIT,
            image_base_url=self.config.IMAGE_BASE_URL,
        )

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any]
    ) -> Any:
        """Обработка запроса"""
        user = data.get("event_from_user")
        owner_id = user.id if user else 0

        async with self.session_factory() as session:
            try:
                storage = SqlCartStorage(session, owner_id, key=self.config.CART_STORAGE_KEY)
                cart_service = await CartService.load(
                    storage,
                    canonical_engravings=self.config.CANONICAL_ENGRAVING_ORDER
                )

                # Добавляем сервисы в data для aiogram3-di
                data.update({
                    "session": session,
                    "catalog_service": self.create_catalog_service(),
                    "cart_service": cart_service,
                    "database_middleware": self,
                })

                logger.debug(f"Services created for user {owner_id}, cart items: {cart_service.total_items}")

                result = await handler(event, data)

                # Если всё прошло успешно, коммитим транзакцию
                await session.commit()
                return result

            except Exception as e:
                # В случае ошибки откатываем транзакцию
                await session.rollback()
                logger.error(f"Database error in middleware: {e}", exc_info=True)
                raise
