"""
Базовые классы для архитектуры
"""
from abc import ABC
from sqlalchemy.ext.asyncio import AsyncSession
import logging

logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """Базовый класс для репозиториев, работающих с сессией БД"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def flush(self):
        """Отправить изменения в БД без коммита (коммит делает middleware)"""
        await self.session.flush()

    async def rollback(self):
        """Откатить транзакцию"""
        await self.session.rollback()
