from abc import ABC, abstractmethod
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from ..models.models import StorageEntry
from ..core.base import BaseRepository

logger = logging.getLogger(__name__)


class CartStorage(ABC):
    """
    Порт хранения корзины: один сериализованный снимок под одним ключом.
    Носитель (БД, память, файл) меняется без изменения логики корзины.
    """

    @abstractmethod
    async def load(self) -> Optional[str]:
        """Прочитать сохраненный снимок; None, если его нет"""

    @abstractmethod
    async def save(self, snapshot: str) -> None:
        """Полностью перезаписать снимок"""


class InMemoryCartStorage(CartStorage):
    """Хранилище в памяти процесса (тесты, запуск без БД)"""

    def __init__(self, snapshot: Optional[str] = None):
        self.snapshot = snapshot
        self.saves = 0

    async def load(self) -> Optional[str]:
        return self.snapshot

    async def save(self, snapshot: str) -> None:
        self.snapshot = snapshot
        self.saves += 1


class SqlCartStorage(BaseRepository, CartStorage):
    """Корзина пользователя в таблице storage_entries"""

    def __init__(self, session: AsyncSession, owner_id: int, key: str = "cart"):
        super().__init__(session)
        self.owner_id = owner_id
        self.key = key

    async def _get_entry(self) -> Optional[StorageEntry]:
        query = select(StorageEntry).where(
            StorageEntry.owner_id == self.owner_id,
            StorageEntry.key == self.key
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def load(self) -> Optional[str]:
        """Получить сохраненную корзину пользователя"""
        entry = await self._get_entry()
        return entry.value if entry else None

    async def save(self, snapshot: str) -> None:
        """Сохранить корзину (коммит делает middleware)"""
        entry = await self._get_entry()
        if entry:
            entry.value = snapshot
        else:
            self.session.add(StorageEntry(owner_id=self.owner_id, key=self.key, value=snapshot))
        await self.flush()
        logger.debug(f"Cart snapshot saved for owner {self.owner_id} ({len(snapshot)} bytes)")
