from dataclasses import replace
from typing import List, Optional
import json
import logging

from ..models.cart import CartLineItem, Selection
from ..models.catalog import Product
from ..repositories.cart_repository import CartStorage
from .line_item_builder import build_line_item, build_default_line_item

logger = logging.getLogger(__name__)


class CartService:
    """
    Корзина пользователя: упорядоченный список позиций, уникальных по identity.

    Инварианты: количество каждой позиции >= 1, одинаковые identity не повторяются.
    После каждого изменения полный снимок корзины сохраняется через CartStorage.
    """

    def __init__(self, storage: CartStorage, items: Optional[List[CartLineItem]] = None,
                 canonical_engravings: bool = False):
        self.storage = storage
        self.canonical_engravings = canonical_engravings
        self._items: List[CartLineItem] = []
        for item in items or []:
            self._merge(item)

    @classmethod
    async def load(cls, storage: CartStorage, canonical_engravings: bool = False) -> "CartService":
        """
        Создать корзину, восстановив ее из хранилища (один раз).
        Ошибки чтения хранилища пробрасываются, пустой считается только отсутствующий или поврежденный снимок.
        """
        payload = await storage.load()
        return cls(storage, cls.deserialize(payload), canonical_engravings=canonical_engravings)

    # ------------------------------------------------------------------
    # Сериализация
    # ------------------------------------------------------------------

    def serialize(self) -> str:
        """JSON-массив позиций с полями в camelCase"""
        return json.dumps([item.to_dict() for item in self._items], ensure_ascii=False)

    @staticmethod
    def deserialize(payload: Optional[str]) -> List[CartLineItem]:
        """
        Разобрать сохраненный снимок.
        Отсутствующий или поврежденный снимок - пустая корзина, не ошибка.
        """
        if not payload:
            return []
        try:
            raw_items = json.loads(payload)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Corrupt cart snapshot, starting with empty cart: {e}")
            return []
        if not isinstance(raw_items, list):
            logger.warning(f"Cart snapshot is not a list ({type(raw_items).__name__}), starting with empty cart")
            return []

        items = []
        for raw in raw_items:
            try:
                item = CartLineItem.from_dict(raw)
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed cart entry: {e}")
                continue
            if item.quantity < 1:
                logger.warning(f"Skipping cart entry {item.identity} with quantity {item.quantity}")
                continue
            items.append(item)
        return items

    async def _persist(self) -> None:
        await self.storage.save(self.serialize())

    # ------------------------------------------------------------------
    # Чтение
    # ------------------------------------------------------------------

    @property
    def items(self) -> List[CartLineItem]:
        return list(self._items)

    @property
    def total_items(self) -> int:
        """Общее количество единиц товара"""
        return sum(item.quantity for item in self._items)

    @property
    def total_price(self) -> int:
        """Общая стоимость корзины"""
        return sum(item.unit_price * item.quantity for item in self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def get_item(self, identity: str) -> Optional[CartLineItem]:
        return next((item for item in self._items if item.identity == identity), None)

    def get_item_by_key(self, key: str) -> Optional[CartLineItem]:
        """Позиция по короткому ключу из callback_data"""
        return next((item for item in self._items if item.key == key), None)

    def index_of(self, identity: str) -> Optional[int]:
        return next((i for i, item in enumerate(self._items) if item.identity == identity), None)

    # ------------------------------------------------------------------
    # Изменение
    # ------------------------------------------------------------------

    def _merge(self, line_item: CartLineItem) -> CartLineItem:
        index = self.index_of(line_item.identity)
        if index is None:
            self._items.append(line_item)
            return line_item
        # Цена и описание первой добавленной позиции не перезаписываются
        existing = self._items[index]
        merged = replace(existing, quantity=existing.quantity + line_item.quantity)
        self._items[index] = merged
        return merged

    async def add_item(self, line_item: CartLineItem) -> List[CartLineItem]:
        """
        Добавить позицию: при совпадении identity увеличивается количество,
        иначе позиция добавляется в конец.
        """
        if line_item.quantity <= 0:
            logger.warning(f"Invalid quantity {line_item.quantity} for {line_item.identity}, ignored")
            return self.items

        self._merge(line_item)
        await self._persist()
        logger.info(f"Cart item {line_item.identity} added (+{line_item.quantity}), total items: {self.total_items}")
        return self.items

    async def remove_item(self, identity: str) -> List[CartLineItem]:
        """Удалить позицию; если ее нет - ничего не делать"""
        before = len(self._items)
        self._items = [item for item in self._items if item.identity != identity]
        if len(self._items) != before:
            logger.info(f"Cart item {identity} removed")
        await self._persist()
        return self.items

    async def update_quantity(self, identity: str, quantity: int) -> List[CartLineItem]:
        """
        Установить количество позиции.
        Количество 0 и меньше удаляет позицию.
        """
        if quantity <= 0:
            return await self.remove_item(identity)

        index = self.index_of(identity)
        if index is None:
            logger.debug(f"Cart item {identity} not found for quantity update")
        else:
            self._items[index] = replace(self._items[index], quantity=quantity)
        await self._persist()
        return self.items

    async def clear_cart(self) -> List[CartLineItem]:
        """Очистить корзину"""
        self._items = []
        await self._persist()
        logger.info("Cart cleared")
        return self.items

    async def add_to_cart(self, product: Product, selection: Selection, quantity: int = 1) -> List[CartLineItem]:
        """Добавить настроенную в конфигураторе позицию"""
        line_item = build_line_item(product, selection, quantity, self.canonical_engravings)
        return await self.add_item(line_item)

    async def quick_add(self, product: Product, quantity: int = 1) -> List[CartLineItem]:
        """Быстрое добавление из каталога в стандартной комплектации"""
        return await self.add_item(build_default_line_item(product, quantity))
