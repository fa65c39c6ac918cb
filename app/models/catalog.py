"""
Модели каталога: товары, категории, таблицы модификаторов цены.
Каталог загружается один раз при старте и дальше не меняется.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
import logging

from ..core.constants import ModifierCategory

logger = logging.getLogger(__name__)


def _to_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    """Безопасно привести значение к int"""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        try:
            return int(float(value))
        except (ValueError, TypeError):
            return default


@dataclass(frozen=True)
class ModifierOption:
    """Вариант модификатора: надбавка к цене и отображаемое название"""
    price_delta: int
    display_name: str

    @classmethod
    def from_raw(cls, key: str, raw: Any) -> "ModifierOption":
        # В данных встречается как {"price": 2500, "name": "..."}, так и просто число
        if isinstance(raw, dict):
            return cls(
                price_delta=_to_int(raw.get("price")),
                display_name=str(raw.get("name") or key),
            )
        return cls(price_delta=_to_int(raw), display_name=key)


ModifierTable = Dict[str, ModifierOption]


def parse_modifier_table(raw: Any) -> Optional[ModifierTable]:
    """Разобрать таблицу модификаторов, сохраняя порядок ключей"""
    if raw is None:
        return None
    if not isinstance(raw, dict):
        logger.warning(f"Unexpected modifier table format: {type(raw).__name__}")
        return None
    return {str(key): ModifierOption.from_raw(str(key), value) for key, value in raw.items()}


@dataclass(frozen=True)
class PriceModifiers:
    """Шесть независимых (необязательных) таблиц модификаторов товара"""
    sizes: Optional[ModifierTable] = None
    base_sizes: Optional[ModifierTable] = None
    flower_sizes: Optional[ModifierTable] = None
    polish_types: Optional[ModifierTable] = None
    materials: Optional[ModifierTable] = None
    engravings: Optional[ModifierTable] = None

    def get_table(self, category: str) -> ModifierTable:
        """Таблица категории или пустой словарь"""
        if not ModifierCategory.is_valid(category):
            return {}
        return getattr(self, category) or {}

    def has_table(self, category: str) -> bool:
        return bool(self.get_table(category))

    @property
    def is_empty(self) -> bool:
        return not any(self.has_table(c) for c in ModifierCategory.get_all())

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> "PriceModifiers":
        if not raw:
            return cls()
        return cls(**{
            category: parse_modifier_table(raw.get(category))
            for category in ModifierCategory.get_all()
        })


@dataclass(frozen=True)
class ProductImage:
    id: int
    url: str
    is_main: bool = False

    @classmethod
    def from_dict(cls, raw: dict) -> "ProductImage":
        return cls(
            id=_to_int(raw.get("id")),
            url=str(raw.get("image_url") or raw.get("url") or ""),
            is_main=bool(raw.get("is_main", False)),
        )


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    image_url: str = ""

    @classmethod
    def from_dict(cls, raw: dict) -> "Category":
        return cls(
            id=_to_int(raw.get("id")),
            name=str(raw.get("name") or ""),
            image_url=str(raw.get("image_url") or ""),
        )


@dataclass(frozen=True)
class Product:
    """
    Товар каталога.

    base_price - опорная цена для расчета, price - запасная цена,
    discount_price - справочная "старая" цена (только для отображения).
    """
    id: int
    title: str
    description: str = ""
    category_id: Optional[int] = None
    base_price: int = 0
    price: int = 0
    discount_price: int = 0
    images: Tuple[ProductImage, ...] = ()
    modifiers: Optional[PriceModifiers] = field(default=None)

    def __repr__(self):
        return f"<Product(id={self.id}, title='{self.title}', base_price={self.base_price})>"

    def get_modifier_table(self, category: str) -> ModifierTable:
        """Таблица модификаторов категории; отсутствие таблиц - не ошибка"""
        if self.modifiers is None:
            return {}
        return self.modifiers.get_table(category)

    @property
    def main_image(self) -> Optional[ProductImage]:
        """Главное изображение, иначе первое"""
        for image in self.images:
            if image.is_main:
                return image
        return self.images[0] if self.images else None

    @property
    def article_code(self) -> str:
        return f"00{self.id}"

    @classmethod
    def from_dict(cls, raw: dict) -> "Product":
        modifiers_raw = raw.get("price_modifiers")
        return cls(
            id=_to_int(raw.get("id")),
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            category_id=_to_int(raw.get("category_id"), default=None),
            base_price=_to_int(raw.get("base_price")),
            price=_to_int(raw.get("price")),
            discount_price=_to_int(raw.get("discount_price")),
            images=tuple(ProductImage.from_dict(image) for image in raw.get("images") or [] if isinstance(image, dict)),
            modifiers=PriceModifiers.from_dict(modifiers_raw) if isinstance(modifiers_raw, dict) else None,
        )
