"""
Модели конфигуратора и корзины: выбор пользователя и позиция корзины.
Позиции сериализуются в JSON с именами полей в camelCase.
"""
from dataclasses import dataclass, field
import hashlib
from typing import Any, Dict, List, Optional

from ..core.constants import ModifierCategory, PolishType, Material

# Длина ключа позиции в callback_data
ITEM_KEY_LENGTH = 12

# Категория модификатора -> поле выбора
SELECTION_FIELDS = {
    ModifierCategory.SIZES: "size",
    ModifierCategory.BASE_SIZES: "base_size",
    ModifierCategory.FLOWER_SIZES: "flower_size",
    ModifierCategory.POLISH_TYPES: "polish_type",
    ModifierCategory.MATERIALS: "material",
}


@dataclass
class Selection:
    """Текущий выбор пользователя в конфигураторе товара"""
    size: Optional[str] = None
    base_size: Optional[str] = None
    flower_size: Optional[str] = None
    polish_type: str = PolishType.MIRROR
    material: str = Material.BLACK_GRANITE
    engravings: List[str] = field(default_factory=list)

    def get(self, category: str) -> Optional[str]:
        """Выбранный ключ одиночной категории"""
        attr = SELECTION_FIELDS.get(category)
        return getattr(self, attr) if attr else None

    def select(self, category: str, key: str) -> None:
        """Выбрать вариант одиночной категории"""
        attr = SELECTION_FIELDS.get(category)
        if attr is None:
            raise ValueError(f"Category {category!r} is not single-select")
        setattr(self, attr, key)

    def toggle_engraving(self, key: str) -> bool:
        """Переключить гравировку. Возвращает True, если гравировка выбрана"""
        if key in self.engravings:
            self.engravings.remove(key)
            return False
        self.engravings.append(key)
        return True

    def to_dict(self) -> dict:
        return {
            "size": self.size,
            "base_size": self.base_size,
            "flower_size": self.flower_size,
            "polish_type": self.polish_type,
            "material": self.material,
            "engravings": list(self.engravings),
        }

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> "Selection":
        if not raw:
            return cls()
        engravings = []
        for key in raw.get("engravings") or []:
            if key not in engravings:
                engravings.append(str(key))
        return cls(
            size=raw.get("size"),
            base_size=raw.get("base_size"),
            flower_size=raw.get("flower_size"),
            polish_type=raw.get("polish_type") or PolishType.MIRROR,
            material=raw.get("material") or Material.BLACK_GRANITE,
            engravings=engravings,
        )


@dataclass(frozen=True)
class Characteristics:
    """Характеристики позиции с уже подставленными названиями"""
    size: Optional[str] = None
    base_size: Optional[str] = None
    flower_size: Optional[str] = None
    polish_type: Optional[str] = None
    material: Optional[str] = None
    engravings: tuple = ()

    def to_dict(self) -> dict:
        result: Dict[str, Any] = {}
        for key, value in (
            ("size", self.size),
            ("baseSize", self.base_size),
            ("flowerSize", self.flower_size),
            ("polishType", self.polish_type),
            ("material", self.material),
        ):
            if value is not None:
                result[key] = value
        result["engravings"] = list(self.engravings)
        return result

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> "Characteristics":
        raw = raw or {}
        if not isinstance(raw, dict):
            raise ValueError("characteristics must be an object")
        return cls(
            size=raw.get("size"),
            base_size=raw.get("baseSize"),
            flower_size=raw.get("flowerSize"),
            polish_type=raw.get("polishType"),
            material=raw.get("material"),
            engravings=tuple(str(name) for name in raw.get("engravings") or []),
        )


@dataclass(frozen=True)
class CartLineItem:
    """Позиция корзины. Цена и описание фиксируются в момент добавления, запись неизменяема"""
    identity: str
    product_id: int
    title: str
    unit_price: int
    image: str
    quantity: int
    article_code: str
    resolved_description: str
    resolved_characteristics: Characteristics = field(default_factory=Characteristics)

    @property
    def total_price(self) -> int:
        return self.unit_price * self.quantity

    @property
    def key(self) -> str:
        """Короткий ключ позиции для callback_data (хеш identity)"""
        return hashlib.sha1(self.identity.encode("utf-8")).hexdigest()[:ITEM_KEY_LENGTH]

    def to_dict(self) -> dict:
        return {
            "identity": self.identity,
            "productId": self.product_id,
            "title": self.title,
            "unitPrice": self.unit_price,
            "image": self.image,
            "quantity": self.quantity,
            "articleCode": self.article_code,
            "resolvedDescription": self.resolved_description,
            "resolvedCharacteristics": self.resolved_characteristics.to_dict(),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "CartLineItem":
        """
        Восстановить позицию из сохраненной записи.

        Raises:
            ValueError, KeyError, TypeError: запись повреждена
        """
        if not isinstance(raw, dict):
            raise TypeError("line item must be an object")
        identity = raw["identity"]
        if not isinstance(identity, str) or not identity:
            raise ValueError("identity must be a non-empty string")
        quantity = raw["quantity"]
        unit_price = raw["unitPrice"]
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError("quantity must be an integer")
        if isinstance(unit_price, bool) or not isinstance(unit_price, int):
            raise TypeError("unitPrice must be an integer")
        return cls(
            identity=identity,
            product_id=raw["productId"],
            title=str(raw.get("title") or ""),
            unit_price=unit_price,
            image=str(raw.get("image") or ""),
            quantity=quantity,
            article_code=str(raw.get("articleCode") or ""),
            resolved_description=str(raw.get("resolvedDescription") or ""),
            resolved_characteristics=Characteristics.from_dict(raw.get("resolvedCharacteristics")),
        )
