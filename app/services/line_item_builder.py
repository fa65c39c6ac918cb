"""
Построение позиции корзины из выбранной конфигурации.

Идентификатор позиции детерминированно зависит от товара и всех выбранных
ключей: одинаковые конфигурации объединяются в корзине в одну строку.
"""
from typing import Dict, List, Optional
import logging

from ..core.constants import (
    ModifierCategory,
    PolishType,
    Material,
    IDENTITY_SEPARATOR,
    DEFAULT_IDENTITY_SUFFIX,
    PLACEHOLDER_IMAGE_URL,
    QUICK_ADD_CHARACTERISTICS,
    QUICK_ADD_DESCRIPTION,
    STANDARD_DISPLAY_NAMES,
    STANDARD_POLISH_TYPES,
)
from ..models.catalog import Product, ModifierTable, parse_modifier_table
from ..models.cart import Selection, Characteristics, CartLineItem
from .pricing import compute_price, get_base_price

logger = logging.getLogger(__name__)


def _first_key(table: ModifierTable) -> Optional[str]:
    return next(iter(table), None)


def default_selection(product: Product) -> Selection:
    """Начальный выбор: первый вариант каждой доступной таблицы"""
    return Selection(
        size=_first_key(product.get_modifier_table(ModifierCategory.SIZES)),
        base_size=_first_key(product.get_modifier_table(ModifierCategory.BASE_SIZES)),
        flower_size=_first_key(product.get_modifier_table(ModifierCategory.FLOWER_SIZES)),
        polish_type=_first_key(product.get_modifier_table(ModifierCategory.POLISH_TYPES)) or PolishType.MIRROR,
        material=_first_key(product.get_modifier_table(ModifierCategory.MATERIALS)) or Material.BLACK_GRANITE,
        engravings=[],
    )


def get_option_table(product: Product, category: str) -> ModifierTable:
    """
    Варианты категории для показа в конфигураторе.
    Полировка доступна всегда: без своей таблицы показываются стандартные варианты.
    """
    table = product.get_modifier_table(category)
    if not table and category == ModifierCategory.POLISH_TYPES:
        return parse_modifier_table(STANDARD_POLISH_TYPES)
    return table


def resolve_display_name(
    table: Optional[ModifierTable],
    key: Optional[str],
    fallback_names: Optional[Dict[str, str]] = None
) -> Optional[str]:
    """
    Название выбранного варианта.

    Порядок: название из таблицы товара -> стандартное название -> сам ключ.
    None возвращается только если ничего не выбрано.
    """
    if not key:
        return None
    option = (table or {}).get(key)
    if option is not None:
        return option.display_name
    if fallback_names and key in fallback_names:
        return fallback_names[key]
    return key


def _resolve(product: Product, category: str, key: Optional[str]) -> Optional[str]:
    return resolve_display_name(
        product.get_modifier_table(category),
        key,
        STANDARD_DISPLAY_NAMES.get(category)
    )


def resolve_characteristics(product: Product, selection: Selection) -> Characteristics:
    """Подставить названия для всех выбранных ключей"""
    engravings: List[str] = [
        _resolve(product, ModifierCategory.ENGRAVINGS, key)
        for key in selection.engravings
    ]
    return Characteristics(
        size=_resolve(product, ModifierCategory.SIZES, selection.size),
        base_size=_resolve(product, ModifierCategory.BASE_SIZES, selection.base_size),
        flower_size=_resolve(product, ModifierCategory.FLOWER_SIZES, selection.flower_size),
        polish_type=_resolve(product, ModifierCategory.POLISH_TYPES, selection.polish_type),
        material=_resolve(product, ModifierCategory.MATERIALS, selection.material),
        engravings=tuple(engravings),
    )


def describe_characteristics(characteristics: Characteristics) -> str:
    """Строка вида "Размер стелы: ..., Материал: ..." по заполненным категориям"""
    pairs = [
        (ModifierCategory.SIZES, characteristics.size),
        (ModifierCategory.BASE_SIZES, characteristics.base_size),
        (ModifierCategory.FLOWER_SIZES, characteristics.flower_size),
        (ModifierCategory.POLISH_TYPES, characteristics.polish_type),
        (ModifierCategory.MATERIALS, characteristics.material),
    ]
    parts = [f"{ModifierCategory.get_label(category)}: {value}" for category, value in pairs if value]
    if characteristics.engravings:
        label = ModifierCategory.get_label(ModifierCategory.ENGRAVINGS)
        parts.append(f"{label}: {', '.join(characteristics.engravings)}")
    return ", ".join(parts)


def build_configuration_identity(
    product_id: int,
    selection: Selection,
    canonical_engravings: bool = False
) -> str:
    """
    Идентификатор конфигурации:
    "{id}-{стела}-{подставка}-{цветник}-{полировка}-{материал}-{гравировки}".

    Все шесть позиций присутствуют всегда (пустая строка, если ничего не выбрано).
    Гравировки идут в порядке выбора, при canonical_engravings - по алфавиту.
    """
    engravings = sorted(selection.engravings) if canonical_engravings else list(selection.engravings)
    parts = [
        str(product_id),
        selection.size or "",
        selection.base_size or "",
        selection.flower_size or "",
        selection.polish_type or "",
        selection.material or "",
        IDENTITY_SEPARATOR.join(engravings),
    ]
    return IDENTITY_SEPARATOR.join(parts)


def get_placeholder_image(product_id: int) -> str:
    return PLACEHOLDER_IMAGE_URL.format(seed=10 + product_id)


def get_line_item_image(product: Product) -> str:
    """Главное изображение товара или заглушка"""
    image = product.main_image
    if image and image.url:
        return image.url
    return get_placeholder_image(product.id)


def build_line_item(
    product: Product,
    selection: Selection,
    quantity: int = 1,
    canonical_engravings: bool = False
) -> CartLineItem:
    """
    Собрать позицию корзины из конфигурации.
    Цена рассчитывается один раз и дальше не пересчитывается.

    Raises:
        ValueError: quantity меньше 1
    """
    if quantity < 1:
        raise ValueError(f"Quantity must be positive, got {quantity}")

    characteristics = resolve_characteristics(product, selection)
    return CartLineItem(
        identity=build_configuration_identity(product.id, selection, canonical_engravings),
        product_id=product.id,
        title=product.title,
        unit_price=compute_price(product, selection),
        image=get_line_item_image(product),
        quantity=quantity,
        article_code=product.article_code,
        resolved_description=describe_characteristics(characteristics),
        resolved_characteristics=characteristics,
    )


def build_default_line_item(product: Product, quantity: int = 1) -> CartLineItem:
    """
    Позиция "быстрого добавления" из каталога, без конфигуратора.
    Цена - цена карточки каталога (стандартная комплектация).
    Все такие добавления одного товара объединяются между собой,
    но не с настроенными конфигурациями того же товара.
    """
    if quantity < 1:
        raise ValueError(f"Quantity must be positive, got {quantity}")

    return CartLineItem(
        identity=f"{product.id}{IDENTITY_SEPARATOR}{DEFAULT_IDENTITY_SUFFIX}",
        product_id=product.id,
        title=product.title,
        unit_price=get_base_price(product),
        image=get_line_item_image(product),
        quantity=quantity,
        article_code=product.article_code,
        resolved_description=QUICK_ADD_DESCRIPTION,
        resolved_characteristics=Characteristics(**QUICK_ADD_CHARACTERISTICS),
    )
