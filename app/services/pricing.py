"""
Расчет итоговой цены памятника по выбранной конфигурации.

Порядок расчета:
1. базовая цена товара (base_price, при отсутствии - price);
2. + надбавки одиночных категорий (стела, подставка, цветник, материал);
3. + надбавки всех выбранных гравировок;
4. комбинированная полировка умножает полную сумму на 1.15 (округление half-up).
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
import logging

from ..core.constants import ModifierCategory, PolishType, COMBINED_POLISH_MULTIPLIER
from ..models.catalog import Product
from ..models.cart import Selection

logger = logging.getLogger(__name__)


def get_base_price(product: Product) -> int:
    """Опорная цена товара; price используется только если base_price не задан"""
    return product.base_price or product.price or 0


def apply_polish_surcharge(amount: int, polish_type: Optional[str]) -> int:
    """Надбавка за комбинированную полировку (определяется по ключу, не по названию)"""
    if polish_type != PolishType.COMBINED:
        return amount
    surcharged = Decimal(amount) * Decimal(COMBINED_POLISH_MULTIPLIER)
    return int(surcharged.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_price(product: Product, selection: Selection) -> int:
    """
    Рассчитать цену за единицу для выбранной конфигурации.

    Ключи, которых нет в таблице товара, пропускаются без ошибки:
    вариант мог устареть после обновления каталога.

    Args:
        product: Товар
        selection: Выбор пользователя

    Returns:
        Неотрицательная цена в рублях
    """
    price = get_base_price(product)

    for category in ModifierCategory.get_additive():
        key = selection.get(category)
        if not key:
            continue
        option = product.get_modifier_table(category).get(key)
        if option is None:
            logger.debug(f"Product {product.id}: stale {category} key {key!r} ignored")
            continue
        price += option.price_delta

    engravings = product.get_modifier_table(ModifierCategory.ENGRAVINGS)
    for key in selection.engravings:
        option = engravings.get(key)
        if option is None:
            logger.debug(f"Product {product.id}: stale engraving key {key!r} ignored")
            continue
        price += option.price_delta

    price = apply_polish_surcharge(price, selection.polish_type)
    return max(price, 0)


def get_discount_price(product: Product, final_price: int) -> Optional[int]:
    """Зачеркнутая цена показывается, только если она выше итоговой"""
    if product.discount_price and product.discount_price > final_price:
        return product.discount_price
    return None
