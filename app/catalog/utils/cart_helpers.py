"""
Вспомогательные функции для работы с корзиной.
Выносим форматирование и разбор callback_data из cart.py.
"""
from typing import List, Optional
import logging
import string

from ...models.cart import CartLineItem, ITEM_KEY_LENGTH
from ..keyboards.common_kb import format_price

logger = logging.getLogger(__name__)


def parse_cart_key(callback_data: str) -> Optional[str]:
    """Безопасно парсит ключ позиции из callback_data вида cart:plus:1a2b3c4d5e6f"""
    parts = callback_data.split(":")
    key = parts[2] if len(parts) == 3 else ""
    if len(key) != ITEM_KEY_LENGTH or any(c not in string.hexdigits for c in key):
        logger.error(f"Invalid callback data: {callback_data}")
        return None
    return key


def format_cart_item_text(item: CartLineItem) -> str:
    """Форматирует текст для отображения позиции корзины"""
    text = f"🛒 <b>{item.title}</b>\n"
    text += f"Артикул: {item.article_code}\n\n"

    if item.resolved_description:
        text += f"⚙️ {item.resolved_description}\n\n"

    text += f"🔢 Количество: {item.quantity} шт.\n"
    text += f"💰 Цена за единицу: {format_price(item.unit_price)}\n"
    text += f"💰 Общая стоимость: <b>{format_price(item.total_price)}</b>\n"
    return text


def format_cart_summary_text(cart_items: List[CartLineItem], total_items: int, total_price: int) -> str:
    """Форматирует текст корзины с итогами, посчитанными корзиной"""
    if not cart_items:
        return "🛒 <b>Ваша корзина пуста</b>\n\nДобавьте памятник из каталога."

    text = "🛒 <b>Ваша корзина:</b>\n\n"
    for number, item in enumerate(cart_items, start=1):
        text += f"{number}. {item.title}\n"
        if item.resolved_description:
            text += f"   <i>{item.resolved_description}</i>\n"
        text += f"   {item.quantity} шт. × {format_price(item.unit_price)} = {format_price(item.total_price)}\n\n"

    text += f"📦 Товаров: {total_items} шт.\n"
    text += f"💰 <b>Итого: {format_price(total_price)}</b>"
    return text
