from aiogram.utils.text_decorations import html_decoration
from typing import Optional

from ...models.catalog import Product
from ...models.cart import CartLineItem
from ...services.catalog import CatalogPage
from ..keyboards.common_kb import format_price

# Ограничение Telegram на подпись к фото
CAPTION_LIMIT = 1024


def format_product_card(
    product: Product,
    category_name: str,
    price: int,
    discount_price: Optional[int] = None,
    configuration: Optional[str] = None
) -> str:
    """Форматирует полную карточку товара с ценой текущей конфигурации"""
    text = f"🪦 <b>{product.title}</b>\n"
    text += f"{category_name} • Артикул: {product.article_code}\n\n"

    # Старая цена показывается, только если она больше итоговой
    if discount_price:
        text += f"💰 Цена: <b>{format_price(price)}</b> <s>{format_price(discount_price)}</s>\n"
    else:
        text += f"💰 Цена: <b>{format_price(price)}</b>\n"

    if configuration:
        text += f"\n⚙️ {configuration}\n"

    if product.description:
        description = f"\n📝 {product.description}"
        if len(text) + len(description) > CAPTION_LIMIT:
            description = description[:max(0, CAPTION_LIMIT - len(text) - 1)] + "…"
        text += description

    return text


def format_success_add(item: CartLineItem, quantity: int) -> str:
    """Форматирует сообщение об успешном добавлении в корзину"""
    text = "✅ Товар добавлен в корзину!\n\n"
    text += f"🪦 {item.title}\n"
    if item.resolved_description:
        text += f"⚙️ {item.resolved_description}\n"
    text += f"💰 Цена: {format_price(item.unit_price)}\n"
    text += f"🔢 Количество: {quantity} шт.\n"
    return text


def format_products_list(title: str, page: CatalogPage) -> str:
    """Заголовок страницы списка товаров. Заголовок может содержать запрос пользователя"""
    text = f"🛍 <b>{html_decoration.quote(title)}</b>\n\n"
    if not page.total_count:
        return text + "К сожалению, здесь пока нет товаров."
    text += f"Найдено товаров: {page.total_count}\n"
    text += "Нажмите на товар, чтобы настроить его, или ⚡️🛒 для быстрого добавления."
    return text
