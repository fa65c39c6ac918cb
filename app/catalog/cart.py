"""
Обработчики корзины.
Форматирование вынесено в utils/cart_helpers.py
"""
from aiogram import Router, F
from aiogram.types import CallbackQuery
from typing import Optional
import logging

from ..utils.message_editor import update_message
from .keyboards.cart_kb import CartKeyboard
from ..models.cart import CartLineItem
from ..services.cart import CartService
from ..utils.callback_helpers import safe_callback_answer
from .utils.cart_helpers import (
    parse_cart_key,
    format_cart_item_text,
    format_cart_summary_text,
)

logger = logging.getLogger(__name__)
router = Router(name="cart_handlers")


def find_cart_item(callback: CallbackQuery, cart_service: CartService) -> Optional[CartLineItem]:
    """Позиция корзины по ключу из callback_data"""
    key = parse_cart_key(callback.data)
    return cart_service.get_item_by_key(key) if key else None


async def render_cart(callback: CallbackQuery, cart_service: CartService):
    """Показать корзину целиком"""
    items = cart_service.items
    text = format_cart_summary_text(items, cart_service.total_items, cart_service.total_price)
    if items:
        keyboard = CartKeyboard.get_cart_keyboard(items)
    else:
        keyboard = CartKeyboard.get_empty_cart_keyboard()
    await update_message(callback, text=text, reply_markup=keyboard)


async def render_cart_item(callback: CallbackQuery, cart_service: CartService, identity: str):
    """Показать позицию корзины; если ее уже нет - всю корзину"""
    item = cart_service.get_item(identity)
    if item is None:
        await render_cart(callback, cart_service)
        return
    await update_message(
        callback,
        text=format_cart_item_text(item),
        reply_markup=CartKeyboard.get_cart_item_keyboard(item)
    )


# =============================================================================
# НАВИГАЦИЯ В КОРЗИНУ
# =============================================================================

@router.callback_query(F.data == "menu:cart")
async def show_cart_menu(callback: CallbackQuery, cart_service: CartService):
    """Переход в корзину из главного меню"""
    try:
        logger.info(f"User {callback.from_user.id} opened cart ({cart_service.total_items} items)")
        await render_cart(callback, cart_service)
        await safe_callback_answer(callback)

    except Exception as e:
        logger.error(f"Error showing cart: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Ошибка при переходе в корзину")


# =============================================================================
# ОБРАБОТЧИКИ ПОЗИЦИЙ КОРЗИНЫ
# =============================================================================

@router.callback_query(F.data.startswith("cart:item:"))
async def show_cart_item(callback: CallbackQuery, cart_service: CartService):
    """Показать позицию корзины"""
    try:
        item = find_cart_item(callback, cart_service)
        if item is None:
            await safe_callback_answer(callback, "❌ Товар не найден в корзине")
            await render_cart(callback, cart_service)
            return

        await render_cart_item(callback, cart_service, item.identity)
        await safe_callback_answer(callback)

    except Exception as e:
        logger.error(f"Unexpected error showing cart item for user {callback.from_user.id}: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Произошла ошибка при просмотре товара")


@router.callback_query(F.data.startswith("cart:plus:") | F.data.startswith("cart:minus:"))
async def change_quantity(callback: CallbackQuery, cart_service: CartService):
    """
    Изменить количество на единицу.
    Уменьшение до нуля удаляет позицию из корзины.
    """
    try:
        item = find_cart_item(callback, cart_service)
        if item is None:
            await safe_callback_answer(callback, "❌ Товар не найден в корзине")
            await render_cart(callback, cart_service)
            return

        delta = 1 if callback.data.startswith("cart:plus:") else -1
        new_quantity = item.quantity + delta
        await cart_service.update_quantity(item.identity, new_quantity)

        if new_quantity <= 0:
            logger.info(f"User {callback.from_user.id} removed {item.identity} by decreasing quantity")
            await render_cart(callback, cart_service)
            await safe_callback_answer(callback, "🗑 Товар удален из корзины")
            return

        await render_cart_item(callback, cart_service, item.identity)
        await safe_callback_answer(callback, f"✅ Количество: {new_quantity} шт.")

    except Exception as e:
        logger.error(f"Error changing quantity for user {callback.from_user.id}: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Ошибка при изменении количества")


@router.callback_query(F.data.startswith("cart:remove:"))
async def remove_item(callback: CallbackQuery, cart_service: CartService):
    """Удалить позицию из корзины"""
    try:
        item = find_cart_item(callback, cart_service)
        if item is None:
            await safe_callback_answer(callback, "❌ Товар не найден в корзине")
            await render_cart(callback, cart_service)
            return

        await cart_service.remove_item(item.identity)
        await render_cart(callback, cart_service)
        await safe_callback_answer(callback, "🗑 Товар удален из корзины")

    except Exception as e:
        logger.error(f"Error removing cart item for user {callback.from_user.id}: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Ошибка при удалении товара")


# =============================================================================
# ОЧИСТКА КОРЗИНЫ
# =============================================================================

@router.callback_query(F.data == "cart:clear")
async def confirm_clear_cart(callback: CallbackQuery):
    """Запросить подтверждение очистки"""
    try:
        await update_message(
            callback,
            text="🧹 <b>Очистить корзину?</b>\n\nВсе товары будут удалены.",
            reply_markup=CartKeyboard.get_clear_confirm_keyboard()
        )
        await safe_callback_answer(callback)

    except Exception as e:
        logger.error(f"Error showing clear confirmation: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Произошла ошибка")


@router.callback_query(F.data == "cart:clear:confirm")
async def clear_cart(callback: CallbackQuery, cart_service: CartService):
    """Очистить корзину"""
    try:
        await cart_service.clear_cart()
        logger.info(f"User {callback.from_user.id} cleared cart")
        await render_cart(callback, cart_service)
        await safe_callback_answer(callback, "✅ Корзина очищена")

    except Exception as e:
        logger.error(f"Error clearing cart for user {callback.from_user.id}: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Ошибка при очистке корзины")
