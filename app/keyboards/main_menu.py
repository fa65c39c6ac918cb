from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from ..core.constants import CURRENCY_SIGN


class MainKeyboard:
    """Клавиатуры главного меню"""

    @staticmethod
    def get_main_keyboard(cart_items: int = 0, cart_total: int = 0) -> InlineKeyboardMarkup:
        """Главное меню: каталог, поиск, корзина"""
        kb = InlineKeyboardBuilder()

        kb.row(InlineKeyboardButton(text="🛍 Каталог", callback_data="menu:catalog"))
        kb.row(InlineKeyboardButton(text="🔍 Поиск", callback_data="menu:search"))

        cart_text = "🛒 Корзина"
        if cart_items:
            formatted_total = f"{cart_total:,}".replace(",", " ")
            cart_text += f" ({cart_items} шт. • {formatted_total} {CURRENCY_SIGN})"
        kb.row(InlineKeyboardButton(text=cart_text, callback_data="menu:cart"))

        return kb.as_markup()

    @staticmethod
    def get_back_to_main_menu() -> InlineKeyboardMarkup:
        """Кнопка возврата в главное меню"""
        kb = InlineKeyboardBuilder()
        kb.row(InlineKeyboardButton(text="↩️ В главное меню", callback_data="menu:main"))
        return kb.as_markup()
