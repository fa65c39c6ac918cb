from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder
from typing import List

from ...models.cart import CartLineItem
from .common_kb import KeyboardBuilder, EMOJI
import logging

logger = logging.getLogger(__name__)


class CartKeyboard(KeyboardBuilder):
    """Клавиатуры для корзины. Позиции адресуются ключом, а не номером"""

    @classmethod
    def get_cart_keyboard(cls, cart_items: List[CartLineItem]) -> InlineKeyboardMarkup:
        """Клавиатура корзины"""
        kb = InlineKeyboardBuilder()

        for item in cart_items:
            kb.row(cls.create_button(
                text=cls.format_product_info(item.title, item.unit_price, item.quantity),
                callback_data=f"cart:item:{item.key}"
            ))

        if cart_items:
            kb.row(cls.create_button(
                text=f"{EMOJI['clear']} Очистить корзину",
                callback_data="cart:clear"
            ))

        kb.row(*cls.create_nav_row(include_cart=False))
        return kb.as_markup()

    @classmethod
    def get_empty_cart_keyboard(cls) -> InlineKeyboardMarkup:
        """Клавиатура для пустой корзины"""
        kb = InlineKeyboardBuilder()
        kb.row(*cls.create_nav_row(include_cart=False))
        return kb.as_markup()

    @classmethod
    def get_cart_item_keyboard(cls, item: CartLineItem) -> InlineKeyboardMarkup:
        """Клавиатура для отдельной позиции корзины"""
        kb = InlineKeyboardBuilder()

        kb.row(*cls.create_quantity_row(item.key, item.quantity))

        kb.row(cls.create_button(
            text=f"{EMOJI['delete']} Удалить из корзины",
            callback_data=f"cart:remove:{item.key}"
        ))

        kb.row(*cls.create_nav_row(
            {"text": f"{EMOJI['back']} К корзине", "callback_data": "menu:cart"},
            include_cart=False
        ))
        return kb.as_markup()

    @classmethod
    def get_clear_confirm_keyboard(cls) -> InlineKeyboardMarkup:
        """Подтверждение очистки корзины"""
        kb = InlineKeyboardBuilder()
        kb.row(
            cls.create_button(text=f"{EMOJI['confirm']} Да, очистить", callback_data="cart:clear:confirm"),
            cls.create_button(text=f"{EMOJI['cancel']} Отмена", callback_data="menu:cart")
        )
        return kb.as_markup()
