from aiogram.types import InlineKeyboardButton
from typing import List, Dict, Optional, Union

from ...core.constants import CURRENCY_SIGN

# Эмодзи для кнопок
EMOJI = {
    "cart": "🛒",
    "back": "↩️",
    "prev": "◀️",
    "next": "▶️",
    "confirm": "✅",
    "catalog": "🛍",
    "home": "🏠",
    "delete": "🗑",
    "minus": "➖",
    "plus": "➕",
    "quick": "⚡️",
    "search": "🔍",
    "clear": "🧹",
    "cancel": "❌",
}


def format_price(value: int) -> str:
    """19000 -> '19 000 ₽'"""
    return f"{value:,}".replace(",", " ") + f" {CURRENCY_SIGN}"


class KeyboardBuilder:
    """Базовый класс для создания клавиатур"""

    @staticmethod
    def create_button(text: str, callback_data: str) -> InlineKeyboardButton:
        """Создает кнопку с текстом и callback_data"""
        return InlineKeyboardButton(text=text, callback_data=callback_data)

    @staticmethod
    def create_nav_row(
        *buttons: Union[str, Dict[str, str]],
        include_cart: bool = True,
        include_catalog: bool = True,
        include_main: bool = True
    ) -> List[InlineKeyboardButton]:
        """Создает ряд навигационных кнопок"""
        nav_row = [
            InlineKeyboardButton(text=button, callback_data="ignore") if isinstance(button, str)
            else InlineKeyboardButton(text=button["text"], callback_data=button["callback_data"])
            for button in buttons
        ]

        if include_cart:
            nav_row.append(InlineKeyboardButton(text=f"{EMOJI['cart']} Корзина", callback_data="menu:cart"))
        if include_catalog:
            nav_row.append(InlineKeyboardButton(text=f"{EMOJI['catalog']} Каталог", callback_data="menu:catalog"))
        if include_main:
            nav_row.append(InlineKeyboardButton(text=f"{EMOJI['home']} Меню", callback_data="menu:main"))

        return nav_row

    @staticmethod
    def create_pagination_row(
        page: int,
        total_pages: int,
        callback_prefix: str
    ) -> List[InlineKeyboardButton]:
        """Ряд пагинации: ◀️ 2/5 ▶️"""
        row = []
        if page > 1:
            row.append(InlineKeyboardButton(text=EMOJI["prev"], callback_data=f"{callback_prefix}:{page - 1}"))
        row.append(InlineKeyboardButton(text=f"{page}/{total_pages}", callback_data="ignore"))
        if page < total_pages:
            row.append(InlineKeyboardButton(text=EMOJI["next"], callback_data=f"{callback_prefix}:{page + 1}"))
        return row

    @staticmethod
    def create_quantity_row(item_key: str, current_quantity: int, prefix: str = "cart") -> List[InlineKeyboardButton]:
        """Создает ряд кнопок для управления количеством позиции корзины"""
        return [
            InlineKeyboardButton(text=EMOJI["minus"], callback_data=f"{prefix}:minus:{item_key}"),
            InlineKeyboardButton(text=f"{current_quantity} шт.", callback_data="ignore"),
            InlineKeyboardButton(text=EMOJI["plus"], callback_data=f"{prefix}:plus:{item_key}"),
        ]

    @staticmethod
    def create_option_rows(
        options: List[tuple],
        selected: Union[str, List[str], None],
        callback_prefix: str,
        per_row: int = 2
    ) -> List[List[InlineKeyboardButton]]:
        """
        Ряды кнопок выбора опции.

        Args:
            options: список пар (ключ, подпись)
            selected: выбранный ключ или список выбранных ключей
            callback_prefix: в callback_data передается номер опции, а не ключ
        """
        if isinstance(selected, (list, tuple)):
            selected_keys = set(selected)
        else:
            selected_keys = {selected} if selected else set()

        rows = []
        current_row = []
        for index, (key, label) in enumerate(options):
            text = f"{EMOJI['confirm']} {label}" if key in selected_keys else label
            current_row.append(InlineKeyboardButton(text=text, callback_data=f"{callback_prefix}:{index}"))
            if len(current_row) == per_row:
                rows.append(current_row)
                current_row = []

        if current_row:
            rows.append(current_row)

        return rows

    @staticmethod
    def format_product_info(title: str, price: int, quantity: Optional[int] = None) -> str:
        """Краткая подпись товара для кнопки"""
        text = f"{title} • {format_price(price)}"
        if quantity:
            text += f" × {quantity}"
        return text
