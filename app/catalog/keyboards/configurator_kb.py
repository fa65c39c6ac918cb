from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder
from typing import Optional

from ...core.constants import ModifierCategory
from ...models.catalog import Product
from ...models.cart import Selection
from ...services.line_item_builder import get_option_table
from .common_kb import KeyboardBuilder, EMOJI, format_price

# Короткие коды категорий для callback_data (ограничение Telegram - 64 байта)
CATEGORY_CODES = {
    ModifierCategory.SIZES: "sz",
    ModifierCategory.BASE_SIZES: "bs",
    ModifierCategory.FLOWER_SIZES: "fl",
    ModifierCategory.POLISH_TYPES: "po",
    ModifierCategory.MATERIALS: "ma",
    ModifierCategory.ENGRAVINGS: "en",
}
CODE_CATEGORIES = {code: category for category, code in CATEGORY_CODES.items()}


def get_option_keys(product: Product, category: str) -> list:
    """Ключи вариантов в порядке кнопок"""
    return list(get_option_table(product, category))


class ConfiguratorKeyboard(KeyboardBuilder):
    """Клавиатура карточки товара с конфигуратором"""

    @classmethod
    def get_configurator_keyboard(
        cls,
        product: Product,
        selection: Selection,
        prev_product_id: Optional[int] = None,
        next_product_id: Optional[int] = None
    ) -> InlineKeyboardMarkup:
        kb = InlineKeyboardBuilder()

        for category in ModifierCategory.get_all():
            table = get_option_table(product, category)
            if not table:
                continue

            kb.row(cls.create_button(text=f"— {ModifierCategory.get_label(category)} —", callback_data="ignore"))

            if category == ModifierCategory.ENGRAVINGS:
                options = [
                    (key, f"{option.display_name} +{format_price(option.price_delta)}")
                    for key, option in table.items()
                ]
                selected = selection.engravings
            else:
                options = [(key, option.display_name) for key, option in table.items()]
                selected = selection.get(category)

            for row in cls.create_option_rows(
                options,
                selected,
                callback_prefix=f"cfg:{product.id}:{CATEGORY_CODES[category]}",
                per_row=1 if category in (ModifierCategory.SIZES, ModifierCategory.POLISH_TYPES) else 2
            ):
                kb.row(*row)

        kb.row(cls.create_button(
            text=f"{EMOJI['cart']} Добавить в корзину",
            callback_data=f"cfg:{product.id}:add"
        ))

        # Навигация между товарами списка
        nav_row = []
        if prev_product_id:
            nav_row.append(cls.create_button(text=EMOJI["prev"], callback_data=f"product:{prev_product_id}"))
        nav_row.append(cls.create_button(text=f"{EMOJI['back']} К списку", callback_data="catalog:back"))
        if next_product_id:
            nav_row.append(cls.create_button(text=EMOJI["next"], callback_data=f"product:{next_product_id}"))
        kb.row(*nav_row)

        kb.row(*cls.create_nav_row(include_catalog=False))
        return kb.as_markup()
