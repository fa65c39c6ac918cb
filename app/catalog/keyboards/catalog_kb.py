from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder
from typing import List

from ...models.catalog import Category
from ...services.catalog import CatalogPage
from ...services.pricing import get_base_price
from .common_kb import KeyboardBuilder, EMOJI
import logging

logger = logging.getLogger(__name__)

# Категория 0 - все товары
ALL_CATEGORIES = 0


class CatalogKeyboard(KeyboardBuilder):
    """Клавиатуры для каталога"""

    @classmethod
    def get_categories_keyboard(cls, categories: List[Category]) -> InlineKeyboardMarkup:
        """Список категорий"""
        kb = InlineKeyboardBuilder()

        kb.row(cls.create_button(
            text=f"{EMOJI['catalog']} Все товары",
            callback_data=f"catalog:list:{ALL_CATEGORIES}:1"
        ))
        for category in categories:
            kb.row(cls.create_button(
                text=category.name,
                callback_data=f"catalog:list:{category.id}:1"
            ))

        kb.row(cls.create_button(text=f"{EMOJI['search']} Поиск", callback_data="menu:search"))
        kb.row(*cls.create_nav_row(include_catalog=False))
        return kb.as_markup()

    @classmethod
    def get_products_keyboard(cls, page: CatalogPage, pagination_prefix: str) -> InlineKeyboardMarkup:
        """
        Страница списка товаров.
        У каждого товара кнопка карточки и кнопка быстрого добавления в корзину.
        """
        kb = InlineKeyboardBuilder()

        for product in page.items:
            kb.row(
                cls.create_button(
                    text=cls.format_product_info(product.title, get_base_price(product)),
                    callback_data=f"product:{product.id}"
                ),
                cls.create_button(text=f"{EMOJI['quick']}{EMOJI['cart']}", callback_data=f"quick:{product.id}")
            )

        if page.total_pages > 1:
            kb.row(*cls.create_pagination_row(page.page, page.total_pages, pagination_prefix))

        kb.row(*cls.create_nav_row(include_catalog=True, include_main=True))
        return kb.as_markup()

    @classmethod
    def get_empty_list_keyboard(cls) -> InlineKeyboardMarkup:
        """Клавиатура для пустого списка"""
        kb = InlineKeyboardBuilder()
        kb.row(cls.create_button(text=f"{EMOJI['search']} Новый поиск", callback_data="menu:search"))
        kb.row(*cls.create_nav_row())
        return kb.as_markup()

    @classmethod
    def get_search_prompt_keyboard(cls) -> InlineKeyboardMarkup:
        kb = InlineKeyboardBuilder()
        kb.row(cls.create_button(text=f"{EMOJI['cancel']} Отмена", callback_data="menu:catalog"))
        return kb.as_markup()

    @classmethod
    def get_success_add_keyboard(cls, product_id: int) -> InlineKeyboardMarkup:
        """Клавиатура после добавления в корзину"""
        kb = InlineKeyboardBuilder()
        kb.row(
            cls.create_button(text=f"{EMOJI['cart']} Перейти в корзину", callback_data="menu:cart"),
            cls.create_button(text=f"{EMOJI['back']} К товару", callback_data=f"product:{product_id}")
        )
        kb.row(cls.create_button(text=f"{EMOJI['back']} К списку", callback_data="catalog:back"))
        return kb.as_markup()
