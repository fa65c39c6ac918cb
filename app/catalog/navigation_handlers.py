from aiogram import Router, F
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from typing import Union
import logging

from .keyboards.catalog_kb import CatalogKeyboard, ALL_CATEGORIES
from .states import ListPosition, save_list_position, get_list_position
from .utils.product_formatters import format_products_list
from ..services.catalog import CatalogService
from ..utils.message_editor import update_message
from ..utils.callback_helpers import safe_callback_answer

logger = logging.getLogger(__name__)

router = Router(name="navigation_handlers")


async def show_product_list(
    msg: Union[CallbackQuery, Message],
    catalog_service: CatalogService,
    state: FSMContext,
    position: ListPosition
):
    """
    Показать страницу списка товаров (категория или результаты поиска)
    и запомнить позицию для кнопки "К списку".
    """
    products = catalog_service.list_products(
        category_id=position.category_id or None,
        query=position.query
    )
    page = catalog_service.paginate(products, position.page)
    position.page = page.page
    await save_list_position(state, position)

    if position.query:
        title = f"Результаты поиска «{position.query}»"
        pagination_prefix = "search:page"
    else:
        title = catalog_service.get_category_name(position.category_id or None)
        if position.category_id == ALL_CATEGORIES:
            title = "Все товары"
        pagination_prefix = f"catalog:list:{position.category_id}"

    if page.total_count:
        keyboard = CatalogKeyboard.get_products_keyboard(page, pagination_prefix)
    else:
        keyboard = CatalogKeyboard.get_empty_list_keyboard()

    if isinstance(msg, Message):
        await msg.answer(format_products_list(title, page), parse_mode="HTML", reply_markup=keyboard)
    else:
        await update_message(msg, text=format_products_list(title, page), reply_markup=keyboard)


@router.callback_query(F.data == "menu:catalog")
async def show_catalog_menu(callback: CallbackQuery, catalog_service: CatalogService, state: FSMContext):
    """Переход в каталог из главного меню"""
    try:
        logger.info(f"User {callback.from_user.id} opening catalog")
        await state.set_state(None)

        text = "🛍 <b>Каталог памятников</b>\n\nВыберите категорию:"
        keyboard = CatalogKeyboard.get_categories_keyboard(catalog_service.get_categories())
        await update_message(callback, text=text, reply_markup=keyboard)
        await safe_callback_answer(callback)

    except Exception as e:
        logger.error(f"Error showing catalog: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Ошибка при переходе в каталог")


@router.callback_query(F.data.startswith("catalog:list:"))
async def show_category_page(callback: CallbackQuery, catalog_service: CatalogService, state: FSMContext):
    """Страница товаров категории: catalog:list:{category_id}:{page}"""
    try:
        _, _, category_id, page = callback.data.split(":")
        position = ListPosition(category_id=int(category_id), page=int(page))
    except ValueError:
        logger.error(f"Invalid callback data: {callback.data}")
        await safe_callback_answer(callback, "❌ Неверный формат данных")
        return

    try:
        await show_product_list(callback, catalog_service, state, position)
        await safe_callback_answer(callback)

    except Exception as e:
        logger.error(f"Error showing category {position.category_id} page {position.page}: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Ошибка при загрузке товаров")


@router.callback_query(F.data == "catalog:back")
async def back_to_list(callback: CallbackQuery, catalog_service: CatalogService, state: FSMContext):
    """Вернуться к последней открытой странице списка"""
    try:
        position = await get_list_position(state)
        await show_product_list(callback, catalog_service, state, position)
        await safe_callback_answer(callback)

    except Exception as e:
        logger.error(f"Error in back_to_list: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Произошла ошибка")
