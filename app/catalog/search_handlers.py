from aiogram import Router, F
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
import logging

from .keyboards.catalog_kb import CatalogKeyboard
from .keyboards.common_kb import format_price
from .navigation_handlers import show_product_list
from .states import SearchStates, ListPosition, get_list_position
from ..services.catalog import CatalogService
from ..services.pricing import get_base_price
from ..utils.message_editor import update_message
from ..utils.callback_helpers import safe_callback_answer, parse_callback_int

logger = logging.getLogger(__name__)

router = Router(name="search_handlers")


@router.callback_query(F.data == "menu:search")
async def start_search(callback: CallbackQuery, state: FSMContext):
    """Запросить поисковый запрос"""
    try:
        await state.set_state(SearchStates.waiting_for_query)
        await update_message(
            callback,
            text="🔍 <b>Поиск</b>\n\nВведите название памятника или его часть:",
            reply_markup=CatalogKeyboard.get_search_prompt_keyboard()
        )
        await safe_callback_answer(callback)

    except Exception as e:
        logger.error(f"Error starting search: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Произошла ошибка")


@router.message(SearchStates.waiting_for_query, F.text)
async def process_search_query(message: Message, catalog_service: CatalogService, state: FSMContext):
    """Показать результаты поиска"""
    query = message.text.strip()
    if not query:
        await message.answer("❌ Введите непустой запрос")
        return

    try:
        logger.info(f"User {message.from_user.id} searching for {query!r}")
        await state.set_state(None)

        # Короткие подсказки для достаточно длинных запросов
        suggestions = catalog_service.search_suggestions(query)
        if suggestions:
            lines = [f"• {p.title} - {format_price(get_base_price(p))}" for p in suggestions]
            await message.answer("💡 Подходящие товары:\n" + "\n".join(lines))

        await show_product_list(message, catalog_service, state, ListPosition(query=query))

    except Exception as e:
        logger.error(f"Error processing search for user {message.from_user.id}: {e}", exc_info=True)
        await message.answer("❌ Ошибка при поиске. Попробуйте позже.")


@router.callback_query(F.data.startswith("search:page:"))
async def show_search_page(callback: CallbackQuery, catalog_service: CatalogService, state: FSMContext):
    """Страница результатов последнего поиска"""
    page = parse_callback_int(callback.data, 2)
    if page is None:
        await safe_callback_answer(callback, "❌ Неверный формат данных")
        return

    try:
        position = await get_list_position(state)
        if not position.query:
            await safe_callback_answer(callback, "❌ Поиск устарел, начните заново")
            return
        position.page = page
        await show_product_list(callback, catalog_service, state, position)
        await safe_callback_answer(callback)

    except Exception as e:
        logger.error(f"Error showing search page {page}: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Ошибка при загрузке результатов")
