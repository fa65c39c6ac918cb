from aiogram import Router, F
from aiogram.filters import Command
from aiogram.types import Message, CallbackQuery
from aiogram.fsm.context import FSMContext
from datetime import datetime
import logging

from ..services.cart import CartService
from ..keyboards.main_menu import MainKeyboard
from ..utils.message_editor import update_message
from ..utils.callback_helpers import safe_callback_answer

logger = logging.getLogger(__name__)

router = Router(name="main_menu")

# Время запуска бота для фильтрации старых команд
BOT_START_TIME = datetime.now()

WELCOME_TEXT = (
    "🪦 <b>Памятники из гранита и мрамора</b>\n\n"
    "Здесь можно подобрать памятник, настроить размеры стелы, подставки и цветника, "
    "материал, полировку и гравировку, и сразу увидеть итоговую цену.\n\n"
    "Выберите действие:"
)


@router.message(Command("start"))
async def cmd_start(message: Message, cart_service: CartService, state: FSMContext):
    """Обработчик команды /start"""
    try:
        # Проверяем, не является ли команда старой (отправленной до запуска бота)
        message_time = datetime.fromtimestamp(message.date.timestamp())
        if message_time < BOT_START_TIME:
            logger.info(f"Ignoring old /start command from user {message.from_user.id} sent at {message_time}")
            return

        logger.info(f"Start command called for user {message.from_user.id}")
        await state.set_state(None)

        keyboard = MainKeyboard.get_main_keyboard(cart_service.total_items, cart_service.total_price)
        await message.answer(text=WELCOME_TEXT, parse_mode="HTML", reply_markup=keyboard)

    except Exception as e:
        logger.error(f"Error in start command: {e}", exc_info=True)
        await message.answer("❌ Произошла ошибка")


@router.callback_query(F.data == "menu:main")
async def show_main_menu(callback: CallbackQuery, cart_service: CartService, state: FSMContext):
    """Показать главное меню"""
    try:
        logger.info(f"Main menu callback for user {callback.from_user.id}")
        await state.set_state(None)

        keyboard = MainKeyboard.get_main_keyboard(cart_service.total_items, cart_service.total_price)
        await update_message(callback, text=WELCOME_TEXT, reply_markup=keyboard)
        await safe_callback_answer(callback)

    except Exception as e:
        logger.error(f"Error showing main menu: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Произошла ошибка")


@router.callback_query(F.data == "ignore")
async def ignore_callback(callback: CallbackQuery):
    """Кнопки-подписи (номер страницы, количество)"""
    await safe_callback_answer(callback)
