from aiogram import Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import ErrorEvent
import logging

from ..keyboards.main_menu import MainKeyboard

logger = logging.getLogger(__name__)

router = Router(name="errors")

ERROR_TEXT = (
    "😔 <b>Сервис временно недоступен</b>\n\n"
    "Не удалось выполнить действие. Попробуйте еще раз чуть позже."
)


@router.errors()
async def handle_error(event: ErrorEvent):
    """Общий экран ошибки для необработанных исключений"""
    update = event.update
    logger.error(f"Unhandled error for update {update.update_id}: {event.exception}", exc_info=event.exception)

    try:
        if update.callback_query:
            await update.callback_query.answer("❌ Сервис временно недоступен")
            if update.callback_query.message:
                await update.callback_query.message.answer(
                    ERROR_TEXT,
                    parse_mode="HTML",
                    reply_markup=MainKeyboard.get_back_to_main_menu()
                )
        elif update.message:
            await update.message.answer(
                ERROR_TEXT,
                parse_mode="HTML",
                reply_markup=MainKeyboard.get_back_to_main_menu()
            )
    except TelegramBadRequest as e:
        logger.error(f"Failed to show error view: {e}")
    return True
