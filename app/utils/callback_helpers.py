from aiogram.types import CallbackQuery
from aiogram.exceptions import TelegramBadRequest
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# Ошибки ответа на callback, которые не мешают работе (запрос устарел и т.п.)
BENIGN_CALLBACK_ERRORS = (
    "query is too old",
    "query id is invalid",
    "response timeout expired",
)


async def safe_callback_answer(
    callback: CallbackQuery,
    text: str = "",
    show_alert: bool = False,
    cache_time: int = 0
) -> bool:
    """
    Безопасно отвечает на callback query

    Returns:
        bool: True если ответ отправлен, False если запрос уже устарел
    """
    try:
        await callback.answer(text=text, show_alert=show_alert, cache_time=cache_time)
        return True
    except TelegramBadRequest as e:
        message = str(e).lower()
        if any(reason in message for reason in BENIGN_CALLBACK_ERRORS):
            logger.warning(f"Callback query for user {callback.from_user.id} not answered: {e}")
            return False
        logger.error(f"Error answering callback query for user {callback.from_user.id}: {e}")
        raise


def parse_callback_int(callback_data: str, position: int) -> Optional[int]:
    """Безопасно достать число из callback_data вида "prefix:part:123" """
    try:
        return int(callback_data.split(":")[position])
    except (ValueError, IndexError, AttributeError):
        logger.error(f"Invalid callback data: {callback_data!r}, position {position}")
        return None
