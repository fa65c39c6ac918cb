from aiogram.types import CallbackQuery, Message, InlineKeyboardMarkup, InputMediaPhoto
from aiogram.exceptions import TelegramBadRequest
from typing import Optional, Union
import logging

logger = logging.getLogger(__name__)


def _is_photo(message: Message) -> bool:
    return bool(getattr(message, "photo", None))


async def _send_new(message: Message, text: Optional[str], media: Optional[InputMediaPhoto],
                    reply_markup: Optional[InlineKeyboardMarkup]):
    """Отправить новое сообщение вместо текущего"""
    if media:
        await message.answer_photo(
            photo=media.media,
            caption=media.caption,
            parse_mode="HTML",
            reply_markup=reply_markup
        )
    elif text:
        await message.answer(text=text, parse_mode="HTML", reply_markup=reply_markup)


async def update_message(
    msg: Union[CallbackQuery, Message],
    text: Optional[str] = None,
    media: Optional[InputMediaPhoto] = None,
    reply_markup: Optional[InlineKeyboardMarkup] = None
):
    """
    Обновить сообщение: текст, фото с подписью или только клавиатуру.

    Текстовое сообщение нельзя превратить в фото (и наоборот), поэтому в таких
    случаях старое сообщение удаляется и отправляется новое.
    Если фото не загрузилось, карточка показывается текстом.
    """
    message = msg.message if isinstance(msg, CallbackQuery) else msg

    try:
        if media:
            if _is_photo(message):
                await message.edit_media(media=media, reply_markup=reply_markup)
            else:
                await message.delete()
                await _send_new(message, None, media, reply_markup)
        elif text:
            if _is_photo(message):
                await message.delete()
                await _send_new(message, text, None, reply_markup)
            else:
                await message.edit_text(text=text, parse_mode="HTML", reply_markup=reply_markup)
        elif reply_markup:
            await message.edit_reply_markup(reply_markup=reply_markup)
    except TelegramBadRequest as e:
        if "message is not modified" in str(e):
            return
        logger.error(f"Error updating message: {e}")
        # Например, изображение по адресу недоступно - показываем текст
        fallback_text = media.caption if media else text
        if fallback_text:
            try:
                await message.answer(text=fallback_text, parse_mode="HTML", reply_markup=reply_markup)
            except TelegramBadRequest as ex:
                logger.error(f"Failed to recover message: {ex}")


async def update_caption(
    callback: CallbackQuery,
    text: str,
    reply_markup: Optional[InlineKeyboardMarkup] = None
):
    """Обновить подпись карточки (или текст, если карточка без фото), не меняя изображение"""
    message = callback.message
    try:
        if _is_photo(message):
            await message.edit_caption(caption=text, parse_mode="HTML", reply_markup=reply_markup)
        else:
            await message.edit_text(text=text, parse_mode="HTML", reply_markup=reply_markup)
    except TelegramBadRequest as e:
        if "message is not modified" in str(e):
            return
        logger.error(f"Error updating caption: {e}")
        raise
