"""
Общие операции обработчиков Telegram.

Содержит:
- ensure_user: регистрация/обновление пользователя на каждом сообщении
- send_markdown: отправка длинного Markdown-текста частями
"""

from typing import Optional

from aiogram import Bot
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import InlineKeyboardMarkup, User

from config import get_logger
from db.queries.users import register_user
from locales import detect_language
from .helpers import split_message, is_message_too_long

logger = get_logger(__name__)


async def ensure_user(tg_user: User) -> dict:
    """Пользователь из БД (создаётся при первом сообщении)

    Язык нового пользователя определяется по language_code Telegram.
    """
    return await register_user(
        tg_user.id,
        username=tg_user.username or '',
        first_name=tg_user.first_name or '',
        last_name=tg_user.last_name or '',
        language=detect_language(tg_user.language_code),
    )


async def send_markdown(bot: Bot, chat_id: int, text: str,
                        reply_markup: Optional[InlineKeyboardMarkup] = None):
    """Отправляет текст частями не длиннее лимита Telegram

    Клавиатура прикрепляется к последней части. Если Telegram не смог
    разобрать Markdown, часть отправляется простым текстом.
    """
    parts = [text]
    if is_message_too_long(text):
        parts = split_message(text)
        logger.info(f"✂️ Сообщение для {chat_id}: {len(text)} символов, частей {len(parts)}")

    for index, part in enumerate(parts):
        markup = reply_markup if index == len(parts) - 1 else None
        try:
            await bot.send_message(chat_id, part, parse_mode="Markdown", reply_markup=markup)
        except TelegramBadRequest as e:
            logger.warning(f"Markdown не разобран для {chat_id}, отправляем текстом: {e}")
            await bot.send_message(chat_id, part, reply_markup=markup)
