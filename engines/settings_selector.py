"""
UI пользовательских настроек.

Позволяет:
- /language: выбрать язык интерфейса и раскладов
- /reversals: включить/выключить перевёрнутые карты
- /reminder: ежедневное напоминание о карте дня
"""

from aiogram import Router, F
from aiogram.types import Message, CallbackQuery, InlineKeyboardMarkup, InlineKeyboardButton
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup

from config import get_logger
from config.features import flags
from core.helpers import parse_time
from core.telegram import ensure_user, send_markdown
from db.queries.users import set_user_language, set_reversal_preference, set_reminder
from locales import t, get_language_name, SUPPORTED_LANGUAGES

logger = get_logger(__name__)

# Создаём роутер настроек
settings_router = Router(name="settings")


class ReminderStates(StatesGroup):
    waiting_time = State()          # Ждём время в формате HH:MM


# ==================== ЯЗЫК ====================

@settings_router.message(Command("language"))
async def cmd_language(message: Message):
    """Команда /language - выбор языка"""
    user = await ensure_user(message.from_user)
    lang = user['language']

    buttons = [
        [InlineKeyboardButton(
            text=get_language_name(code) + (" ✓" if code == lang else ""),
            callback_data=f"lang_{code}"
        )]
        for code in SUPPORTED_LANGUAGES
    ]
    text = f"{t('language.select', lang)}\n\n{t('language.current', lang, language=get_language_name(lang))}"
    await send_markdown(message.bot, message.chat.id, text,
                        reply_markup=InlineKeyboardMarkup(inline_keyboard=buttons))


@settings_router.callback_query(F.data.startswith("lang_"))
async def cb_language(callback: CallbackQuery):
    code = callback.data.replace("lang_", "", 1)
    if code not in SUPPORTED_LANGUAGES:
        await callback.answer()
        return

    await ensure_user(callback.from_user)
    await set_user_language(callback.from_user.id, code)
    logger.info(f"Пользователь {callback.from_user.id} сменил язык на {code}")

    await callback.answer()
    await callback.message.edit_text(t('language.changed', code, language=get_language_name(code)))


# ==================== ПЕРЕВЁРНУТЫЕ КАРТЫ ====================

@settings_router.message(Command("reversals"))
async def cmd_reversals(message: Message):
    """Команда /reversals - переключатель перевёрнутых карт"""
    user = await ensure_user(message.from_user)
    include_reversals = not user['include_reversals']
    await set_reversal_preference(message.from_user.id, include_reversals)

    key = 'reversals.enabled' if include_reversals else 'reversals.disabled'
    await send_markdown(message.bot, message.chat.id, t(key, user['language']))


# ==================== НАПОМИНАНИЕ ====================

def kb_reminder(enabled: bool, lang: str) -> InlineKeyboardMarkup:
    toggle = (
        InlineKeyboardButton(text=t('reminder.turn_off', lang), callback_data="reminder_off")
        if enabled else
        InlineKeyboardButton(text=t('reminder.turn_on', lang), callback_data="reminder_on")
    )
    return InlineKeyboardMarkup(inline_keyboard=[
        [toggle],
        [InlineKeyboardButton(text=t('reminder.change_time', lang), callback_data="reminder_time")],
    ])


def kb_daily_card(lang: str) -> InlineKeyboardMarkup:
    """Кнопка в напоминании: вытянуть карту дня"""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=t('reminder.draw_button', lang), callback_data="daily_card")]
    ])


@settings_router.message(Command("reminder"))
async def cmd_reminder(message: Message):
    """Команда /reminder - статус и настройка напоминания"""
    user = await ensure_user(message.from_user)
    lang = user['language']

    if not flags.is_enabled("reminders.enabled"):
        await message.answer(t('reminder.unavailable', lang))
        return

    enabled = user['reminder_enabled']
    text = (
        t('reminder.status_on', lang, time=user['reminder_time'])
        if enabled else t('reminder.status_off', lang)
    )
    await send_markdown(message.bot, message.chat.id, text, reply_markup=kb_reminder(enabled, lang))


@settings_router.callback_query(F.data == "reminder_on")
async def cb_reminder_on(callback: CallbackQuery):
    user = await ensure_user(callback.from_user)
    await set_reminder(callback.from_user.id, True)
    await callback.answer()
    await callback.message.answer(t('reminder.set', user['language'], time=user['reminder_time']))


@settings_router.callback_query(F.data == "reminder_off")
async def cb_reminder_off(callback: CallbackQuery):
    user = await ensure_user(callback.from_user)
    await set_reminder(callback.from_user.id, False)
    await callback.answer()
    await callback.message.answer(t('reminder.disabled', user['language']))


@settings_router.callback_query(F.data == "reminder_time")
async def cb_reminder_time(callback: CallbackQuery, state: FSMContext):
    user = await ensure_user(callback.from_user)
    await state.set_state(ReminderStates.waiting_time)
    await callback.answer()
    await callback.message.answer(t('reminder.ask_time', user['language']))


@settings_router.message(ReminderStates.waiting_time, F.text)
async def on_reminder_time(message: Message, state: FSMContext):
    """Время напоминания текстом: 8:30, 08:30, 08.30

    Команда вместо времени отменяет ввод.
    """
    user = await ensure_user(message.from_user)
    lang = user['language']

    if message.text.strip().startswith("/"):
        await state.set_state(None)
        await message.answer(t('reminder.time_cancelled', lang))
        return

    reminder_time = parse_time(message.text)
    if reminder_time is None:
        await message.answer(t('reminder.invalid_time', lang))
        return

    await state.set_state(None)
    await set_reminder(message.from_user.id, True, reminder_time)
    logger.info(f"Напоминание {message.from_user.id} установлено на {reminder_time}")
    await message.answer(t('reminder.set', lang, time=reminder_time))
