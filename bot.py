"""
Mystical Tarot Bot: Telegram-бот для раскладов Таро

Расклады с AI-интерпретацией через Claude, персонализация по профилю,
английский, русский и испанский языки. Данные пользователей в PostgreSQL.
"""

import asyncio
from datetime import datetime

from aiogram import Bot, Dispatcher, Router
from aiogram.types import Message, BotCommand
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.memory import MemoryStorage
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import get_logger, validate_env, BOT_TOKEN
from config.features import flags
from core.telegram import ensure_user, send_markdown
from db import init_db, close_pool
from db.queries.users import get_users_for_reminder
from engines import setup_routers, get_commands_list
from engines.settings_selector import kb_daily_card
from engines.tarot.service import init_reader
from locales import t, SUPPORTED_LANGUAGES, DEFAULT_LANGUAGE

logger = get_logger(__name__)

# ============= ОБЩИЕ КОМАНДЫ =============

router = Router(name="main")


@router.message(CommandStart())
async def cmd_start(message: Message, state: FSMContext):
    """Приветствие: описание бота для новых пользователей, короткое для вернувшихся"""
    await state.set_state(None)
    user = await ensure_user(message.from_user)
    lang = user['language']

    if user['readings_count']:
        name = user['first_name'] or user['username'] or ''
        await message.answer(t('welcome.returning', lang, name=name))
        return

    text = (
        f"{t('welcome.title', lang)}\n\n"
        f"{t('welcome.message', lang)}\n\n"
        f"{t('welcome.features', lang)}\n"
        f"• {t('welcome.feature_ai', lang)}\n"
        f"• {t('welcome.feature_personalized', lang)}\n"
        f"• {t('welcome.feature_multilingual', lang)}\n\n"
        f"{t('welcome.instruction', lang)}"
    )
    await send_markdown(message.bot, message.chat.id, text)


@router.message(Command("help"))
async def cmd_help(message: Message):
    user = await ensure_user(message.from_user)
    await send_markdown(message.bot, message.chat.id, t('help.text', user['language']))


# ============= ПЛАНИРОВЩИК =============

scheduler = AsyncIOScheduler()


async def scheduled_check(bot: Bot):
    """Проверка напоминаний о карте дня каждую минуту"""
    now = datetime.now()
    users = await get_users_for_reminder(now.hour, now.minute)

    for user in users:
        lang = user['language']
        try:
            await bot.send_message(
                user['telegram_id'],
                t('reminder.message', lang),
                reply_markup=kb_daily_card(lang)
            )
            logger.info(f"Sent daily card reminder to {user['telegram_id']}")
        except Exception as e:
            logger.error(f"Failed to send reminder to {user['telegram_id']}: {e}")


# ============= ЗАПУСК =============

async def set_commands(bot: Bot):
    """Меню команд на каждом поддерживаемом языке"""
    for lang in SUPPORTED_LANGUAGES:
        commands = [
            BotCommand(command=command, description=description)
            for command, description in get_commands_list(lang)
        ]
        language_code = None if lang == DEFAULT_LANGUAGE else lang
        await bot.set_my_commands(commands, language_code=language_code)


async def main():
    validate_env()

    # Инициализация БД и каталога карт
    await init_db()
    init_reader()

    bot = Bot(token=BOT_TOKEN)
    dp = Dispatcher(storage=MemoryStorage())
    dp.include_router(router)
    setup_routers(dp)

    # Установка команд бота (Menu-кнопка)
    await set_commands(bot)

    # Запуск планировщика
    if flags.is_enabled("reminders.enabled"):
        scheduler.add_job(scheduled_check, 'cron', minute='*', args=[bot])
        scheduler.start()

    logger.info("🚀 Бот запущен")
    try:
        await dp.start_polling(bot)
    finally:
        if scheduler.running:
            scheduler.shutdown(wait=False)
        await close_pool()
        await bot.session.close()


if __name__ == "__main__":
    asyncio.run(main())
