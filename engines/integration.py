"""
Интеграция движков в основной бот.

Этот файл содержит функцию для подключения всех роутеров.
Добавьте в bot.py после создания диспетчера:

    from engines.integration import setup_routers
    setup_routers(dp)

Порядок важен: tarot_router ловит любой свободный текст,
поэтому подключается последним.
"""

from typing import List, Tuple

from aiogram import Dispatcher

from config import get_logger
from locales import t

logger = get_logger(__name__)

# Команды меню в порядке показа
MENU_COMMANDS = [
    "start", "daily", "love", "career", "decision", "celtic", "quick", "fulldeck",
    "profile", "reversals", "reminder", "stats", "history", "language", "help",
]


def setup_routers(dp: Dispatcher):
    """Подключает все роутеры движков к диспетчеру

    Args:
        dp: Dispatcher aiogram
    """
    # Настройки: язык, перевёрнутые карты, напоминание
    from .settings_selector import settings_router
    dp.include_router(settings_router)
    logger.info("✓ Подключен settings_router (/language, /reversals, /reminder)")

    # Опрос профиля
    from .survey import survey_router
    dp.include_router(survey_router)
    logger.info("✓ Подключен survey_router (/profile)")

    # Расклады (последним: свободный текст)
    from .tarot import tarot_router
    dp.include_router(tarot_router)
    logger.info("✓ Подключен tarot_router (/daily, /love, /career, ...)")

    logger.info("✅ Все роутеры движков подключены")


def get_commands_list(lang: str = "en") -> List[Tuple[str, str]]:
    """Возвращает список команд для регистрации в боте"""
    return [(command, t(f'menu.{command}', lang)) for command in MENU_COMMANDS]
