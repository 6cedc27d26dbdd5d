"""
Настройки бота: токены, пути, константы раскладов.

Все значения окружения читаются один раз при импорте.
"""

import logging
import os
from pathlib import Path

# ============= ТОКЕНЫ И ОКРУЖЕНИЕ =============

BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
DATABASE_URL = os.getenv("DATABASE_URL")

CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-sonnet-4-20250514")
CLAUDE_TIMEOUT = int(os.getenv("CLAUDE_TIMEOUT", "60"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Пул соединений PostgreSQL
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", "1"))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", "10"))
DB_COMMAND_TIMEOUT = float(os.getenv("DB_COMMAND_TIMEOUT", "30"))


def validate_env():
    """Проверяет обязательные переменные окружения

    ANTHROPIC_API_KEY не обязателен: без него расклады работают
    только на шаблонном тексте.

    Raises:
        ValueError: если не задан токен бота или строка подключения к БД
    """
    if not BOT_TOKEN:
        raise ValueError("TELEGRAM_BOT_TOKEN не установлен!")
    if not DATABASE_URL:
        raise ValueError("DATABASE_URL не установлен!")


# ============= ЛОГИРОВАНИЕ =============

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def get_logger(name: str) -> logging.Logger:
    """Получить логгер модуля"""
    return logging.getLogger(name)


# ============= ПУТИ =============

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
TAROT_CARDS_PATH = Path(os.getenv("TAROT_CARDS_PATH", str(DATA_DIR / "tarot_cards.yaml")))


# ============= ТИПЫ РАСКЛАДОВ =============

class ReadingType:
    """Типы раскладов (влияют на выбор схемы и колоды)"""
    DAILY = "daily"
    LOVE = "love"
    CAREER = "career"
    GENERAL = "general"
    DECISION = "decision"
    COMPREHENSIVE = "comprehensive"
    QUICK = "quick"
    FULL_DECK = "full_deck"


class Context:
    """Тематическая линза чтения значений карт"""
    GENERAL = "general"
    LOVE = "love"
    CAREER = "career"
    HEALTH = "health"


class Orientation:
    UPRIGHT = "upright"
    REVERSED = "reversed"


MAJOR_ARCANA_SUIT = "Major Arcana"

SUITS = {
    "wands": {"name": "Wands", "element": "Fire"},
    "cups": {"name": "Cups", "element": "Water"},
    "swords": {"name": "Swords", "element": "Air"},
    "pentacles": {"name": "Pentacles", "element": "Earth"},
}

# Пулы карт для вытягивания
CARD_POOLS = ["all", "major", "minor", "wands", "cups", "swords", "pentacles"]

# Схема расклада по умолчанию для каждого типа
DEFAULT_SPREADS = {
    ReadingType.DAILY: "single",
    ReadingType.LOVE: "love",
    ReadingType.CAREER: "career",
    ReadingType.GENERAL: "three_card",
    ReadingType.DECISION: "decision",
    ReadingType.COMPREHENSIVE: "celtic_cross",
    ReadingType.QUICK: "single",
}
FALLBACK_SPREAD = "three_card"
QUICK_READING_SPREAD = "three_card"

# Типы колоды для /fulldeck: тип -> пул
DECK_TYPES = {
    "full": "all",
    "majors": "major",
    "wands": "wands",
    "cups": "cups",
    "swords": "swords",
    "pentacles": "pentacles",
}
FULL_DECK_CARD_COUNT = 3


# ============= ВЕРОЯТНОСТИ =============

# Вероятность перевёрнутой карты (независимо для каждой)
REVERSAL_PROBABILITY = 0.3

# Смещение колоды для тематических раскладов: тип -> (масть, вероятность)
POOL_BIAS = {
    ReadingType.LOVE: ("cups", 0.6),
    ReadingType.CAREER: ("pentacles", 0.6),
}


# ============= ЛИМИТЫ =============

TELEGRAM_MESSAGE_LIMIT = 4096
AI_INTERPRETATION_MAX_CHARS = 1000
AI_ADVICE_MAX_CHARS = 800
MAX_THEMES = 5
MAX_ADVICE_POINTS = 3
HISTORY_DEFAULT_LIMIT = 10

# Напоминание о карте дня
DEFAULT_REMINDER_TIME = "09:00"
