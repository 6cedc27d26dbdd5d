"""
Модуль конфигурации бота.

Содержит:
- settings.py: токены, пути, константы раскладов и лимиты
- features.py: feature flags (features.yaml + переменные окружения)
"""

from .settings import (
    # Токены
    BOT_TOKEN,
    ANTHROPIC_API_KEY,
    DATABASE_URL,
    CLAUDE_MODEL,
    CLAUDE_TIMEOUT,
    validate_env,

    # База данных
    DB_POOL_MIN_SIZE,
    DB_POOL_MAX_SIZE,
    DB_COMMAND_TIMEOUT,

    # Логирование
    get_logger,
    LOG_LEVEL,

    # Пути
    BASE_DIR,
    DATA_DIR,
    TAROT_CARDS_PATH,

    # Типы и контексты
    ReadingType,
    Context,
    Orientation,
    MAJOR_ARCANA_SUIT,
    SUITS,
    CARD_POOLS,
    DEFAULT_SPREADS,
    FALLBACK_SPREAD,
    QUICK_READING_SPREAD,
    DECK_TYPES,
    FULL_DECK_CARD_COUNT,

    # Вероятности
    REVERSAL_PROBABILITY,
    POOL_BIAS,

    # Лимиты
    TELEGRAM_MESSAGE_LIMIT,
    AI_INTERPRETATION_MAX_CHARS,
    AI_ADVICE_MAX_CHARS,
    MAX_THEMES,
    MAX_ADVICE_POINTS,
    HISTORY_DEFAULT_LIMIT,
    DEFAULT_REMINDER_TIME,
)

__all__ = [
    'BOT_TOKEN',
    'ANTHROPIC_API_KEY',
    'DATABASE_URL',
    'CLAUDE_MODEL',
    'CLAUDE_TIMEOUT',
    'validate_env',
    'DB_POOL_MIN_SIZE',
    'DB_POOL_MAX_SIZE',
    'DB_COMMAND_TIMEOUT',
    'get_logger',
    'LOG_LEVEL',
    'BASE_DIR',
    'DATA_DIR',
    'TAROT_CARDS_PATH',
    'ReadingType',
    'Context',
    'Orientation',
    'MAJOR_ARCANA_SUIT',
    'SUITS',
    'CARD_POOLS',
    'DEFAULT_SPREADS',
    'FALLBACK_SPREAD',
    'QUICK_READING_SPREAD',
    'DECK_TYPES',
    'FULL_DECK_CARD_COUNT',
    'REVERSAL_PROBABILITY',
    'POOL_BIAS',
    'TELEGRAM_MESSAGE_LIMIT',
    'AI_INTERPRETATION_MAX_CHARS',
    'AI_ADVICE_MAX_CHARS',
    'MAX_THEMES',
    'MAX_ADVICE_POINTS',
    'HISTORY_DEFAULT_LIMIT',
    'DEFAULT_REMINDER_TIME',
]
