"""
Модуль локализации Таро-бота.
Поддерживает английский (en), русский (ru) и испанский (es) языки.
"""

import yaml
from pathlib import Path
from typing import Any, Optional

# Загружаем переводы при импорте модуля
_translations: dict[str, dict] = {}
_locales_dir = Path(__file__).parent

SUPPORTED_LANGUAGES = ['en', 'ru', 'es']
DEFAULT_LANGUAGE = 'en'
FALLBACK_CHAIN = {'es': 'en', 'ru': 'en', 'en': None}


def _load_translations():
    """Загрузить все файлы переводов"""
    global _translations
    for lang in SUPPORTED_LANGUAGES:
        file_path = _locales_dir / f"{lang}.yaml"
        if file_path.exists():
            with open(file_path, 'r', encoding='utf-8') as f:
                _translations[lang] = yaml.safe_load(f) or {}
        else:
            _translations[lang] = {}


def _get_nested(data: dict, keys: list[str]) -> Any:
    """Получить вложенное значение по списку ключей"""
    for key in keys:
        if isinstance(data, dict) and key in data:
            data = data[key]
        else:
            return None
    return data


def normalize_language(lang: Optional[str]) -> str:
    """Код языка -> поддерживаемый код ('en-US' -> 'en', 'de' -> 'en')"""
    lang = lang[:2].lower() if lang else DEFAULT_LANGUAGE
    return lang if lang in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def t(key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
    """
    Получить перевод по ключу.

    Args:
        key: Ключ перевода (например, 'reading.title')
        lang: Код языка ('en', 'ru', 'es')
        **kwargs: Переменные для подстановки в строку

    Returns:
        Переведённая строка или ключ, если перевод не найден

    Example:
        t('reading.title', 'en', spread='Celtic Cross')
        t('reading.cards_drawn', 'ru', count=3)
    """
    if not _translations:
        _load_translations()

    lang = normalize_language(lang)
    keys = key.split('.')

    # Пробуем получить перевод с fallback
    current_lang = lang
    while current_lang:
        value = _get_nested(_translations.get(current_lang, {}), keys)
        if value is not None:
            if kwargs and isinstance(value, str):
                try:
                    return value.format(**kwargs)
                except (KeyError, IndexError):
                    return value
            return value
        current_lang = FALLBACK_CHAIN.get(current_lang)

    # Перевод не найден - возвращаем ключ
    return key


def get_language_name(lang: str) -> str:
    """Получить название языка на этом же языке"""
    names = {
        'en': '🇬🇧 English',
        'ru': '🇷🇺 Русский',
        'es': '🇪🇸 Español'
    }
    return names.get(lang, lang)


def detect_language(language_code: Optional[str]) -> str:
    """
    Определить язык по коду из Telegram.

    Args:
        language_code: Код языка из message.from_user.language_code

    Returns:
        Поддерживаемый код языка или DEFAULT_LANGUAGE
    """
    if not language_code:
        return DEFAULT_LANGUAGE

    lang = language_code[:2].lower()
    if lang in SUPPORTED_LANGUAGES:
        return lang

    return DEFAULT_LANGUAGE


# Загружаем переводы при импорте
_load_translations()
