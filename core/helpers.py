"""
Вспомогательные функции для текстов и промптов.

Содержит:
- split_message / truncate_message: укладка длинного текста в лимит Telegram
- get_profile_prompt: блок профиля пользователя для промптов Claude
- parse_time: разбор времени напоминания HH:MM
"""

import re
from typing import List, Optional

from config import get_logger, TELEGRAM_MESSAGE_LIMIT

logger = get_logger(__name__)

# Поля профиля в порядке опроса -> подпись для промпта
PROFILE_PROMPT_FIELDS = [
    ('gender', 'Gender'),
    ('age_group', 'Age Group'),
    ('emotional_state', 'Emotional State'),
    ('life_focus', 'Life Focus'),
    ('spiritual_beliefs', 'Spiritual Beliefs'),
    ('relationship_status', 'Relationship Status'),
    ('career_field', 'Career Stage'),
]

_TIME_PATTERN = re.compile(r'^\s*([01]?\d|2[0-3])[:.]([0-5]\d)\s*$')


def is_message_too_long(message: str, max_length: int = TELEGRAM_MESSAGE_LIMIT) -> bool:
    return len(message) > max_length


def split_message(message: str, max_length: int = TELEGRAM_MESSAGE_LIMIT) -> List[str]:
    """Разбивает текст на части не длиннее max_length

    Режет по строкам; строку длиннее лимита режет по словам;
    слово длиннее лимита обрезает с многоточием.

    Args:
        message: исходный текст
        max_length: лимит одной части

    Returns:
        Список частей (пустые части отбрасываются)
    """
    if len(message) <= max_length:
        return [message]

    parts = []
    current = ''

    for line in message.split('\n'):
        if len(current) + len(line) + 1 <= max_length:
            current += line + '\n'
            continue

        if current.strip():
            parts.append(current.strip())
        current = ''

        if len(line) <= max_length:
            current = line + '\n'
            continue

        # Строка сама по себе длиннее лимита
        chunk = ''
        for word in line.split(' '):
            if len(word) > max_length:
                if chunk.strip():
                    parts.append(chunk.strip())
                parts.append(word[:max_length - 3] + '...')
                chunk = ''
            elif chunk and len(chunk) + len(word) + 1 > max_length:
                parts.append(chunk.strip())
                chunk = word
            else:
                chunk = f"{chunk} {word}" if chunk else word
        if chunk.strip():
            current = chunk.strip() + '\n'

    if current.strip():
        parts.append(current.strip())

    return parts


def truncate_message(message: str, max_length: int = TELEGRAM_MESSAGE_LIMIT) -> str:
    """Обрезает текст до max_length с многоточием

    Если в последних 20% есть конец предложения или строки, режет по нему.
    """
    if len(message) <= max_length:
        return message

    truncated = message[:max_length - 3]
    cut_point = max(truncated.rfind(mark) for mark in ('.', '!', '?', '\n'))

    if cut_point > max_length * 0.8:
        return truncated[:cut_point + 1] + '...'

    return truncated + '...'


def get_profile_prompt(profile: Optional[dict]) -> str:
    """Блок профиля пользователя для промпта

    Args:
        profile: ответы опроса (может быть None или неполным)

    Returns:
        Строка "User Profile Information:" со списком заполненных полей
        или пустая строка, если заполненных полей нет
    """
    if not profile:
        return ''

    lines = [
        f"- {label}: {profile[field]}"
        for field, label in PROFILE_PROMPT_FIELDS
        if profile.get(field)
    ]
    if not lines:
        return ''

    return "User Profile Information:\n" + "\n".join(lines) + "\n"


def parse_time(text: Optional[str]) -> Optional[str]:
    """'8:30' / '08.30' -> '08:30'; None, если формат не распознан"""
    if not text:
        return None
    match = _TIME_PATTERN.match(text)
    if not match:
        return None
    return f"{int(match.group(1)):02d}:{match.group(2)}"
