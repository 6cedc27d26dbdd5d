"""
Текст расклада для отправки в Telegram (Markdown).
"""

from locales import t
from .narrative import Reading, get_quick_interpretation

DATE_FORMAT = '%d.%m.%Y %H:%M'


def _footer(reading: Reading, language: str) -> str:
    date = reading.timestamp.strftime(DATE_FORMAT)
    return f"⏰ _{t('reading.performed_on', language, date=date)}_"


def format_quick_reading(reading: Reading, language: str = "en") -> str:
    """Быстрый расклад: заголовок, вопрос, короткий блок на каждую карту"""
    reading_type = t(f'reading_types.{reading.reading_type}', language)
    parts = [t('reading.quick_title', language, type=reading_type), ""]

    if reading.user_question:
        parts.append(t('reading.your_question', language, question=reading.user_question))
        parts.append("")

    for item in reading.cards:
        if item.position_name:
            parts.append(f"*{item.position_name}*")
        parts.append(get_quick_interpretation(item))
        parts.append("")

    parts.append(_footer(reading, language))
    return "\n".join(parts)


def format_full_reading(reading: Reading, language: str = "en") -> str:
    """Полный расклад: рассказ, сводка, советы, вопрос, дата"""
    parts = [reading.narrative.rstrip(), "", reading.summary.rstrip(), "", reading.advice.rstrip(), ""]

    if reading.user_question:
        parts.append(t('reading.your_question', language, question=reading.user_question))
        parts.append("")

    if reading.personalized:
        parts.append(f"✨ {t('reading.personalized_note', language)}")
        parts.append("")

    parts.append(_footer(reading, language))
    return "\n".join(parts)


def format_reading_for_display(reading: Reading, language: str = "en") -> str:
    if reading.quick:
        return format_quick_reading(reading, language)
    return format_full_reading(reading, language)
