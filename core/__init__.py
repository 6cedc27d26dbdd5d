"""
Ядро бота: общие компоненты.

Содержит:
- helpers.py: разбиение длинных сообщений, промпт профиля, разбор времени
"""

from .helpers import (
    split_message,
    truncate_message,
    is_message_too_long,
    get_profile_prompt,
    parse_time,
)

__all__ = [
    'split_message',
    'truncate_message',
    'is_message_too_long',
    'get_profile_prompt',
    'parse_time',
]
