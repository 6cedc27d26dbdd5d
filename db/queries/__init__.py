"""
Функции для работы с базой данных.

Модули:
- users.py: работа с таблицей users
- readings.py: работа с таблицей readings
"""

from .users import (
    PROFILE_FIELDS,
    get_user,
    register_user,
    update_user,
    get_user_language,
    set_user_language,
    get_user_profile,
    update_user_profile,
    is_profile_completed,
    get_reversal_preference,
    set_reversal_preference,
    increment_reading_count,
    set_reminder,
    get_users_for_reminder,
)

from .readings import (
    store_reading,
    get_reading_history,
    get_user_stats,
)

__all__ = [
    # users
    'PROFILE_FIELDS',
    'get_user',
    'register_user',
    'update_user',
    'get_user_language',
    'set_user_language',
    'get_user_profile',
    'update_user_profile',
    'is_profile_completed',
    'get_reversal_preference',
    'set_reversal_preference',
    'increment_reading_count',
    'set_reminder',
    'get_users_for_reminder',

    # readings
    'store_reading',
    'get_reading_history',
    'get_user_stats',
]
