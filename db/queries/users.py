"""
Запросы для работы с пользователями (таблица users).
"""

from typing import List, Optional

from config import get_logger, DEFAULT_REMINDER_TIME
from config.features import flags
from db.connection import get_pool

logger = get_logger(__name__)

# Поля профиля, которые заполняет опрос /profile
PROFILE_FIELDS = (
    'gender',
    'age_group',
    'emotional_state',
    'life_focus',
    'spiritual_beliefs',
    'relationship_status',
    'career_field',
)

# Поля, которые можно менять через update_user
UPDATABLE_FIELDS = PROFILE_FIELDS + (
    'username',
    'first_name',
    'last_name',
    'language',
    'profile_completed',
    'include_reversals',
    'reminder_enabled',
    'reminder_time',
)


def _row_to_dict(row) -> dict:
    """Преобразовать строку БД в словарь"""
    def safe_get(key, default=''):
        return row[key] if key in row.keys() and row[key] is not None else default

    user = {
        'telegram_id': row['telegram_id'],
        'username': safe_get('username', ''),
        'first_name': safe_get('first_name', ''),
        'last_name': safe_get('last_name', ''),
        'language': safe_get('language', 'en'),
        'profile_completed': safe_get('profile_completed', False),
        'include_reversals': safe_get('include_reversals', True),
        'reminder_enabled': safe_get('reminder_enabled', False),
        'reminder_time': safe_get('reminder_time', DEFAULT_REMINDER_TIME),
        'readings_count': safe_get('readings_count', 0),
        'last_reading_at': safe_get('last_reading_at', None),
        'created_at': safe_get('created_at', None),
    }
    for field in PROFILE_FIELDS:
        user[field] = safe_get(field, None)
    return user


async def get_user(telegram_id: int) -> Optional[dict]:
    """Пользователь по Telegram ID или None"""
    pool = await get_pool()
    async with pool.acquire() as conn:
        row = await conn.fetchrow('SELECT * FROM users WHERE telegram_id = $1', telegram_id)
        return _row_to_dict(row) if row else None


async def register_user(telegram_id: int, username: str = '', first_name: str = '',
                        last_name: str = '', language: str = 'en') -> dict:
    """Создать пользователя или обновить его имя из Telegram

    Язык задаётся только при создании: выбранный через /language не перетирается.
    """
    pool = await get_pool()
    async with pool.acquire() as conn:
        row = await conn.fetchrow(
            '''
            INSERT INTO users (telegram_id, username, first_name, last_name, language, include_reversals)
            VALUES ($1, $2, $3, $4, $5, $6)
            ON CONFLICT (telegram_id) DO UPDATE
            SET username = EXCLUDED.username,
                first_name = EXCLUDED.first_name,
                last_name = EXCLUDED.last_name,
                updated_at = NOW()
            RETURNING *
            ''',
            telegram_id, username or '', first_name or '', last_name or '', language,
            bool(flags.get("readings.reversals_default", True)),
        )
        return _row_to_dict(row)


async def update_user(telegram_id: int, **kwargs):
    """Обновить данные пользователя"""
    pool = await get_pool()
    async with pool.acquire() as conn:
        for key, value in kwargs.items():
            if key not in UPDATABLE_FIELDS:
                raise ValueError(f"Unknown user field: {key}")
            await conn.execute(
                f'UPDATE users SET {key} = $1, updated_at = NOW() WHERE telegram_id = $2',
                value, telegram_id
            )


# ============= ЯЗЫК =============

async def get_user_language(telegram_id: int) -> str:
    user = await get_user(telegram_id)
    return user['language'] if user else 'en'


async def set_user_language(telegram_id: int, language: str):
    await update_user(telegram_id, language=language)


# ============= ПРОФИЛЬ =============

async def get_user_profile(telegram_id: int) -> Optional[dict]:
    """Ответы опроса (только заполненные поля) или None"""
    user = await get_user(telegram_id)
    if not user:
        return None
    profile = {field: user[field] for field in PROFILE_FIELDS if user.get(field)}
    return profile or None


async def update_user_profile(telegram_id: int, profile: dict):
    """Сохранить ответы опроса и отметить профиль заполненным"""
    values = {field: profile.get(field) for field in PROFILE_FIELDS}
    await update_user(telegram_id, profile_completed=True, **values)
    logger.info(f"✅ Профиль пользователя {telegram_id} сохранён")


async def is_profile_completed(telegram_id: int) -> bool:
    user = await get_user(telegram_id)
    return bool(user and user['profile_completed'])


# ============= ПЕРЕВЁРНУТЫЕ КАРТЫ =============

async def get_reversal_preference(telegram_id: int) -> bool:
    user = await get_user(telegram_id)
    return bool(user['include_reversals']) if user else True


async def set_reversal_preference(telegram_id: int, include_reversals: bool):
    await update_user(telegram_id, include_reversals=include_reversals)


# ============= СЧЁТЧИК РАСКЛАДОВ =============

async def increment_reading_count(telegram_id: int):
    pool = await get_pool()
    async with pool.acquire() as conn:
        await conn.execute(
            '''
            UPDATE users
            SET readings_count = readings_count + 1,
                last_reading_at = NOW(),
                updated_at = NOW()
            WHERE telegram_id = $1
            ''',
            telegram_id
        )


# ============= НАПОМИНАНИЯ =============

async def set_reminder(telegram_id: int, enabled: bool, reminder_time: Optional[str] = None):
    """Включить/выключить напоминание; reminder_time в формате HH:MM"""
    values = {'reminder_enabled': enabled}
    if reminder_time:
        values['reminder_time'] = reminder_time
    await update_user(telegram_id, **values)


async def get_users_for_reminder(hour: int, minute: int) -> List[dict]:
    """Пользователи с включённым напоминанием на заданное время"""
    pool = await get_pool()
    time_str = f"{hour:02d}:{minute:02d}"
    async with pool.acquire() as conn:
        rows = await conn.fetch(
            'SELECT * FROM users WHERE reminder_enabled = TRUE AND reminder_time = $1',
            time_str
        )
        return [_row_to_dict(row) for row in rows]
