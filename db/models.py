"""
Модели базы данных (SQL схемы).

Содержит CREATE TABLE и миграции.
"""

import asyncpg
from config import get_logger

logger = get_logger(__name__)


async def create_tables(pool: asyncpg.Pool):
    """Создание всех таблиц и применение миграций"""
    async with pool.acquire() as conn:
        # ═══════════════════════════════════════════════════════════
        # ПОЛЬЗОВАТЕЛИ
        # ═══════════════════════════════════════════════════════════
        await conn.execute('''
            CREATE TABLE IF NOT EXISTS users (
                telegram_id BIGINT PRIMARY KEY,

                -- Telegram
                username TEXT DEFAULT '',
                first_name TEXT DEFAULT '',
                last_name TEXT DEFAULT '',
                language TEXT DEFAULT 'en',

                -- Профиль (опрос /profile)
                profile_completed BOOLEAN DEFAULT FALSE,
                gender TEXT,
                age_group TEXT,
                emotional_state TEXT,
                life_focus TEXT,
                spiritual_beliefs TEXT,
                relationship_status TEXT,
                career_field TEXT,

                -- Предпочтения
                include_reversals BOOLEAN DEFAULT TRUE,
                reminder_enabled BOOLEAN DEFAULT FALSE,
                reminder_time TEXT DEFAULT '09:00',

                -- Расклады
                readings_count INTEGER DEFAULT 0,
                last_reading_at TIMESTAMP DEFAULT NULL,

                -- Временные метки
                created_at TIMESTAMP DEFAULT NOW(),
                updated_at TIMESTAMP DEFAULT NOW()
            )
        ''')

        # ═══════════════════════════════════════════════════════════
        # МИГРАЦИИ ДЛЯ СУЩЕСТВУЮЩИХ ТАБЛИЦ
        # ═══════════════════════════════════════════════════════════
        migrations = [
            'ALTER TABLE users ADD COLUMN IF NOT EXISTS life_focus TEXT',
            'ALTER TABLE users ADD COLUMN IF NOT EXISTS spiritual_beliefs TEXT',
            'ALTER TABLE users ADD COLUMN IF NOT EXISTS include_reversals BOOLEAN DEFAULT TRUE',
            'ALTER TABLE users ADD COLUMN IF NOT EXISTS reminder_enabled BOOLEAN DEFAULT FALSE',
            'ALTER TABLE users ADD COLUMN IF NOT EXISTS reminder_time TEXT DEFAULT \'09:00\'',
            'ALTER TABLE users ADD COLUMN IF NOT EXISTS last_reading_at TIMESTAMP DEFAULT NULL',
        ]

        for migration in migrations:
            try:
                await conn.execute(migration)
            except Exception as e:
                if 'already exists' not in str(e).lower():
                    logger.warning(f"Миграция пропущена: {e}")

        # ═══════════════════════════════════════════════════════════
        # РАСКЛАДЫ
        # ═══════════════════════════════════════════════════════════
        await conn.execute('''
            CREATE TABLE IF NOT EXISTS readings (
                id SERIAL PRIMARY KEY,
                telegram_id BIGINT NOT NULL,

                reading_type TEXT DEFAULT 'general',
                spread_name TEXT DEFAULT '',
                question TEXT DEFAULT '',

                -- JSON список интерпретаций
                cards_drawn TEXT NOT NULL DEFAULT '[]',
                interpretation TEXT DEFAULT '',

                ai_enhanced BOOLEAN DEFAULT FALSE,
                personalized BOOLEAN DEFAULT FALSE,

                created_at TIMESTAMP DEFAULT NOW()
            )
        ''')

        reading_migrations = [
            'ALTER TABLE readings ADD COLUMN IF NOT EXISTS reading_type TEXT DEFAULT \'general\'',
            'ALTER TABLE readings ADD COLUMN IF NOT EXISTS spread_name TEXT DEFAULT \'\'',
        ]

        for migration in reading_migrations:
            try:
                await conn.execute(migration)
            except Exception as e:
                if 'already exists' not in str(e).lower():
                    logger.warning(f"Миграция пропущена: {e}")

        # ═══════════════════════════════════════════════════════════
        # ИНДЕКСЫ
        # ═══════════════════════════════════════════════════════════
        await conn.execute('''
            CREATE INDEX IF NOT EXISTS idx_readings_telegram_id
            ON readings(telegram_id, created_at DESC)
        ''')
        await conn.execute('''
            CREATE INDEX IF NOT EXISTS idx_users_reminder
            ON users(reminder_time) WHERE reminder_enabled = TRUE
        ''')

    logger.info("✅ Таблицы созданы/обновлены")
