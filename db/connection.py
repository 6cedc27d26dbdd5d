"""
Пул соединений PostgreSQL (asyncpg).

Пул создаётся лениво при первом запросе; bot.py закрывает его при остановке.
"""

import asyncpg
from typing import Optional

from config import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE, DB_COMMAND_TIMEOUT, get_logger

logger = get_logger(__name__)

_pool: Optional[asyncpg.Pool] = None


async def get_pool() -> asyncpg.Pool:
    """Пул соединений (создаётся при первом вызове)

    Raises:
        Исключение asyncpg, если база недоступна
    """
    global _pool
    if _pool is None:
        try:
            _pool = await asyncpg.create_pool(
                DATABASE_URL,
                min_size=DB_POOL_MIN_SIZE,
                max_size=DB_POOL_MAX_SIZE,
                command_timeout=DB_COMMAND_TIMEOUT,
            )
            logger.info(f"✅ Пул соединений создан ({DB_POOL_MIN_SIZE}-{DB_POOL_MAX_SIZE})")
        except Exception as e:
            logger.error(f"❌ Не удалось подключиться к базе: {e}")
            raise
    return _pool


async def close_pool():
    global _pool
    if _pool:
        await _pool.close()
        _pool = None
        logger.info("🔒 Пул соединений закрыт")


async def init_db():
    """Проверяет подключение, применяет схему и миграции"""
    pool = await get_pool()

    async with pool.acquire() as conn:
        await conn.fetchval('SELECT 1')

    from .models import create_tables
    await create_tables(pool)

    async with pool.acquire() as conn:
        users = await conn.fetchval('SELECT COUNT(*) FROM users')
        readings = await conn.fetchval('SELECT COUNT(*) FROM readings')
    logger.info(f"✅ База данных готова: пользователей {users}, раскладов {readings}")
    return pool
