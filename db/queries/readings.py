"""
Запросы для работы с раскладами (таблица readings).
"""

import json
from typing import List

from config import get_logger
from db.connection import get_pool

logger = get_logger(__name__)


async def store_reading(telegram_id: int, reading) -> int:
    """Сохранить расклад

    Args:
        telegram_id: Telegram ID пользователя
        reading: Reading из engines.tarot

    Returns:
        id сохранённой записи
    """
    cards = json.dumps([card.to_dict() for card in reading.cards], ensure_ascii=False)
    reading_type = "quick" if reading.quick else reading.reading_type

    pool = await get_pool()
    async with pool.acquire() as conn:
        reading_id = await conn.fetchval(
            '''
            INSERT INTO readings
            (telegram_id, reading_type, spread_name, question, cards_drawn,
             interpretation, ai_enhanced, personalized)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING id
            ''',
            telegram_id, reading_type, reading.spread_name, reading.user_question or '',
            cards, reading.narrative, reading.ai_enhanced, reading.personalized
        )

    logger.info(f"✅ Расклад #{reading_id} сохранён для пользователя {telegram_id}")
    return reading_id


async def get_reading_history(telegram_id: int, limit: int = 10) -> List[dict]:
    """Последние расклады пользователя, самый свежий первым"""
    pool = await get_pool()
    async with pool.acquire() as conn:
        rows = await conn.fetch(
            '''
            SELECT id, reading_type, spread_name, question, cards_drawn,
                   ai_enhanced, personalized, created_at
            FROM readings
            WHERE telegram_id = $1
            ORDER BY created_at DESC
            LIMIT $2
            ''',
            telegram_id, limit
        )

    history = []
    for row in rows:
        item = dict(row)
        try:
            item['cards'] = json.loads(item.pop('cards_drawn') or '[]')
        except json.JSONDecodeError:
            logger.warning(f"Повреждённый cards_drawn в раскладе #{item['id']}")
            item['cards'] = []
        history.append(item)
    return history


async def get_user_stats(telegram_id: int) -> dict:
    """Статистика раскладов пользователя

    Returns:
        {'total_readings', 'ai_enhanced_readings', 'personalized_readings',
         'reading_types_used', 'favorite_types': [(type, count), ...]}
    """
    pool = await get_pool()
    async with pool.acquire() as conn:
        totals = await conn.fetchrow(
            '''
            SELECT COUNT(*) AS total_readings,
                   COUNT(*) FILTER (WHERE ai_enhanced) AS ai_enhanced_readings,
                   COUNT(*) FILTER (WHERE personalized) AS personalized_readings,
                   COUNT(DISTINCT reading_type) AS reading_types_used
            FROM readings
            WHERE telegram_id = $1
            ''',
            telegram_id
        )
        favorites = await conn.fetch(
            '''
            SELECT reading_type, COUNT(*) AS count
            FROM readings
            WHERE telegram_id = $1
            GROUP BY reading_type
            ORDER BY count DESC, reading_type
            LIMIT 3
            ''',
            telegram_id
        )

    return {
        'total_readings': totals['total_readings'] or 0,
        'ai_enhanced_readings': totals['ai_enhanced_readings'] or 0,
        'personalized_readings': totals['personalized_readings'] or 0,
        'reading_types_used': totals['reading_types_used'] or 0,
        'favorite_types': [(row['reading_type'], row['count']) for row in favorites],
    }
