"""
Вытягивание карт.

Карты выбираются без возвращения: случайный индекс из оставшихся
кандидатов, карта удаляется из пула. Ориентация решается в момент
вытягивания, независимо для каждой карты.
"""

import random
from dataclasses import dataclass
from typing import List, Optional

from config import get_logger, REVERSAL_PROBABILITY
from .cards import Card, CardCatalog
from .errors import CatalogNotInitializedError, InvalidRequestError

logger = get_logger(__name__)


@dataclass(frozen=True)
class DrawnCard:
    """Вытянутая карта с ориентацией"""
    card: Card
    is_reversed: bool = False


def draw_cards(
    catalog: Optional[CardCatalog],
    count: int,
    pool: str = "all",
    include_reversals: bool = True,
    rng: Optional[random.Random] = None,
    reversal_probability: float = REVERSAL_PROBABILITY,
) -> List[DrawnCard]:
    """Вытягивает count разных карт из пула

    Args:
        catalog: каталог карт
        count: сколько карт нужно (больше размера пула -> молча обрезается)
        pool: all, major, minor, wands, cups, swords, pentacles
        include_reversals: False -> все карты прямые
        rng: источник случайности (для тестов можно передать random.Random(seed))
        reversal_probability: вероятность переворота каждой карты

    Returns:
        Список DrawnCard без повторов

    Raises:
        CatalogNotInitializedError: каталог пуст или не загружен
        InvalidRequestError: count <= 0
        InvalidPoolError: неизвестный пул
    """
    if catalog is None or len(catalog) == 0:
        raise CatalogNotInitializedError("Card catalog is not loaded")
    if count <= 0:
        raise InvalidRequestError(f"Card count must be positive, got {count}")

    rng = rng or random
    candidates = catalog.pool(pool)
    if count > len(candidates):
        logger.debug(f"Запрошено {count} карт из пула '{pool}' размером {len(candidates)}")

    drawn = []
    while candidates and len(drawn) < count:
        card = candidates.pop(rng.randrange(len(candidates)))
        is_reversed = include_reversals and rng.random() < reversal_probability
        drawn.append(DrawnCard(card=card, is_reversed=is_reversed))

    reversed_count = sum(1 for d in drawn if d.is_reversed)
    logger.info(
        f"🎴 Вытянуто {len(drawn)} карт из пула '{pool}': "
        f"{', '.join(d.card.name for d in drawn)} (перевёрнуто: {reversed_count})"
    )
    return drawn
