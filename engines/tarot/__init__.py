"""
Движок раскладов Таро.

Содержит:
- cards.py: каталог карт и значения с fallback
- spreads.py: схемы раскладов и позиции
- draw.py: вытягивание карт без повторов
- interpreter.py: интерпретации карт в раскладе
- narrative.py: шаблонный рассказ, сводка, советы, Reading
- reader.py: TarotReader - оркестратор расклада
- display.py: текст расклада для Telegram
- service.py: общий экземпляр TarotReader
- handlers.py: обработчики Telegram + FSM
"""

from .cards import Card, CardCatalog, get_card_meaning
from .spreads import Position, Spread, SpreadCatalog
from .draw import DrawnCard, draw_cards
from .interpreter import Interpretation, interpret_card, interpret_spread
from .narrative import Reading, format_complete_reading, get_quick_interpretation
from .reader import TarotReader
from .display import format_reading_for_display
from .errors import (
    TarotError,
    InvalidCatalogError,
    ReadingError,
    NoValidSpreadError,
    InvalidPoolError,
    InvalidRequestError,
    CatalogNotInitializedError,
)
from .handlers import tarot_router, FollowUpStates

__all__ = [
    'Card',
    'CardCatalog',
    'get_card_meaning',
    'Position',
    'Spread',
    'SpreadCatalog',
    'DrawnCard',
    'draw_cards',
    'Interpretation',
    'interpret_card',
    'interpret_spread',
    'Reading',
    'format_complete_reading',
    'get_quick_interpretation',
    'TarotReader',
    'format_reading_for_display',
    'TarotError',
    'InvalidCatalogError',
    'ReadingError',
    'NoValidSpreadError',
    'InvalidPoolError',
    'InvalidRequestError',
    'CatalogNotInitializedError',
    'tarot_router',
    'FollowUpStates',
]
