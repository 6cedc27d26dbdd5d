"""
Сборка интерпретаций: вытянутая карта + позиция + контекст -> Interpretation.

Функции чистые: только чтение каталога и переводов.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from config import Context
from locales import t
from .cards import (
    get_translated_card_description,
    get_translated_card_meaning,
    get_translated_card_name,
)
from .draw import DrawnCard
from .spreads import Position, Spread


@dataclass
class Interpretation:
    """Интерпретация одной карты в раскладе"""
    name: str
    suit: str
    orientation: str
    is_reversed: bool
    is_major_arcana: bool
    element: Optional[str]
    keywords: Tuple[str, ...]
    description: str
    meaning: str
    context: str
    card_name: str = ""
    position: Optional[Position] = None
    position_name: Optional[str] = None
    position_description: Optional[str] = None
    position_meaning: Optional[str] = None

    def to_dict(self) -> dict:
        """Сериализация для БД (cards_drawn JSON) и промптов"""
        return {
            'card': self.card_name,
            'name': self.name,
            'suit': self.suit,
            'orientation': self.orientation,
            'is_reversed': self.is_reversed,
            'is_major_arcana': self.is_major_arcana,
            'element': self.element,
            'keywords': list(self.keywords),
            'meaning': self.meaning,
            'context': self.context,
            'position': self.position.position if self.position else None,
            'position_name': self.position_name,
        }


def orientation_label(is_reversed: bool, lang: str = "en") -> str:
    return t('card.reversed' if is_reversed else 'card.upright', lang)


def interpret_card(
    drawn: DrawnCard,
    context: str = Context.GENERAL,
    position: Optional[Position] = None,
    lang: str = "en",
) -> Interpretation:
    """Интерпретация одной вытянутой карты

    Args:
        drawn: карта и ориентация
        context: general, love, career, health (неизвестный -> значения general)
        position: позиция в раскладе (None для раскладов без позиций)
        lang: язык пользователя
    """
    card = drawn.card
    interpretation = Interpretation(
        name=get_translated_card_name(card, lang),
        suit=card.suit,
        orientation=orientation_label(drawn.is_reversed, lang),
        is_reversed=drawn.is_reversed,
        is_major_arcana=card.is_major_arcana,
        element=card.element,
        keywords=card.keywords,
        description=get_translated_card_description(card, lang),
        meaning=get_translated_card_meaning(card, context, drawn.is_reversed, lang),
        context=context,
        card_name=card.name,
    )

    if position is not None:
        interpretation.position = position
        interpretation.position_name = position.name
        interpretation.position_description = position.description
        interpretation.position_meaning = position.meaning

    return interpretation


def interpret_spread(
    drawn_cards: List[DrawnCard],
    spread: Optional[Spread],
    context: str = Context.GENERAL,
    lang: str = "en",
) -> List[Interpretation]:
    """Интерпретации всех карт в порядке вытягивания

    Позиция i-й карты = spread.positions[i]. Для раскладов без схемы
    (spread=None) позиции отсутствуют.
    """
    interpretations = []
    for index, drawn in enumerate(drawn_cards, start=1):
        position = spread.position_at(index) if spread else None
        interpretations.append(interpret_card(drawn, context, position, lang))
    return interpretations
