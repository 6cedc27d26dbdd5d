"""
Схемы раскладов: ключ -> упорядоченные именованные позиции.

Инвариант схемы: len(positions) == card_count, номера позиций ровно 1..card_count.
Нарушение обнаруживается при построении каталога (InvalidCatalogError).
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from config import DEFAULT_SPREADS, FALLBACK_SPREAD
from .errors import InvalidCatalogError


@dataclass(frozen=True)
class Position:
    """Позиция в раскладе (номер с 1)"""
    position: int
    name: str
    description: str
    meaning: str


@dataclass(frozen=True)
class Spread:
    key: str
    name: str
    description: str
    card_count: int
    positions: Tuple[Position, ...]

    def position_at(self, number: int) -> Optional[Position]:
        """Позиция по номеру (1-based) или None"""
        if 1 <= number <= len(self.positions):
            return self.positions[number - 1]
        return None


SPREAD_DEFINITIONS = {
    "single": {
        "name": "Single Card",
        "description": "A simple one-card reading for daily guidance",
        "positions": [
            ("Daily Guidance", "The main message or theme for today",
             "This card represents the primary energy or message you should focus on today."),
        ],
    },
    "three_card": {
        "name": "Three Card Spread",
        "description": "Past, present, and future reading",
        "positions": [
            ("Past", "Influences from the past affecting your situation",
             "This card shows what has led you to your current situation and what you can learn from past experiences."),
            ("Present", "Your current situation and circumstances",
             "This card reflects where you are right now and the energies currently surrounding you."),
            ("Future", "Potential outcomes and future possibilities",
             "This card indicates what may come to pass and the direction you're heading."),
        ],
    },
    "celtic_cross": {
        "name": "Celtic Cross",
        "description": "A comprehensive ten-card spread for detailed readings",
        "positions": [
            ("Present", "Your current situation",
             "The central issue or question you're facing right now."),
            ("Challenge", "Immediate challenge or obstacle",
             "What's crossing or challenging you in this situation."),
            ("Past Foundation", "Root cause or foundation",
             "The underlying cause or foundation of your current situation."),
            ("Recent Past", "Recent events or influences",
             "What has recently happened that led to your current situation."),
            ("Possible Future", "What may come to pass",
             "The likely outcome if you continue on your current path."),
            ("Near Future", "Immediate future",
             "What's coming up very soon in your life."),
            ("Self", "Your attitude and approach",
             "How you see yourself and your approach to this situation."),
            ("Environment", "External influences and people",
             "The people and circumstances around you affecting this situation."),
            ("Hopes & Fears", "Your hopes and fears",
             "What you hope for and what you fear about this situation."),
            ("Outcome", "Final outcome or resolution",
             "The ultimate outcome or resolution of this situation."),
        ],
    },
    "love": {
        "name": "Love Spread",
        "description": "A five-card spread focused on love and relationships",
        "positions": [
            ("Your Feelings", "How you feel about love and relationships",
             "Your current emotional state and feelings about love."),
            ("Partner's Feelings", "How your partner or potential partner feels",
             "The emotional state and feelings of your partner or potential partner."),
            ("Relationship Dynamics", "The energy between you",
             "The current dynamics and energy flow in your relationship."),
            ("Challenges", "Obstacles or challenges in the relationship",
             "What challenges or obstacles you may face in your love life."),
            ("Future of Love", "Where the relationship is heading",
             "The potential future and direction of your love life."),
        ],
    },
    "career": {
        "name": "Career Spread",
        "description": "A five-card spread focused on career and professional development",
        "positions": [
            ("Current Work", "Your current professional situation",
             "Where you are right now in your career and work life."),
            ("Skills & Talents", "Your professional strengths",
             "Your key skills, talents, and professional strengths."),
            ("Opportunities", "Professional opportunities available",
             "What opportunities are available to you in your career."),
            ("Challenges", "Professional obstacles or challenges",
             "What challenges or obstacles you may face in your career."),
            ("Career Path", "Your professional future",
             "Where your career path is leading and potential outcomes."),
        ],
    },
    "decision": {
        "name": "Decision Spread",
        "description": "A three-card spread to help with decision making",
        "positions": [
            ("Option A", "First choice or option",
             "What the first option or choice represents and its implications."),
            ("Option B", "Second choice or option",
             "What the second option or choice represents and its implications."),
            ("Guidance", "Advice for making the decision",
             "Guidance and advice to help you make the best decision."),
        ],
    },
}


def build_spread(key: str, definition: dict) -> Spread:
    """Собирает Spread из определения и проверяет инвариант позиций

    Позиции в определении могут быть кортежами (name, description, meaning)
    или готовыми Position.
    """
    positions = []
    for index, item in enumerate(definition.get("positions") or [], start=1):
        if isinstance(item, Position):
            positions.append(item)
        else:
            name, description, meaning = item
            positions.append(Position(index, name, description, meaning))

    card_count = definition.get("card_count", len(positions))
    if card_count <= 0:
        raise InvalidCatalogError(f"Spread '{key}': card_count must be positive")
    if len(positions) != card_count:
        raise InvalidCatalogError(
            f"Spread '{key}': {len(positions)} positions for {card_count} cards"
        )
    if [p.position for p in positions] != list(range(1, card_count + 1)):
        raise InvalidCatalogError(f"Spread '{key}': positions must be numbered 1..{card_count}")

    return Spread(
        key=key,
        name=definition["name"],
        description=definition.get("description", ""),
        card_count=card_count,
        positions=tuple(positions),
    )


class SpreadCatalog:
    """Статический набор схем раскладов"""

    def __init__(self, definitions: Optional[Dict[str, dict]] = None):
        definitions = SPREAD_DEFINITIONS if definitions is None else definitions
        self._spreads: Dict[str, Spread] = {
            key: build_spread(key, definition) for key, definition in definitions.items()
        }

    def get(self, key: Optional[str]) -> Optional[Spread]:
        return self._spreads.get(key) if key else None

    @staticmethod
    def default_for(reading_type: str) -> str:
        """Ключ схемы по умолчанию для типа расклада (неизвестный тип -> three_card)"""
        return DEFAULT_SPREADS.get(reading_type, FALLBACK_SPREAD)
