"""
Тесты сборки интерпретаций.

Запуск: python -m pytest tests/test_interpreter.py -v
"""

import sys
import os

# Добавляем путь к проекту
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import TAROT_CARDS_PATH
from engines.tarot.cards import CardCatalog, get_card_meaning
from engines.tarot.draw import DrawnCard
from engines.tarot.interpreter import interpret_card, interpret_spread
from engines.tarot.spreads import SpreadCatalog

CATALOG = CardCatalog.load(TAROT_CARDS_PATH)
SPREADS = SpreadCatalog()


def _drawn(*names, reversed_names=()):
    return [DrawnCard(CATALOG.get(name), name in reversed_names) for name in names]


def test_positions_follow_draw_order():
    """i-я карта получает i-ю позицию схемы"""
    drawn = _drawn("The Fool", "The Magician", "Three of Cups")
    spread = SPREADS.get("three_card")
    result = interpret_spread(drawn, spread, "general")

    assert [i.card_name for i in result] == ["The Fool", "The Magician", "Three of Cups"]
    assert [i.position.position for i in result] == [1, 2, 3]
    assert [i.position_name for i in result] == ["Past", "Present", "Future"]
    assert result[0].position_meaning == spread.positions[0].meaning
    print("✅ Позиции по порядку")


def test_positionless_layout():
    result = interpret_spread(_drawn("The Fool", "Ace of Cups"), None, "general")
    assert all(i.position is None and i.position_name is None for i in result)


def test_card_fields():
    drawn = _drawn("Ace of Cups", reversed_names=("Ace of Cups",))[0]
    item = interpret_card(drawn, "love")

    assert item.name == "Ace of Cups"
    assert item.suit == "Cups"
    assert item.element == "Water"
    assert item.is_reversed
    assert item.orientation == "Reversed"
    assert not item.is_major_arcana
    assert item.meaning == get_card_meaning(drawn.card, "love", True)
    assert item.context == "love"
    assert "love" in item.keywords


def test_major_arcana_fields():
    item = interpret_card(_drawn("The Star")[0], "general")
    assert item.is_major_arcana
    assert item.element is None
    assert item.orientation == "Upright"


def test_unknown_context_uses_general_meaning():
    drawn = _drawn("The Sun")[0]
    item = interpret_card(drawn, "full_deck")
    assert item.meaning == get_card_meaning(drawn.card, "general", False)


def test_translated_interpretation():
    item = interpret_card(_drawn("The Fool")[0], "general", lang="ru")
    assert item.name == "Шут"
    assert item.orientation == "Прямое положение"
    assert item.card_name == "The Fool"
    print("✅ Интерпретация на русском")


def test_to_dict():
    spread = SPREADS.get("single")
    data = interpret_spread(_drawn("The Moon"), spread, "general")[0].to_dict()
    assert data['card'] == "The Moon"
    assert data['position'] == 1
    assert data['position_name'] == "Daily Guidance"
    assert isinstance(data['keywords'], list)
