"""
Тесты шаблонного текста расклада: темы, послание, советы, сборка Reading.

Запуск: python -m pytest tests/test_narrative.py -v
"""

import sys
import os

# Добавляем путь к проекту
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from locales import t
from engines.tarot.interpreter import Interpretation
from engines.tarot.narrative import (
    analyze_themes,
    collect_advice_points,
    format_complete_reading,
    generate_advice,
    generate_narrative,
    generate_overall_message,
    get_quick_interpretation,
)
from engines.tarot.display import format_reading_for_display


def make_item(name="The Fool", meaning="Plain text.", keywords=(), is_reversed=False,
              major=True, position_name=None):
    return Interpretation(
        name=name,
        suit="Major Arcana" if major else "Cups",
        orientation="Reversed" if is_reversed else "Upright",
        is_reversed=is_reversed,
        is_major_arcana=major,
        element=None if major else "Water",
        keywords=tuple(keywords),
        description="",
        meaning=meaning,
        context="general",
        card_name=name,
        position_name=position_name,
    )


def _numbered_lines(text):
    return [line for line in text.splitlines() if line[:1].isdigit()]


def test_dominant_themes_order():
    """a:3, b:2, c:2, d/e/f:1 -> [a, b, c]"""
    items = [
        make_item(keywords=("a", "b", "d")),
        make_item(keywords=("a", "c", "e")),
        make_item(keywords=("a", "b", "c", "f")),
    ]
    assert analyze_themes(items) == ["a", "b", "c"]
    print("✅ Доминирующие темы")


def test_themes_tie_keeps_first_seen_order():
    items = [make_item(keywords=("x", "y")), make_item(keywords=("y", "x"))]
    assert analyze_themes(items) == ["x", "y"]


def test_themes_capped_at_five():
    keywords = ("k1", "k2", "k3", "k4", "k5", "k6")
    items = [make_item(keywords=keywords), make_item(keywords=keywords)]
    assert len(analyze_themes(items)) == 5


def test_no_repeated_keywords_no_themes():
    items = [make_item(keywords=("a",)), make_item(keywords=("b",))]
    assert analyze_themes(items) == []


def test_trust_and_patience_give_two_advice_lines():
    items = [
        make_item(meaning="Trust your intuition."),
        make_item(meaning="Have patience."),
    ]
    points = collect_advice_points(items)
    assert points == [t('advice.trust_intuition'), t('advice.patience')]

    lines = _numbered_lines(generate_advice(items))
    assert len(lines) == 2, f"Ожидалось 2 совета, получено: {lines}"
    print("✅ Два совета по триггерам")


def test_advice_deduplicated_and_capped():
    items = [
        make_item(meaning="Trust and take action, embrace change."),
        make_item(meaning="Trust again. Find balance and focus."),
    ]
    points = collect_advice_points(items)
    assert len(points) == 3
    assert points[0] == t('advice.trust_intuition')
    assert len(set(points)) == 3


def test_fallback_advice():
    lines = _numbered_lines(generate_advice([make_item(meaning="Nothing matches here.")]))
    assert lines == [
        f"1. {t('advice.trust_journey')}",
        f"2. {t('advice.listen_inner_voice')}",
        f"3. {t('advice.one_step')}",
    ]


def test_overall_message_thresholds():
    def items(reversed_count, total):
        return [make_item(is_reversed=i < reversed_count) for i in range(total)]

    assert generate_overall_message(items(2, 3)).startswith(t('reading.energy.high'))
    assert generate_overall_message(items(1, 3)).startswith(t('reading.energy.mixed'))
    # Ровно 25% ещё не mixed
    assert generate_overall_message(items(1, 4)).startswith(t('reading.energy.low'))
    assert generate_overall_message(items(0, 3), "love").endswith(t('reading.guidance.love'))
    assert generate_overall_message(items(0, 3), "unknown").endswith(t('reading.guidance.general'))


def test_narrative_uses_card_n_without_positions():
    items = [make_item(name="The Sun"), make_item(name="Two of Cups", major=False)]
    text = generate_narrative(items, "Cups 2-Card Reading")
    assert "*1. Card 1*" in text
    assert "*2. Card 2*" in text
    assert "Cups (Water)" in text
    assert t('card.major_arcana') in text


def test_narrative_uses_position_names():
    text = generate_narrative([make_item(position_name="Past")], "Three Card Spread", "love")
    assert "*1. Past*" in text
    assert t('reading.intro.love') in text


def test_ai_text_replaces_templates():
    items = [make_item(meaning="Trust your intuition.")]

    plain = format_complete_reading(items, "Single Card", "daily")
    assert not plain.ai_enhanced and not plain.personalized
    assert "Single Card" in plain.narrative
    assert plain.card_count == 1

    enhanced = format_complete_reading(
        items, "Single Card", "daily",
        ai_enhanced_reading="AI story", personalized_advice="AI advice",
    )
    assert enhanced.ai_enhanced and enhanced.personalized
    assert enhanced.narrative == "AI story"
    assert enhanced.advice == "AI advice"
    assert enhanced.summary == plain.summary
    print("✅ AI-текст заменяет шаблон")


def test_quick_interpretation():
    text = get_quick_interpretation(make_item(name="The Star", meaning="Hope."))
    assert text == "🎴 *The Star* (Upright)\n📝 Hope."


def test_display_full_and_quick():
    items = [make_item(name="The Star", meaning="Hope.", position_name="Past")]

    full = format_complete_reading(items, "Single Card", "general", user_question="Will it work?")
    text = format_reading_for_display(full)
    assert full.narrative.strip() in text
    assert "Will it work?" in text
    assert "⏰" in text

    quick = format_complete_reading(items, "Three Card Spread", "general", quick=True)
    text = format_reading_for_display(quick)
    assert text.startswith(t('reading.quick_title', type=t('reading_types.general')))
    assert "*Past*" in text
    assert "🎴 *The Star*" in text
