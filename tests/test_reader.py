"""
Тесты оркестратора TarotReader без Telegram, БД и сети.

Claude и загрузка профиля подменяются фейками.

Запуск: python -m pytest tests/test_reader.py -v
"""

import sys
import os
import asyncio
import random

import pytest

# Добавляем путь к проекту
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import TAROT_CARDS_PATH, AI_INTERPRETATION_MAX_CHARS, AI_ADVICE_MAX_CHARS
from engines.tarot.cards import CardCatalog
from engines.tarot.errors import InvalidPoolError, NoValidSpreadError
from engines.tarot.reader import TarotReader
from engines.tarot.spreads import SpreadCatalog

CATALOG = CardCatalog.load(TAROT_CARDS_PATH)


class FakeLLM:
    """Возвращает фиксированный текст и запоминает вызовы"""

    def __init__(self, story="AI story", advice="AI advice"):
        self.story = story
        self.advice = advice
        self.calls = []

    async def generate_interpretation(self, **kwargs):
        self.calls.append(('interpretation', kwargs))
        return self.story

    async def generate_advice(self, **kwargs):
        self.calls.append(('advice', kwargs))
        return self.advice


class FailingLLM:
    async def generate_interpretation(self, **kwargs):
        raise RuntimeError("API down")

    async def generate_advice(self, **kwargs):
        raise RuntimeError("API down")


class SlowLLM:
    async def generate_interpretation(self, **kwargs):
        await asyncio.sleep(1)
        return "too late"

    async def generate_advice(self, **kwargs):
        await asyncio.sleep(1)
        return "too late"


def make_reader(llm=None, profile_loader=None, seed=1, **kwargs):
    return TarotReader(
        CATALOG,
        SpreadCatalog(),
        llm=llm,
        profile_loader=profile_loader,
        rng=random.Random(seed),
        **kwargs,
    )


def run(coro):
    return asyncio.run(coro)


def test_daily_reading_end_to_end():
    """Карта дня: одна карта, позиция, AI-текст, история"""
    llm = FakeLLM()
    reader = make_reader(llm=llm)
    reading = run(reader.perform_daily_reading(language="en"))

    assert reading.card_count == 1
    assert reading.spread_name == "Single Card"
    assert reading.spread_key == "single"
    assert reading.reading_type == "daily"
    assert reading.cards[0].position_name == "Daily Guidance"
    assert reading.user_question == "What guidance do I need for today?"
    assert reading.ai_enhanced and reading.personalized
    assert reading.narrative == "AI story"
    assert reading.advice == "AI advice"
    assert reader.get_reading_history() == [reading]
    print("✅ Карта дня от начала до конца")


def test_ai_failure_falls_back_to_templates():
    reader = make_reader(llm=FailingLLM())
    reading = run(reader.perform_reading("general", "What now?"))

    assert not reading.ai_enhanced
    assert not reading.personalized
    assert "Three Card Spread" in reading.narrative
    assert reading.card_count == 3
    print("✅ Сбой AI -> шаблон")


def test_ai_timeout_falls_back_to_templates():
    reader = make_reader(llm=SlowLLM(), llm_timeout=0.01)
    reading = run(reader.perform_reading("love"))
    assert not reading.ai_enhanced
    assert not reading.personalized


def test_empty_ai_text_is_ignored():
    reader = make_reader(llm=FakeLLM(story="   ", advice=None))
    reading = run(reader.perform_reading("general"))
    assert not reading.ai_enhanced
    assert not reading.personalized


def test_without_llm():
    reading = run(make_reader().perform_reading("career"))
    assert not reading.ai_enhanced
    assert reading.card_count == 5
    assert reading.spread_name == "Career Spread"


def test_feature_flags_disable_ai(monkeypatch):
    monkeypatch.setenv("AI_ENHANCE_NARRATIVE", "false")
    llm = FakeLLM()
    reading = run(make_reader(llm=llm).perform_reading("general"))

    assert not reading.ai_enhanced
    assert reading.personalized
    assert [name for name, _ in llm.calls] == ['advice']


def test_profile_passed_to_llm():
    async def load_profile(user_id):
        return {'life_focus': 'Career & Work'}

    llm = FakeLLM()
    run(make_reader(llm=llm, profile_loader=load_profile).perform_reading("career", user_id=42, language="es"))

    for _, kwargs in llm.calls:
        assert kwargs['profile'] == {'life_focus': 'Career & Work'}
        assert kwargs['language'] == "es"
        assert kwargs['context'] == "career"


def test_profile_failure_is_ignored():
    async def broken_loader(user_id):
        raise ConnectionError("db down")

    llm = FakeLLM()
    reading = run(make_reader(llm=llm, profile_loader=broken_loader).perform_reading("general", user_id=1))
    assert reading.ai_enhanced
    assert all(kwargs['profile'] is None for _, kwargs in llm.calls)


def test_spread_resolution():
    reader = make_reader()

    assert run(reader.perform_reading("comprehensive")).card_count == 10
    assert run(reader.perform_reading("decision")).spread_name == "Decision Spread"

    # Неизвестный тип -> three_card
    reading = run(reader.perform_reading("mystery"))
    assert reading.spread_key == "three_card"
    assert reading.reading_type == "mystery"

    # Явная схема важнее типа
    assert run(reader.perform_reading("daily", spread_name="celtic_cross")).card_count == 10

    with pytest.raises(NoValidSpreadError):
        run(reader.perform_reading("general", spread_name="pyramid"))
    print("✅ Выбор схемы")


def test_explicit_context_overrides_reading_type():
    reading = run(make_reader().perform_reading("general", context="health"))
    assert reading.context == "health"
    assert all(item.context == "health" for item in reading.cards)


def test_love_readings_favor_cups():
    reader = make_reader(seed=5)
    suits = []
    for _ in range(150):
        reading = run(reader.perform_reading("love", include_reversals=False))
        suits.extend(item.suit for item in reading.cards)

    cups_share = suits.count("Cups") / len(suits)
    assert cups_share > 0.5, f"Доля Кубков {cups_share:.2f}"
    print(f"✅ Любовь тянет Кубки: {cups_share:.2f}")


def test_reversals_disabled_in_reading():
    reading = run(make_reader().perform_reading("comprehensive", include_reversals=False))
    assert not any(item.is_reversed for item in reading.cards)


def test_quick_reading_skips_ai():
    llm = FakeLLM()
    reader = make_reader(llm=llm)
    reading = run(reader.perform_quick_reading("general", "Quick one?"))

    assert reading.quick
    assert reading.card_count == 3
    assert [item.position_name for item in reading.cards] == ["Past", "Present", "Future"]
    assert not reading.ai_enhanced
    assert llm.calls == []
    assert reader.get_reading_history()[0] is reading


def test_full_deck_readings():
    reader = make_reader(llm=FakeLLM())

    reading = run(reader.perform_full_deck_reading("cups"))
    assert reading.spread_name == "Cups 3-Card Reading"
    assert reading.deck_type == "cups"
    assert reading.reading_type == "full_deck"
    assert all(item.suit == "Cups" for item in reading.cards)
    assert all(item.position is None for item in reading.cards)
    assert reading.ai_enhanced

    reading = run(reader.perform_full_deck_reading("majors", card_count=5))
    assert reading.card_count == 5
    assert all(item.is_major_arcana for item in reading.cards)

    reading = run(reader.perform_full_deck_reading("full", include_minors=False))
    assert all(item.is_major_arcana for item in reading.cards)

    with pytest.raises(InvalidPoolError):
        run(reader.perform_full_deck_reading("tarot"))
    print("✅ Расклады колодой")


def test_history_and_stats():
    reader = make_reader()
    assert reader.get_reading_stats() == {
        'total_readings': 0,
        'reading_types': {},
        'spread_types': {},
        'average_cards_per_reading': 0,
    }

    first = run(reader.perform_reading("daily"))
    second = run(reader.perform_reading("general"))
    third = run(reader.perform_reading("comprehensive"))

    assert reader.get_reading_history() == [third, second, first]
    assert reader.get_reading_history(limit=2) == [third, second]
    assert reader.get_reading_from_history(0) is third
    assert reader.get_reading_from_history(2) is first
    assert reader.get_reading_from_history(5) is None

    stats = reader.get_reading_stats()
    assert stats['total_readings'] == 3
    assert stats['reading_types'] == {'daily': 1, 'general': 1, 'comprehensive': 1}
    assert stats['spread_types']['Celtic Cross'] == 1
    # (1 + 3 + 10) / 3 = 4.67
    assert stats['average_cards_per_reading'] == 4.7

    reader.clear_reading_history()
    assert reader.get_reading_history() == []
    assert reader.get_reading_stats()['total_readings'] == 0
    print("✅ История и статистика")


def test_concurrent_readings_all_recorded():
    reader = make_reader(llm=FakeLLM())

    async def many():
        return await asyncio.gather(*(reader.perform_reading("general") for _ in range(20)))

    readings = run(many())
    assert len(reader.get_reading_history(limit=50)) == 20
    assert all(len({i.card_name for i in r.cards}) == 3 for r in readings)


def test_history_keeps_every_reading():
    """История не теряет старые расклады"""
    reader = make_reader()

    async def many():
        for _ in range(501):
            await reader.perform_quick_reading()

    run(many())
    stats = reader.get_reading_stats()
    assert stats['total_readings'] == 501
    assert stats['spread_types'] == {'Three Card Spread': 501}
    assert stats['average_cards_per_reading'] == 3
    assert reader.get_reading_from_history(500) is not None
    assert len(reader.get_reading_history(limit=1000)) == 501


def test_long_ai_text_is_truncated():
    story = "The cards speak of change. " * 100
    advice = "Trust yourself today. " * 100
    reader = make_reader(llm=FakeLLM(story=story, advice=advice))

    reading = run(reader.perform_reading("general"))

    assert reading.ai_enhanced and reading.personalized
    assert len(reading.narrative) <= AI_INTERPRETATION_MAX_CHARS
    assert len(reading.advice) <= AI_ADVICE_MAX_CHARS
    # Обрезано по концу предложения
    assert reading.narrative.endswith("change....")
    assert reading.advice.endswith("today....")
