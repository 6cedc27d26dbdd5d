"""
Тесты вытягивания карт: без повторов, обрезка по пулу, доля перевёрнутых.

Запуск: python -m pytest tests/test_draw.py -v
"""

import sys
import os
import random

import pytest

# Добавляем путь к проекту
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import TAROT_CARDS_PATH
from engines.tarot.cards import CardCatalog
from engines.tarot.draw import draw_cards
from engines.tarot.errors import CatalogNotInitializedError, InvalidPoolError, InvalidRequestError

CATALOG = CardCatalog.load(TAROT_CARDS_PATH)


def test_no_duplicates_in_one_draw():
    """Одна карта не встречается дважды в раскладе"""
    for seed in range(200):
        drawn = draw_cards(CATALOG, 10, rng=random.Random(seed))
        names = [d.card.name for d in drawn]
        assert len(names) == 10
        assert len(set(names)) == len(names), f"Повтор карт при seed={seed}: {names}"
    print("✅ Повторов нет")


def test_count_capped_by_pool_size():
    """Запрос больше размера пула молча обрезается"""
    drawn = draw_cards(CATALOG, 30, pool="major", rng=random.Random(1))
    assert len(drawn) == 22, f"Ожидалось 22 старших аркана, получено {len(drawn)}"

    drawn = draw_cards(CATALOG, 20, pool="cups", rng=random.Random(2))
    assert len(drawn) == 14
    assert len({d.card.name for d in drawn}) == 14
    print("✅ Количество обрезается по пулу")


def test_pool_restricts_cards():
    drawn = draw_cards(CATALOG, 5, pool="cups", rng=random.Random(3))
    assert all(d.card.suit == "Cups" for d in drawn)

    drawn = draw_cards(CATALOG, 5, pool="major", rng=random.Random(4))
    assert all(d.card.is_major_arcana for d in drawn)

    drawn = draw_cards(CATALOG, 5, pool="minor", rng=random.Random(5))
    assert not any(d.card.is_major_arcana for d in drawn)
    print("✅ Пулы соблюдаются")


def test_reversal_rate_close_to_thirty_percent():
    rng = random.Random(42)
    total = 0
    reversed_count = 0
    for _ in range(300):
        drawn = draw_cards(CATALOG, 10, rng=rng)
        total += len(drawn)
        reversed_count += sum(1 for d in drawn if d.is_reversed)

    rate = reversed_count / total
    assert 0.26 < rate < 0.34, f"Доля перевёрнутых {rate:.3f} далека от 0.3"
    print(f"✅ Доля перевёрнутых: {rate:.3f}")


def test_reversals_disabled():
    for seed in range(50):
        drawn = draw_cards(CATALOG, 10, include_reversals=False, rng=random.Random(seed))
        assert not any(d.is_reversed for d in drawn)
    print("✅ Без перевёрнутых карт")


def test_same_seed_same_draw():
    first = draw_cards(CATALOG, 5, rng=random.Random(7))
    second = draw_cards(CATALOG, 5, rng=random.Random(7))
    assert first == second


def test_invalid_requests():
    with pytest.raises(InvalidRequestError):
        draw_cards(CATALOG, 0)

    with pytest.raises(InvalidRequestError):
        draw_cards(CATALOG, -3)

    with pytest.raises(InvalidPoolError):
        draw_cards(CATALOG, 3, pool="stars")

    with pytest.raises(CatalogNotInitializedError):
        draw_cards(CardCatalog([]), 3)

    with pytest.raises(CatalogNotInitializedError):
        draw_cards(None, 3)
    print("✅ Ошибки запроса")


if __name__ == "__main__":
    test_no_duplicates_in_one_draw()
    test_count_capped_by_pool_size()
    test_pool_restricts_cards()
    test_reversal_rate_close_to_thirty_percent()
    test_reversals_disabled()
    print("\n✅ Все тесты пройдены!")
