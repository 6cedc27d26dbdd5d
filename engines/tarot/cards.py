"""
Каталог карт Таро.

Каталог загружается один раз при старте из data/tarot_cards.yaml
и дальше используется только для чтения.

Содержит:
- Card: неизменяемая карта со значениями по ориентации и контексту
- CardCatalog: 78 карт, пулы для вытягивания, поиск по имени
- get_card_meaning / get_translated_*: разрешение текста с fallback
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import yaml

from config import (
    get_logger,
    MAJOR_ARCANA_SUIT,
    SUITS,
    CARD_POOLS,
    Context,
    Orientation,
)
from locales import t
from .errors import InvalidCatalogError, InvalidPoolError

logger = get_logger(__name__)

MEANING_NOT_AVAILABLE_CARD = "Meaning not available for this card."
MEANING_NOT_AVAILABLE_ORIENTATION = "Meaning not available for this orientation."


@dataclass(frozen=True)
class Card:
    """Карта Таро"""
    name: str
    suit: str
    element: Optional[str]
    keywords: Tuple[str, ...]
    description: str
    meanings: Dict[str, Dict[str, str]] = field(default_factory=dict, compare=False, hash=False)
    number: Optional[int] = None

    @property
    def is_major_arcana(self) -> bool:
        return self.suit == MAJOR_ARCANA_SUIT

    @property
    def slug(self) -> str:
        return card_slug(self.name)


def card_slug(name: str) -> str:
    """Ключ карты для переводов: 'The High Priestess' -> 'the_high_priestess'"""
    return re.sub(r'[^a-z0-9]', '_', name.lower())


def _card_from_dict(data: dict, suit: str, element: Optional[str]) -> Card:
    name = data.get('name')
    if not name:
        raise InvalidCatalogError(f"Карта без имени в масти {suit}")
    return Card(
        name=name,
        suit=suit,
        element=element,
        keywords=tuple(data.get('keywords') or ()),
        description=data.get('description') or '',
        meanings=data.get('meanings') or {},
        number=data.get('number'),
    )


class CardCatalog:
    """Неизменяемый набор карт с пулами для вытягивания"""

    def __init__(self, cards: Iterable[Card]):
        self._cards: Tuple[Card, ...] = tuple(cards)
        self._by_name: Dict[str, Card] = {}
        for card in self._cards:
            key = card.name.lower()
            if key in self._by_name:
                raise InvalidCatalogError(f"Дубликат карты в каталоге: {card.name}")
            self._by_name[key] = card

    @classmethod
    def from_dict(cls, data: dict) -> 'CardCatalog':
        """Строит каталог из структуры tarot_cards.yaml

        Args:
            data: {'major_arcana': [...], 'minor_arcana': {'wands': [...], ...}}
        """
        cards: List[Card] = []
        for item in data.get('major_arcana') or []:
            cards.append(_card_from_dict(item, MAJOR_ARCANA_SUIT, None))

        for suit_key, suit_cards in (data.get('minor_arcana') or {}).items():
            suit_info = SUITS.get(suit_key)
            if not suit_info:
                raise InvalidCatalogError(f"Неизвестная масть: {suit_key}")
            for item in suit_cards or []:
                cards.append(_card_from_dict(item, suit_info['name'], suit_info['element']))

        return cls(cards)

    @classmethod
    def load(cls, path: Path) -> 'CardCatalog':
        """Загружает каталог из YAML файла"""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidCatalogError(f"Invalid YAML in {path}: {e}")

        catalog = cls.from_dict(data)
        logger.info(
            f"✅ Каталог карт загружен: {len(catalog.major_arcana)} старших, "
            f"{len(catalog.minor_arcana)} младших"
        )
        return catalog

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    @property
    def cards(self) -> Tuple[Card, ...]:
        return self._cards

    @property
    def major_arcana(self) -> List[Card]:
        return [c for c in self._cards if c.is_major_arcana]

    @property
    def minor_arcana(self) -> List[Card]:
        return [c for c in self._cards if not c.is_major_arcana]

    def suit(self, suit_key: str) -> List[Card]:
        """Карты одной масти по ключу ('cups', 'wands', ...)"""
        suit_info = SUITS.get(suit_key.lower())
        if not suit_info:
            raise InvalidPoolError(f"Invalid suit: {suit_key}. Must be one of: {', '.join(SUITS)}")
        return [c for c in self._cards if c.suit == suit_info['name']]

    def pool(self, name: str = "all") -> List[Card]:
        """Кандидаты для вытягивания (новый список, его можно изменять)

        Raises:
            InvalidPoolError: неизвестное имя пула
        """
        key = (name or "all").lower()
        if key not in CARD_POOLS:
            raise InvalidPoolError(f"Unknown card pool: {name}. Must be one of: {', '.join(CARD_POOLS)}")
        if key == "all":
            return list(self._cards)
        if key == "major":
            return self.major_arcana
        if key == "minor":
            return self.minor_arcana
        return self.suit(key)

    def get(self, name: str) -> Optional[Card]:
        """Поиск карты по имени (без учёта регистра)"""
        return self._by_name.get(name.lower()) if name else None


# ==================== ЗНАЧЕНИЯ И ПЕРЕВОДЫ ====================

def orientation_key(is_reversed: bool) -> str:
    return Orientation.REVERSED if is_reversed else Orientation.UPRIGHT


def get_card_meaning(card: Card, context: str = Context.GENERAL, is_reversed: bool = False) -> str:
    """Значение карты из каталога

    Порядок: meanings[ориентация][контекст] -> meanings[ориентация]['general'] -> фиксированный текст.
    Никогда не возвращает пустую строку.
    """
    if card is None or not card.meanings:
        return MEANING_NOT_AVAILABLE_CARD

    by_context = card.meanings.get(orientation_key(is_reversed)) or {}
    return (
        by_context.get(context)
        or by_context.get(Context.GENERAL)
        or MEANING_NOT_AVAILABLE_ORIENTATION
    )


def _lookup(key: str, lang: str) -> Optional[str]:
    """Перевод по ключу или None (t возвращает сам ключ при промахе)"""
    value = t(key, lang)
    if isinstance(value, str) and value and value != key:
        return value
    return None


def get_translated_card_name(card: Card, lang: str = "en") -> str:
    """Название карты на языке пользователя (fallback: имя из каталога)"""
    if card is None:
        return "Unknown Card"
    return _lookup(f"cards.names.{card.slug}", lang) or card.name


def get_translated_card_meaning(card: Card, context: str = Context.GENERAL,
                                is_reversed: bool = False, lang: str = "en") -> str:
    """Значение карты на языке пользователя

    Сначала перевод для контекста, затем общий перевод,
    затем цепочка get_card_meaning из каталога.
    """
    if card is None:
        return MEANING_NOT_AVAILABLE_CARD

    base = f"cards.meanings.{card.slug}.{orientation_key(is_reversed)}"
    return (
        _lookup(f"{base}.{context}", lang)
        or _lookup(f"{base}.{Context.GENERAL}", lang)
        or get_card_meaning(card, context, is_reversed)
    )


def get_translated_card_description(card: Card, lang: str = "en") -> str:
    if card is None or not card.description:
        return t('cards.no_description', lang)
    return _lookup(f"cards.descriptions.{card.slug}", lang) or card.description
