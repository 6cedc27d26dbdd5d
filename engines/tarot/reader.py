"""
Оркестратор расклада.

TarotReader проводит полный цикл:
схема -> пул -> вытягивание -> интерпретации -> профиль -> AI -> Reading.

Ошибки схемы, пула и каталога пробрасываются (ReadingError).
Профиль и AI необязательны: любая ошибка или таймаут даёт шаблонный текст.
"""

import asyncio
import random
import threading
from typing import Awaitable, Callable, Dict, List, Optional

from config import (
    get_logger,
    ReadingType,
    DECK_TYPES,
    FULL_DECK_CARD_COUNT,
    POOL_BIAS,
    QUICK_READING_SPREAD,
    REVERSAL_PROBABILITY,
    HISTORY_DEFAULT_LIMIT,
    CLAUDE_TIMEOUT,
    AI_INTERPRETATION_MAX_CHARS,
    AI_ADVICE_MAX_CHARS,
)
from config.features import flags
from core.helpers import truncate_message
from .cards import CardCatalog
from .draw import draw_cards
from .errors import InvalidPoolError, NoValidSpreadError
from .interpreter import interpret_spread
from .narrative import Reading, format_complete_reading
from .spreads import Spread, SpreadCatalog

logger = get_logger(__name__)

ProfileLoader = Callable[[int], Awaitable[Optional[dict]]]

# Вопросы по умолчанию для быстрых команд
DEFAULT_QUESTIONS = {
    ReadingType.DAILY: "What guidance do I need for today?",
    ReadingType.LOVE: "What guidance do I need for my love life?",
    ReadingType.CAREER: "What guidance do I need for my career?",
}

# Лимит длины AI-текста по методу llm
LLM_TEXT_LIMITS = {
    "generate_interpretation": AI_INTERPRETATION_MAX_CHARS,
    "generate_advice": AI_ADVICE_MAX_CHARS,
}


class TarotReader:
    """Проводит расклады и хранит историю в памяти процесса

    Args:
        catalog: каталог карт
        spreads: каталог схем
        llm: клиент с generate_interpretation / generate_advice (None -> без AI)
        profile_loader: async функция user_id -> профиль (None -> без профиля)
        rng: источник случайности
        reversal_probability: вероятность перевёрнутой карты
        llm_timeout: таймаут одного AI-запроса в секундах
    """

    def __init__(
        self,
        catalog: CardCatalog,
        spreads: SpreadCatalog,
        llm=None,
        profile_loader: Optional[ProfileLoader] = None,
        rng: Optional[random.Random] = None,
        reversal_probability: float = REVERSAL_PROBABILITY,
        llm_timeout: float = CLAUDE_TIMEOUT,
    ):
        self.catalog = catalog
        self.spreads = spreads
        self.llm = llm
        self.profile_loader = profile_loader
        self.rng = rng or random.Random()
        self.reversal_probability = reversal_probability
        self.llm_timeout = llm_timeout
        self._history: List[Reading] = []
        self._lock = threading.Lock()

    # ==================== ВЫБОР СХЕМЫ И ПУЛА ====================

    def determine_spread(self, reading_type: str, spread_name: Optional[str] = None) -> Spread:
        """Явная схема, если она существует, иначе схема по умолчанию для типа

        Raises:
            NoValidSpreadError: явная схема неизвестна или схема по умолчанию не найдена
        """
        if spread_name:
            spread = self.spreads.get(spread_name)
            if spread is None:
                raise NoValidSpreadError(f"Unknown spread: {spread_name}")
            return spread

        default_key = SpreadCatalog.default_for(reading_type)
        spread = self.spreads.get(default_key)
        if spread is None:
            raise NoValidSpreadError(f"No valid spread found for reading type: {reading_type}")
        return spread

    def select_pool(self, reading_type: str) -> str:
        """Любовь тянет чаще из Кубков, карьера из Пентаклей"""
        bias = POOL_BIAS.get(reading_type)
        if bias:
            suit, probability = bias
            if self.rng.random() < probability:
                return suit
        return "all"

    # ==================== BEST-EFFORT ====================

    async def _load_profile(self, user_id: Optional[int]) -> Optional[dict]:
        if user_id is None or self.profile_loader is None:
            return None
        try:
            return await self.profile_loader(user_id)
        except Exception as e:
            logger.warning(f"⚠️ Профиль пользователя {user_id} недоступен: {e}")
            return None

    async def _ask_llm(self, method: str, **kwargs) -> Optional[str]:
        """Вызывает метод llm с таймаутом; None при любой ошибке

        Слишком длинный ответ обрезается по границе предложения.
        """
        if self.llm is None:
            return None
        try:
            result = await asyncio.wait_for(getattr(self.llm, method)(**kwargs), timeout=self.llm_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"⚠️ AI {method}: таймаут {self.llm_timeout}с, используем шаблон")
            return None
        except Exception as e:
            logger.warning(f"⚠️ AI {method} не удался, используем шаблон: {e}")
            return None

        if not isinstance(result, str) or not result.strip():
            return None

        text = result.strip()
        limit = LLM_TEXT_LIMITS.get(method)
        if limit and len(text) > limit:
            logger.info(f"✂️ AI {method}: {len(text)} символов, обрезаем до {limit}")
            text = truncate_message(text, limit)
        return text

    async def _enhance(self, interpretations, spread_name: str, context: str, user_question: str,
                       language: str, profile: Optional[dict]):
        """AI-рассказ и советы, каждый независимо и под своим флагом"""
        ai_reading = None
        if flags.is_enabled("ai.enhance_narrative"):
            ai_reading = await self._ask_llm(
                "generate_interpretation",
                interpretations=interpretations,
                spread_name=spread_name,
                context=context,
                user_question=user_question,
                language=language,
                profile=profile,
            )

        ai_advice = None
        if flags.is_enabled("ai.enhance_advice"):
            ai_advice = await self._ask_llm(
                "generate_advice",
                interpretations=interpretations,
                context=context,
                user_question=user_question,
                language=language,
                profile=profile,
            )

        return ai_reading, ai_advice

    def _remember(self, reading: Reading) -> None:
        with self._lock:
            self._history.append(reading)

    # ==================== РАСКЛАДЫ ====================

    async def perform_reading(
        self,
        reading_type: str = ReadingType.GENERAL,
        user_question: str = "",
        spread_name: Optional[str] = None,
        include_reversals: bool = True,
        context: Optional[str] = None,
        user_id: Optional[int] = None,
        language: str = "en",
    ) -> Reading:
        """Полный расклад

        Args:
            reading_type: daily, love, career, general, decision, comprehensive, quick
            user_question: вопрос пользователя (может быть пустым)
            spread_name: ключ схемы (None -> схема по умолчанию для типа)
            include_reversals: разрешить перевёрнутые карты
            context: линза значений (None -> reading_type)
            user_id: Telegram ID для загрузки профиля
            language: язык текста

        Returns:
            Reading, уже добавленный в историю

        Raises:
            ReadingError: схема не найдена, пул неизвестен, каталог не загружен
        """
        logger.info(f"🔮 Расклад {reading_type} (язык {language}, пользователь {user_id})")

        spread = self.determine_spread(reading_type, spread_name)
        pool = self.select_pool(reading_type)
        drawn = draw_cards(
            self.catalog,
            spread.card_count,
            pool=pool,
            include_reversals=include_reversals,
            rng=self.rng,
            reversal_probability=self.reversal_probability,
        )

        reading_context = context or reading_type
        interpretations = interpret_spread(drawn, spread, reading_context, language)

        profile = await self._load_profile(user_id)
        ai_reading, ai_advice = await self._enhance(
            interpretations, spread.name, reading_context, user_question, language, profile
        )

        reading = format_complete_reading(
            interpretations,
            spread.name,
            reading_context,
            ai_enhanced_reading=ai_reading,
            personalized_advice=ai_advice,
            lang=language,
            reading_type=reading_type,
            user_question=user_question,
            spread_key=spread.key,
        )
        self._remember(reading)

        logger.info(
            f"✅ Расклад {reading_type} готов: {spread.name}, {reading.card_count} карт, "
            f"AI: {reading.ai_enhanced}, советы: {reading.personalized}"
        )
        return reading

    async def perform_quick_reading(
        self,
        reading_type: str = ReadingType.GENERAL,
        user_question: str = "",
        include_reversals: bool = True,
        language: str = "en",
    ) -> Reading:
        """Быстрый расклад на три карты без AI"""
        spread = self.spreads.get(QUICK_READING_SPREAD)
        if spread is None:
            raise NoValidSpreadError(f"Quick reading spread '{QUICK_READING_SPREAD}' is not defined")

        drawn = draw_cards(
            self.catalog,
            spread.card_count,
            include_reversals=include_reversals,
            rng=self.rng,
            reversal_probability=self.reversal_probability,
        )
        interpretations = interpret_spread(drawn, spread, reading_type, language)

        reading = format_complete_reading(
            interpretations,
            spread.name,
            reading_type,
            lang=language,
            reading_type=reading_type,
            user_question=user_question,
            quick=True,
            spread_key=spread.key,
        )
        self._remember(reading)
        logger.info(f"⚡ Быстрый расклад готов: {', '.join(i.card_name for i in interpretations)}")
        return reading

    async def perform_full_deck_reading(
        self,
        deck_type: str = "full",
        card_count: int = FULL_DECK_CARD_COUNT,
        user_question: str = "",
        include_reversals: bool = True,
        include_minors: bool = True,
        user_id: Optional[int] = None,
        language: str = "en",
    ) -> Reading:
        """Расклад из выбранной части колоды без схемы позиций

        Args:
            deck_type: full, majors, wands, cups, swords, pentacles
            card_count: сколько карт тянуть
            include_minors: False для full -> только Старшие арканы

        Raises:
            InvalidPoolError: неизвестный тип колоды
        """
        key = (deck_type or "full").lower()
        if key not in DECK_TYPES:
            raise InvalidPoolError(f"Unknown deck type: {deck_type}. Must be one of: {', '.join(DECK_TYPES)}")

        pool = DECK_TYPES[key]
        if key == "full" and not include_minors:
            pool = DECK_TYPES["majors"]

        drawn = draw_cards(
            self.catalog,
            card_count,
            pool=pool,
            include_reversals=include_reversals,
            rng=self.rng,
            reversal_probability=self.reversal_probability,
        )
        spread_name = f"{key.capitalize()} {card_count}-Card Reading"
        context = ReadingType.FULL_DECK

        interpretations = interpret_spread(drawn, None, context, language)
        profile = await self._load_profile(user_id)
        ai_reading, ai_advice = await self._enhance(
            interpretations, spread_name, context, user_question, language, profile
        )

        reading = format_complete_reading(
            interpretations,
            spread_name,
            context,
            ai_enhanced_reading=ai_reading,
            personalized_advice=ai_advice,
            lang=language,
            reading_type=ReadingType.FULL_DECK,
            user_question=user_question,
            deck_type=key,
        )
        self._remember(reading)
        logger.info(f"✅ Расклад колодой {key}: {reading.card_count} карт, AI: {reading.ai_enhanced}")
        return reading

    # Быстрые команды

    async def perform_daily_reading(self, include_reversals: bool = True, user_id: Optional[int] = None,
                                    language: str = "en") -> Reading:
        return await self.perform_reading(
            ReadingType.DAILY, DEFAULT_QUESTIONS[ReadingType.DAILY], "single",
            include_reversals, user_id=user_id, language=language,
        )

    async def perform_love_reading(self, user_question: str = "", include_reversals: bool = True,
                                   user_id: Optional[int] = None, language: str = "en") -> Reading:
        return await self.perform_reading(
            ReadingType.LOVE, user_question or DEFAULT_QUESTIONS[ReadingType.LOVE], "love",
            include_reversals, user_id=user_id, language=language,
        )

    async def perform_career_reading(self, user_question: str = "", include_reversals: bool = True,
                                     user_id: Optional[int] = None, language: str = "en") -> Reading:
        return await self.perform_reading(
            ReadingType.CAREER, user_question or DEFAULT_QUESTIONS[ReadingType.CAREER], "career",
            include_reversals, user_id=user_id, language=language,
        )

    async def perform_general_reading(self, user_question: str = "", include_reversals: bool = True,
                                      user_id: Optional[int] = None, language: str = "en") -> Reading:
        return await self.perform_reading(
            ReadingType.GENERAL, user_question, "three_card",
            include_reversals, user_id=user_id, language=language,
        )

    async def perform_decision_reading(self, user_question: str = "", include_reversals: bool = True,
                                       user_id: Optional[int] = None, language: str = "en") -> Reading:
        return await self.perform_reading(
            ReadingType.DECISION, user_question, "decision",
            include_reversals, user_id=user_id, language=language,
        )

    # ==================== ИСТОРИЯ ====================

    def get_reading_history(self, limit: int = HISTORY_DEFAULT_LIMIT) -> List[Reading]:
        """Последние limit раскладов, самый свежий первым"""
        if limit <= 0:
            return []
        with self._lock:
            return list(reversed(self._history[-limit:]))

    def get_reading_from_history(self, index: int) -> Optional[Reading]:
        """Расклад по индексу (0 = самый свежий) или None"""
        with self._lock:
            if 0 <= index < len(self._history):
                return self._history[-1 - index]
        return None

    def clear_reading_history(self) -> None:
        with self._lock:
            self._history.clear()
        logger.info("🗑️ История раскладов очищена")

    def get_reading_stats(self) -> Dict:
        """Статистика по истории: всего, по типам, по схемам, среднее число карт"""
        with self._lock:
            history = list(self._history)

        reading_types: Dict[str, int] = {}
        spread_types: Dict[str, int] = {}
        for reading in history:
            reading_types[reading.reading_type] = reading_types.get(reading.reading_type, 0) + 1
            spread_types[reading.spread_name] = spread_types.get(reading.spread_name, 0) + 1

        average = 0
        if history:
            average = round(sum(r.card_count for r in history) / len(history), 1)

        return {
            'total_readings': len(history),
            'reading_types': reading_types,
            'spread_types': spread_types,
            'average_cards_per_reading': average,
        }
