"""
Шаблонный текст расклада: рассказ, сводка, советы.

Все функции чистые и работают над списком Interpretation.
AI-тексты (если есть) заменяют шаблонный рассказ и советы целиком.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from config import Context, MAX_THEMES, MAX_ADVICE_POINTS
from locales import t
from .interpreter import Interpretation

# Триггеры советов: подстроки в значении карты -> ключ совета.
# Порядок важен: советы добавляются в порядке проверки.
ADVICE_TRIGGERS = [
    (("trust", "intuition"), "advice.trust_intuition"),
    (("action", "move"), "advice.take_action"),
    (("patience", "wait"), "advice.patience"),
    (("change", "transform"), "advice.embrace_change"),
    (("balance", "harmony"), "advice.balance_harmony"),
    (("release", "let go"), "advice.release"),
    (("focus", "concentrate"), "advice.focus"),
]

FALLBACK_ADVICE = ["advice.trust_journey", "advice.listen_inner_voice", "advice.one_step"]

KNOWN_CONTEXTS = (Context.LOVE, Context.CAREER, Context.HEALTH, Context.GENERAL)


@dataclass
class Reading:
    """Готовый расклад"""
    spread_name: str
    context: str
    cards: List[Interpretation]
    narrative: str
    summary: str
    advice: str
    ai_enhanced: bool = False
    personalized: bool = False
    user_question: str = ""
    timestamp: datetime = field(default_factory=datetime.now)
    card_count: int = 0
    reading_type: str = Context.GENERAL
    language: str = "en"
    quick: bool = False
    deck_type: Optional[str] = None
    spread_key: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'spread_name': self.spread_name,
            'spread_key': self.spread_key,
            'reading_type': self.reading_type,
            'context': self.context,
            'cards': [c.to_dict() for c in self.cards],
            'ai_enhanced': self.ai_enhanced,
            'personalized': self.personalized,
            'user_question': self.user_question,
            'timestamp': self.timestamp.isoformat(),
            'card_count': self.card_count,
            'quick': self.quick,
            'deck_type': self.deck_type,
        }


def _context_key(context: str) -> str:
    return context if context in KNOWN_CONTEXTS else Context.GENERAL


def generate_narrative(interpretations: List[Interpretation], spread_name: str,
                       context: str = Context.GENERAL, lang: str = "en") -> str:
    """Рассказ: заголовок, вступление по контексту, блок на каждую карту"""
    parts = [t('reading.title', lang, spread=spread_name), "\n\n"]
    parts.append(t(f'reading.intro.{_context_key(context)}', lang))
    parts.append(" " + t('reading.wisdom_intro', lang) + "\n\n")

    for number, item in enumerate(interpretations, start=1):
        position_name = item.position_name or t('reading.card_n', lang, n=number)
        parts.append(f"*{number}. {position_name}*\n")
        parts.append(f"🎴 {item.name} ({item.orientation})\n")
        if item.is_major_arcana:
            parts.append(f"✨ {t('card.major_arcana', lang)}\n")
        else:
            parts.append(f"⚡ {item.suit} ({item.element})\n")
        parts.append(f"📝 {item.meaning}\n\n")

    return "".join(parts)


def analyze_themes(interpretations: List[Interpretation]) -> List[str]:
    """Доминирующие темы: ключевые слова, встретившиеся больше одного раза

    Сортировка по частоте по убыванию, при равенстве в порядке первого появления.
    Не больше MAX_THEMES.
    """
    counts: Dict[str, int] = {}
    for item in interpretations:
        for keyword in item.keywords:
            counts[keyword] = counts.get(keyword, 0) + 1

    repeated = [(keyword, count) for keyword, count in counts.items() if count > 1]
    repeated.sort(key=lambda pair: pair[1], reverse=True)
    return [keyword for keyword, _ in repeated[:MAX_THEMES]]


def generate_overall_message(interpretations: List[Interpretation],
                             context: str = Context.GENERAL, lang: str = "en") -> str:
    """Общее послание по доле перевёрнутых карт (>50 / >25 / иначе) + совет по контексту"""
    total = len(interpretations)
    reversed_count = sum(1 for item in interpretations if item.is_reversed)
    reversed_percentage = (reversed_count / total * 100) if total else 0

    if reversed_percentage > 50:
        energy = t('reading.energy.high', lang)
    elif reversed_percentage > 25:
        energy = t('reading.energy.mixed', lang)
    else:
        energy = t('reading.energy.low', lang)

    return f"{energy}\n\n{t(f'reading.guidance.{_context_key(context)}', lang)}"


def generate_summary(interpretations: List[Interpretation],
                     context: str = Context.GENERAL, lang: str = "en") -> str:
    """Сводка: количество карт, темы, общее послание"""
    major = sum(1 for item in interpretations if item.is_major_arcana)
    reversed_count = sum(1 for item in interpretations if item.is_reversed)

    lines = [
        t('reading.summary_title', lang),
        "",
        t('reading.cards_drawn', lang, count=len(interpretations)),
        t('reading.major_count', lang, count=major),
        t('reading.minor_count', lang, count=len(interpretations) - major),
        t('reading.reversed_count', lang, count=reversed_count),
        "",
    ]

    themes = analyze_themes(interpretations)
    if themes:
        lines.append(t('reading.dominant_themes', lang))
        lines.extend(f"• {theme}" for theme in themes)
        lines.append("")

    lines.append(t('reading.overall_message', lang))
    lines.append(generate_overall_message(interpretations, context, lang))
    return "\n".join(lines) + "\n"


def collect_advice_points(interpretations: List[Interpretation], lang: str = "en") -> List[str]:
    """Советы по триггерам в значениях карт (без повторов, не больше MAX_ADVICE_POINTS)

    Пустой список, если ни один триггер не сработал.
    """
    keys: List[str] = []
    for item in interpretations:
        meaning = item.meaning.lower()
        for triggers, advice_key in ADVICE_TRIGGERS:
            if advice_key not in keys and any(trigger in meaning for trigger in triggers):
                keys.append(advice_key)
    return [t(key, lang) for key in keys[:MAX_ADVICE_POINTS]]


def generate_advice(interpretations: List[Interpretation],
                    context: str = Context.GENERAL, lang: str = "en") -> str:
    """Блок советов: найденные по триггерам или три общих"""
    points = collect_advice_points(interpretations, lang)
    if not points:
        points = [t(key, lang) for key in FALLBACK_ADVICE]

    lines = [t('reading.advice_title', lang), ""]
    lines.extend(f"{number}. {point}" for number, point in enumerate(points, start=1))
    return "\n".join(lines) + "\n"


def format_complete_reading(
    interpretations: List[Interpretation],
    spread_name: str,
    context: str = Context.GENERAL,
    ai_enhanced_reading: Optional[str] = None,
    personalized_advice: Optional[str] = None,
    lang: str = "en",
    reading_type: Optional[str] = None,
    user_question: str = "",
    quick: bool = False,
    deck_type: Optional[str] = None,
    spread_key: Optional[str] = None,
) -> Reading:
    """Собирает Reading

    AI-рассказ и персональные советы заменяют шаблонные целиком,
    флаги ai_enhanced / personalized фиксируют замену.
    """
    narrative = ai_enhanced_reading or generate_narrative(interpretations, spread_name, context, lang)
    advice = personalized_advice or generate_advice(interpretations, context, lang)

    return Reading(
        spread_name=spread_name,
        context=context,
        cards=list(interpretations),
        narrative=narrative,
        summary=generate_summary(interpretations, context, lang),
        advice=advice,
        ai_enhanced=bool(ai_enhanced_reading),
        personalized=bool(personalized_advice),
        user_question=user_question or "",
        card_count=len(interpretations),
        reading_type=reading_type or context,
        language=lang,
        quick=quick,
        deck_type=deck_type,
        spread_key=spread_key,
    )


def get_quick_interpretation(interpretation: Interpretation) -> str:
    """Короткий блок для одной карты"""
    return f"🎴 *{interpretation.name}* ({interpretation.orientation})\n📝 {interpretation.meaning}"
