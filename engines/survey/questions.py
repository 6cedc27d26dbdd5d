"""
Вопросы опроса /profile и разбор ответов.

Значения ответов хранятся ключами (например, 'calm_peaceful'),
подписи берутся из локалей survey.options.<вопрос>.<ключ>.
"""

from typing import List, Optional, Tuple

from locales import t

# Порядок вопросов и допустимые значения
SURVEY_QUESTIONS: List[Tuple[str, List[str]]] = [
    ('gender', ['female', 'male', 'non_binary', 'prefer_not_to_say']),
    ('age_group', ['under_18', '18_25', '26_35', '36_45', '46_55', 'over_55']),
    ('emotional_state', [
        'happy_optimistic', 'calm_peaceful', 'anxious_stressed',
        'sad_depressed', 'confused_uncertain', 'excited_motivated',
    ]),
    ('life_focus', [
        'love_relationships', 'career_work', 'personal_growth', 'health_wellness',
        'family_home', 'spirituality', 'financial', 'social_friends',
    ]),
    ('spiritual_beliefs', [
        'spiritual_believer', 'religious', 'agnostic', 'atheist', 'open_minded', 'not_sure',
    ]),
    ('relationship_status', [
        'single', 'in_relationship', 'married', 'divorced', 'complicated', 'not_looking',
    ]),
    ('career_field', [
        'student', 'entry_level', 'mid_career', 'senior_level',
        'entrepreneur', 'career_change', 'retired', 'unemployed',
    ]),
]

TOTAL_QUESTIONS = len(SURVEY_QUESTIONS)


def get_question(index: int) -> Optional[Tuple[str, List[str]]]:
    if 0 <= index < TOTAL_QUESTIONS:
        return SURVEY_QUESTIONS[index]
    return None


def option_label(question_key: str, value: str, lang: str = "en") -> str:
    key = f"survey.options.{question_key}.{value}"
    label = t(key, lang)
    return value if label == key else label


def format_question(index: int, lang: str = "en") -> str:
    """Текст вопроса: прогресс, вопрос, пронумерованные варианты"""
    question_key, options = SURVEY_QUESTIONS[index]
    lines = [
        f"_{t('survey.progress', lang, current=index + 1, total=TOTAL_QUESTIONS)}_",
        "",
        f"*{t(f'survey.questions.{question_key}', lang)}*",
        "",
    ]
    lines.extend(
        f"{number}. {option_label(question_key, value, lang)}"
        for number, value in enumerate(options, start=1)
    )
    lines.append("")
    lines.append(t('survey.answer_hint', lang))
    return "\n".join(lines)


def match_answer(question_key: str, text: str, lang: str = "en") -> Optional[str]:
    """Ответ текстом -> ключ значения

    Принимает номер варианта, подпись на языке пользователя или на английском,
    либо сам ключ. None, если ничего не подошло.
    """
    options = dict(SURVEY_QUESTIONS).get(question_key)
    if not options or not text:
        return None

    answer = text.strip().lower()
    if answer.isdigit():
        number = int(answer)
        if 1 <= number <= len(options):
            return options[number - 1]
        return None

    for value in options:
        candidates = {
            value.lower(),
            option_label(question_key, value, lang).lower(),
            option_label(question_key, value, "en").lower(),
        }
        if answer in candidates:
            return value
    return None


def describe_profile(profile: Optional[dict], lang: str = "en") -> Optional[dict]:
    """Ключи ответов -> подписи (для промптов и показа профиля)"""
    if not profile:
        return None
    described = {
        question_key: option_label(question_key, profile[question_key], lang)
        for question_key, _ in SURVEY_QUESTIONS
        if profile.get(question_key)
    }
    return described or None


def format_profile(profile: Optional[dict], lang: str = "en") -> str:
    """Заполненный профиль списком: поле и подпись ответа"""
    described = describe_profile(profile, lang) or {}
    lines = [t('survey.profile_title', lang), ""]
    lines.extend(
        f"• *{t(f'survey.fields.{question_key}', lang)}:* {label}"
        for question_key, label in described.items()
    )
    return "\n".join(lines)
