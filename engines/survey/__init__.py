"""
Опрос /profile для персонализации раскладов.

Содержит:
- questions.py: вопросы, варианты, разбор ответов
- handlers.py: обработчики Telegram + FSM
"""

from .questions import SURVEY_QUESTIONS, match_answer, describe_profile, format_profile
from .handlers import survey_router, SurveyStates

__all__ = [
    'SURVEY_QUESTIONS',
    'match_answer',
    'describe_profile',
    'format_profile',
    'survey_router',
    'SurveyStates',
]
