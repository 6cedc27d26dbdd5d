"""
Клиент для работы с Claude API.

ClaudeClient - асинхронный клиент для текстов расклада через Claude API.
Поддерживает:
- AI-интерпретацию расклада с учётом профиля
- Персональные советы по раскладу
- Ответы на уточняющие вопросы по последнему раскладу
- Проверку, является ли сообщение пользователя вопросом для гадания

Все методы возвращают None при ошибке: расклад в этом случае
собирается из шаблонного текста.
"""

from typing import List, Optional, Tuple

import aiohttp

from config import (
    get_logger,
    ANTHROPIC_API_KEY,
    CLAUDE_MODEL,
    CLAUDE_TIMEOUT,
    AI_INTERPRETATION_MAX_CHARS,
    AI_ADVICE_MAX_CHARS,
)
from core.helpers import get_profile_prompt
from locales import t

logger = get_logger(__name__)

VALID_MARKER = "VALID"


def _cards_block(interpretations: List, with_keywords: bool = False) -> str:
    """Список карт для промпта: номер, название, ориентация, значение"""
    lines = []
    for number, item in enumerate(interpretations, start=1):
        lines.append(f"{number}. {item.name} ({item.orientation})")
        lines.append(f"   Meaning: {item.meaning}")
        if with_keywords and item.keywords:
            lines.append(f"   Keywords: {', '.join(item.keywords)}")
    return "\n".join(lines)


class ClaudeClient:
    """Клиент для работы с Claude API"""

    def __init__(self, api_key: Optional[str] = ANTHROPIC_API_KEY, model: str = CLAUDE_MODEL,
                 timeout: int = CLAUDE_TIMEOUT):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.base_url = "https://api.anthropic.com/v1/messages"

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def generate(self, system_prompt: str, user_prompt: str,
                       max_tokens: int = 500, temperature: float = 0.7) -> Optional[str]:
        """Базовый метод генерации текста через Claude API

        Args:
            system_prompt: системный промпт
            user_prompt: пользовательский промпт
            max_tokens: лимит токенов ответа
            temperature: температура генерации

        Returns:
            Сгенерированный текст или None при ошибке
        """
        if not self.available:
            logger.warning("ANTHROPIC_API_KEY не задан, AI-генерация пропущена")
            return None

        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": "2023-06-01"
        }

        payload = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}]
        }

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.base_url, headers=headers, json=payload) as resp:
                    if resp.status == 200:
                        data = await resp.json()
                        text = data["content"][0]["text"].strip()
                        return text or None
                    else:
                        error = await resp.text()
                        logger.error(f"Claude API error: {resp.status} {error}")
                        return None
        except Exception as e:
            logger.error(f"Claude API exception: {e}")
            return None

    async def generate_interpretation(
        self,
        interpretations: List,
        spread_name: str,
        context: str = "general",
        user_question: str = "",
        language: str = "en",
        profile: Optional[dict] = None,
    ) -> Optional[str]:
        """AI-рассказ по раскладу, заменяет шаблонный narrative

        Returns:
            Текст не длиннее AI_INTERPRETATION_MAX_CHARS или None
        """
        system_prompt = f"""You are a wise and intuitive tarot reader. Provide concise, meaningful interpretations that fit within {AI_INTERPRETATION_MAX_CHARS} characters.

Guidelines:
- Be concise but insightful (max {AI_INTERPRETATION_MAX_CHARS} characters)
- Focus on the most important messages
- Use clear, simple language
- Provide practical guidance
- Be encouraging and supportive
- Remember: readings are for entertainment and self-reflection
- Use Telegram Markdown: *bold* only, no headings
- {t('ai.language_instruction', language)}

Format: Brief introduction, key insights, practical guidance."""

        user_prompt = (
            f"I've drawn the following cards for a {context} reading using the {spread_name} spread:\n\n"
            f"{_cards_block(interpretations, with_keywords=True)}\n\n"
        )
        if user_question:
            user_prompt += f"Question: \"{user_question}\"\n\n"
        profile_block = get_profile_prompt(profile)
        if profile_block:
            user_prompt += profile_block + "\n"
        user_prompt += (
            f"Provide a concise interpretation (max {AI_INTERPRETATION_MAX_CHARS} characters) that connects "
            f"these cards meaningfully for this {context} reading. "
            f"Focus on the most important insights and practical guidance."
        )

        logger.info(
            f"🤖 Запрос интерпретации: {spread_name}, контекст {context}, язык {language}, "
            f"карт {len(interpretations)}, профиль {'да' if profile_block else 'нет'}"
        )
        return await self.generate(system_prompt, user_prompt, max_tokens=500, temperature=0.8)

    async def generate_advice(
        self,
        interpretations: List,
        context: str = "general",
        user_question: str = "",
        language: str = "en",
        profile: Optional[dict] = None,
    ) -> Optional[str]:
        """Персональные советы по раскладу, заменяют шаблонный advice"""
        system_prompt = f"""You are a compassionate spiritual advisor. Provide concise, actionable advice (max {AI_ADVICE_MAX_CHARS} characters).

Guidelines:
- Give 2-3 specific, actionable tips
- Be encouraging and practical
- Focus on immediate next steps
- Use simple, clear language
- Use Telegram Markdown: *bold* only, no headings
- {t('ai.language_instruction', language)}

Format: "💡 Advice:" followed by 2-3 numbered points"""

        cards = "\n".join(
            f"• {item.name} ({item.orientation}): {item.meaning}" for item in interpretations
        )
        user_prompt = f"Based on this {context} reading:\n\n{cards}\n"
        if user_question:
            user_prompt += f"\nThe person asked: \"{user_question}\"\n"
        profile_block = get_profile_prompt(profile)
        if profile_block:
            user_prompt += "\n" + profile_block
        user_prompt += (
            f"\nProvide 2-3 specific, actionable tips (max {AI_ADVICE_MAX_CHARS} characters) "
            f"to help this person move forward positively."
        )

        logger.info(f"🤖 Запрос советов: контекст {context}, язык {language}, карт {len(interpretations)}")
        return await self.generate(system_prompt, user_prompt, max_tokens=300, temperature=0.7)

    async def answer_follow_up(
        self,
        interpretations: List,
        question: str,
        context: str = "general",
        language: str = "en",
    ) -> Optional[str]:
        """Ответ на уточняющий вопрос по картам последнего расклада"""
        system_prompt = f"""You are a knowledgeable tarot reader. Answer follow-up questions concisely (max {AI_INTERPRETATION_MAX_CHARS} characters).

Guidelines:
- Reference the original cards meaningfully
- Be encouraging and practical
- Keep responses brief but insightful
- Focus on the most relevant guidance
- Use clear, simple language
- {t('ai.language_instruction', language)}"""

        user_prompt = (
            f"The person received this {context} reading:\n\n"
            f"{_cards_block(interpretations)}\n\n"
            f"Their follow-up question is: \"{question}\"\n\n"
            f"Provide a concise answer (max {AI_INTERPRETATION_MAX_CHARS} characters) that addresses "
            f"their question using the wisdom of their original reading."
        )

        logger.info(f"🤖 Уточняющий вопрос: контекст {context}, язык {language}")
        return await self.generate(system_prompt, user_prompt, max_tokens=500, temperature=0.7)

    async def validate_question(self, text: str, language: str = "en") -> Tuple[bool, Optional[str]]:
        """Проверяет, является ли текст личным вопросом для гадания

        Returns:
            (True, None) для вопроса или при недоступном API;
            (False, вежливый ответ) для приветствий, болтовни и т.п.
        """
        system_prompt = f"""You are a tarot bot assistant. Your job is to determine if the user's input is a valid tarot reading question.

VALID tarot questions MUST:
- Be personal questions about the user's life, relationships, career, or decisions
- Ask for guidance, insight, or understanding about a specific situation
- Be about the user's personal circumstances, not general topics

EXAMPLES of VALID questions:
- "Should I take this job offer?"
- "What does my future hold?"
- "Will I find love this year?"

EXAMPLES of NOT VALID:
- "Hello" or "Hi" (greetings)
- "Thanks" (gratitude)
- "What's the weather?" (non-personal topic)
- "Tell me a joke" (entertainment)

{t('ai.language_instruction', language)}

RESPONSE FORMAT:
- If it's a valid tarot question: respond with exactly "{VALID_MARKER}" (nothing else)
- Otherwise: a polite, friendly response (under 200 characters) explaining that you're a tarot bot and asking for a tarot-related question."""

        user_prompt = f"User input: \"{text}\"\n\nIs this a valid tarot reading question?"

        result = await self.generate(system_prompt, user_prompt, max_tokens=300, temperature=0.3)
        if result is None:
            # API недоступен: не мешаем гаданию
            return True, None

        if result.strip().upper() == VALID_MARKER:
            return True, None
        return False, result or t('question.not_tarot', language)


# Создаём экземпляр клиента
claude = ClaudeClient()
