"""
Обработчики Telegram для раскладов.

Содержит:
- Команды раскладов: /daily, /love, /career, /decision, /celtic, /quick
- /fulldeck: выбор части колоды кнопками
- Свободный текст: проверка вопроса -> общий расклад
- Уточняющие вопросы по последнему раскладу
- /history, /stats
"""

from typing import Optional

from aiogram import Bot, Router, F
from aiogram.types import Message, CallbackQuery, InlineKeyboardMarkup, InlineKeyboardButton, User
from aiogram.filters import Command, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup

from config import get_logger, ReadingType, DECK_TYPES, AI_INTERPRETATION_MAX_CHARS
from config.features import flags
from clients import claude
from core.helpers import truncate_message
from core.telegram import ensure_user, send_markdown
from db.queries.readings import store_reading, get_reading_history, get_user_stats
from db.queries.users import increment_reading_count
from locales import t
from .display import format_reading_for_display
from .errors import ReadingError
from .narrative import Reading
from .service import get_reader

logger = get_logger(__name__)

# Создаём роутер для раскладов
tarot_router = Router(name="tarot")

DATE_FORMAT = '%d.%m.%Y'


class FollowUpStates(StatesGroup):
    """FSM состояния для уточняющих вопросов"""
    waiting_question = State()      # Ждём вопрос по последнему раскладу


# ==================== ВЫПОЛНЕНИЕ РАСКЛАДА ====================

async def _perform(kind: str, question: str, include_reversals: bool,
                   user_id: int, language: str, deck_type: Optional[str] = None) -> Reading:
    """Вызывает нужный метод TarotReader для типа расклада"""
    reader = get_reader()
    common = dict(include_reversals=include_reversals, user_id=user_id, language=language)

    if kind == ReadingType.DAILY:
        return await reader.perform_daily_reading(**common)
    if kind == ReadingType.LOVE:
        return await reader.perform_love_reading(question, **common)
    if kind == ReadingType.CAREER:
        return await reader.perform_career_reading(question, **common)
    if kind == ReadingType.DECISION:
        return await reader.perform_decision_reading(question, **common)
    if kind == ReadingType.COMPREHENSIVE:
        return await reader.perform_reading(ReadingType.COMPREHENSIVE, question, **common)
    if kind == ReadingType.QUICK:
        return await reader.perform_quick_reading(
            ReadingType.GENERAL, question, include_reversals=include_reversals, language=language
        )
    if kind == ReadingType.FULL_DECK:
        return await reader.perform_full_deck_reading(
            deck_type or "full", user_question=question, **common
        )
    return await reader.perform_general_reading(question, **common)


def kb_follow_up(lang: str) -> Optional[InlineKeyboardMarkup]:
    if not (flags.is_enabled("ai.follow_up") and claude.available):
        return None
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=t('follow_up.button', lang), callback_data="follow_up")]
    ])


async def _persist(telegram_id: int, reading: Reading):
    """Сохраняет расклад и увеличивает счётчик (ошибка БД не отменяет расклад)"""
    try:
        await store_reading(telegram_id, reading)
        await increment_reading_count(telegram_id)
    except Exception as e:
        logger.error(f"Не удалось сохранить расклад пользователя {telegram_id}: {e}")


async def deliver_reading(bot: Bot, chat_id: int, tg_user: User, state: FSMContext,
                          kind: str, question: str = "", deck_type: Optional[str] = None):
    """Проводит расклад и отправляет его пользователю

    Args:
        bot: экземпляр бота
        chat_id: куда отправлять
        tg_user: пользователь Telegram (для профиля и языка)
        state: FSM контекст (сюда кладётся последний расклад)
        kind: тип расклада (ReadingType.*)
        question: вопрос пользователя
        deck_type: часть колоды для ReadingType.FULL_DECK
    """
    user = await ensure_user(tg_user)
    lang = user['language']
    await state.set_state(None)

    await send_markdown(bot, chat_id, f"{t(f'reading.headers.{kind}', lang)}\n\n{t('reading.in_progress', lang)}")

    try:
        reading = await _perform(kind, question, user['include_reversals'], tg_user.id, lang, deck_type)
    except ReadingError as e:
        logger.error(f"Расклад {kind} не выполнен для {tg_user.id}: {e}")
        await bot.send_message(chat_id, t('errors.reading_failed', lang))
        return

    await send_markdown(bot, chat_id, format_reading_for_display(reading, lang), reply_markup=kb_follow_up(lang))
    await state.update_data(last_reading=reading)
    await _persist(tg_user.id, reading)


async def _reading_command(message: Message, state: FSMContext, kind: str):
    try:
        await deliver_reading(message.bot, message.chat.id, message.from_user, state, kind)
    except Exception as e:
        import traceback
        logger.error(f"Ошибка в расклад {kind}: {e}\n{traceback.format_exc()}")
        await message.answer(t('errors.generic', 'en'))


# ==================== КОМАНДЫ РАСКЛАДОВ ====================

@tarot_router.message(Command("daily"))
async def cmd_daily(message: Message, state: FSMContext):
    """Команда /daily - карта дня"""
    await _reading_command(message, state, ReadingType.DAILY)


@tarot_router.message(Command("love"))
async def cmd_love(message: Message, state: FSMContext):
    await _reading_command(message, state, ReadingType.LOVE)


@tarot_router.message(Command("career"))
async def cmd_career(message: Message, state: FSMContext):
    await _reading_command(message, state, ReadingType.CAREER)


@tarot_router.message(Command("decision"))
async def cmd_decision(message: Message, state: FSMContext):
    await _reading_command(message, state, ReadingType.DECISION)


@tarot_router.message(Command("celtic"))
async def cmd_celtic(message: Message, state: FSMContext):
    """Команда /celtic - Кельтский крест на 10 карт"""
    await _reading_command(message, state, ReadingType.COMPREHENSIVE)


@tarot_router.message(Command("quick"))
async def cmd_quick(message: Message, state: FSMContext):
    """Команда /quick - три карты без AI"""
    await _reading_command(message, state, ReadingType.QUICK)


@tarot_router.callback_query(F.data == "daily_card")
async def cb_daily_card(callback: CallbackQuery, state: FSMContext):
    """Кнопка из ежедневного напоминания"""
    await callback.answer()
    try:
        await deliver_reading(callback.bot, callback.message.chat.id, callback.from_user, state, ReadingType.DAILY)
    except Exception as e:
        import traceback
        logger.error(f"Ошибка в cb_daily_card: {e}\n{traceback.format_exc()}")
        await callback.message.answer(t('errors.generic', 'en'))


# ==================== ПОЛНАЯ КОЛОДА ====================

@tarot_router.message(Command("fulldeck"))
async def cmd_fulldeck(message: Message):
    """Команда /fulldeck - выбор части колоды"""
    user = await ensure_user(message.from_user)
    lang = user['language']

    text = t('fulldeck.title', lang) + "\n\n"
    for number, deck_type in enumerate(DECK_TYPES, start=1):
        text += f"{number}. {t(f'fulldeck.options.{deck_type}', lang)}\n\n"

    deck_keys = list(DECK_TYPES)
    buttons = [
        [
            InlineKeyboardButton(text=t(f'fulldeck.buttons.{key}', lang), callback_data=f"fulldeck_{key}")
            for key in deck_keys[i:i + 2]
        ]
        for i in range(0, len(deck_keys), 2)
    ]
    await send_markdown(message.bot, message.chat.id, text.rstrip(),
                        reply_markup=InlineKeyboardMarkup(inline_keyboard=buttons))


@tarot_router.callback_query(F.data.startswith("fulldeck_"))
async def cb_fulldeck(callback: CallbackQuery, state: FSMContext):
    deck_type = callback.data.replace("fulldeck_", "", 1)
    await callback.answer()
    try:
        await deliver_reading(
            callback.bot, callback.message.chat.id, callback.from_user, state,
            ReadingType.FULL_DECK, deck_type=deck_type,
        )
    except Exception as e:
        import traceback
        logger.error(f"Ошибка в cb_fulldeck: {e}\n{traceback.format_exc()}")
        await callback.message.answer(t('errors.generic', 'en'))


# ==================== УТОЧНЯЮЩИЕ ВОПРОСЫ ====================

@tarot_router.callback_query(F.data == "follow_up")
async def cb_follow_up(callback: CallbackQuery, state: FSMContext):
    user = await ensure_user(callback.from_user)
    lang = user['language']
    await callback.answer()

    data = await state.get_data()
    if not data.get('last_reading'):
        await callback.message.answer(t('follow_up.no_reading', lang))
        return

    await state.set_state(FollowUpStates.waiting_question)
    await callback.message.answer(t('follow_up.prompt', lang))


@tarot_router.message(FollowUpStates.waiting_question, F.text)
async def on_follow_up_question(message: Message, state: FSMContext):
    """Ответ Claude на вопрос по картам последнего расклада"""
    try:
        user = await ensure_user(message.from_user)
        lang = user['language']
        data = await state.get_data()
        reading: Optional[Reading] = data.get('last_reading')
        await state.set_state(None)

        if reading is None:
            await message.answer(t('follow_up.no_reading', lang))
            return

        await message.answer(t('follow_up.thinking', lang))
        answer = await claude.answer_follow_up(reading.cards, message.text.strip(), reading.context, lang)
        if not answer:
            await message.answer(t('follow_up.unavailable', lang))
            return

        answer = truncate_message(answer.strip(), AI_INTERPRETATION_MAX_CHARS)
        await send_markdown(message.bot, message.chat.id, f"{t('follow_up.title', lang)}\n\n{answer}",
                            reply_markup=kb_follow_up(lang))
    except Exception as e:
        import traceback
        logger.error(f"Ошибка в on_follow_up_question: {e}\n{traceback.format_exc()}")
        await message.answer(t('errors.generic', 'en'))


# ==================== ИСТОРИЯ И СТАТИСТИКА ====================

def _type_label(reading_type: str, lang: str) -> str:
    key = f'reading_types.{reading_type}'
    label = t(key, lang)
    return reading_type if label == key else label


@tarot_router.message(Command("history"))
async def cmd_history(message: Message):
    """Команда /history - последние расклады"""
    try:
        user = await ensure_user(message.from_user)
        lang = user['language']
        limit = int(flags.get("readings.history_limit", 5))
        history = await get_reading_history(message.from_user.id, limit=limit)

        if not history:
            await message.answer(t('history.empty', lang))
            return

        lines = [t('history.title', lang), ""]
        for index, item in enumerate(history, start=1):
            lines.append(t(
                'history.item', lang,
                index=index,
                date=item['created_at'].strftime(DATE_FORMAT),
                type=_type_label(item['reading_type'], lang),
                spread=item['spread_name'],
                count=len(item['cards']),
            ))
            if item.get('question'):
                lines.append(t('history.question', lang, question=item['question']))
        await send_markdown(message.bot, message.chat.id, "\n".join(lines))
    except Exception as e:
        import traceback
        logger.error(f"Ошибка в cmd_history: {e}\n{traceback.format_exc()}")
        await message.answer(t('errors.generic', 'en'))


@tarot_router.message(Command("stats"))
async def cmd_stats(message: Message):
    """Команда /stats - статистика раскладов"""
    try:
        user = await ensure_user(message.from_user)
        lang = user['language']
        stats = await get_user_stats(message.from_user.id)

        if not stats['total_readings']:
            await message.answer(t('stats.empty', lang))
            return

        created_at = user.get('created_at')
        lines = [
            t('stats.title', lang),
            "",
            t('stats.user', lang, name=user['first_name'] or user['username'] or '—'),
            t('stats.member_since', lang, date=created_at.strftime(DATE_FORMAT) if created_at else '—'),
            "",
            t('stats.summary', lang),
            t('stats.total', lang, count=stats['total_readings']),
            t('stats.ai_enhanced', lang, count=stats['ai_enhanced_readings']),
            t('stats.personalized', lang, count=stats['personalized_readings']),
            t('stats.types_used', lang, count=stats['reading_types_used']),
        ]

        if stats['favorite_types']:
            lines.append("")
            lines.append(t('stats.favorites', lang))
            for index, (reading_type, count) in enumerate(stats['favorite_types'], start=1):
                lines.append(t('stats.favorite_item', lang, index=index,
                               type=_type_label(reading_type, lang), count=count))

        lines.append("")
        lines.append(t('stats.encouragement', lang))
        await send_markdown(message.bot, message.chat.id, "\n".join(lines))
    except Exception as e:
        import traceback
        logger.error(f"Ошибка в cmd_stats: {e}\n{traceback.format_exc()}")
        await message.answer(t('errors.generic', 'en'))


# ==================== СВОБОДНЫЙ ТЕКСТ ====================

@tarot_router.message(StateFilter(None), F.text, ~F.text.startswith("/"))
async def on_free_text(message: Message, state: FSMContext):
    """Вопрос текстом -> проверка -> общий расклад с этим вопросом"""
    try:
        user = await ensure_user(message.from_user)
        lang = user['language']
        question = message.text.strip()

        if flags.is_enabled("ai.validate_questions") and claude.available:
            await message.answer(t('reading.validating', lang))
            is_valid, reply = await claude.validate_question(question, lang)
            if not is_valid:
                await send_markdown(message.bot, message.chat.id, reply or t('question.not_tarot', lang))
                return

        await deliver_reading(message.bot, message.chat.id, message.from_user, state,
                              ReadingType.GENERAL, question=question)
    except Exception as e:
        import traceback
        logger.error(f"Ошибка в on_free_text: {e}\n{traceback.format_exc()}")
        await message.answer(t('errors.generic', 'en'))
