"""
Обработчики Telegram для опроса /profile.

Семь вопросов по очереди. Ответ кнопкой или текстом
(номер варианта или его подпись). Отмена в любой момент.
Заполненный профиль показывается с предложением обновить.
"""

from aiogram import Router, F
from aiogram.types import Message, CallbackQuery, InlineKeyboardMarkup, InlineKeyboardButton
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup

from config import get_logger
from core.telegram import ensure_user, send_markdown
from db.queries.users import get_user_profile, update_user_profile
from locales import t
from .questions import SURVEY_QUESTIONS, TOTAL_QUESTIONS, format_question, format_profile, match_answer, option_label

logger = get_logger(__name__)

# Создаём роутер для опроса
survey_router = Router(name="survey")


class SurveyStates(StatesGroup):
    """FSM состояния опроса"""
    answering = State()             # Отвечает на текущий вопрос


def kb_question(index: int, lang: str) -> InlineKeyboardMarkup:
    """Кнопки вариантов текущего вопроса + отмена"""
    question_key, options = SURVEY_QUESTIONS[index]
    buttons = [
        [InlineKeyboardButton(
            text=option_label(question_key, value, lang),
            callback_data=f"survey_{index}_{number}"
        )]
        for number, value in enumerate(options)
    ]
    buttons.append([InlineKeyboardButton(text=t('survey.cancel_button', lang), callback_data="survey_cancel")])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


async def ask_question(message: Message, index: int, lang: str):
    await send_markdown(message.bot, message.chat.id, format_question(index, lang),
                        reply_markup=kb_question(index, lang))


async def start_survey(message: Message, state: FSMContext, lang: str):
    await state.set_state(SurveyStates.answering)
    await state.update_data(survey_index=0, survey_answers={}, survey_lang=lang)

    intro = "\n\n".join([
        t('survey.introduction', lang),
        t('survey.benefits', lang),
        t('survey.start', lang),
    ])
    await send_markdown(message.bot, message.chat.id, intro)
    await ask_question(message, 0, lang)


async def save_answer_and_continue(message: Message, state: FSMContext, user_id: int, value: str):
    """Записывает ответ и задаёт следующий вопрос или завершает опрос"""
    data = await state.get_data()
    index = data.get('survey_index', 0)
    answers = dict(data.get('survey_answers', {}))
    lang = data.get('survey_lang', 'en')

    question_key, _ = SURVEY_QUESTIONS[index]
    answers[question_key] = value
    index += 1

    if index < TOTAL_QUESTIONS:
        await state.update_data(survey_index=index, survey_answers=answers)
        await ask_question(message, index, lang)
        return

    await state.clear()
    await update_user_profile(user_id, answers)
    await send_markdown(message.bot, message.chat.id, t('survey.completed', lang))


# ==================== КОМАНДЫ ====================

@survey_router.message(Command("profile"))
async def cmd_profile(message: Message, state: FSMContext):
    """Команда /profile - опрос или показ заполненного профиля"""
    try:
        user = await ensure_user(message.from_user)
        lang = user['language']

        if user['profile_completed']:
            profile = await get_user_profile(message.from_user.id)
            keyboard = InlineKeyboardMarkup(inline_keyboard=[
                [InlineKeyboardButton(text=t('survey.update_yes', lang), callback_data="profile_update")],
                [InlineKeyboardButton(text=t('survey.update_no', lang), callback_data="profile_keep")],
            ])
            text = f"{format_profile(profile, lang)}\n\n{t('survey.update_prompt', lang)}"
            await send_markdown(message.bot, message.chat.id, text, reply_markup=keyboard)
            return

        await start_survey(message, state, lang)
    except Exception as e:
        import traceback
        logger.error(f"Ошибка в cmd_profile: {e}\n{traceback.format_exc()}")
        await message.answer(t('errors.generic', 'en'))


@survey_router.callback_query(F.data == "profile_update")
async def cb_profile_update(callback: CallbackQuery, state: FSMContext):
    user = await ensure_user(callback.from_user)
    await callback.answer()
    await start_survey(callback.message, state, user['language'])


@survey_router.callback_query(F.data == "profile_keep")
async def cb_profile_keep(callback: CallbackQuery):
    user = await ensure_user(callback.from_user)
    await callback.answer()
    await callback.message.answer(t('survey.update_cancelled', user['language']))


# ==================== ОТВЕТЫ ====================

@survey_router.callback_query(F.data == "survey_cancel")
async def cb_survey_cancel(callback: CallbackQuery, state: FSMContext):
    data = await state.get_data()
    lang = data.get('survey_lang', 'en')
    await state.clear()
    await callback.answer()
    await callback.message.answer(t('survey.cancelled', lang))


@survey_router.callback_query(SurveyStates.answering, F.data.startswith("survey_"))
async def cb_survey_answer(callback: CallbackQuery, state: FSMContext):
    """Ответ кнопкой: survey_<вопрос>_<вариант>"""
    data = await state.get_data()
    _, index, number = callback.data.split("_")
    index, number = int(index), int(number)

    # Кнопка от уже пройденного вопроса
    if index != data.get('survey_index', 0):
        await callback.answer()
        return

    _, options = SURVEY_QUESTIONS[index]
    await callback.answer()
    await save_answer_and_continue(callback.message, state, callback.from_user.id, options[number])


@survey_router.message(SurveyStates.answering, F.text)
async def on_survey_text(message: Message, state: FSMContext):
    """Ответ текстом: номер или подпись варианта"""
    data = await state.get_data()
    index = data.get('survey_index', 0)
    lang = data.get('survey_lang', 'en')

    if message.text.strip().startswith("/"):
        await state.clear()
        await message.answer(t('survey.cancelled', lang))
        return

    question_key, _ = SURVEY_QUESTIONS[index]
    value = match_answer(question_key, message.text, lang)
    if value is None:
        await message.answer(t('survey.unknown_answer', lang))
        await ask_question(message, index, lang)
        return

    await save_answer_and_continue(message, state, message.from_user.id, value)
