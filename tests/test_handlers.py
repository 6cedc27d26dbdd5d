"""
Тесты обработчиков Telegram и планировщика с фейковыми bot/message/state.

БД подменяется через monkeypatch, сеть не нужна.

Запуск: python -m pytest tests/test_handlers.py -v
"""

import sys
import os
import asyncio

# Добавляем путь к проекту
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import bot as bot_module
from core import telegram
from engines import settings_selector
from engines.survey import handlers as survey_handlers
from engines.settings_selector import ReminderStates
from locales import t


class FakeBot:
    """Запоминает отправленные сообщения"""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    async def send_message(self, chat_id, text, parse_mode=None, reply_markup=None):
        if chat_id in self.fail_for:
            raise RuntimeError("bot was blocked by the user")
        self.sent.append({'chat_id': chat_id, 'text': text, 'reply_markup': reply_markup})


class FakeUser:
    def __init__(self, user_id):
        self.id = user_id


class FakeChat:
    def __init__(self, chat_id):
        self.id = chat_id


class FakeMessage:
    def __init__(self, text, user_id=42, chat_id=42, bot=None):
        self.text = text
        self.from_user = FakeUser(user_id)
        self.chat = FakeChat(chat_id)
        self.bot = bot or FakeBot()
        self.answers = []

    async def answer(self, text, **kwargs):
        self.answers.append(text)


class FakeState:
    def __init__(self, state=None, data=None):
        self.state = state
        self.data = dict(data or {})

    async def get_data(self):
        return dict(self.data)

    async def update_data(self, **kwargs):
        self.data.update(kwargs)

    async def set_state(self, state):
        self.state = state

    async def clear(self):
        self.state = None
        self.data = {}


def fake_user(**overrides):
    user = {
        'telegram_id': 42,
        'language': 'en',
        'reminder_enabled': False,
        'reminder_time': '09:00',
    }
    user.update(overrides)

    async def ensure_user(tg_user):
        return user

    return ensure_user


def run(coro):
    return asyncio.run(coro)


# ==================== НАПОМИНАНИЯ ====================

def test_scheduled_check_sends_daily_card_button(monkeypatch):
    requested = []

    async def users_for_reminder(hour, minute):
        requested.append((hour, minute))
        return [
            {'telegram_id': 1, 'language': 'ru'},
            {'telegram_id': 2, 'language': 'en'},
            {'telegram_id': 3, 'language': 'es'},
        ]

    monkeypatch.setattr(bot_module, "get_users_for_reminder", users_for_reminder)
    fake_bot = FakeBot(fail_for={2})

    run(bot_module.scheduled_check(fake_bot))

    assert len(requested) == 1
    hour, minute = requested[0]
    assert 0 <= hour < 24 and 0 <= minute < 60

    # Ошибка одному пользователю не мешает остальным
    assert [m['chat_id'] for m in fake_bot.sent] == [1, 3]
    assert fake_bot.sent[0]['text'] == t('reminder.message', 'ru')
    button = fake_bot.sent[1]['reply_markup'].inline_keyboard[0][0]
    assert button.callback_data == "daily_card"
    assert button.text == t('reminder.draw_button', 'es')
    print("✅ Напоминания разосланы")


def test_scheduled_check_without_users(monkeypatch):
    async def users_for_reminder(hour, minute):
        return []

    monkeypatch.setattr(bot_module, "get_users_for_reminder", users_for_reminder)
    fake_bot = FakeBot()
    run(bot_module.scheduled_check(fake_bot))
    assert fake_bot.sent == []


def test_reminder_command_when_reminders_off(monkeypatch):
    monkeypatch.setattr(settings_selector, "ensure_user", fake_user())
    monkeypatch.setenv("REMINDERS_ENABLED", "false")
    message = FakeMessage("/reminder")

    run(settings_selector.cmd_reminder(message))

    assert message.answers == [t('reminder.unavailable', 'en')]
    assert t('reminder.unavailable', 'en') != t('reminder.disabled', 'en')


def test_command_cancels_reminder_time_input(monkeypatch):
    saved = []

    async def set_reminder(telegram_id, enabled, reminder_time=None):
        saved.append((telegram_id, enabled, reminder_time))

    monkeypatch.setattr(settings_selector, "ensure_user", fake_user())
    monkeypatch.setattr(settings_selector, "set_reminder", set_reminder)
    state = FakeState(state=ReminderStates.waiting_time)
    message = FakeMessage("/daily")

    run(settings_selector.on_reminder_time(message, state))

    assert state.state is None
    assert saved == []
    assert message.answers == [t('reminder.time_cancelled', 'en')]


def test_reminder_time_saved(monkeypatch):
    saved = []

    async def set_reminder(telegram_id, enabled, reminder_time=None):
        saved.append((telegram_id, enabled, reminder_time))

    monkeypatch.setattr(settings_selector, "ensure_user", fake_user())
    monkeypatch.setattr(settings_selector, "set_reminder", set_reminder)

    # Неверный формат: остаёмся в ожидании
    state = FakeState(state=ReminderStates.waiting_time)
    message = FakeMessage("noon")
    run(settings_selector.on_reminder_time(message, state))
    assert state.state == ReminderStates.waiting_time
    assert message.answers == [t('reminder.invalid_time', 'en')]

    message = FakeMessage("7.45")
    run(settings_selector.on_reminder_time(message, state))
    assert state.state is None
    assert saved == [(42, True, "07:45")]


# ==================== ОПРОС ====================

def test_survey_profile_saved_for_user_not_chat(monkeypatch):
    stored = []

    async def update_user_profile(telegram_id, profile):
        stored.append((telegram_id, profile))

    async def send_markdown(bot, chat_id, text, reply_markup=None):
        pass

    monkeypatch.setattr(survey_handlers, "update_user_profile", update_user_profile)
    monkeypatch.setattr(survey_handlers, "send_markdown", send_markdown)

    state = FakeState(data={
        'survey_index': survey_handlers.TOTAL_QUESTIONS - 1,
        'survey_answers': {'gender': 'female'},
        'survey_lang': 'en',
    })
    # Сообщение из группы: chat.id отличается от id пользователя
    message = FakeMessage("1", user_id=42, chat_id=-100500)

    run(survey_handlers.on_survey_text(message, state))

    assert len(stored) == 1
    telegram_id, profile = stored[0]
    assert telegram_id == 42
    assert profile == {'gender': 'female', 'career_field': 'student'}
    assert state.state is None


# ==================== ОТПРАВКА ====================

def test_send_markdown_splits_long_text():
    fake_bot = FakeBot()
    text = "\n".join(f"Line {i}: " + "x" * 80 for i in range(100))
    markup = object()

    run(telegram.send_markdown(fake_bot, 7, text, reply_markup=markup))

    assert len(fake_bot.sent) > 1
    assert all(len(m['text']) <= 4096 for m in fake_bot.sent)
    assert [m['reply_markup'] for m in fake_bot.sent[:-1]] == [None] * (len(fake_bot.sent) - 1)
    assert fake_bot.sent[-1]['reply_markup'] is markup


def test_send_markdown_short_text_single_message():
    fake_bot = FakeBot()
    run(telegram.send_markdown(fake_bot, 7, "*Hello*"))
    assert [m['text'] for m in fake_bot.sent] == ["*Hello*"]
