"""
Тесты вспомогательных функций: разбиение сообщений, промпт профиля, время.

Запуск: python -m pytest tests/test_helpers.py -v
"""

import sys
import os

# Добавляем путь к проекту
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.helpers import split_message, truncate_message, is_message_too_long, get_profile_prompt, parse_time


def test_short_message_not_split():
    assert split_message("Hello") == ["Hello"]
    assert not is_message_too_long("Hello")


def test_split_on_line_boundaries():
    lines = [f"Line {i} " + "x" * 40 for i in range(100)]
    text = "\n".join(lines)
    parts = split_message(text, max_length=500)

    assert len(parts) > 1
    assert all(len(part) <= 500 for part in parts), [len(p) for p in parts]
    # Строки не разрезаются
    rebuilt = "\n".join(parts).split("\n")
    assert rebuilt == lines
    print(f"✅ Разбито на {len(parts)} частей")


def test_split_long_line_by_words():
    words = ["word"] * 300
    parts = split_message(" ".join(words), max_length=100)

    assert all(len(part) <= 100 for part in parts)
    assert " ".join(parts).split() == words


def test_split_truncates_giant_word():
    parts = split_message("a" * 250, max_length=100)
    assert parts[0] == "a" * 97 + "..."
    assert all(len(part) <= 100 for part in parts)


def test_truncate_on_sentence_boundary():
    text = "First sentence. " * 10
    result = truncate_message(text, max_length=100)
    assert len(result) <= 100
    assert result.endswith("....")  # точка предложения + многоточие

    assert truncate_message("short", max_length=100) == "short"


def test_truncate_without_boundary():
    result = truncate_message("x" * 200, max_length=50)
    assert result == "x" * 47 + "..."


def test_profile_prompt():
    assert get_profile_prompt(None) == ""
    assert get_profile_prompt({}) == ""
    assert get_profile_prompt({'gender': None}) == ""

    prompt = get_profile_prompt({
        'gender': 'Female',
        'life_focus': 'Career & Work',
        'career_field': 'Mid-career',
    })
    assert prompt.startswith("User Profile Information:\n")
    assert "- Gender: Female" in prompt
    assert "- Life Focus: Career & Work" in prompt
    assert "- Career Stage: Mid-career" in prompt
    # Порядок полей как в опросе
    assert prompt.index("Gender") < prompt.index("Life Focus") < prompt.index("Career Stage")


def test_parse_time():
    assert parse_time("08:30") == "08:30"
    assert parse_time("8:30") == "08:30"
    assert parse_time(" 21.05 ") == "21:05"
    assert parse_time("23:59") == "23:59"
    assert parse_time("24:00") is None
    assert parse_time("12:60") is None
    assert parse_time("noon") is None
    assert parse_time("") is None
    assert parse_time(None) is None
