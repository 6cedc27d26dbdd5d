"""
Тесты feature flags.

Запуск: python -m pytest tests/test_features.py -v
"""

import sys
import os

import pytest

# Добавляем путь к проекту
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.features import FeatureFlags, flags


def _write(tmp_path, text):
    path = tmp_path / "features.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_default_flags_loaded():
    assert flags.is_enabled("ai.enhance_narrative")
    assert flags.is_enabled("ai.enhance_advice")
    assert flags.get("readings.history_limit") == 5


def test_flags_from_file(tmp_path):
    ff = FeatureFlags(_write(tmp_path, "ai:\n  enhance_narrative: false\nreadings:\n  history_limit: 3\n"))
    assert not ff.is_enabled("ai.enhance_narrative")
    assert not ff.is_enabled("ai.unknown")
    assert ff.get("readings.history_limit") == 3
    assert ff.get("readings.missing", 7) == 7


def test_env_overrides_file(tmp_path, monkeypatch):
    ff = FeatureFlags(_write(tmp_path, "ai:\n  enhance_narrative: false\n"))

    monkeypatch.setenv("AI_ENHANCE_NARRATIVE", "true")
    assert ff.is_enabled("ai.enhance_narrative")

    monkeypatch.setenv("AI_ENHANCE_NARRATIVE", "0")
    assert not ff.is_enabled("ai.enhance_narrative")

    monkeypatch.setenv("READINGS_HISTORY_LIMIT", "12")
    assert ff.get("readings.history_limit") == 12


def test_missing_file_is_empty(tmp_path):
    ff = FeatureFlags(tmp_path / "absent.yaml")
    assert not ff.is_enabled("ai.enhance_narrative")
    assert ff.get("anything", "default") == "default"


def test_invalid_yaml_raises(tmp_path):
    with pytest.raises(ValueError):
        FeatureFlags(_write(tmp_path, "ai: [unclosed\n"))
