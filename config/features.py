"""
Feature Flags для управления функциональностью бота.

Позволяет:
- Отключать AI-улучшение раскладов без изменения кода
- Переопределять флаги через переменные окружения
- Настраивать параметры раскладов (например, вероятность переворота)

Использование:
    from config.features import flags

    if flags.is_enabled("ai.enhance_narrative"):
        text = await llm.generate_interpretation(...)
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml

DEFAULT_FEATURES_PATH = Path(__file__).parent / "features.yaml"

_TRUE_VALUES = ("true", "1", "yes", "on")


class FeatureFlags:
    """
    Флаги загружаются из features.yaml.
    Переменные окружения имеют приоритет над значениями в файле.

    Формат env переменных: путь с точками заменяется на подчёркивания в верхнем регистре.
    Пример: "ai.enhance_narrative" → "AI_ENHANCE_NARRATIVE"
    """

    def __init__(self, config_path: Optional[Path] = None):
        self._path = Path(config_path) if config_path else DEFAULT_FEATURES_PATH
        self._config: dict = {}
        self.reload()

    def reload(self) -> None:
        """Перечитывает features.yaml (отсутствующий файл = пустой конфиг)"""
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            self._config = {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {self._path.name}: {e}")

    @staticmethod
    def _env_override(path: str) -> Optional[str]:
        return os.getenv(path.upper().replace(".", "_"))

    def _lookup(self, path: str) -> Any:
        value = self._config
        for key in path.split("."):
            if not isinstance(value, dict) or key not in value:
                return None
            value = value[key]
        return value

    def is_enabled(self, path: str) -> bool:
        """
        Проверяет, включён ли флаг.

        Args:
            path: Путь к флагу через точку (например, "ai.enhance_advice")

        Returns:
            True если флаг включён, False если выключен или не найден
        """
        env_value = self._env_override(path)
        if env_value is not None:
            return env_value.lower() in _TRUE_VALUES
        return bool(self._lookup(path))

    def get(self, path: str, default: Any = None) -> Any:
        """
        Получает значение параметра (числа приводятся из env автоматически).

        Args:
            path: Путь к значению через точку
            default: Значение по умолчанию
        """
        env_value = self._env_override(path)
        if env_value is not None:
            for cast in (int, float):
                try:
                    return cast(env_value)
                except ValueError:
                    continue
            return env_value

        value = self._lookup(path)
        return default if value is None else value


# Глобальный экземпляр для использования во всём приложении
flags = FeatureFlags()
