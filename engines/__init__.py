"""
Движки бота.

Содержит:
- tarot/: движок раскладов Таро
- survey/: опрос /profile
- settings_selector.py: UI настроек (язык, перевёрнутые карты, напоминание)
- integration.py: подключение роутеров
"""

from .integration import setup_routers, get_commands_list

__all__ = [
    'setup_routers',
    'get_commands_list',
]
