"""
Модуль работы с базой данных.

Содержит:
- connection.py: пул соединений PostgreSQL
- models.py: описание таблиц (SQL schemas)
- queries/: функции для работы с данными
    - users.py: пользователи, язык, профиль, напоминания
    - readings.py: сохранённые расклады и статистика
"""

from .connection import (
    get_pool,
    close_pool,
    init_db,
)

from .models import create_tables

__all__ = [
    'get_pool',
    'close_pool',
    'init_db',
    'create_tables',
]
