"""
Клиенты для внешних API.

Содержит:
- claude.py: ClaudeClient для работы с Claude API
"""

from .claude import ClaudeClient, claude

__all__ = [
    'ClaudeClient',
    'claude',
]
