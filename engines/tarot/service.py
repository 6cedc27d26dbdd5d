"""
Общий экземпляр TarotReader для обработчиков.

Каталог карт загружается один раз при первом обращении
(или явно из bot.py через init_reader).
"""

from pathlib import Path
from typing import Optional

from config import get_logger, TAROT_CARDS_PATH
from clients import claude
from db.queries.users import get_user_profile
from engines.survey.questions import describe_profile
from .cards import CardCatalog
from .reader import TarotReader
from .spreads import SpreadCatalog

logger = get_logger(__name__)

_reader: Optional[TarotReader] = None


async def load_profile_for_prompt(telegram_id: int) -> Optional[dict]:
    """Профиль с английскими подписями ответов (для промптов Claude)"""
    return describe_profile(await get_user_profile(telegram_id), "en")


def init_reader(cards_path: Path = TAROT_CARDS_PATH) -> TarotReader:
    global _reader
    _reader = TarotReader(
        CardCatalog.load(cards_path),
        SpreadCatalog(),
        llm=claude,
        profile_loader=load_profile_for_prompt,
    )
    logger.info("✅ TarotReader готов")
    return _reader


def get_reader() -> TarotReader:
    return _reader or init_reader()
