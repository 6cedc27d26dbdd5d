"""
Исключения движка раскладов.

Ошибки конфигурации и инвариантов пробрасываются вызывающему коду;
обработчики Telegram превращают их в сообщение errors.reading_failed.
"""


class TarotError(Exception):
    """Базовая ошибка движка Таро"""
    pass


class InvalidCatalogError(TarotError):
    """Некорректные данные каталога карт или схем раскладов"""
    pass


class ReadingError(TarotError):
    """Расклад не может быть выполнен"""
    pass


class NoValidSpreadError(ReadingError):
    """Схема расклада не найдена"""
    pass


class InvalidPoolError(ReadingError):
    """Неизвестный пул карт"""
    pass


class InvalidRequestError(ReadingError):
    """Некорректные параметры запроса (например, число карт <= 0)"""
    pass


class CatalogNotInitializedError(ReadingError):
    """Каталог карт пуст или не загружен"""
    pass
