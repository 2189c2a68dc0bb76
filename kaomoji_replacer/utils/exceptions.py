"""
Модуль кастомных исключений приложения
Содержит специализированные исключения для ядра замены и хост-слоя
"""

from typing import Optional, Any

# Логирование (ОБЯЗАТЕЛЬНО loguru)
from loguru import logger

# Настройка логгера модуля
logger = logger.bind(module="exceptions")


class KaomojiReplacerError(Exception):
    """Базовое исключение для всех ошибок приложения"""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

        # Логируем все исключения
        if details:
            logger.error("KaomojiReplacerError: {} | Детали: {}", message, details)
        else:
            logger.error("KaomojiReplacerError: {}", message)


# ==============================================
# ИСКЛЮЧЕНИЯ ДАННЫХ
# ==============================================

class DataFormatError(KaomojiReplacerError):
    """Некорректный формат набора данных каомодзи"""

    def __init__(self, details: Optional[str] = None, index: Optional[int] = None):
        if index is not None:
            message = f"Некорректная запись набора данных (позиция {index})"
        else:
            message = "Некорректный формат набора данных"
        super().__init__(message, details)
        self.index = index


class DatasetUnavailableError(KaomojiReplacerError):
    """Ни один источник набора данных не удалось загрузить"""

    def __init__(self, sources: Any, details: Optional[str] = None):
        message = f"Нет доступных данных каомодзи, источники: {sources}"
        super().__init__(message, details)
        self.sources = sources


# ==============================================
# ИСКЛЮЧЕНИЯ КОНФИГУРАЦИИ
# ==============================================

class ConfigurationError(KaomojiReplacerError):
    """Ошибки конфигурации приложения"""
    pass


class InvalidConfigValueError(ConfigurationError):
    """Неверное значение в конфигурации"""

    def __init__(self, parameter: str, value: Any, expected: str):
        message = f"Неверное значение параметра '{parameter}': {value}. Ожидается: {expected}"
        super().__init__(message)
        self.parameter = parameter
        self.value = value
        self.expected = expected


# ==============================================
# ИСКЛЮЧЕНИЯ ХРАНИЛИЩА ЧАТА
# ==============================================

class ChatStoreError(KaomojiReplacerError):
    """Ошибка чтения или записи файла чата"""

    def __init__(self, path: str, details: Optional[str] = None):
        message = f"Ошибка работы с файлом чата: {path}"
        super().__init__(message, details)
        self.path = path
