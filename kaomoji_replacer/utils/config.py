"""
Модуль конфигурации приложения
Загружает и валидирует переменные окружения (префикс KAOMOJI_)
"""

from pathlib import Path
from typing import Optional

# Логирование (ОБЯЗАТЕЛЬНО loguru)
from loguru import logger

# Сторонние библиотеки
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Локальные импорты
from kaomoji_replacer.models.replacement import ReplaceOptions, ReplaceStrategy

# Настройка логгера модуля
logger = logger.bind(module="config")

VALID_MODIFY_MODES = ("display", "content")
VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class Config(BaseSettings):
    """Конфигурация приложения с валидацией"""

    model_config = SettingsConfigDict(
        env_prefix="KAOMOJI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Обработка сообщений
    ENABLED: bool = True
    AUTO_PROCESS: bool = True               # Автоматически обрабатывать новые сообщения
    MODIFY_MODE: str = "display"            # 'display' или 'content'
    PROCESS_USER_MESSAGES: bool = False
    PROCESS_AI_MESSAGES: bool = True

    # Движок замены
    REPLACE_STRATEGY: str = "best"          # 'first', 'best', 'all'
    KEEP_ORIGINAL_ON_NOT_FOUND: bool = True
    MARK_NOT_FOUND: bool = False
    FUZZY_THRESHOLD: float = 0.3

    # Источники данных
    DATA_SOURCE: str = "data/kaomojis.json"
    TEMPLATE_SOURCE: str = "data/kaomojis.template.json"
    FETCH_TIMEOUT: int = 30

    # Чат
    CHAT_PATH: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "30 days"
    LOGS_DIR: str = "logs"

    @field_validator("MODIFY_MODE")
    @classmethod
    def validate_modify_mode(cls, v: str) -> str:
        """Валидация режима изменения сообщений"""
        v = v.strip().lower()
        if v not in VALID_MODIFY_MODES:
            raise ValueError(f"MODIFY_MODE должен быть одним из: {', '.join(VALID_MODIFY_MODES)}")
        return v

    @field_validator("REPLACE_STRATEGY")
    @classmethod
    def validate_replace_strategy(cls, v: str) -> str:
        """Валидация стратегии замены"""
        v = v.strip().lower()
        valid = [strategy.value for strategy in ReplaceStrategy]
        if v not in valid:
            raise ValueError(f"REPLACE_STRATEGY должен быть одним из: {', '.join(valid)}")
        return v

    @field_validator("FUZZY_THRESHOLD")
    @classmethod
    def validate_fuzzy_threshold(cls, v: float) -> float:
        """Валидация порога нечеткого поиска"""
        if not 0.0 <= v < 1.0:
            raise ValueError("FUZZY_THRESHOLD должен быть в диапазоне [0.0, 1.0)")
        return v

    @field_validator("FETCH_TIMEOUT")
    @classmethod
    def validate_fetch_timeout(cls, v: int) -> int:
        """Валидация таймаута загрузки данных"""
        if v <= 0:
            raise ValueError("FETCH_TIMEOUT должен быть положительным числом")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Валидация уровня логирования"""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL должен быть одним из: {', '.join(VALID_LOG_LEVELS)}")
        return v.upper()

    def to_replace_options(self) -> ReplaceOptions:
        """Получить параметры движка замены из настроек"""
        return ReplaceOptions(
            strategy=ReplaceStrategy(self.REPLACE_STRATEGY),
            keep_original_on_not_found=self.KEEP_ORIGINAL_ON_NOT_FOUND,
            mark_not_found=self.MARK_NOT_FOUND,
            threshold=self.FUZZY_THRESHOLD
        )

    @property
    def is_display_mode(self) -> bool:
        """Изменяется только отображение, а не текст сообщения"""
        return self.MODIFY_MODE == "display"

    def get_logs_dir(self) -> Path:
        """Получить директорию для логов"""
        return Path(self.LOGS_DIR)


# Глобальный экземпляр конфигурации
_config: Optional[Config] = None


def get_config() -> Config:
    """Получить глобальный экземпляр конфигурации"""
    global _config
    if _config is None:
        _config = Config()
        logger.debug(
            "Конфигурация загружена: стратегия={}, режим={}",
            _config.REPLACE_STRATEGY, _config.MODIFY_MODE
        )
    return _config

