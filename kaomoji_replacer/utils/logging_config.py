"""
Модуль настройки логирования через loguru
Консоль плюс файлы общего журнала и журнала ошибок
"""

import sys
from pathlib import Path
from typing import Any, Dict, Union

# Логирование (ОБЯЗАТЕЛЬНО loguru)
from loguru import logger

# Настройка логгера модуля
logger = logger.bind(module="logging_config")

ALL_LOG_FILE = "kaomoji.log"
ERROR_LOG_FILE = "errors.log"


def _console_format(record: Dict[str, Any]) -> str:
    """Формат консоли: модуль из bind, иначе место вызова"""
    source = "{extra[module]}" if record["extra"].get("module") else "{name}:{function}:{line}"
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        f"<cyan>{source}</cyan> | "
        "<level>{message}</level>\n{exception}"
    )


def _has_module(record: Dict[str, Any]) -> bool:
    return record["extra"].get("module") is not None


def setup_logging(
    log_level: str = "INFO",
    log_rotation: str = "10 MB",
    log_retention: str = "30 days",
    logs_dir: Union[str, Path] = "logs"
) -> Path:
    """
    Настройка логирования через loguru

    Args:
        log_level: Уровень логирования консоли
        log_rotation: Размер файла для ротации общего журнала
        log_retention: Время хранения общего журнала
        logs_dir: Директория для файлов логов

    Returns:
        Директория с файлами логов
    """
    logs_path = Path(logs_dir)
    logs_path.mkdir(parents=True, exist_ok=True)

    logger.remove()

    logger.add(
        sys.stdout,
        level=log_level,
        format=_console_format,
        colorize=True,
        enqueue=True
    )

    # Файлы пишут только модули с привязанным логгером
    file_sinks = (
        (ALL_LOG_FILE, "DEBUG", log_rotation, log_retention, ""),
        (ERROR_LOG_FILE, "ERROR", "5 MB", "60 days", " | {exception}"),
    )
    for file_name, level, rotation, retention, tail in file_sinks:
        logger.add(
            logs_path / file_name,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]} | {message}" + tail,
            rotation=rotation,
            retention=retention,
            compression="zip",
            encoding="utf-8",
            enqueue=True,
            filter=_has_module
        )

    logger.info("Логирование настроено: уровень {}, файлы в {}", log_level, logs_path)
    return logs_path


def setup_logging_from_config() -> None:
    """Настройка логирования из конфигурации"""
    try:
        # Импортируем здесь чтобы избежать циклических импортов
        from kaomoji_replacer.utils.config import get_config

        config = get_config()
        setup_logging(
            log_level=config.LOG_LEVEL,
            log_rotation=config.LOG_ROTATION,
            log_retention=config.LOG_RETENTION,
            logs_dir=config.get_logs_dir()
        )

    except Exception as e:
        # Используем базовую настройку при ошибке загрузки конфигурации
        setup_logging()
        logger.error("Ошибка загрузки конфигурации для логирования: {}", str(e))


def get_module_logger(module_name: str):
    """Получить логгер с привязкой к модулю"""
    return logger.bind(module=module_name)


def log_startup_info() -> None:
    """Логирование информации о запуске приложения"""
    startup_logger = get_module_logger("startup")

    startup_logger.info("🚀 Запуск Kaomoji Replacer")
    startup_logger.info("Python {} на {}, рабочая директория {}",
                        sys.version.split()[0], sys.platform, Path.cwd())
