"""
Загрузчик набора данных каомодзи
Пользовательский источник с откатом на шаблон (файл или HTTP)
"""

import asyncio
from pathlib import Path
from typing import Optional

# HTTP запросы
import aiohttp

# Логирование (ОБЯЗАТЕЛЬНО loguru)
from loguru import logger

# Локальные импорты
from kaomoji_replacer.utils.exceptions import DataFormatError, DatasetUnavailableError
from .dataset import DatasetStore

# Настройка логгера модуля
logger = logger.bind(module="kaomoji_loader")


def is_url(source: str) -> bool:
    """Является ли источник HTTP адресом"""
    return source.startswith(("http://", "https://"))


class DatasetLoader:
    """
    Загрузчик набора данных с откатом на резервный источник
    Загрузка выполняется вне ядра, ядро получает сырые байты
    """

    def __init__(
        self,
        primary: str,
        fallback: Optional[str] = None,
        request_timeout: int = 30
    ):
        """
        Инициализация загрузчика

        Args:
            primary: Пользовательский источник (путь или URL)
            fallback: Шаблонный источник (путь или URL)
            request_timeout: Таймаут HTTP запроса в секундах
        """
        self.primary = primary
        self.fallback = fallback
        self.request_timeout = request_timeout

    async def fetch_bytes(self, source: str) -> bytes:
        """
        Получить сырые данные набора из источника
        Декодирование выполняет хранилище, ошибка кодировки становится DataFormatError

        Args:
            source: Путь к файлу или URL

        Returns:
            Байты набора данных
        """
        if is_url(source):
            timeout = aiohttp.ClientTimeout(total=self.request_timeout)
            headers = {"Accept": "application/json"}

            async with aiohttp.ClientSession(timeout=timeout, headers=headers) as session:
                async with session.get(source) as response:
                    response.raise_for_status()
                    return await response.read()

        path = Path(source)
        return await asyncio.to_thread(path.read_bytes)

    async def _load_source(self, store: DatasetStore, source: str) -> int:
        """Загрузить один источник в хранилище"""
        data = await self.fetch_bytes(source)
        return store.load_from(data)

    async def load(self, store: DatasetStore) -> str:
        """
        Загрузить набор данных в хранилище

        Args:
            store: Хранилище каомодзи

        Returns:
            Источник, из которого загружены данные

        Raises:
            DatasetUnavailableError: Если не удалось загрузить ни один источник
        """
        try:
            count = await self._load_source(store, self.primary)
            logger.info("Загружено {} каомодзи из пользовательских данных", count)
            return self.primary

        except (OSError, aiohttp.ClientError, asyncio.TimeoutError, DataFormatError) as e:
            logger.warning("Не удалось загрузить пользовательские данные, пробуем шаблон: {}", str(e))
            primary_error = e

        if not self.fallback:
            raise DatasetUnavailableError([self.primary], str(primary_error))

        try:
            count = await self._load_source(store, self.fallback)
            logger.info("Загружено {} каомодзи из шаблона (откат)", count)
            return self.fallback

        except (OSError, aiohttp.ClientError, asyncio.TimeoutError, DataFormatError) as e:
            logger.error("Не удалось загрузить шаблон данных: {}", str(e))
            raise DatasetUnavailableError([self.primary, self.fallback], str(e))
