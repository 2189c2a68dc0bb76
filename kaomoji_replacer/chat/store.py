"""
Хранилище сообщений чата
Чтение и запись чата в формате JSONL (первая строка может быть заголовком чата)
"""

import asyncio
import inspect
import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

# Логирование (ОБЯЗАТЕЛЬНО loguru)
from loguru import logger

# Локальные импорты
from kaomoji_replacer.models.message import ChatMessage
from kaomoji_replacer.utils.exceptions import ChatStoreError

# Настройка логгера модуля
logger = logger.bind(module="chat_store")


class ChatStore:
    """
    Хранилище сообщений одного чата
    Сообщения адресуются по позиции в чате
    """

    def __init__(self, messages: Optional[List[ChatMessage]] = None, path: Optional[str] = None):
        """
        Инициализация хранилища

        Args:
            messages: Начальный список сообщений
            path: Путь к файлу чата для сохранения
        """
        self.messages: List[ChatMessage] = list(messages or [])
        self.path: Optional[Path] = Path(path) if path else None
        self.header: Optional[Dict[str, Any]] = None
        self._edited_handlers: List[Callable] = []

    @classmethod
    async def load(cls, path: str) -> "ChatStore":
        """
        Загрузить чат из файла JSONL

        Args:
            path: Путь к файлу чата

        Returns:
            Хранилище с сообщениями
        """
        file_path = Path(path)
        try:
            content = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
        except OSError as e:
            raise ChatStoreError(str(file_path), str(e))

        store = cls(path=str(file_path))

        for line_number, line in enumerate(content.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                raise ChatStoreError(str(file_path), f"строка {line_number}: {e}")

            # Заголовок чата не содержит текста сообщения
            if line_number == 1 and "mes" not in data:
                store.header = data
                continue

            store.messages.append(ChatMessage.from_dict(data))

        logger.info("Загружен чат {}: {} сообщений", file_path.name, len(store.messages))
        return store

    async def save(self) -> bool:
        """
        Сохранить чат в файл

        Returns:
            True если сохранение выполнено
        """
        if self.path is None:
            logger.debug("Путь к чату не задан, сохранение пропущено")
            return False

        lines = []
        if self.header is not None:
            lines.append(json.dumps(self.header, ensure_ascii=False))
        lines.extend(json.dumps(message.to_dict(), ensure_ascii=False) for message in self.messages)

        try:
            await asyncio.to_thread(self.path.write_text, "\n".join(lines) + "\n", encoding="utf-8")
        except OSError as e:
            raise ChatStoreError(str(self.path), str(e))

        logger.debug("Чат сохранен: {}", self.path)
        return True

    def get(self, message_id: int) -> Optional[ChatMessage]:
        """Получить сообщение по позиции"""
        if 0 <= message_id < len(self.messages):
            return self.messages[message_id]
        return None

    def on_edited(self, handler: Callable) -> None:
        """Подписаться на событие редактирования сообщения"""
        self._edited_handlers.append(handler)

    async def emit_edited(self, message_id: int) -> None:
        """Уведомить подписчиков о редактировании сообщения"""
        for handler in self._edited_handlers:
            result = handler(message_id)
            if inspect.isawaitable(result):
                await result

    def __len__(self) -> int:
        return len(self.messages)
