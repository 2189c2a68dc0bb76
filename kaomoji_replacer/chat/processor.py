"""
Обработчик сообщений чата
Применяет движок замены к сообщениям и умеет восстанавливать оригиналы
"""

from typing import Optional

# Логирование (ОБЯЗАТЕЛЬНО loguru)
from loguru import logger

# Локальные импорты
from kaomoji_replacer.kaomoji.replacer import ReplacementEngine
from kaomoji_replacer.models.message import ChatMessage, DISPLAY_KEY, ORIGINAL_KEY
from kaomoji_replacer.utils.config import Config, get_config
from .store import ChatStore

# Настройка логгера модуля
logger = logger.bind(module="chat_processor")


class MessageProcessor:
    """
    Обработчик сообщений чата

    Режим display меняет только отображаемый текст (extra.display_text),
    режим content перезаписывает текст сообщения
    """

    def __init__(
        self,
        engine: ReplacementEngine,
        store: ChatStore,
        config: Optional[Config] = None
    ):
        """
        Инициализация обработчика

        Args:
            engine: Движок замены
            store: Хранилище сообщений чата
            config: Настройки (по умолчанию глобальные)
        """
        self.engine = engine
        self.store = store
        self.config = config or get_config()

    def should_process(self, message: Optional[ChatMessage]) -> bool:
        """Нужно ли обрабатывать сообщение согласно настройкам"""
        if message is None or message.is_system:
            return False
        if message.is_user and not self.config.PROCESS_USER_MESSAGES:
            return False
        if not message.is_user and not self.config.PROCESS_AI_MESSAGES:
            return False
        return True

    async def process_message(self, message_id: int) -> bool:
        """
        Обработать одно сообщение

        Args:
            message_id: Позиция сообщения в чате

        Returns:
            True если в сообщении была выполнена хотя бы одна замена
        """
        try:
            message = self.store.get(message_id)

            if not self.should_process(message):
                return False

            original_text = message.mes
            result = self.engine.replace_text(original_text, self.config.to_replace_options())

            # Без успешных замен сообщение не трогаем
            if not result.has_replacements or result.success_count == 0:
                return False

            if self.config.is_display_mode:
                await self._modify_display(message_id, message, result.text, original_text)
            else:
                await self._modify_content(message_id, message, result.text, original_text)

            missing = [record.raw_keyword for record in result.records if not record.is_replaced]
            if missing:
                logger.debug("Сообщение {}: не найдены каомодзи для {}", message_id, missing)

            logger.info("Обработано сообщение {}: {} замен", message_id, result.success_count)
            return True

        except Exception as e:
            logger.error("Ошибка обработки сообщения {}: {}", message_id, str(e))
            return False

    async def _modify_display(
        self,
        message_id: int,
        message: ChatMessage,
        display_content: str,
        original_content: str
    ) -> None:
        """Изменить только отображаемый текст"""
        message.extra.setdefault(ORIGINAL_KEY, original_content)
        message.extra[DISPLAY_KEY] = display_content
        await self.store.save()

    async def _modify_content(
        self,
        message_id: int,
        message: ChatMessage,
        new_content: str,
        original_content: str
    ) -> None:
        """Перезаписать текст сообщения"""
        message.extra.setdefault(ORIGINAL_KEY, original_content)
        message.mes = new_content
        await self.store.save()
        await self.store.emit_edited(message_id)

    async def process_all(self) -> int:
        """
        Обработать все сообщения чата

        Returns:
            Количество измененных сообщений
        """
        processed_count = 0
        for message_id in range(len(self.store)):
            if await self.process_message(message_id):
                processed_count += 1

        logger.info("Обработано сообщений: {}", processed_count)
        return processed_count

    async def restore_message(self, message_id: int) -> bool:
        """
        Восстановить исходный текст сообщения

        Args:
            message_id: Позиция сообщения в чате

        Returns:
            True если сообщение восстановлено
        """
        try:
            message = self.store.get(message_id)
            if message is None or message.original_text is None:
                return False

            original_content = message.extra.pop(ORIGINAL_KEY)

            if self.config.is_display_mode:
                message.extra.pop(DISPLAY_KEY, None)
            else:
                message.mes = original_content

            await self.store.save()
            return True

        except Exception as e:
            logger.error("Ошибка восстановления сообщения {}: {}", message_id, str(e))
            return False

    async def restore_all(self) -> int:
        """
        Восстановить все сообщения чата

        Returns:
            Количество восстановленных сообщений
        """
        restored_count = 0
        for message_id in range(len(self.store)):
            if await self.restore_message(message_id):
                restored_count += 1

        logger.info("Восстановлено сообщений: {}", restored_count)
        return restored_count

    def _auto_enabled(self) -> bool:
        return self.config.ENABLED and self.config.AUTO_PROCESS

    async def on_message_received(self, message_id: int) -> bool:
        """Обработчик нового сообщения AI"""
        if self._auto_enabled() and self.config.PROCESS_AI_MESSAGES:
            return await self.process_message(message_id)
        return False

    async def on_message_sent(self, message_id: int) -> bool:
        """Обработчик отправленного сообщения пользователя"""
        if self._auto_enabled() and self.config.PROCESS_USER_MESSAGES:
            return await self.process_message(message_id)
        return False
