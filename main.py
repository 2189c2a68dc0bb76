"""
Главный файл запуска Kaomoji Replacer
Загружает набор данных и обрабатывает чат из файла JSONL
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

# Стандартные импорты
from dotenv import load_dotenv

# Логирование (ОБЯЗАТЕЛЬНО loguru)
from loguru import logger

# Локальные импорты
from kaomoji_replacer.chat import ChatStore, MessageProcessor
from kaomoji_replacer.kaomoji import DatasetLoader, DatasetStore, create_engine
from kaomoji_replacer.utils.config import get_config
from kaomoji_replacer.utils.exceptions import KaomojiReplacerError
from kaomoji_replacer.utils.logging_config import log_startup_info, setup_logging_from_config

USAGE = "Использование: main.py [process|restore] <chat.jsonl> | main.py test"


class KaomojiReplacerApp:
    """Главный класс приложения"""

    def __init__(self):
        """Инициализация приложения"""
        self.config = get_config()
        self.store = DatasetStore()
        self.engine = create_engine(self.store)
        self.engine.set_config(self.config.to_replace_options())
        self.data_source: Optional[str] = None

    async def startup(self) -> bool:
        """Загрузка набора данных"""
        if not self.config.ENABLED:
            logger.warning("Обработка отключена настройкой ENABLED")
            return False

        loader = DatasetLoader(
            primary=self.config.DATA_SOURCE,
            fallback=self.config.TEMPLATE_SOURCE,
            request_timeout=self.config.FETCH_TIMEOUT
        )
        try:
            self.data_source = await loader.load(self.store)
        except KaomojiReplacerError as e:
            logger.error("💥 Инициализация не удалась, обработка отключена: {}", e.message)
            return False

        logger.info("✅ Набор данных готов: {} каомодзи из {}", self.store.count, self.data_source)
        return True

    async def open_processor(self, chat_path: str) -> MessageProcessor:
        """Загрузить чат и создать обработчик сообщений"""
        chat = await ChatStore.load(chat_path)
        return MessageProcessor(self.engine, chat, self.config)

    async def process_chat(self, chat_path: str) -> int:
        """Обработать все сообщения чата"""
        processor = await self.open_processor(chat_path)
        return await processor.process_all()

    async def restore_chat(self, chat_path: str) -> int:
        """Восстановить все сообщения чата"""
        processor = await self.open_processor(chat_path)
        return await processor.restore_all()


async def test_system_components(app: KaomojiReplacerApp) -> bool:
    """Проверка загрузки данных и работы движка"""
    logger.info("🧪 Запуск проверки системы")

    if not await app.startup():
        logger.error("❌ Набор данных недоступен")
        return False

    first_entry = next(iter(app.store.all()), None)
    if first_entry is None:
        logger.error("❌ Набор данных пуст")
        return False

    if not app.store.has_keyword(first_entry.keyword):
        logger.error("❌ Ключ '{}' отсутствует в индексе", first_entry.keyword)
        return False

    sample = f"test [kaomoji:{first_entry.keyword}]"
    result = app.engine.replace_text(sample)

    if result.success_count != 1:
        logger.error("❌ Замена не выполнена для '{}'", sample)
        return False

    logger.info("✅ '{}' -> '{}'", sample, result.text)
    return True


async def main() -> int:
    """Главная функция"""
    load_dotenv()

    # Настраиваем логирование
    setup_logging_from_config()
    log_startup_info()

    try:
        app = KaomojiReplacerApp()
    except Exception as e:
        logger.error("💥 Ошибка конфигурации: {}", str(e))
        return 1

    args = sys.argv[1:]
    command = args[0] if args else "process"

    if command == "test":
        success = await test_system_components(app)
        return 0 if success else 1

    if command not in ("process", "restore"):
        logger.error("Неизвестная команда: {}", command)
        logger.info(USAGE)
        return 1

    chat_path = args[1] if len(args) > 1 else app.config.CHAT_PATH
    if not chat_path or not Path(chat_path).exists():
        logger.error("Файл чата не найден: {}", chat_path)
        logger.info(USAGE)
        return 1

    try:
        if command == "restore":
            # Восстановление не требует набора данных
            count = await app.restore_chat(chat_path)
            logger.info("🏁 Восстановлено сообщений: {}", count)
            return 0

        if not await app.startup():
            return 1

        count = await app.process_chat(chat_path)
        logger.info("🏁 Обработано сообщений: {}", count)
        return 0

    except KaomojiReplacerError as e:
        logger.error("💥 Ошибка обработки чата: {}", e.message)
        return 1


if __name__ == "__main__":
    """Точка входа в приложение"""

    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code)

    except KeyboardInterrupt:
        logger.info("👋 Программа завершена пользователем")
        sys.exit(0)
