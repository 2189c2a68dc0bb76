"""
Хранилище набора данных каомодзи
Упорядоченный список записей и индекс ключ/псевдоним -> запись
"""

import json
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

# Логирование (ОБЯЗАТЕЛЬНО loguru)
from loguru import logger

# Сторонние библиотеки
from pydantic import ValidationError

# Локальные импорты
from kaomoji_replacer.models.kaomoji import KaomojiEntry, KaomojiRecord, normalize_keyword
from kaomoji_replacer.utils.exceptions import DataFormatError

# Настройка логгера модуля
logger = logger.bind(module="kaomoji_dataset")

# Каомодзи не может содержать синтаксис токена или заканчиваться его началом,
# иначе результат замены снова будет распознан как токен
TOKEN_PREFIX = "[kaomoji:"


def breaks_token_syntax(kaomoji: str) -> bool:
    """Может ли каомодзи сам или вместе с текстом после него образовать токен"""
    if TOKEN_PREFIX in kaomoji:
        return True
    return any(kaomoji.endswith(TOKEN_PREFIX[:size]) for size in range(1, len(TOKEN_PREFIX)))


@dataclass(frozen=True)
class DatasetView:
    """
    Неизменяемый снимок набора данных

    Attributes:
        entries: Записи в порядке загрузки
        index: Нормализованный ключ или псевдоним -> (позиция записи, это псевдоним)
    """

    entries: Tuple[KaomojiEntry, ...] = ()
    index: Dict[str, Tuple[int, bool]] = field(default_factory=dict)

    def lookup(self, key: str) -> Optional[Tuple[int, bool]]:
        """Найти позицию записи по уже нормализованному ключу"""
        return self.index.get(key)

    def __len__(self) -> int:
        return len(self.entries)


EMPTY_VIEW = DatasetView()


class _EntryIterable:
    """Ленивая перезапускаемая последовательность записей снимка"""

    def __init__(self, view: DatasetView):
        self._view = view

    def __iter__(self) -> Iterator[KaomojiEntry]:
        return iter(self._view.entries)


def _decode(serialized_data: Union[str, bytes, List[Any], Dict[str, Any]]) -> List[Any]:
    """Разобрать сериализованный набор данных в список записей"""
    data = serialized_data

    if isinstance(data, (bytes, bytearray)):
        try:
            data = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DataFormatError(f"Набор данных не в UTF-8: {e}")

    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise DataFormatError(f"Невалидный JSON: {e}")

    # Поддерживаем обертку {"kaomojis": [...]}
    if isinstance(data, dict):
        if "kaomojis" not in data:
            raise DataFormatError("Объект набора данных не содержит ключ 'kaomojis'")
        data = data["kaomojis"]

    if not isinstance(data, list):
        raise DataFormatError(f"Ожидался список записей, получен {type(data).__name__}")

    return data


def build_view(records: List[Any]) -> DatasetView:
    """
    Построить снимок набора данных из списка записей

    Args:
        records: Декодированные записи (словари)

    Returns:
        Новый снимок с индексом

    Raises:
        DataFormatError: Если запись не соответствует схеме
    """
    entries: List[KaomojiEntry] = []
    index: Dict[str, Tuple[int, bool]] = {}
    duplicates = 0

    for position, raw in enumerate(records):
        if not isinstance(raw, dict):
            raise DataFormatError(
                f"Запись должна быть объектом, получен {type(raw).__name__}", index=position
            )

        try:
            entry = KaomojiRecord.model_validate(raw).to_entry()
        except ValidationError as e:
            raise DataFormatError(str(e), index=position)

        if breaks_token_syntax(entry.kaomoji):
            raise DataFormatError(
                f"Каомодзи '{entry.kaomoji}' содержит синтаксис токена", index=position
            )

        key = entry.normalized_keyword
        if key in index:
            # Первая запись побеждает
            duplicates += 1
            logger.warning("Дубликат ключевого слова '{}' (позиция {}), запись пропущена",
                           entry.keyword, position)
            continue

        entry_position = len(entries)
        entries.append(entry)
        index[key] = (entry_position, False)

        for alias in entry.aliases:
            alias_key = normalize_keyword(alias)
            if alias_key in index:
                if index[alias_key][0] != entry_position:
                    logger.warning("Псевдоним '{}' записи '{}' уже занят, пропущен",
                                   alias, entry.keyword)
                continue
            index[alias_key] = (entry_position, True)

    if duplicates:
        logger.warning("Пропущено дубликатов: {}", duplicates)

    return DatasetView(entries=tuple(entries), index=index)


class DatasetStore:
    """
    Хранилище каомодзи с атомарной перезагрузкой
    Читатели всегда видят полностью построенный снимок
    """

    def __init__(self):
        """Инициализация пустого хранилища"""
        self._view: DatasetView = EMPTY_VIEW
        self._loaded: bool = False
        self._load_lock = threading.Lock()

    def load_from(self, serialized_data: Union[str, bytes, List[Any], Dict[str, Any]]) -> int:
        """
        Загрузить набор данных, заменив текущее содержимое

        Args:
            serialized_data: JSON текст или уже декодированный список записей

        Returns:
            Количество загруженных записей

        Raises:
            DataFormatError: Если данные некорректны (содержимое не меняется)
        """
        with self._load_lock:
            view = build_view(_decode(serialized_data))
            # Замена ссылки на снимок атомарна для читателей
            self._view = view
            self._loaded = True

        logger.info("Загружено {} каомодзи в хранилище", len(view))
        return len(view)

    def clear(self) -> None:
        """Очистить хранилище"""
        with self._load_lock:
            self._view = EMPTY_VIEW
            self._loaded = False

    def view(self) -> DatasetView:
        """Получить текущий неизменяемый снимок"""
        return self._view

    def lookup_exact(self, keyword: str) -> Optional[KaomojiEntry]:
        """
        Найти запись по ключевому слову или псевдониму

        Args:
            keyword: Ключевое слово (регистр и пробелы по краям не важны)

        Returns:
            Запись или None если не найдена
        """
        view = self._view
        found = view.lookup(normalize_keyword(keyword))
        if found is None:
            return None
        return view.entries[found[0]]

    def all(self) -> _EntryIterable:
        """Все записи в порядке загрузки"""
        return _EntryIterable(self._view)

    def categories(self) -> List[str]:
        """Получить список всех категорий"""
        return sorted({entry.category for entry in self._view.entries})

    def has_keyword(self, keyword: str) -> bool:
        """Проверить есть ли ключевое слово в хранилище"""
        return self.lookup_exact(keyword) is not None

    @property
    def count(self) -> int:
        """Количество записей"""
        return len(self._view)

    @property
    def is_loaded(self) -> bool:
        """Загружен ли набор данных"""
        return self._loaded
