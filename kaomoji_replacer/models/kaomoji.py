"""
Модель записи каомодзи
Хранит ключевое слово, сам каомодзи, псевдонимы и теги
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Логирование (ОБЯЗАТЕЛЬНО loguru)
from loguru import logger

# Сторонние библиотеки
from pydantic import BaseModel, Field, field_validator

# Настройка логгера модуля
logger = logger.bind(module="models_kaomoji")


def normalize_keyword(keyword: str) -> str:
    """Нормализация ключа: приведение регистра и обрезка пробелов"""
    return keyword.strip().casefold()


@dataclass(frozen=True)
class KaomojiEntry:
    """
    Запись набора данных каомодзи

    Attributes:
        keyword: Ключевое слово (уникально без учета регистра)
        kaomoji: Сам каомодзи, например (^_^)
        aliases: Альтернативные ключевые слова
        tags: Метки для нечеткого поиска
        category: Категория каомодзи
        description: Описание для удобства управления
    """

    keyword: str
    kaomoji: str
    aliases: Tuple[str, ...] = field(default_factory=tuple)
    tags: Tuple[str, ...] = field(default_factory=tuple)
    category: str = "general"
    description: str = ""

    @property
    def normalized_keyword(self) -> str:
        return normalize_keyword(self.keyword)

    def search_terms(self) -> List[str]:
        """Все строки записи для нечеткого поиска: ключ, псевдонимы, теги"""
        terms = [self.keyword, *self.aliases, *self.tags]
        return [normalize_keyword(term) for term in terms if term.strip()]

    def __repr__(self) -> str:
        """Строковое представление"""
        return (
            f"KaomojiEntry(keyword='{self.keyword}', kaomoji='{self.kaomoji}', "
            f"category='{self.category}')"
        )


class KaomojiRecord(BaseModel):
    """Запись сериализованного набора данных (схема JSON)"""

    keyword: str = Field(min_length=1, description="Ключевое слово")
    kaomoji: str = Field(min_length=1, description="Каомодзи")
    aliases: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    description: Optional[str] = None

    @field_validator("keyword", "kaomoji")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Поле не должно состоять из одних пробелов"""
        if not v.strip():
            raise ValueError("поле не может быть пустым")
        return v

    def to_entry(self) -> KaomojiEntry:
        """Преобразовать запись схемы в неизменяемую модель"""
        return KaomojiEntry(
            keyword=self.keyword.strip(),
            kaomoji=self.kaomoji,
            aliases=tuple(alias.strip() for alias in self.aliases if alias.strip()),
            tags=tuple(tag.strip() for tag in self.tags if tag.strip()),
            category=self.category or "general",
            description=self.description or ""
        )
