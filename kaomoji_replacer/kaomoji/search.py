"""
Поисковый движок каомодзи
Точный поиск по ключу и псевдониму, затем нечеткий поиск через rapidfuzz
"""

import unicodedata
from typing import List, Optional, Tuple

# Логирование (ОБЯЗАТЕЛЬНО loguru)
from loguru import logger

# Сторонние библиотеки
from rapidfuzz import fuzz

# Локальные импорты
from kaomoji_replacer.models.kaomoji import normalize_keyword
from kaomoji_replacer.models.replacement import (
    DEFAULT_FUZZY_THRESHOLD,
    MatchCandidate,
    MatchKind,
)
from .dataset import DatasetStore, DatasetView

# Настройка логгера модуля
logger = logger.bind(module="kaomoji_search")


def _is_punctuation(char: str) -> bool:
    return unicodedata.category(char).startswith("P")


def normalize_query(query: str) -> str:
    """
    Нормализация поискового запроса

    Приводит регистр, обрезает пробелы и знаки препинания по краям.
    Запрос только из знаков препинания (например "^_^") остается как есть.
    """
    base = normalize_keyword(query)

    start, end = 0, len(base)
    while start < end and _is_punctuation(base[start]):
        start += 1
    while end > start and _is_punctuation(base[end - 1]):
        end -= 1

    stripped = base[start:end].strip()
    return stripped or base


def similarity(first: str, second: str) -> float:
    """
    Схожесть двух строк в диапазоне 0..1

    Нормализованное расстояние Indel (fuzz.ratio / 100):
    одинаковые строки дают 1.0, строки без общих символов дают 0.0
    """
    if not first or not second:
        return 0.0
    return fuzz.ratio(first, second) / 100.0


class SearchEngine:
    """
    Поисковый движок поверх хранилища каомодзи
    Возвращает кандидатов по убыванию оценки, при равенстве в порядке набора данных
    """

    def __init__(self, store: DatasetStore, threshold: float = DEFAULT_FUZZY_THRESHOLD):
        """
        Инициализация движка

        Args:
            store: Хранилище каомодзи
            threshold: Порог нечеткого поиска по умолчанию
        """
        self.store = store
        self.threshold = threshold

    def search(
        self,
        query: str,
        threshold: Optional[float] = None,
        limit: Optional[int] = None,
        view: Optional[DatasetView] = None
    ) -> List[MatchCandidate]:
        """
        Найти кандидатов для запроса

        Args:
            query: Ключевое слово запроса
            threshold: Порог нечеткого поиска (по умолчанию порог движка)
            limit: Максимум кандидатов
            view: Снимок набора данных (по умолчанию текущий снимок хранилища)

        Returns:
            Список кандидатов, возможно пустой
        """
        if view is None:
            view = self.store.view()
        if threshold is None:
            threshold = self.threshold

        if not view.entries or not query or not query.strip():
            return []

        normalized = normalize_query(query)

        # Точный этап: сначала как есть, затем без знаков препинания по краям
        exact_position: Optional[int] = None
        ranked: List[Tuple[int, float, int, MatchCandidate]] = []

        for key in dict.fromkeys((normalize_keyword(query), normalized)):
            found = view.lookup(key)
            if found is not None:
                exact_position, is_alias = found
                kind = MatchKind.ALIAS if is_alias else MatchKind.EXACT
                candidate = MatchCandidate(view.entries[exact_position], 1.0, kind)
                ranked.append((0, 1.0, exact_position, candidate))
                break

        # Нечеткий этап по всем остальным записям
        for position, entry in enumerate(view.entries):
            if position == exact_position:
                continue

            score = max(
                (similarity(normalized, term) for term in entry.search_terms()),
                default=0.0
            )
            if score > threshold:
                candidate = MatchCandidate(entry, score, MatchKind.FUZZY)
                ranked.append((1, score, position, candidate))

        ranked.sort(key=lambda item: (item[0], -item[1], item[2]))
        candidates = [item[3] for item in ranked]

        if limit is not None:
            candidates = candidates[:limit]

        logger.debug("Поиск '{}': {} кандидатов", normalized, len(candidates))
        return candidates

    def best(self, query: str, threshold: Optional[float] = None) -> Optional[MatchCandidate]:
        """Лучший кандидат для запроса или None"""
        candidates = self.search(query, threshold=threshold, limit=1)
        return candidates[0] if candidates else None
