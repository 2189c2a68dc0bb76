"""
Модуль замены каомодзи
Замена токенов [kaomoji:keyword] в тексте чата на каомодзи из набора данных
"""

from typing import Optional

from .dataset import DatasetStore, DatasetView
from .search import SearchEngine, normalize_query, similarity
from .scanner import scan, contains_tokens
from .replacer import ReplacementEngine, replace_tokens
from .loader import DatasetLoader

__all__ = [
    "DatasetStore",
    "DatasetView",
    "SearchEngine",
    "normalize_query",
    "similarity",
    "scan",
    "contains_tokens",
    "ReplacementEngine",
    "replace_tokens",
    "DatasetLoader",
    "create_engine"
]


def create_engine(store: Optional[DatasetStore] = None, **options) -> ReplacementEngine:
    """
    Собрать движок замены поверх хранилища

    Args:
        store: Хранилище каомодзи (по умолчанию новое пустое)
        **options: Параметры замены по умолчанию

    Returns:
        Готовый движок замены
    """
    store = store if store is not None else DatasetStore()
    engine = ReplacementEngine(SearchEngine(store))
    if options:
        engine.set_config(**options)
    return engine
