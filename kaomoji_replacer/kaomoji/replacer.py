"""
Движок замены токенов [kaomoji:keyword] на каомодзи
Сканирует текст, ищет кандидатов и собирает результат за один проход
"""

from typing import List, Optional, Sequence, Tuple

# Логирование (ОБЯЗАТЕЛЬНО loguru)
from loguru import logger

# Локальные импорты
from kaomoji_replacer.models.replacement import (
    MatchCandidate,
    MatchKind,
    ReplaceOptions,
    ReplaceStrategy,
    ReplacementOutcome,
    ReplacementRecord,
    ReplacementResult,
    Token,
)
from .dataset import DatasetView
from .scanner import scan
from .search import SearchEngine

# Настройка логгера модуля
logger = logger.bind(module="kaomoji_replacer")


def select_candidate(
    candidates: Sequence[MatchCandidate],
    strategy: ReplaceStrategy
) -> Optional[MatchCandidate]:
    """
    Выбрать кандидата по стратегии

    Кандидаты уже отсортированы поисковым движком.
    ALL не склеивает несколько каомодзи: победитель тоже один.
    """
    if not candidates:
        return None

    if strategy is ReplaceStrategy.FIRST:
        # Первый кандидат выдачи
        return candidates[0]

    # BEST и ALL: наивысший ранг, при равенстве порядок набора данных
    top_rank = _rank(candidates[0])
    tied = [candidate for candidate in candidates if _rank(candidate) == top_rank]
    return tied[0]


def _rank(candidate: MatchCandidate) -> Tuple[bool, float]:
    """Ранг кандидата: точный этап выше нечеткого, затем оценка"""
    return (candidate.match_kind is not MatchKind.FUZZY, candidate.score)


def _not_found(token: Token, options: ReplaceOptions) -> Tuple[str, ReplacementOutcome]:
    """Замена для ненайденного токена согласно параметрам"""
    if options.keep_original_on_not_found:
        return token.original_text, ReplacementOutcome.NOT_FOUND_KEPT
    if options.mark_not_found:
        return f"[?{token.raw_keyword}]", ReplacementOutcome.NOT_FOUND_MARKED
    return "", ReplacementOutcome.NOT_FOUND_REMOVED


def replace_tokens(
    text: str,
    options: ReplaceOptions,
    view: DatasetView,
    search_engine: SearchEngine
) -> ReplacementResult:
    """
    Заменить все токены текста

    Args:
        text: Исходный текст
        options: Параметры замены
        view: Снимок набора данных для всего вызова
        search_engine: Поисковый движок

    Returns:
        Результат замены
    """
    if not text:
        return ReplacementResult.unchanged(text or "")

    spans: List[Tuple[int, int, str]] = []
    records: List[ReplacementRecord] = []
    success_count = 0
    failure_count = 0

    for token in scan(text):
        candidates = search_engine.search(token.raw_keyword, threshold=options.threshold, view=view)
        chosen = select_candidate(candidates, options.strategy)

        if chosen is not None:
            replacement = chosen.kaomoji
            records.append(ReplacementRecord(
                raw_keyword=token.raw_keyword,
                outcome=ReplacementOutcome.REPLACED,
                start=token.start,
                end=token.end,
                chosen_kaomoji=chosen.kaomoji,
                match_kind=chosen.match_kind,
                score=chosen.score
            ))
            success_count += 1
        else:
            replacement, outcome = _not_found(token, options)
            records.append(ReplacementRecord(
                raw_keyword=token.raw_keyword,
                outcome=outcome,
                start=token.start,
                end=token.end
            ))
            failure_count += 1
            logger.debug("Каомодзи не найден для '{}': {}", token.raw_keyword, outcome.value)

        spans.append((token.start, token.end, replacement))

    if not spans:
        return ReplacementResult.unchanged(text)

    # Сборка по исходным смещениям
    pieces: List[str] = []
    cursor = 0
    for start, end, replacement in spans:
        pieces.append(text[cursor:start])
        pieces.append(replacement)
        cursor = end
    pieces.append(text[cursor:])
    output = "".join(pieces)

    # Соседний пользовательский текст может сложиться с заменой в новый токен
    kept = sum(1 for record in records if record.outcome is ReplacementOutcome.NOT_FOUND_KEPT)
    if sum(1 for _ in scan(output)) > kept:
        logger.warning("Замена образовала новый токен в тексте: {}", output)

    return ReplacementResult(
        text=output,
        has_replacements=(success_count + failure_count) > 0,
        success_count=success_count,
        failure_count=failure_count,
        records=tuple(records)
    )


class ReplacementEngine:
    """
    Движок замены каомодзи
    Хранит только параметры по умолчанию, сам вызов замены не меняет состояние движка
    """

    def __init__(self, search_engine: SearchEngine, options: Optional[ReplaceOptions] = None):
        """
        Инициализация движка

        Args:
            search_engine: Поисковый движок
            options: Параметры замены по умолчанию
        """
        self.search_engine = search_engine
        self._options = options or ReplaceOptions()

    @property
    def options(self) -> ReplaceOptions:
        """Текущие параметры по умолчанию"""
        return self._options

    def set_config(self, options: Optional[ReplaceOptions] = None, **overrides) -> None:
        """
        Установить параметры по умолчанию для последующих вызовов

        Args:
            options: Полный набор параметров
            **overrides: Отдельные поля ReplaceOptions
        """
        base = options or self._options
        self._options = base.merged(**overrides)
        logger.debug("Параметры замены обновлены: {}", self._options)

    def replace_text(
        self,
        text: str,
        options: Optional[ReplaceOptions] = None,
        **overrides
    ) -> ReplacementResult:
        """
        Заменить токены в тексте

        Args:
            text: Исходный текст
            options: Параметры вызова (по умолчанию параметры движка)
            **overrides: Отдельные поля ReplaceOptions для этого вызова

        Returns:
            Результат замены
        """
        effective = (options or self._options).merged(**overrides)
        view = self.search_engine.store.view()

        result = replace_tokens(text, effective, view, self.search_engine)

        if result.has_replacements:
            logger.info(
                "Обработан текст: {} замен, {} не найдено",
                result.success_count, result.failure_count
            )

        return result
