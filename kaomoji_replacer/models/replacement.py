"""
Модели процесса замены
Токены, кандидаты поиска, параметры и результат замены
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

# Локальные импорты
from kaomoji_replacer.models.kaomoji import KaomojiEntry
from kaomoji_replacer.utils.exceptions import InvalidConfigValueError

DEFAULT_FUZZY_THRESHOLD = 0.3


class MatchKind(Enum):
    """Тип совпадения при поиске"""
    EXACT = "exact"    # Совпадение с ключевым словом
    ALIAS = "alias"    # Совпадение с псевдонимом
    FUZZY = "fuzzy"    # Нечеткое совпадение


class ReplaceStrategy(Enum):
    """Стратегия выбора кандидата"""
    FIRST = "first"
    BEST = "best"
    ALL = "all"


class ReplacementOutcome(Enum):
    """Итог обработки одного токена"""
    REPLACED = "replaced"                     # Заменен на каомодзи
    NOT_FOUND_KEPT = "not_found_kept"         # Не найден, токен оставлен
    NOT_FOUND_MARKED = "not_found_marked"     # Не найден, заменен на [?keyword]
    NOT_FOUND_REMOVED = "not_found_removed"   # Не найден, токен удален


@dataclass(frozen=True)
class Token:
    """
    Токен [kaomoji:keyword] найденный в тексте

    Attributes:
        raw_keyword: Текст между разделителями (без нормализации)
        start: Начало токена в исходном тексте
        end: Конец токена (не включительно)
        original_text: Точная подстрока токена с разделителями
    """
    raw_keyword: str
    start: int
    end: int
    original_text: str

    @property
    def length(self) -> int:
        """Длина токена в исходном тексте"""
        return self.end - self.start


@dataclass(frozen=True)
class MatchCandidate:
    """Кандидат, найденный поисковым движком"""
    entry: KaomojiEntry
    score: float
    match_kind: MatchKind

    @property
    def kaomoji(self) -> str:
        return self.entry.kaomoji


@dataclass
class ReplaceOptions:
    """
    Параметры замены

    Attributes:
        strategy: Стратегия выбора кандидата
        keep_original_on_not_found: Оставлять токен если ничего не найдено
        mark_not_found: Заменять ненайденный токен на [?keyword]
        threshold: Порог нечеткого поиска (0..1)
    """
    strategy: ReplaceStrategy = ReplaceStrategy.BEST
    keep_original_on_not_found: bool = True
    mark_not_found: bool = False
    threshold: float = DEFAULT_FUZZY_THRESHOLD

    def __post_init__(self):
        """Приведение и проверка значений"""
        if not isinstance(self.strategy, ReplaceStrategy):
            try:
                self.strategy = ReplaceStrategy(str(self.strategy).strip().lower())
            except ValueError:
                raise InvalidConfigValueError(
                    "strategy", self.strategy, "first, best или all"
                )

        if not 0.0 <= self.threshold < 1.0:
            raise InvalidConfigValueError("threshold", self.threshold, "число в [0.0, 1.0)")

    def merged(self, **overrides) -> "ReplaceOptions":
        """Получить копию параметров с переопределенными полями (None игнорируется)"""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


@dataclass(frozen=True)
class ReplacementRecord:
    """Итог обработки одного токена"""
    raw_keyword: str
    outcome: ReplacementOutcome
    start: int
    end: int
    chosen_kaomoji: Optional[str] = None
    match_kind: Optional[MatchKind] = None
    score: Optional[float] = None

    @property
    def is_replaced(self) -> bool:
        return self.outcome is ReplacementOutcome.REPLACED


@dataclass(frozen=True)
class ReplacementResult:
    """
    Результат одного вызова замены

    Attributes:
        text: Переписанный текст
        has_replacements: Были ли в тексте токены
        success_count: Количество замененных токенов
        failure_count: Количество ненайденных токенов
        records: Итоги по каждому токену слева направо
    """
    text: str
    has_replacements: bool = False
    success_count: int = 0
    failure_count: int = 0
    records: Tuple[ReplacementRecord, ...] = field(default_factory=tuple)

    @classmethod
    def unchanged(cls, text: str) -> "ReplacementResult":
        """Результат для текста без токенов"""
        return cls(text=text)

    def to_dict(self) -> dict:
        """Преобразование результата в словарь"""
        return {
            "text": self.text,
            "has_replacements": self.has_replacements,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "records": [
                {
                    "raw_keyword": record.raw_keyword,
                    "outcome": record.outcome.value,
                    "chosen_kaomoji": record.chosen_kaomoji,
                    "match_kind": record.match_kind.value if record.match_kind else None,
                    "score": record.score,
                    "start": record.start,
                    "end": record.end,
                }
                for record in self.records
            ],
        }
