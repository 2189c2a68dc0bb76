"""
Модели данных: записи каомодзи, токены, результаты замены, сообщения чата
"""

from .kaomoji import KaomojiEntry, KaomojiRecord, normalize_keyword
from .message import ChatMessage
from .replacement import (
    MatchCandidate,
    MatchKind,
    ReplaceOptions,
    ReplaceStrategy,
    ReplacementOutcome,
    ReplacementRecord,
    ReplacementResult,
    Token,
)

__all__ = [
    "KaomojiEntry",
    "KaomojiRecord",
    "normalize_keyword",
    "ChatMessage",
    "MatchCandidate",
    "MatchKind",
    "ReplaceOptions",
    "ReplaceStrategy",
    "ReplacementOutcome",
    "ReplacementRecord",
    "ReplacementResult",
    "Token",
]
