"""
Сканер токенов [kaomoji:keyword] в тексте
Чисто лексический разбор, без обращения к набору данных
"""

import re
from typing import Iterator

# Локальные импорты
from kaomoji_replacer.models.replacement import Token

# Регулярное выражение токена: [kaomoji: + любые символы кроме ] + ]
# Незакрытые токены не совпадают и остаются в тексте как есть
TOKEN_PATTERN = re.compile(r"\[kaomoji:([^\]]+)\]")


class TokenScan:
    """Ленивая перезапускаемая последовательность токенов текста"""

    def __init__(self, text: str):
        self.text = text or ""

    def __iter__(self) -> Iterator[Token]:
        for match in TOKEN_PATTERN.finditer(self.text):
            yield Token(
                raw_keyword=match.group(1),
                start=match.start(),
                end=match.end(),
                original_text=match.group(0)
            )

    def __bool__(self) -> bool:
        return contains_tokens(self.text)


def scan(text: str) -> TokenScan:
    """
    Найти все токены в тексте

    Args:
        text: Исходный текст

    Returns:
        Токены слева направо, без пересечений
    """
    return TokenScan(text)


def contains_tokens(text: str) -> bool:
    """Есть ли в тексте хотя бы один токен"""
    return bool(text) and TOKEN_PATTERN.search(text) is not None
