"""
Kaomoji Replacer
Замена токенов [kaomoji:keyword] в сообщениях чата на каомодзи
"""

__version__ = "1.0.0"
