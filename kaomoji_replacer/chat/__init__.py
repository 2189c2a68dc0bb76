"""
Хост-слой чата: хранилище сообщений и обработчик замен
"""

from .store import ChatStore
from .processor import MessageProcessor

__all__ = [
    "ChatStore",
    "MessageProcessor"
]
