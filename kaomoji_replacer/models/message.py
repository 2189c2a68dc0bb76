"""
Модель сообщения чата
Представляет одно сообщение чата хост-приложения (формат JSONL)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# Ключи в extra, которыми управляет обработчик
ORIGINAL_KEY = "kaomoji_original"
DISPLAY_KEY = "display_text"


@dataclass
class ChatMessage:
    """
    Сообщение чата

    Attributes:
        mes: Текст сообщения
        name: Имя автора
        is_user: Сообщение пользователя
        is_system: Системное сообщение (не обрабатывается)
        extra: Дополнительные данные сообщения
        raw: Остальные поля исходной записи (сохраняются при записи)
    """

    mes: str = ""
    name: str = ""
    is_user: bool = False
    is_system: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def original_text(self) -> Optional[str]:
        """Резервная копия текста до замены"""
        return self.extra.get(ORIGINAL_KEY)

    @property
    def display_text(self) -> str:
        """Текст, который увидит пользователь"""
        return self.extra.get(DISPLAY_KEY, self.mes)

    def to_dict(self) -> Dict[str, Any]:
        """Преобразование в запись JSONL"""
        data = dict(self.raw)
        data.update({
            "name": self.name,
            "is_user": self.is_user,
            "is_system": self.is_system,
            "mes": self.mes,
        })
        if self.extra:
            data["extra"] = self.extra
        else:
            data.pop("extra", None)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        """Создание сообщения из записи JSONL"""
        known = {"name", "is_user", "is_system", "mes", "extra"}
        return cls(
            mes=data.get("mes") or "",
            name=data.get("name") or "",
            is_user=bool(data.get("is_user", False)),
            is_system=bool(data.get("is_system", False)),
            extra=dict(data.get("extra") or {}),
            raw={key: value for key, value in data.items() if key not in known}
        )
