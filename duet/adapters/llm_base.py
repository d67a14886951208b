from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Protocol, Sequence


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role="user", content=content)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class ChatTransport(Protocol):
    """One way of turning a message list into the first reply choice's text.

    Implementations raise the classified errors from ``duet.errors``.
    """

    name: str

    def complete(self, messages: Sequence[ChatMessage]) -> str:
        raise NotImplementedError

    def close(self) -> None:
        return None


def serialize_messages(messages: Sequence[ChatMessage]) -> List[Dict[str, str]]:
    return [message.to_dict() for message in messages]
