"""Domain models for staff chat."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ChatReply:
    """Reply appended to a top-level message."""

    author_id: str
    author_name: str
    text: str
    created_at: datetime


@dataclass(frozen=True)
class ChatMessage:
    """Top-level chat message with its replies."""

    id: str
    author_id: str
    author_name: str
    text: str
    created_at: datetime
    replies: list[ChatReply] = field(default_factory=list)


@dataclass(frozen=True)
class ChatEvent:
    """Change notification pushed to chat subscribers."""

    kind: str
    message_id: str
    message: ChatMessage | None = None
