"""Staff chat with threaded replies and a live change feed."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from meal_tracker.domain.centres import Role
from meal_tracker.domain.chat import ChatEvent, ChatMessage, ChatReply
from meal_tracker.domain.errors import RecordNotFoundError

logger = logging.getLogger(__name__)


class ChatRepository(Protocol):
    """Persistence interface for chat messages."""

    def list_recent(self, limit: int, author_id: str | None) -> list[ChatMessage]:
        """Return the newest messages, optionally filtered by author."""

    def get_message(self, message_id: str) -> ChatMessage | None:
        """Return a message by id, if present."""

    def create_message(
        self, author_id: str, author_name: str, text: str, created_at: datetime
    ) -> ChatMessage:
        """Create and return a top-level message."""

    def append_reply(self, message_id: str, reply: ChatReply) -> ChatMessage:
        """Append a reply to a message and return the updated message."""

    def delete_message(self, message_id: str) -> None:
        """Delete a message together with its replies."""


@dataclass
class ChatFeed:
    """In-process fan-out of chat events to live subscribers."""

    _subscribers: set[asyncio.Queue[ChatEvent]] = field(default_factory=set)

    def subscribe(self) -> asyncio.Queue[ChatEvent]:
        """Register a subscriber and return its event queue."""
        queue: asyncio.Queue[ChatEvent] = asyncio.Queue()
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[ChatEvent]) -> None:
        """Remove a subscriber."""
        self._subscribers.discard(queue)

    def publish(self, event: ChatEvent) -> None:
        """Deliver an event to every subscriber."""
        for queue in list(self._subscribers):
            queue.put_nowait(event)

    @property
    def subscriber_count(self) -> int:
        """Return the number of live subscribers."""
        return len(self._subscribers)


@dataclass
class ChatService:
    """Application service for chat messages."""

    repository: ChatRepository
    feed: ChatFeed = field(default_factory=ChatFeed)
    history_limit: int = 50

    def list_messages(self, viewer_id: str, role: Role | None) -> list[ChatMessage]:
        """Return visible messages oldest first, capped to the history limit.

        Admins see every message; everyone else sees only their own.
        """
        author_filter = None if role == Role.ADMIN else viewer_id
        messages = self.repository.list_recent(self.history_limit, author_filter)
        return sorted(messages, key=lambda message: message.created_at)

    def send(
        self,
        author_id: str,
        author_name: str,
        text: str,
        reply_to: str | None = None,
    ) -> ChatMessage:
        """Post a new message, or a reply when ``reply_to`` is set."""
        if not text.strip():
            raise ValueError("Message text must not be empty")
        now = datetime.now(tz=UTC)
        if reply_to is None:
            message = self.repository.create_message(
                author_id, author_name, text, created_at=now
            )
            self.feed.publish(ChatEvent("created", message.id, message))
            return message

        if self.repository.get_message(reply_to) is None:
            raise RecordNotFoundError(f"No chat message {reply_to}")
        reply = ChatReply(
            author_id=author_id, author_name=author_name, text=text, created_at=now
        )
        message = self.repository.append_reply(reply_to, reply)
        self.feed.publish(ChatEvent("replied", message.id, message))
        return message

    def delete(self, message_id: str) -> None:
        """Delete a top-level message and all of its replies."""
        if self.repository.get_message(message_id) is None:
            raise RecordNotFoundError(f"No chat message {message_id}")
        self.repository.delete_message(message_id)
        logger.info("Deleted chat message", extra={"message_id": message_id})
        self.feed.publish(ChatEvent("deleted", message_id))
