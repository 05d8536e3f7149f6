"""Supabase repository for chat messages."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from meal_tracker.domain.chat import ChatMessage, ChatReply
from meal_tracker.services.chat import ChatRepository

CHAT_COLUMNS = "id, author_id, author_name, text, created_at, replies"


@dataclass
class SupabaseChatRepository(ChatRepository):
    """Supabase-backed chat repository."""

    client: Client

    def list_recent(self, limit: int, author_id: str | None) -> list[ChatMessage]:
        """Return the newest messages, newest first."""
        query = self.client.table("chats").select(CHAT_COLUMNS)
        if author_id is not None:
            query = query.eq("author_id", author_id)
        response = query.order("created_at", desc=True).limit(limit).execute()
        return [_parse_message(row) for row in response.data or []]

    def get_message(self, message_id: str) -> ChatMessage | None:
        """Return a message by id, if present."""
        if not is_uuid(message_id):
            return None
        response = (
            self.client.table("chats")
            .select(CHAT_COLUMNS)
            .eq("id", message_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_message(response.data[0])

    def create_message(
        self, author_id: str, author_name: str, text: str, created_at: datetime
    ) -> ChatMessage:
        """Insert a top-level message."""
        response = (
            self.client.table("chats")
            .insert(
                {
                    "author_id": author_id,
                    "author_name": author_name,
                    "text": text,
                    "created_at": created_at.isoformat(),
                    "replies": [],
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create chat message")
        return _parse_message(response.data[0])

    def append_reply(self, message_id: str, reply: ChatReply) -> ChatMessage:
        """Append a reply atomically through the append_chat_reply function."""
        response = self.client.rpc(
            "append_chat_reply",
            {
                "p_message_id": message_id,
                "p_reply": {
                    "author_id": reply.author_id,
                    "author_name": reply.author_name,
                    "text": reply.text,
                    "created_at": reply.created_at.isoformat(),
                },
            },
        ).execute()
        rows = response.data if isinstance(response.data, list) else [response.data]
        if not rows or not rows[0]:
            raise RuntimeError("Failed to append chat reply")
        return _parse_message(rows[0])

    def delete_message(self, message_id: str) -> None:
        """Delete a message row; replies live on the row and go with it."""
        if not is_uuid(message_id):
            return
        self.client.table("chats").delete().eq("id", message_id).execute()


def is_uuid(value: str) -> bool:
    """Return True when ``value`` can be sent to a uuid column."""
    try:
        UUID(value)
    except ValueError:
        return False
    return True


def _parse_datetime(raw: object) -> datetime:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return datetime.min.replace(tzinfo=UTC)


def _parse_message(row: dict[str, object]) -> ChatMessage:
    raw_replies = row.get("replies")
    replies = [
        ChatReply(
            author_id=str(reply.get("author_id", "")),
            author_name=str(reply.get("author_name") or ""),
            text=str(reply.get("text", "")),
            created_at=_parse_datetime(reply.get("created_at")),
        )
        for reply in (raw_replies if isinstance(raw_replies, list) else [])
        if isinstance(reply, dict)
    ]
    return ChatMessage(
        id=str(row["id"]),
        author_id=str(row.get("author_id", "")),
        author_name=str(row.get("author_name") or ""),
        text=str(row.get("text", "")),
        created_at=_parse_datetime(row.get("created_at")),
        replies=replies,
    )
