"""Tests for the staff chat."""

from datetime import UTC, datetime, timedelta

import pytest

from meal_tracker.domain.centres import Role
from meal_tracker.domain.errors import RecordNotFoundError
from meal_tracker.services.chat import ChatFeed, ChatService
from tests.conftest import InMemoryChatRepository


def test_send_creates_message_and_publishes(
    chat_repository: InMemoryChatRepository,
) -> None:
    feed = ChatFeed()
    queue = feed.subscribe()
    service = ChatService(repository=chat_repository, feed=feed)

    message = service.send("u1", "Ana", "Lunch is late today")

    assert chat_repository.messages[message.id].text == "Lunch is late today"
    event = queue.get_nowait()
    assert event.kind == "created"
    assert event.message_id == message.id


def test_send_rejects_blank_text(chat_repository: InMemoryChatRepository) -> None:
    service = ChatService(repository=chat_repository)

    with pytest.raises(ValueError, match="empty"):
        service.send("u1", "Ana", "   ")


def test_reply_appends_to_parent(chat_repository: InMemoryChatRepository) -> None:
    service = ChatService(repository=chat_repository)
    parent = service.send("u1", "Ana", "Who has the keys?")

    updated = service.send("admin", "Sam", "I do", reply_to=parent.id)

    assert updated.id == parent.id
    assert [reply.text for reply in updated.replies] == ["I do"]
    assert chat_repository.messages[parent.id].replies[0].author_name == "Sam"


def test_reply_to_missing_message_raises(
    chat_repository: InMemoryChatRepository,
) -> None:
    service = ChatService(repository=chat_repository)

    with pytest.raises(RecordNotFoundError):
        service.send("u1", "Ana", "hello?", reply_to="missing")


def test_delete_removes_message_with_replies(
    chat_repository: InMemoryChatRepository,
) -> None:
    feed = ChatFeed()
    service = ChatService(repository=chat_repository, feed=feed)
    parent = service.send("u1", "Ana", "Question")
    service.send("admin", "Sam", "Answer", reply_to=parent.id)
    queue = feed.subscribe()

    service.delete(parent.id)

    assert parent.id not in chat_repository.messages
    event = queue.get_nowait()
    assert event.kind == "deleted"
    assert event.message is None


def test_delete_missing_message_raises(
    chat_repository: InMemoryChatRepository,
) -> None:
    with pytest.raises(RecordNotFoundError):
        ChatService(repository=chat_repository).delete("missing")


def test_list_messages_visibility_by_role(
    chat_repository: InMemoryChatRepository,
) -> None:
    service = ChatService(repository=chat_repository)
    service.send("u1", "Ana", "from ana")
    service.send("u2", "Ben", "from ben")

    own = service.list_messages("u1", Role.CARER)
    everything = service.list_messages("admin", Role.ADMIN)

    assert [message.text for message in own] == ["from ana"]
    assert {message.text for message in everything} == {"from ana", "from ben"}


def test_list_messages_oldest_first_within_limit(
    chat_repository: InMemoryChatRepository,
) -> None:
    start = datetime(2024, 7, 10, 9, tzinfo=UTC)
    for index in range(5):
        chat_repository.create_message(
            "u1", "Ana", f"message {index}", start + timedelta(minutes=index)
        )
    service = ChatService(repository=chat_repository, history_limit=3)

    messages = service.list_messages("u1", None)

    assert [message.text for message in messages] == [
        "message 2",
        "message 3",
        "message 4",
    ]


def test_feed_unsubscribe_stops_delivery() -> None:
    feed = ChatFeed()
    queue = feed.subscribe()
    assert feed.subscriber_count == 1

    feed.unsubscribe(queue)

    assert feed.subscriber_count == 0
