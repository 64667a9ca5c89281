"""
Unit tests for conversation storage backends.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine

from business_dna.models import Conversation, Message, SuggestedAction
from business_dna.storage import InMemoryConversationStore, SQLAlchemyConversationStore

T0 = datetime(2024, 6, 3, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(params=["memory", "sqlalchemy"])
def conversation_store(request):
    """Create a fresh conversation store for each backend."""
    if request.param == "memory":
        return InMemoryConversationStore()
    store = SQLAlchemyConversationStore(create_engine("sqlite:///:memory:"))
    store.create_tables()
    return store


@pytest.fixture
def conversation(conversation_store):
    return conversation_store.create_conversation(
        Conversation(id="c1", operator_id="op1", title="Reviews", created_at=T0)
    )


def test_create_and_get_conversation(conversation_store, conversation):
    stored = conversation_store.get_conversation("c1")

    assert stored == conversation
    assert conversation_store.get_conversation("missing") is None


def test_list_conversations_newest_first(conversation_store, conversation):
    conversation_store.create_conversation(
        Conversation(id="c2", operator_id="op1", created_at=T0 + timedelta(hours=1))
    )
    conversation_store.create_conversation(
        Conversation(id="c3", operator_id="op1", status="archived", created_at=T0)
    )
    conversation_store.create_conversation(Conversation(id="c4", operator_id="op2", created_at=T0))

    assert [c.id for c in conversation_store.list_conversations("op1")] == ["c2", "c1"]
    assert [c.id for c in conversation_store.list_conversations("op1", limit=1)] == ["c2"]


def test_messages_keep_append_order(conversation_store, conversation):
    """Test that messages come back oldest first with their metadata."""
    user = Message(id="m1", conversation_id="c1", role="user", content="How are my reviews?", created_at=T0)
    reply = Message(
        id="m2",
        conversation_id="c1",
        role="assistant",
        content="Draft a reply to the review.",
        created_at=T0,
        model_used="openai/gpt-4o-mini",
        tokens_used=42,
        confidence=85,
        suggested_actions=[SuggestedAction(type="reply_review", label="Reply to review")],
        reply_to="m1",
    )
    conversation_store.append_message(user)
    conversation_store.append_message(reply)

    messages = conversation_store.list_messages("c1")

    assert [m.id for m in messages] == ["m1", "m2"]
    assert messages[1] == reply
    assert messages[1].suggested_actions[0].type == "reply_review"


def test_list_messages_limit_returns_latest(conversation_store, conversation):
    for i in range(5):
        conversation_store.append_message(
            Message(id=f"m{i}", conversation_id="c1", role="user", content=str(i), created_at=T0)
        )

    assert [m.id for m in conversation_store.list_messages("c1", limit=2)] == ["m3", "m4"]
    assert conversation_store.list_messages("c1", limit=0) == []


def test_get_message(conversation_store, conversation):
    message = Message(
        id="m1", conversation_id="c1", role="user", content="hi", created_at=T0, retryable=True
    )
    conversation_store.append_message(message)

    assert conversation_store.get_message("m1").retryable is True
    assert conversation_store.get_message("missing") is None


def test_append_to_unknown_conversation(conversation_store):
    with pytest.raises(KeyError):
        conversation_store.append_message(
            Message(conversation_id="missing", role="user", content="hi")
        )
