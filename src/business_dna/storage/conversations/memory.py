"""
In-memory conversation storage implementation.

Suitable for testing and single-instance deployments.
"""

import logging
from typing import Dict, List, Optional

from business_dna.models import Conversation, Message

logger = logging.getLogger(__name__)


class InMemoryConversationStore:
    """
    In-memory implementation of the ConversationStore protocol.

    Messages are kept in per-conversation lists in append order. Data is
    lost on restart.
    """

    def __init__(self):
        self._conversations: Dict[str, Conversation] = {}
        self._messages: Dict[str, List[Message]] = {}
        self._message_index: Dict[str, Message] = {}

        logger.info("InMemoryConversationStore initialized")

    def create_conversation(self, conversation: Conversation) -> Conversation:
        """Store a new conversation."""
        self._conversations[conversation.id] = conversation
        self._messages[conversation.id] = []

        logger.info(f"Created conversation {conversation.id} for operator {conversation.operator_id}")

        return conversation

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        """Retrieve a conversation by ID."""
        return self._conversations.get(conversation_id)

    def list_conversations(self, operator_id: str, limit: int = 20) -> List[Conversation]:
        """List an operator's active conversations, newest first."""
        conversations = [
            c
            for c in self._conversations.values()
            if c.operator_id == operator_id and c.status == "active"
        ]
        conversations.sort(key=lambda c: c.created_at, reverse=True)
        return conversations[:limit]

    def append_message(self, message: Message) -> Message:
        """Append a message to its conversation."""
        if message.conversation_id not in self._conversations:
            raise KeyError(f"Unknown conversation: {message.conversation_id}")
        if message.id in self._message_index:
            raise ValueError(f"Message {message.id} already stored")

        self._messages[message.conversation_id].append(message)
        self._message_index[message.id] = message

        logger.debug(f"Appended {message.role} message {message.id} to {message.conversation_id}")

        return message

    def list_messages(self, conversation_id: str, limit: Optional[int] = None) -> List[Message]:
        """Get messages of a conversation, oldest first."""
        messages = self._messages.get(conversation_id, [])
        if limit is not None:
            messages = messages[-limit:] if limit > 0 else []
        return list(messages)

    def get_message(self, message_id: str) -> Optional[Message]:
        """Retrieve a message by ID."""
        return self._message_index.get(message_id)
