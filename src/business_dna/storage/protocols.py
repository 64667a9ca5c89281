"""
Storage protocol definitions for profiles, memories and conversations.

These protocols define the interface that storage implementations must provide.
They are implementation-agnostic and can be backed by various databases
(PostgreSQL, SQLite, Redis, in-memory, etc.).
"""

from typing import List, Optional, Protocol

from business_dna.models import BehavioralProfile, Conversation, MemoryRecord, Message


class ProfileStore(Protocol):
    """
    Protocol for behavioral profile storage.

    Holds exactly one profile per (operator_id, scope) pair. Staleness and
    recomputation are the profile service's concern, not the store's.
    """

    def get(self, operator_id: str, scope: Optional[str] = None) -> Optional[BehavioralProfile]:
        """
        Retrieve the stored profile for an operator/scope.

        Args:
            operator_id: The operator ID
            scope: Optional sub-partition (e.g. one location)

        Returns:
            The profile if one has been stored, None otherwise
        """
        ...

    def upsert(self, profile: BehavioralProfile) -> None:
        """
        Insert or replace the profile keyed by (profile.operator_id, profile.scope).

        Args:
            profile: The profile to store
        """
        ...

    def delete_operator(self, operator_id: str) -> int:
        """
        Remove every profile of an operator (full data removal).

        Args:
            operator_id: The operator ID

        Returns:
            Number of profiles deleted
        """
        ...


class MemoryStore(Protocol):
    """
    Protocol for append-only operator memory storage.

    Records are immutable: there is no update or delete. Corrections are new
    records that reference the old one in their context.
    """

    def append(self, record: MemoryRecord) -> str:
        """
        Store a memory record.

        Args:
            record: The record to store

        Returns:
            The record ID
        """
        ...

    def top_k(self, operator_id: str, k: int) -> List[MemoryRecord]:
        """
        Get the highest-ranked memories of an operator.

        Args:
            operator_id: The operator ID
            k: Maximum number of records to return

        Returns:
            Records ordered by importance descending, then most recent first
        """
        ...

    def count(self, operator_id: str) -> int:
        """
        Count the memories stored for an operator.

        Args:
            operator_id: The operator ID

        Returns:
            Number of records
        """
        ...


class ConversationStore(Protocol):
    """
    Protocol for conversation and message storage.

    Messages are append-only and keep their creation order.
    """

    def create_conversation(self, conversation: Conversation) -> Conversation:
        """
        Store a new conversation.

        Args:
            conversation: The conversation to create

        Returns:
            The stored conversation
        """
        ...

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        """
        Retrieve a conversation by ID.

        Args:
            conversation_id: The conversation ID

        Returns:
            The conversation if found, None otherwise
        """
        ...

    def list_conversations(self, operator_id: str, limit: int = 20) -> List[Conversation]:
        """
        List an operator's active conversations, newest first.

        Args:
            operator_id: The operator ID
            limit: Maximum number of conversations to return

        Returns:
            List of conversations
        """
        ...

    def append_message(self, message: Message) -> Message:
        """
        Append a message to its conversation.

        Args:
            message: The message to append

        Returns:
            The stored message
        """
        ...

    def list_messages(self, conversation_id: str, limit: Optional[int] = None) -> List[Message]:
        """
        Get messages of a conversation.

        Args:
            conversation_id: The conversation ID
            limit: If set, only the most recent `limit` messages

        Returns:
            Messages in creation order (oldest first)
        """
        ...

    def get_message(self, message_id: str) -> Optional[Message]:
        """
        Retrieve a message by ID.

        Args:
            message_id: The message ID

        Returns:
            The message if found, None otherwise
        """
        ...
