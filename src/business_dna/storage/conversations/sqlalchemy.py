"""
SQLAlchemy-based conversation storage implementation.

Conversations and their append-only messages. Message order is the
autoincrement sequence, never the client clock.
"""

import json
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, Column, DateTime, Engine, Integer, String, Text
from sqlalchemy.orm import Session, declarative_base

from business_dna.models import Conversation, Message, SuggestedAction
from business_dna.utils.timestamps import ensure_utc

logger = logging.getLogger(__name__)

Base = declarative_base()


class ConversationDB(Base):
    """SQLAlchemy model for conversations."""

    __tablename__ = "conversations"

    id = Column(String, primary_key=True)
    operator_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=True)
    status = Column(String, nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False)

    def to_conversation(self) -> Conversation:
        """Convert database model to Conversation."""
        return Conversation(
            id=self.id,
            operator_id=self.operator_id,
            title=self.title,
            status=self.status,
            created_at=ensure_utc(self.created_at),
        )


class MessageDB(Base):
    """SQLAlchemy model for conversation messages."""

    __tablename__ = "conversation_messages"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False, unique=True)
    conversation_id = Column(String, nullable=False, index=True)

    role = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    # Assistant metadata
    model_used = Column(String, nullable=True)
    tokens_used = Column(Integer, nullable=True)
    confidence = Column(Integer, nullable=True)
    actions_json = Column(Text, nullable=False, default="[]")
    reply_to = Column(String, nullable=True)

    # User message whose turn failed
    retryable = Column(Boolean, nullable=False, default=False)

    stored_at = Column(DateTime, nullable=False, default=datetime.now)

    def to_message(self) -> Message:
        """Convert database model to Message."""
        actions = json.loads(self.actions_json) if self.actions_json else []
        return Message(
            id=self.id,
            conversation_id=self.conversation_id,
            role=self.role,
            content=self.content,
            created_at=ensure_utc(self.created_at),
            model_used=self.model_used,
            tokens_used=self.tokens_used,
            confidence=self.confidence,
            suggested_actions=[SuggestedAction(**a) for a in actions],
            reply_to=self.reply_to,
            retryable=self.retryable,
        )

    @staticmethod
    def from_message(message: Message) -> "MessageDB":
        """Create database model from Message."""
        return MessageDB(
            id=message.id,
            conversation_id=message.conversation_id,
            role=message.role,
            content=message.content,
            created_at=message.created_at,
            model_used=message.model_used,
            tokens_used=message.tokens_used,
            confidence=message.confidence,
            actions_json=json.dumps([a.model_dump() for a in message.suggested_actions], default=str),
            reply_to=message.reply_to,
            retryable=message.retryable,
        )


class SQLAlchemyConversationStore:
    """
    SQLAlchemy-based conversation storage.

    Example:
        from sqlalchemy import create_engine
        engine = create_engine("sqlite:///business_dna.db")
        store = SQLAlchemyConversationStore(engine)
        store.create_tables()
    """

    def __init__(self, engine: Engine):
        """
        Initialize the SQLAlchemy conversation store.

        Args:
            engine: SQLAlchemy engine for database connection
        """
        self.engine = engine
        logger.info(f"SQLAlchemyConversationStore initialized (engine={engine.url})")

    @contextmanager
    def _session(self):
        """Context manager for database sessions with automatic commit/rollback."""
        session = Session(self.engine)
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Database error: {e}")
            raise
        finally:
            session.close()

    def create_tables(self):
        """Create database tables if they don't exist."""
        Base.metadata.create_all(self.engine)
        logger.info("Conversation tables created/verified")

    def create_conversation(self, conversation: Conversation) -> Conversation:
        """Store a new conversation."""
        with self._session() as session:
            session.add(
                ConversationDB(
                    id=conversation.id,
                    operator_id=conversation.operator_id,
                    title=conversation.title,
                    status=conversation.status,
                    created_at=conversation.created_at,
                )
            )

            logger.info(
                f"Created conversation {conversation.id} for operator {conversation.operator_id}"
            )

            return conversation

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        """Retrieve a conversation by ID."""
        with self._session() as session:
            row = session.query(ConversationDB).filter(ConversationDB.id == conversation_id).first()
            return row.to_conversation() if row else None

    def list_conversations(self, operator_id: str, limit: int = 20) -> List[Conversation]:
        """List an operator's active conversations, newest first."""
        with self._session() as session:
            rows = (
                session.query(ConversationDB)
                .filter(ConversationDB.operator_id == operator_id, ConversationDB.status == "active")
                .order_by(ConversationDB.created_at.desc())
                .limit(limit)
                .all()
            )
            return [row.to_conversation() for row in rows]

    def append_message(self, message: Message) -> Message:
        """Append a message to its conversation."""
        with self._session() as session:
            exists = (
                session.query(ConversationDB.id)
                .filter(ConversationDB.id == message.conversation_id)
                .first()
            )
            if not exists:
                raise KeyError(f"Unknown conversation: {message.conversation_id}")

            session.add(MessageDB.from_message(message))

            logger.debug(
                f"Appended {message.role} message {message.id} to {message.conversation_id}"
            )

            return message

    def list_messages(self, conversation_id: str, limit: Optional[int] = None) -> List[Message]:
        """Get messages of a conversation, oldest first."""
        if limit is not None and limit <= 0:
            return []

        with self._session() as session:
            query = (
                session.query(MessageDB)
                .filter(MessageDB.conversation_id == conversation_id)
                .order_by(MessageDB.seq.desc())
            )
            if limit is not None:
                query = query.limit(limit)

            rows = query.all()
            return [row.to_message() for row in reversed(rows)]

    def get_message(self, message_id: str) -> Optional[Message]:
        """Retrieve a message by ID."""
        with self._session() as session:
            row = session.query(MessageDB).filter(MessageDB.id == message_id).first()
            return row.to_message() if row else None
