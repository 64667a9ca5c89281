"""
Storage protocols and backends for profiles, memories and conversations.

Provides protocol definitions for storage backends. Implementations can use
various databases (PostgreSQL, SQLite, Redis, in-memory, etc.) as long as
they satisfy the protocol interface.
"""

from business_dna.storage.conversations.memory import InMemoryConversationStore
from business_dna.storage.conversations.sqlalchemy import SQLAlchemyConversationStore
from business_dna.storage.memories.memory import InMemoryMemoryStore
from business_dna.storage.memories.sqlalchemy import SQLAlchemyMemoryStore
from business_dna.storage.profiles.memory import InMemoryProfileStore
from business_dna.storage.profiles.redis import RedisProfileStore
from business_dna.storage.profiles.sqlalchemy import SQLAlchemyProfileStore
from business_dna.storage.protocols import ConversationStore, MemoryStore, ProfileStore

__all__ = [
    "ProfileStore",
    "MemoryStore",
    "ConversationStore",
    "InMemoryProfileStore",
    "SQLAlchemyProfileStore",
    "RedisProfileStore",
    "InMemoryMemoryStore",
    "SQLAlchemyMemoryStore",
    "InMemoryConversationStore",
    "SQLAlchemyConversationStore",
]
