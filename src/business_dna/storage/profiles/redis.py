"""
Redis profile storage implementation.

Provides a Redis-backed profile cache shared by every replica. Profiles are
stored as JSON strings under "{prefix}{operator_id}:{scope}", with an empty
scope for the unscoped profile.
"""

import logging
from typing import Optional

import redis

from business_dna.models import BehavioralProfile

logger = logging.getLogger(__name__)


class RedisProfileStore:
    """
    Redis implementation of the ProfileStore protocol.

    Survives restarts (with Redis persistence) and works across multiple replicas.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        key_prefix: str = "profile:",
        client: Optional["redis.Redis"] = None,
    ):
        """
        Initialize the Redis store.

        Args:
            url: Redis connection URL
            key_prefix: Prefix for Redis keys (default: "profile:")
            client: Pre-built Redis client (overrides url)
        """
        self.client = client or redis.Redis.from_url(url, decode_responses=True)
        self._key_prefix = key_prefix

        # Test connection
        try:
            self.client.ping()
            logger.info(f"RedisProfileStore initialized (prefix={key_prefix})")
        except redis.ConnectionError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise

    def _get_key(self, operator_id: str, scope: Optional[str]) -> str:
        """Get the Redis key for an operator/scope profile."""
        return f"{self._key_prefix}{operator_id}:{scope or ''}"

    def get(self, operator_id: str, scope: Optional[str] = None) -> Optional[BehavioralProfile]:
        """Retrieve the stored profile for an operator/scope."""
        raw = self.client.get(self._get_key(operator_id, scope))
        if raw is None:
            return None

        try:
            return BehavioralProfile.model_validate_json(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable profile for operator {operator_id}: {e}")
            return None

    def upsert(self, profile: BehavioralProfile) -> None:
        """Insert or replace the profile."""
        self.client.set(self._get_key(profile.operator_id, profile.scope), profile.model_dump_json())

        logger.debug(f"Stored profile for operator {profile.operator_id} (scope={profile.scope})")

    def delete_operator(self, operator_id: str) -> int:
        """Remove every profile of an operator."""
        keys = list(self.client.scan_iter(match=f"{self._key_prefix}{operator_id}:*"))
        count = self.client.delete(*keys) if keys else 0

        logger.info(f"Deleted {count} profiles for operator {operator_id}")

        return count
