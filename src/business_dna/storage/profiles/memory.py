"""
In-memory profile storage implementation.

Suitable for testing and single-instance deployments. For production with
multiple replicas, use the SQLAlchemy or Redis implementations instead.
"""

import logging
from typing import Dict, Optional, Tuple

from business_dna.models import BehavioralProfile

logger = logging.getLogger(__name__)


class InMemoryProfileStore:
    """
    In-memory implementation of the ProfileStore protocol.

    Stores copies of profiles so callers cannot mutate the cached value.
    Data is lost on restart.
    """

    def __init__(self):
        self._profiles: Dict[Tuple[str, Optional[str]], BehavioralProfile] = {}

        logger.info("InMemoryProfileStore initialized")

    def get(self, operator_id: str, scope: Optional[str] = None) -> Optional[BehavioralProfile]:
        """Retrieve the stored profile for an operator/scope."""
        profile = self._profiles.get((operator_id, scope or None))
        return profile.model_copy(deep=True) if profile else None

    def upsert(self, profile: BehavioralProfile) -> None:
        """Insert or replace the profile."""
        self._profiles[(profile.operator_id, profile.scope)] = profile.model_copy(deep=True)

        logger.debug(f"Stored profile for operator {profile.operator_id} (scope={profile.scope})")

    def delete_operator(self, operator_id: str) -> int:
        """Remove every profile of an operator."""
        keys = [key for key in self._profiles if key[0] == operator_id]
        for key in keys:
            del self._profiles[key]

        logger.info(f"Deleted {len(keys)} profiles for operator {operator_id}")

        return len(keys)
