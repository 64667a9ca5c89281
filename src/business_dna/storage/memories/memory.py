"""
In-memory memory-record storage implementation.

Suitable for testing and single-instance deployments.
"""

import logging
from typing import Dict, List, Tuple

from business_dna.models import MemoryRecord

logger = logging.getLogger(__name__)


class InMemoryMemoryStore:
    """
    In-memory implementation of the MemoryStore protocol.

    Keeps an insertion sequence per record so records created within the
    same clock tick still rank most-recent-first. Data is lost on restart.
    """

    def __init__(self):
        # operator_id -> [(sequence, record)]
        self._records: Dict[str, List[Tuple[int, MemoryRecord]]] = {}
        self._sequence = 0

        logger.info("InMemoryMemoryStore initialized")

    def append(self, record: MemoryRecord) -> str:
        """Store a memory record."""
        self._sequence += 1
        self._records.setdefault(record.operator_id, []).append((self._sequence, record))

        logger.debug(
            f"Stored memory {record.id} for operator {record.operator_id} "
            f"(kind={record.kind}, importance={record.importance_score})"
        )

        return record.id

    def top_k(self, operator_id: str, k: int) -> List[MemoryRecord]:
        """Get the highest-ranked memories of an operator."""
        if k <= 0:
            return []

        entries = self._records.get(operator_id, [])
        ranked = sorted(
            entries,
            key=lambda entry: (entry[1].importance_score, entry[1].created_at, entry[0]),
            reverse=True,
        )
        return [record for _, record in ranked[:k]]

    def count(self, operator_id: str) -> int:
        """Count the memories stored for an operator."""
        return len(self._records.get(operator_id, []))
