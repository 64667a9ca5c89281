"""
In-memory record source.

Holds raw platform rows per operator and serves normalized batches. Useful
for tests, demos and for wiring pre-fetched exports into a profile build.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from business_dna.models import InteractionRecord, OperatorIdentity, RecordKind
from business_dna.sources.normalize import newest_first, normalize_records

logger = logging.getLogger(__name__)

Key = Tuple[str, Optional[str]]


class InMemoryRecordSource:
    """
    In-memory implementation of the RecordSource protocol.

    Rows are normalized when they are added. A scope-less query returns the
    operator's rows across all scopes.
    """

    def __init__(self):
        self._identities: Dict[Key, OperatorIdentity] = {}
        self._records: Dict[RecordKind, Dict[Key, List[InteractionRecord]]] = {
            "feedback": {},
            "post": {},
            "question": {},
        }
        self.calls: List[Tuple[str, str, Optional[str]]] = []

        logger.info("InMemoryRecordSource initialized")

    def set_identity(self, identity: OperatorIdentity) -> None:
        self._identities[(identity.operator_id, identity.scope)] = identity

    def add_rows(
        self,
        kind: RecordKind,
        operator_id: str,
        rows: List[Mapping[str, Any]],
        scope: Optional[str] = None,
    ) -> int:
        """Normalize and store raw rows. Returns the number of rows kept."""
        records = normalize_records(kind, rows)
        self._records[kind].setdefault((operator_id, scope), []).extend(records)
        return len(records)

    def add_records(
        self, operator_id: str, records: List[InteractionRecord], scope: Optional[str] = None
    ) -> None:
        for record in records:
            self._records[record.kind].setdefault((operator_id, scope), []).append(record)

    def _list(
        self, kind: RecordKind, operator_id: str, scope: Optional[str], limit: int
    ) -> List[InteractionRecord]:
        self.calls.append((kind, operator_id, scope))
        if scope is None:
            records = [
                record
                for (owner, _), batch in self._records[kind].items()
                if owner == operator_id
                for record in batch
            ]
        else:
            records = list(self._records[kind].get((operator_id, scope), []))
        return newest_first(records)[:limit]

    async def get_identity(
        self, operator_id: str, scope: Optional[str] = None
    ) -> Optional[OperatorIdentity]:
        self.calls.append(("identity", operator_id, scope))
        identity = self._identities.get((operator_id, scope))
        if identity is None and scope is not None:
            identity = self._identities.get((operator_id, None))
        return identity

    async def list_feedback(
        self, operator_id: str, scope: Optional[str] = None, limit: int = 500
    ) -> List[InteractionRecord]:
        return self._list("feedback", operator_id, scope, limit)

    async def list_posts(
        self, operator_id: str, scope: Optional[str] = None, limit: int = 100
    ) -> List[InteractionRecord]:
        return self._list("post", operator_id, scope, limit)

    async def list_questions(
        self, operator_id: str, scope: Optional[str] = None, limit: int = 100
    ) -> List[InteractionRecord]:
        return self._list("question", operator_id, scope, limit)
