import logging
import re
from typing import Any, Dict, List, Optional

from business_dna.models import MemoryRecord, Message
from business_dna.storage.protocols import MemoryStore

logger = logging.getLogger(__name__)

CORRECTION_IMPORTANCE_BOOST = 10
PREFERENCE_IMPORTANCE = 70

# Cues that a user message states a standing preference
PREFERENCE_CUES = ("prefer", "always", "never", "أفضل")
_PREFERENCE_PATTERN = re.compile(
    "|".join(rf"\b{re.escape(cue)}\w*" for cue in PREFERENCE_CUES), re.IGNORECASE
)


class MemoryService:
    def __init__(self, store: MemoryStore):
        self.store = store

    def append(
        self,
        operator_id: str,
        kind: str,
        content: str,
        importance: int = 50,
        context: Optional[Dict[str, Any]] = None,
    ) -> MemoryRecord:
        record = MemoryRecord(
            operator_id=operator_id,
            kind=kind,
            content=content,
            importance_score=importance,
            context=context or {},
        )
        self.store.append(record)
        logger.info(
            f"Memory appended: id={record.id}, operator={operator_id}, "
            f"kind={kind}, importance={importance}"
        )
        return record

    def top_k(self, operator_id: str, k: int = 10) -> List[MemoryRecord]:
        """Highest-ranked memories: importance desc, then most recent first."""
        memories = self.store.top_k(operator_id, k)
        logger.debug(f"{len(memories)} memories loaded for operator {operator_id}")
        return memories

    def record_correction(
        self, operator_id: str, old_record: MemoryRecord, content: str
    ) -> MemoryRecord:
        """
        Correct a memory without editing it.

        The correction is a new record of the same kind that ranks above the
        old one and references it in its context.
        """
        if old_record.operator_id != operator_id:
            raise ValueError(
                f"Memory {old_record.id} does not belong to operator {operator_id}"
            )

        return self.append(
            operator_id=operator_id,
            kind=old_record.kind,
            content=content,
            importance=min(100, old_record.importance_score + CORRECTION_IMPORTANCE_BOOST),
            context={"corrects": old_record.id},
        )

    def capture_preferences(
        self, operator_id: str, message: Message, conversation_id: Optional[str] = None
    ) -> Optional[MemoryRecord]:
        """Store a user message that states a preference as a preference memory."""
        if message.role != "user" or not _PREFERENCE_PATTERN.search(message.content):
            return None

        return self.append(
            operator_id=operator_id,
            kind="preference",
            content=message.content.strip(),
            importance=PREFERENCE_IMPORTANCE,
            context={
                "conversation_id": conversation_id or message.conversation_id,
                "message_id": message.id,
            },
        )
