from business_dna.conversation.orchestrator import (
    FAILURE_NOTICE,
    ConversationOrchestrator,
    TurnResult,
    TurnState,
    pending_retry,
)
from business_dna.conversation.prompts import build_system_prompt

__all__ = [
    "ConversationOrchestrator",
    "TurnResult",
    "TurnState",
    "FAILURE_NOTICE",
    "pending_retry",
    "build_system_prompt",
]
