"""
business-dna: behavioral profiling of a business's customer interactions and a
multi-provider conversational assistant built on top of it.

Core components:
- analysis: Rule-based corpus analyzer (topics, sentiment, reply style, timing)
- profile: Profile ("DNA") cache with staleness policy, single-flight builds and scheduled refresh
- memory_service: Append-only, importance-ranked operator memories
- providers: Provider gateway over chat-completion backends
- conversation: Turn orchestration, context assembly and retry
- actions: Suggested-action extraction from assistant output
- storage: Protocols and backends (in-memory, SQLAlchemy, Redis)
"""

__version__ = "0.1.0"

from business_dna.actions import ActionSuggestionExtractor
from business_dna.analysis import analyze
from business_dna.briefing import DailyBriefing, build_daily_briefing
from business_dna.conversation import ConversationOrchestrator, TurnResult, TurnState
from business_dna.errors import (
    BusinessDNAError,
    CacheBuildFailure,
    ConfigurationError,
    ConversationNotFoundError,
    PartialDataError,
    ProviderError,
)
from business_dna.memory_service import MemoryService
from business_dna.models import (
    BehavioralProfile,
    Conversation,
    InteractionRecord,
    MemoryRecord,
    Message,
    OperatorIdentity,
    ProviderConfig,
    SuggestedAction,
)
from business_dna.profile import ProfileRefreshScheduler, ProfileService
from business_dna.providers import ProviderGateway, ProviderSelector

__all__ = [
    "__version__",
    # Models
    "InteractionRecord",
    "OperatorIdentity",
    "BehavioralProfile",
    "MemoryRecord",
    "Conversation",
    "Message",
    "SuggestedAction",
    "ProviderConfig",
    # Errors
    "BusinessDNAError",
    "ConfigurationError",
    "ProviderError",
    "PartialDataError",
    "CacheBuildFailure",
    "ConversationNotFoundError",
    # Services
    "analyze",
    "ProfileService",
    "ProfileRefreshScheduler",
    "MemoryService",
    "ProviderGateway",
    "ProviderSelector",
    "ConversationOrchestrator",
    "TurnResult",
    "TurnState",
    "ActionSuggestionExtractor",
    "DailyBriefing",
    "build_daily_briefing",
]
