"""
Business Assistant Example

Builds a behavioral profile from raw platform rows, then runs a couple of
assistant turns against a local Ollama model. Set OPENAI_API_KEY (or any
other provider key) and pass provider="openai" to use a hosted model instead.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import create_engine

from business_dna import (
    ConversationOrchestrator,
    MemoryService,
    OperatorIdentity,
    ProfileService,
    ProviderGateway,
    ProviderSelector,
)
from business_dna.briefing import build_daily_briefing
from business_dna.config import get_settings
from business_dna.profile import generate_profile_summary
from business_dna.sources import InMemoryRecordSource
from business_dna.storage import (
    InMemoryProfileStore,
    SQLAlchemyConversationStore,
    SQLAlchemyMemoryStore,
)

logging.basicConfig(level=logging.INFO)

NOW = datetime.now(timezone.utc)

REVIEWS = [
    {"review_id": "r1", "star_rating": "FIVE", "comment": "Excellent service and friendly staff!",
     "reply_text": "Thank you so much! See you soon 😊", "create_time": (NOW - timedelta(days=2)).isoformat()},
    {"review_id": "r2", "rating": 4, "review_text": "Great coffee, a bit pricey",
     "has_reply": True, "review_date": "3 days ago"},
    {"review_id": "r3", "rating": 1, "comment": "Long wait, nobody came to our table",
     "create_time": (NOW - timedelta(days=5)).isoformat()},
    {"review_id": "r4", "rating": 5, "comment": "Delicious food, clean place",
     "reply_text": "Thank you for visiting! We appreciate it.", "create_time": NOW - timedelta(days=9)},
]

POSTS = [
    {"post_id": "p1", "summary": "New breakfast menu", "create_time": (NOW - timedelta(days=7)).isoformat()},
    {"post_id": "p2", "summary": "Live music on Friday", "create_time": (NOW - timedelta(days=14)).isoformat()},
]

QUESTIONS = [{"question_id": "q1", "question_text": "Do you have parking?"}]


async def main():
    print("=== Business Assistant Example ===\n")

    settings = get_settings()
    engine = create_engine("sqlite:///assistant_demo.db")

    # Record source with one operator
    source = InMemoryRecordSource()
    source.set_identity(
        OperatorIdentity(operator_id="cafe-nour", location_name="Cafe Nour", business_category="Cafe")
    )
    source.add_rows("feedback", "cafe-nour", REVIEWS)
    source.add_rows("post", "cafe-nour", POSTS)
    source.add_rows("question", "cafe-nour", QUESTIONS)

    profiles = ProfileService(InMemoryProfileStore(), source, settings=settings)
    memory_store = SQLAlchemyMemoryStore(engine)
    memory_store.create_tables()
    conversation_store = SQLAlchemyConversationStore(engine)
    conversation_store.create_tables()

    gateway = ProviderGateway(settings=settings)
    orchestrator = ConversationOrchestrator(
        profiles=profiles,
        memories=MemoryService(memory_store),
        conversations=conversation_store,
        gateway=gateway,
        selector=ProviderSelector(settings),
        settings=settings,
    )

    try:
        profile = await profiles.get_or_build("cafe-nour")
        print(f"Profile: {generate_profile_summary(profile)}")
        print(f"Confidence: {profile.confidence_score}, completeness: {profile.data_completeness}\n")

        briefing = build_daily_briefing(
            profile,
            await source.list_feedback("cafe-nour"),
            await source.list_questions("cafe-nour"),
            datetime.now(),
        )
        print(f"{briefing.greeting} {briefing.summary}\n")

        result = await orchestrator.send_with_fallback(
            "cafe-nour", "I always prefer short replies. How should I answer the 1-star review?",
            provider="ollama",
        )
        if result.succeeded:
            print(f"Assistant ({result.model_used}): {result.content}")
            print(f"Suggested actions: {[a.type for a in result.suggested_actions]}")
        else:
            print(f"Turn failed: {result.failure_notice} ({result.error})")
            # The user message is stored; retry it once the provider is back
            result = await orchestrator.retry(
                "cafe-nour", result.conversation_id, result.user_message_id, provider="ollama"
            )
            print(f"Retry succeeded: {result.succeeded}")
    finally:
        await gateway.aclose()


if __name__ == "__main__":
    asyncio.run(main())
