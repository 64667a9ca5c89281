"""Shared fixtures for business-dna tests."""

from datetime import datetime, timedelta, timezone

import pytest

from business_dna.config import Settings
from business_dna.models import InteractionRecord, OperatorIdentity
from business_dna.sources import InMemoryRecordSource

T0 = datetime(2024, 6, 3, 9, 0, tzinfo=timezone.utc)  # a Monday


class FakeClock:
    """Controllable clock for staleness tests."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    """Settings isolated from the process environment and any .env file."""
    return Settings(
        _env_file=None,
        PROFILE_STALENESS_SECONDS=3600,
        FETCH_TIMEOUT_SECONDS=1.0,
        PROVIDER_TIMEOUT_SECONDS=1.0,
        HISTORY_WINDOW=50,
        MEMORY_TOP_K=10,
        DEFAULT_PROVIDER=None,
        OPENAI_API_KEY=None,
        ANTHROPIC_API_KEY=None,
        GOOGLE_AI_API_KEY=None,
        GROQ_API_KEY=None,
        DEEPSEEK_API_KEY=None,
        OPENROUTER_API_KEY=None,
    )


def feedback(score, text="", response=None, published_at=None) -> InteractionRecord:
    return InteractionRecord(
        kind="feedback", score=score, text=text, response=response, published_at=published_at
    )


def post(published_at) -> InteractionRecord:
    return InteractionRecord(kind="post", text="New menu items this week", published_at=published_at)


@pytest.fixture
def make_feedback():
    return feedback


@pytest.fixture
def make_post():
    return post


@pytest.fixture
def scenario_feedback():
    """20 records: 14 positive about service, 4 negative about waiting, 2 neutral."""
    records = [feedback(5, "Excellent service, will come back") for _ in range(14)]
    records += [feedback(1, "Long wait and nobody came") for _ in range(4)]
    records += [feedback(3, "It was okay") for _ in range(2)]
    return records


@pytest.fixture
def record_source(scenario_feedback):
    """Source with one identified operator holding the scenario feedback."""
    source = InMemoryRecordSource()
    source.set_identity(
        OperatorIdentity(operator_id="op1", name="Cafe Nour", category="Cafe", primary_category="Restaurant")
    )
    source.add_records("op1", scenario_feedback)
    return source
