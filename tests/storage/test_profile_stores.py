"""
Unit tests for profile storage backends.

The same behavior is checked against the in-memory and the SQLAlchemy store.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine

from business_dna.models import BehavioralProfile, ReplyStyle, TopicSignal
from business_dna.storage import InMemoryProfileStore, SQLAlchemyProfileStore


def sqlalchemy_store():
    engine = create_engine("sqlite:///:memory:")
    store = SQLAlchemyProfileStore(engine)
    store.create_tables()
    return store


@pytest.fixture(params=["memory", "sqlalchemy"])
def profile_store(request):
    """Create a fresh profile store for each backend."""
    if request.param == "memory":
        return InMemoryProfileStore()
    return sqlalchemy_store()


@pytest.fixture
def sample_profile():
    return BehavioralProfile(
        operator_id="op1",
        name="Cafe Nour",
        topics=[TopicSignal(topic="service", mention_count=14, sentiment="positive")],
        strengths=["service"],
        reply_style=ReplyStyle(tone="friendly", length="short", uses_emoji=True, formality_level=5),
        average_rating=4.0,
        total_records=20,
        last_computed_at=datetime(2024, 6, 3, 9, 0, tzinfo=timezone.utc),
    )


def test_get_missing_profile(profile_store):
    assert profile_store.get("nobody") is None


def test_upsert_and_get(profile_store, sample_profile):
    """Test that a stored profile comes back unchanged."""
    profile_store.upsert(sample_profile)

    stored = profile_store.get("op1")

    assert stored == sample_profile
    assert stored.reply_style.uses_emoji is True
    assert stored.topics[0].topic == "service"


def test_upsert_replaces_previous_profile(profile_store, sample_profile):
    """Test that there is exactly one profile per operator and scope."""
    profile_store.upsert(sample_profile)
    profile_store.upsert(sample_profile.model_copy(update={"total_records": 25}))

    assert profile_store.get("op1").total_records == 25


def test_scopes_are_separate(profile_store, sample_profile):
    profile_store.upsert(sample_profile)
    profile_store.upsert(sample_profile.model_copy(update={"scope": "loc2", "name": "Cafe Nour 2"}))

    assert profile_store.get("op1").name == "Cafe Nour"
    assert profile_store.get("op1", "loc2").name == "Cafe Nour 2"
    assert profile_store.get("op1", "loc3") is None


def test_empty_scope_is_unscoped(profile_store, sample_profile):
    profile_store.upsert(sample_profile.model_copy(update={"scope": "_", "name": "Underscore"}))
    profile_store.upsert(BehavioralProfile(**{**sample_profile.model_dump(), "scope": "", "name": "Blank"}))

    assert profile_store.get("op1").name == "Blank"
    assert profile_store.get("op1", "").scope is None
    assert profile_store.get("op1", "_").name == "Underscore"


def test_profile_normalizes_empty_scope():
    assert BehavioralProfile(operator_id="op1", scope="").scope is None


def test_delete_operator(profile_store, sample_profile):
    """Test full data removal across scopes."""
    profile_store.upsert(sample_profile)
    profile_store.upsert(sample_profile.model_copy(update={"scope": "loc2"}))
    profile_store.upsert(sample_profile.model_copy(update={"operator_id": "op2"}))

    assert profile_store.delete_operator("op1") == 2
    assert profile_store.get("op1") is None
    assert profile_store.get("op1", "loc2") is None
    assert profile_store.get("op2") is not None


def test_in_memory_store_returns_copies(sample_profile):
    """Test that callers cannot mutate the cached profile."""
    store = InMemoryProfileStore()
    store.upsert(sample_profile)

    fetched = store.get("op1")
    fetched.strengths.append("price")

    assert store.get("op1").strengths == ["service"]
