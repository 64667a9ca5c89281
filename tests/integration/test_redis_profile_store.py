"""Integration tests for the Redis profile store."""

import pytest

from business_dna.models import BehavioralProfile
from business_dna.storage import RedisProfileStore


@pytest.fixture
def redis_store(skip_if_no_redis):
    # Use separate DB for testing
    store = RedisProfileStore(url="redis://localhost:6379/15", key_prefix="test_profile:")
    yield store
    store.delete_operator("test_op")


@pytest.mark.integration
def test_redis_upsert_and_get(redis_store):
    profile = BehavioralProfile(operator_id="test_op", name="Cafe Nour", total_records=20)

    redis_store.upsert(profile)

    assert redis_store.get("test_op") == profile
    assert redis_store.get("test_op", "loc2") is None


@pytest.mark.integration
def test_redis_delete_operator(redis_store):
    redis_store.upsert(BehavioralProfile(operator_id="test_op"))
    redis_store.upsert(BehavioralProfile(operator_id="test_op", scope="loc2"))

    assert redis_store.delete_operator("test_op") == 2
    assert redis_store.get("test_op") is None


@pytest.mark.integration
def test_redis_discards_unreadable_profile(redis_store):
    redis_store.client.set("test_profile:test_op:", "not json")

    assert redis_store.get("test_op") is None
