"""
Unit tests for record normalization at the source boundary.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from business_dna.models import OperatorIdentity
from business_dna.sources import InMemoryRecordSource, normalize_record, normalize_records
from business_dna.sources.normalize import newest_first


def test_platform_aliases_are_accepted():
    """Test that raw rows using platform field names normalize."""
    record = normalize_record(
        "feedback",
        {
            "review_id": 42,
            "star_rating": "FOUR",
            "review_text": "Lovely staff",
            "reply_text": "Thank you!",
            "review_date": "2024-03-01T10:00:00Z",
        },
    )

    assert record.id == "42"
    assert record.kind == "feedback"
    assert record.score == 4
    assert record.text == "Lovely staff"
    assert record.response == "Thank you!"
    assert record.responded is True
    assert record.published_at == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)


def test_missing_optional_fields():
    """Test that absent or null fields get neutral defaults."""
    record = normalize_record("post", {"summary": None, "response_text": "   "})

    assert record.text == ""
    assert record.response is None
    assert record.responded is False
    assert record.score is None
    assert record.published_at is None
    assert record.id


def test_has_reply_without_text():
    """Test the has_reply flag without response text."""
    record = normalize_record("feedback", {"rating": 5, "has_reply": True})

    assert record.responded is True
    assert record.response is None


def test_out_of_range_score_is_rejected():
    """Test that a score outside 1..5 fails validation."""
    with pytest.raises(ValidationError):
        normalize_record("feedback", {"rating": 9})


def test_normalize_records_skips_invalid_rows():
    """Test that one bad row does not fail the batch."""
    rows = [{"rating": 5, "comment": "ok"}, {"rating": 0}, {"rating": 1, "comment": "bad"}]

    records = normalize_records("feedback", rows)

    assert [r.text for r in records] == ["ok", "bad"]


def test_epoch_and_naive_timestamps():
    """Test epoch seconds and naive datetimes are read as UTC."""
    epoch = normalize_record("post", {"create_time": 1717405200})
    naive = normalize_record("post", {"created_at": datetime(2024, 6, 3, 9, 0)})

    assert epoch.published_at == datetime(2024, 6, 3, 9, 0, tzinfo=timezone.utc)
    assert naive.published_at == datetime(2024, 6, 3, 9, 0, tzinfo=timezone.utc)


def test_newest_first_puts_untimed_last():
    """Test newest-first ordering with missing timestamps last."""
    old = normalize_record("post", {"id": "old", "created_at": "2024-01-01T00:00:00"})
    new = normalize_record("post", {"id": "new", "created_at": "2024-05-01T00:00:00"})
    untimed = normalize_record("post", {"id": "untimed"})

    assert [r.id for r in newest_first([old, untimed, new])] == ["new", "old", "untimed"]


@pytest.mark.asyncio
async def test_in_memory_source_scopes_and_limits():
    """Test scope filtering, aggregation and limits in the in-memory source."""
    source = InMemoryRecordSource()
    source.set_identity(OperatorIdentity(operator_id="op1", business_name="Main"))
    rows = [{"rating": 5, "created_at": f"2024-01-0{i}"} for i in range(1, 4)]
    source.add_rows("feedback", "op1", rows, scope="loc1")
    source.add_rows("feedback", "op1", [{"rating": 4}], scope="loc2")

    assert len(await source.list_feedback("op1", "loc1")) == 3
    assert len(await source.list_feedback("op1")) == 4
    assert len(await source.list_feedback("op1", "loc1", limit=2)) == 2
    assert await source.list_feedback("op2") == []

    # Scoped lookups fall back to the operator-wide identity
    identity = await source.get_identity("op1", "loc1")
    assert identity.name == "Main"
