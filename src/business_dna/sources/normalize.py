"""
Normalization of raw platform rows into InteractionRecords.

Raw rows arrive with inconsistent optional fields and field names. They are
validated exactly once here; rows that cannot be validated are dropped with a
warning instead of failing the whole batch.
"""

import logging
from datetime import datetime
from typing import Any, Iterable, List, Mapping

from pydantic import ValidationError

from business_dna.models import InteractionRecord, RecordKind
from business_dna.utils.timestamps import ensure_utc

logger = logging.getLogger(__name__)


def normalize_record(kind: RecordKind, raw: Mapping[str, Any]) -> InteractionRecord:
    """
    Validate one raw row into an InteractionRecord.

    Raises:
        pydantic.ValidationError: If the row cannot be normalized
    """
    return InteractionRecord.model_validate({**raw, "kind": kind})


def normalize_records(kind: RecordKind, rows: Iterable[Mapping[str, Any]]) -> List[InteractionRecord]:
    """
    Validate a batch of raw rows, skipping invalid ones.

    Args:
        kind: Record kind for every row in the batch
        rows: Raw rows as returned by the platform sync

    Returns:
        Normalized records in input order
    """
    records: List[InteractionRecord] = []
    skipped = 0
    for raw in rows:
        try:
            records.append(normalize_record(kind, raw))
        except ValidationError as e:
            skipped += 1
            logger.warning(
                f"Skipping invalid {kind} record {raw.get('id', '?')}: {e.error_count()} errors"
            )

    if skipped:
        logger.info(f"Normalized {len(records)} {kind} records ({skipped} skipped)")

    return records


def newest_first(records: List[InteractionRecord]) -> List[InteractionRecord]:
    """Sort records newest first; records without a timestamp go last."""
    floor = ensure_utc(datetime.min)
    return sorted(records, key=lambda r: r.published_at or floor, reverse=True)
