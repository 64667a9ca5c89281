"""
Interaction record sources: the boundary to the upstream platform sync.
"""

from business_dna.sources.memory import InMemoryRecordSource
from business_dna.sources.normalize import normalize_record, normalize_records
from business_dna.sources.protocols import RecordSource

__all__ = [
    "RecordSource",
    "InMemoryRecordSource",
    "normalize_record",
    "normalize_records",
]
