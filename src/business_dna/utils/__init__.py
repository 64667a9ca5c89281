"""
Utility functions for business-dna.
"""

from business_dna.utils.timestamps import ensure_utc, parse_timestamp, utcnow, weekday_name

__all__ = [
    "ensure_utc",
    "parse_timestamp",
    "utcnow",
    "weekday_name",
]
