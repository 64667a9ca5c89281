"""
Publishing-time patterns: busiest weekdays and (weekday, hour) slots.
"""

import logging
from collections import Counter
from typing import List, Sequence, Tuple

from business_dna.analysis.tunables import AnalyzerTunables
from business_dna.models import ContactTime, InteractionRecord
from business_dna.utils.timestamps import weekday_name

logger = logging.getLogger(__name__)


def analyze_timing(
    records: Sequence[InteractionRecord], tunables: AnalyzerTunables
) -> Tuple[List[str], List[ContactTime]]:
    """
    Derive peak days and best contact times from timestamped records.

    Returns:
        Tuple of (peak_days, best_contact_times); both empty when fewer than
        the minimum number of timestamped records are available
    """
    timed = [r.published_at for r in records if r.published_at is not None]
    if len(timed) < tunables.min_timed_records:
        logger.debug(f"Skipping timing patterns: {len(timed)} timed records")
        return [], []

    day_counts: Counter = Counter()
    slot_counts: Counter = Counter()
    for published_at in timed:
        day = weekday_name(published_at)
        day_counts[day] += 1
        slot_counts[(day, published_at.hour)] += 1

    peak_days = [day for day, _ in day_counts.most_common(tunables.max_peak_days)]
    best_times = [
        ContactTime(day=day, hour=hour)
        for (day, hour), _ in slot_counts.most_common(tunables.max_best_times)
    ]
    return peak_days, best_times
