"""
Aggregate profile metrics: rating, response rate, growth, completeness, confidence.
"""

import logging
from datetime import datetime, timedelta
from typing import Sequence

from business_dna.models import GrowthTrend, InteractionRecord

logger = logging.getLogger(__name__)

# Data completeness weights (sum to 100)
COMPLETENESS_IDENTITY = 20
COMPLETENESS_FEEDBACK = 30
COMPLETENESS_POSTS = 20
COMPLETENESS_RESPONSE_RATE = 15
COMPLETENESS_QUESTIONS = 15

MIN_FEEDBACK_FOR_COMPLETENESS = 10
MIN_POSTS_FOR_COMPLETENESS = 5
MIN_RESPONSE_RATE_FOR_COMPLETENESS = 50

# Confidence bonus for a large corpus
CONFIDENCE_VOLUME_THRESHOLD = 50
CONFIDENCE_VOLUME_BONUS = 20

# Growth trend windows
GROWTH_WINDOW_DAYS = 30
GROWING_RATIO = 1.2
DECLINING_RATIO = 0.8


def average_rating(feedback: Sequence[InteractionRecord]) -> float:
    """Mean score of scored feedback records, rounded to 2 decimals (0 with none)."""
    scores = [r.score for r in feedback if r.score is not None]
    if not scores:
        return 0.0
    return round(sum(scores) / len(scores), 2)


def response_rate(total: int, responded: int) -> int:
    """Percentage of feedback records the operator responded to."""
    if total <= 0:
        return 0
    return min(100, round(responded / total * 100))


def growth_trend(feedback: Sequence[InteractionRecord], now: datetime) -> GrowthTrend:
    """
    Compare feedback volume of the last 30 days with the 30 days before.

    More than 20% up is growing, more than 20% down is declining.
    """
    window = timedelta(days=GROWTH_WINDOW_DAYS)
    recent_start = now - window
    older_start = now - 2 * window

    recent = 0
    older = 0
    for record in feedback:
        if record.published_at is None:
            continue
        if record.published_at > recent_start:
            recent += 1
        elif record.published_at > older_start:
            older += 1

    if recent > older * GROWING_RATIO:
        trend = "growing"
    elif recent < older * DECLINING_RATIO:
        trend = "declining"
    else:
        trend = "stable"

    logger.debug(f"Growth trend: recent={recent}, older={older} -> {trend}")
    return trend


def data_completeness(
    has_identity: bool,
    feedback_count: int,
    post_count: int,
    response_rate_percent: int,
    question_count: int,
) -> int:
    """Weighted coverage of the inputs a profile was built from, 0..100."""
    completeness = 0
    if has_identity:
        completeness += COMPLETENESS_IDENTITY
    if feedback_count >= MIN_FEEDBACK_FOR_COMPLETENESS:
        completeness += COMPLETENESS_FEEDBACK
    if post_count >= MIN_POSTS_FOR_COMPLETENESS:
        completeness += COMPLETENESS_POSTS
    if response_rate_percent >= MIN_RESPONSE_RATE_FOR_COMPLETENESS:
        completeness += COMPLETENESS_RESPONSE_RATE
    if question_count > 0:
        completeness += COMPLETENESS_QUESTIONS
    return min(100, completeness)


def confidence_score(completeness: int, total_records: int) -> int:
    """Completeness plus a bonus for a large feedback corpus, capped at 100."""
    bonus = CONFIDENCE_VOLUME_BONUS if total_records >= CONFIDENCE_VOLUME_THRESHOLD else 0
    return max(0, min(100, completeness + bonus))
