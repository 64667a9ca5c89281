"""
Keyword topic extraction and sentiment scoring over feedback records.
"""

import logging
import re
from typing import Dict, List, Sequence

from business_dna.analysis.tunables import AnalyzerTunables
from business_dna.models import InteractionRecord, Sentiment, TopicSignal

logger = logging.getLogger(__name__)


def partition_by_score(
    records: Sequence[InteractionRecord], tunables: AnalyzerTunables
) -> Dict[Sentiment, List[InteractionRecord]]:
    """
    Split records into positive / negative / neutral buckets by score.

    Records without a score land in the neutral bucket.
    """
    buckets: Dict[Sentiment, List[InteractionRecord]] = {
        "positive": [],
        "negative": [],
        "neutral": [],
    }
    for record in records:
        if record.score is not None and record.score >= tunables.positive_min_score:
            buckets["positive"].append(record)
        elif record.score is not None and record.score <= tunables.negative_max_score:
            buckets["negative"].append(record)
        else:
            buckets["neutral"].append(record)
    return buckets


def extract_topics(
    records: Sequence[InteractionRecord], sentiment: Sentiment, tunables: AnalyzerTunables
) -> List[TopicSignal]:
    """
    Count domain keyword mentions across the concatenated text of a bucket.

    A keyword matches any word starting with it ("wait" matches "waiting"),
    case-insensitively. Keywords below the mention threshold are dropped.
    """
    if not records:
        return []

    text = " ".join(record.text for record in records).lower()

    counts: Dict[str, int] = {}
    for keyword in tunables.domain_keywords:
        matches = re.findall(rf"\b{re.escape(keyword)}\w*\b", text)
        if len(matches) >= tunables.min_topic_mentions:
            counts[keyword] = len(matches)

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    topics = [
        TopicSignal(topic=topic, mention_count=count, sentiment=sentiment)
        for topic, count in ranked[: tunables.max_topics_per_bucket]
    ]

    logger.debug(f"{sentiment} bucket: {len(records)} records, {len(topics)} topics")
    return topics


def sentiment_score(total: int, positive: int, negative: int) -> int:
    """round((positive fraction - negative fraction) * 100), 0 for no records."""
    if total <= 0:
        return 0
    score = round((positive / total - negative / total) * 100)
    return max(-100, min(100, score))
