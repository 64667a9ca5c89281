"""
Interaction corpus analyzer.

Pure, deterministic analysis of a batch of interaction records into the
behavioral signals a profile is built from. No I/O. Feedback records drive
topics, sentiment and reply style; timestamped posts drive timing patterns;
questions are only counted.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from business_dna.analysis.reply_style import extract_signature_phrases, infer_reply_style
from business_dna.analysis.timing import analyze_timing
from business_dna.analysis.topics import extract_topics, partition_by_score, sentiment_score
from business_dna.analysis.tunables import DEFAULT_TUNABLES, AnalyzerTunables
from business_dna.models import ContactTime, InteractionRecord, ReplyStyle, TopicSignal

logger = logging.getLogger(__name__)


@dataclass
class CorpusSignals:
    """
    Behavioral signals derived from an interaction corpus.

    Attributes:
        topics: Ranked topics across sentiment buckets (mentions descending)
        strengths: Top keywords from positive feedback
        weaknesses: Top keywords from negative feedback
        sentiment_score: -100..100
        reply_style: Inferred response style
        signature_phrases: Recurring opening/closing sentences
        peak_days: Busiest weekdays by publishing volume
        best_contact_times: Busiest (weekday, hour) slots
        feedback_count / responded_count / post_count / question_count: Volumes
        positive_count / negative_count / neutral_count: Feedback bucket sizes
    """

    topics: List[TopicSignal] = field(default_factory=list)
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    sentiment_score: int = 0
    reply_style: ReplyStyle = field(default_factory=ReplyStyle)
    signature_phrases: List[str] = field(default_factory=list)
    peak_days: List[str] = field(default_factory=list)
    best_contact_times: List[ContactTime] = field(default_factory=list)
    feedback_count: int = 0
    responded_count: int = 0
    post_count: int = 0
    question_count: int = 0
    positive_count: int = 0
    negative_count: int = 0
    neutral_count: int = 0


def analyze(
    records: Sequence[InteractionRecord], tunables: AnalyzerTunables = DEFAULT_TUNABLES
) -> CorpusSignals:
    """
    Analyze a batch of interaction records.

    Args:
        records: Normalized records of any kind, in any order
        tunables: Heuristic lexicons and thresholds

    Returns:
        CorpusSignals (zero-valued for an empty batch)
    """
    feedback = [r for r in records if r.kind == "feedback"]
    posts = [r for r in records if r.kind == "post"]
    questions = [r for r in records if r.kind == "question"]

    buckets = partition_by_score(feedback, tunables)
    positive_topics = extract_topics(buckets["positive"], "positive", tunables)
    negative_topics = extract_topics(buckets["negative"], "negative", tunables)
    neutral_topics = extract_topics(buckets["neutral"], "neutral", tunables)

    # sorted() is stable: equal counts keep positive, negative, neutral order
    topics = sorted(
        positive_topics + negative_topics + neutral_topics,
        key=lambda t: t.mention_count,
        reverse=True,
    )

    responses = [r.response for r in feedback if r.response]
    responded_count = sum(1 for r in feedback if r.responded)

    peak_days, best_times = analyze_timing(posts, tunables)

    signals = CorpusSignals(
        topics=topics,
        strengths=[t.topic for t in positive_topics[: tunables.max_strengths]],
        weaknesses=[t.topic for t in negative_topics[: tunables.max_weaknesses]],
        sentiment_score=sentiment_score(
            len(feedback), len(buckets["positive"]), len(buckets["negative"])
        ),
        reply_style=infer_reply_style(responses, tunables),
        signature_phrases=extract_signature_phrases(responses, tunables),
        peak_days=peak_days,
        best_contact_times=best_times,
        feedback_count=len(feedback),
        responded_count=responded_count,
        post_count=len(posts),
        question_count=len(questions),
        positive_count=len(buckets["positive"]),
        negative_count=len(buckets["negative"]),
        neutral_count=len(buckets["neutral"]),
    )

    logger.debug(
        f"Analyzed {len(records)} records: feedback={len(feedback)}, posts={len(posts)}, "
        f"questions={len(questions)}, sentiment={signals.sentiment_score}"
    )
    return signals
