"""
Unit tests for the interaction corpus analyzer.
"""

from business_dna.analysis import DEFAULT_TUNABLES, AnalyzerTunables, analyze
from business_dna.analysis.topics import extract_topics, partition_by_score, sentiment_score
from business_dna.models import InteractionRecord, ReplyStyle


def test_analyze_empty_returns_zero_signals():
    """Test that an empty batch yields zero-valued signals, not an error."""
    signals = analyze([])

    assert signals.topics == []
    assert signals.strengths == []
    assert signals.weaknesses == []
    assert signals.sentiment_score == 0
    assert signals.reply_style == ReplyStyle()
    assert signals.signature_phrases == []
    assert signals.peak_days == []
    assert signals.best_contact_times == []
    assert signals.feedback_count == 0
    assert signals.post_count == 0
    assert signals.question_count == 0


def test_strengths_weaknesses_and_sentiment(scenario_feedback):
    """Test 14 positive 'service' and 4 negative 'wait' records out of 20."""
    signals = analyze(scenario_feedback)

    assert "service" in signals.strengths
    assert "wait" in signals.weaknesses
    assert signals.sentiment_score == 50
    assert signals.positive_count == 14
    assert signals.negative_count == 4
    assert signals.neutral_count == 2


def test_topics_ranked_by_mentions(scenario_feedback):
    """Test that topics across buckets are sorted by mention count."""
    signals = analyze(scenario_feedback)

    counts = [t.mention_count for t in signals.topics]
    assert counts == sorted(counts, reverse=True)
    assert signals.topics[0].topic == "service"
    assert signals.topics[0].sentiment == "positive"
    assert signals.topics[0].mention_count == 14


def test_keyword_needs_two_mentions(make_feedback):
    """Test that a keyword mentioned once is not a topic."""
    records = [make_feedback(5, "great parking"), make_feedback(5, "lovely music, music again")]

    topics = extract_topics(records, "positive", DEFAULT_TUNABLES)

    assert [t.topic for t in topics] == ["music"]


def test_keyword_matches_word_prefix_case_insensitive(make_feedback):
    """Test that 'wait' matches 'Waiting' and 'waited' but not mid-word."""
    records = [make_feedback(1, "Waiting forever"), make_feedback(1, "we waited, await nothing")]

    topics = extract_topics(records, "negative", DEFAULT_TUNABLES)

    assert topics[0].topic == "wait"
    assert topics[0].mention_count == 2


def test_topics_capped_per_bucket(make_feedback):
    """Test the per-bucket topic cap."""
    tunables = AnalyzerTunables(max_topics_per_bucket=2)
    text = "food food staff staff staff price price price price"

    topics = extract_topics([make_feedback(5, text)], "positive", tunables)

    assert [t.topic for t in topics] == ["price", "staff"]


def test_unscored_feedback_is_neutral(make_feedback):
    """Test that feedback without a score lands in the neutral bucket."""
    buckets = partition_by_score(
        [make_feedback(None, "no stars"), make_feedback(4), make_feedback(2)], DEFAULT_TUNABLES
    )

    assert len(buckets["neutral"]) == 1
    assert len(buckets["positive"]) == 1
    assert len(buckets["negative"]) == 1


def test_sentiment_score_bounds(make_feedback):
    """Test that sentiment stays within -100..100."""
    all_negative = analyze([make_feedback(1) for _ in range(5)])
    all_positive = analyze([make_feedback(5) for _ in range(5)])

    assert all_negative.sentiment_score == -100
    assert all_positive.sentiment_score == 100
    assert sentiment_score(0, 0, 0) == 0


def test_questions_are_counted_only():
    """Test that questions count but do not feed topics or sentiment."""
    questions = [
        InteractionRecord(kind="question", text="Is the service good? service? service?")
        for _ in range(3)
    ]

    signals = analyze(questions)

    assert signals.question_count == 3
    assert signals.topics == []
    assert signals.sentiment_score == 0


def test_responded_count_includes_responses_without_text(make_feedback):
    """Test that a has_reply flag counts as a response even with no text."""
    records = [
        make_feedback(5, response="Thank you!"),
        InteractionRecord(kind="feedback", score=4, responded=True),
        make_feedback(3),
    ]

    signals = analyze(records)

    assert signals.feedback_count == 3
    assert signals.responded_count == 2
