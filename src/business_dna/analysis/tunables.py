"""
Heuristic tunables for the interaction corpus analyzer.

The analyzer is rule-based, not a language model: these lexicons and
thresholds are the whole of its "understanding". They are plain data so a
deployment can adjust them without touching the analysis code.
"""

from typing import List

from pydantic import BaseModel, Field


class AnalyzerTunables(BaseModel):
    """Keyword lexicons, score thresholds and caps used by the analyzer."""

    # Score partitioning (1-5 scale)
    positive_min_score: float = 4
    negative_max_score: float = 2

    # Topic extraction
    domain_keywords: List[str] = Field(
        default_factory=lambda: [
            "service",
            "food",
            "staff",
            "price",
            "quality",
            "atmosphere",
            "location",
            "parking",
            "wait",
            "clean",
            "friendly",
            "fast",
            "slow",
            "expensive",
            "cheap",
            "delicious",
            "amazing",
            "terrible",
            "recommend",
            "return",
            "music",
            "drinks",
            "menu",
            "portion",
        ]
    )
    min_topic_mentions: int = 2
    max_topics_per_bucket: int = 10
    max_strengths: int = 5
    max_weaknesses: int = 5

    # Reply style
    short_reply_max_chars: int = 100
    long_reply_min_chars: int = 300
    emoji_usage_ratio: float = 0.3
    formality_seed: int = 5
    professional_min_formality: int = 7
    friendly_min_formality: int = 4
    formal_lexicon: List[str] = Field(
        default_factory=lambda: ["dear", "sincerely", "regards", "appreciate", "grateful"]
    )
    informal_lexicon: List[str] = Field(
        default_factory=lambda: ["hey", "hi", "thanks", "awesome", "cool", "great"]
    )

    # Signature phrases
    min_responses_for_phrases: int = 3
    max_phrase_chars: int = 100
    min_phrase_occurrences: int = 2
    max_signature_phrases: int = 5

    # Timing patterns
    min_timed_records: int = 5
    max_peak_days: int = 3
    max_best_times: int = 5


DEFAULT_TUNABLES = AnalyzerTunables()
