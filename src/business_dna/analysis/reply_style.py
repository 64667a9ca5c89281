"""
Reply-style inference and signature phrase extraction.

Learns how the operator usually answers customers from the responses they
have already written: length, emoji habit, formality and recurring phrases.
"""

import logging
import re
from collections import Counter
from typing import List, Sequence

from business_dna.analysis.tunables import AnalyzerTunables
from business_dna.models import ReplyStyle

logger = logging.getLogger(__name__)

EMOJI_PATTERN = re.compile(
    "["
    "\U0001F600-\U0001F64F"  # emoticons
    "\U0001F300-\U0001F5FF"  # symbols & pictographs
    "\U0001F680-\U0001F6FF"  # transport & map
    "\U0001F1E0-\U0001F1FF"  # flags
    "\U0001F900-\U0001F9FF"  # supplemental symbols
    "\u2600-\u27BF"  # misc symbols, dingbats
    "]"
)

SENTENCE_SPLIT = re.compile(r"[.!?]")


def _lexicon_hits(text: str, lexicon: Sequence[str]) -> int:
    return sum(1 for word in lexicon if re.search(rf"\b{re.escape(word)}\b", text))


def infer_reply_style(responses: Sequence[str], tunables: AnalyzerTunables) -> ReplyStyle:
    """
    Classify the operator's reply style from their response texts.

    With no responses the neutral default style is returned.
    """
    if not responses:
        return ReplyStyle()

    avg_length = sum(len(r) for r in responses) / len(responses)
    if avg_length < tunables.short_reply_max_chars:
        length = "short"
    elif avg_length > tunables.long_reply_min_chars:
        length = "long"
    else:
        length = "medium"

    with_emoji = sum(1 for r in responses if EMOJI_PATTERN.search(r))
    uses_emoji = with_emoji > len(responses) * tunables.emoji_usage_ratio

    formal = 0
    informal = 0
    for response in responses:
        lowered = response.lower()
        formal += _lexicon_hits(lowered, tunables.formal_lexicon)
        informal += _lexicon_hits(lowered, tunables.informal_lexicon)

    formality = max(1, min(10, tunables.formality_seed + formal - informal))

    if formality >= tunables.professional_min_formality:
        tone = "professional"
    elif formality >= tunables.friendly_min_formality:
        tone = "friendly"
    else:
        tone = "casual"

    logger.debug(
        f"Reply style: avg_length={avg_length:.0f}, emoji={with_emoji}/{len(responses)}, "
        f"formal={formal}, informal={informal} -> {tone}/{length}/{formality}"
    )

    return ReplyStyle(tone=tone, length=length, uses_emoji=uses_emoji, formality_level=formality)


def extract_signature_phrases(responses: Sequence[str], tunables: AnalyzerTunables) -> List[str]:
    """
    Find opening and closing sentences the operator reuses across responses.

    Each response contributes its first and last sentence once. Returns an
    empty list when there are too few responses to tell a habit from chance.
    """
    if len(responses) < tunables.min_responses_for_phrases:
        return []

    counts: Counter = Counter()
    for response in responses:
        sentences = [s.strip() for s in SENTENCE_SPLIT.split(response) if s.strip()]
        if not sentences:
            continue
        # A one-sentence response counts once
        for phrase in dict.fromkeys((sentences[0], sentences[-1])):
            if len(phrase) < tunables.max_phrase_chars:
                counts[phrase] += 1

    # most_common keeps first-seen order among equal counts
    return [
        phrase
        for phrase, count in counts.most_common()
        if count >= tunables.min_phrase_occurrences
    ][: tunables.max_signature_phrases]
