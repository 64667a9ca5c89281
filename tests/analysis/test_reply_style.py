"""
Unit tests for reply-style inference and signature phrases.
"""

from business_dna.analysis import DEFAULT_TUNABLES
from business_dna.analysis.reply_style import extract_signature_phrases, infer_reply_style
from business_dna.models import ReplyStyle


def test_no_responses_gives_default_style():
    """Test the neutral default when the operator never responded."""
    assert infer_reply_style([], DEFAULT_TUNABLES) == ReplyStyle(
        tone="professional", length="medium", uses_emoji=False, formality_level=7
    )


def test_short_casual_emoji_style():
    """Test short, emoji-heavy, informal replies."""
    responses = ["Thanks! \U0001F600", "Hey thanks, awesome \U0001F600", "Cool, thanks"]

    style = infer_reply_style(responses, DEFAULT_TUNABLES)

    assert style.length == "short"
    assert style.uses_emoji is True
    assert style.formality_level == 1
    assert style.tone == "casual"


def test_long_formal_style():
    """Test long replies full of formal vocabulary."""
    body = "We sincerely appreciate your visit and are grateful for your feedback. " * 5
    responses = [f"Dear guest, {body} Kind regards." for _ in range(2)]

    style = infer_reply_style(responses, DEFAULT_TUNABLES)

    assert style.length == "long"
    assert style.uses_emoji is False
    assert style.formality_level == 10
    assert style.tone == "professional"


def test_medium_friendly_style():
    """Test a medium reply with one informal hit."""
    response = (
        "Hi there, it was a pleasure to serve you today. We hope to welcome you back very soon, "
        "and our team will keep the table by the window ready for you."
    )

    style = infer_reply_style([response], DEFAULT_TUNABLES)

    assert style.length == "medium"
    assert style.formality_level == 4
    assert style.tone == "friendly"


def test_emoji_threshold_is_strictly_above_ratio():
    """Test that emoji usage needs more than 30% of responses."""
    responses = ["Thank you ❤"] + ["Thank you"] * 3  # 25%

    assert infer_reply_style(responses, DEFAULT_TUNABLES).uses_emoji is False


def test_signature_phrases_need_three_responses():
    """Test that fewer than three responses yield no phrases."""
    responses = ["Thank you for visiting. See you soon!"] * 2

    assert extract_signature_phrases(responses, DEFAULT_TUNABLES) == []


def test_signature_phrases_ranked_by_frequency():
    """Test that repeated openings and closings are kept in frequency order."""
    responses = [
        "Thank you for visiting. The food was fresh today. See you soon!",
        "Thank you for visiting. We fixed the parking issue. See you soon!",
        "Thank you for visiting. Hope to host you again!",
        "Sorry about the delay. We are on it.",
    ]

    phrases = extract_signature_phrases(responses, DEFAULT_TUNABLES)

    assert phrases == ["Thank you for visiting", "See you soon"]


def test_single_sentence_response_counts_once():
    """Test that a one-sentence reply is not counted as both opening and closing."""
    responses = ["Thanks a lot", "Another reply. With two sentences", "Third one. Also two"]

    assert extract_signature_phrases(responses, DEFAULT_TUNABLES) == []


def test_long_sentences_are_not_phrases():
    """Test that sentences of 100+ characters are ignored."""
    long_sentence = "x" * 120
    responses = [f"{long_sentence}. Bye"] * 3

    assert extract_signature_phrases(responses, DEFAULT_TUNABLES) == ["Bye"]
