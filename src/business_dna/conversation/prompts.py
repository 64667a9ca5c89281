"""
System prompt rendering for the conversational assistant.
"""

from typing import List, Optional

from business_dna.actions import ACTION_RULES
from business_dna.models import BehavioralProfile, MemoryRecord
from business_dna.profile.summary import generate_profile_summary

ASSISTANT_INTRO = """You are a business assistant for the operator of a local business.
You help them understand their customers, answer questions about their performance,
draft replies to customer feedback and plan their posts."""

PROFILE_SECTION = """## BUSINESS CONTEXT

{summary}

**Business Name:** {name}
**Type:** {primary_category} | {category}
**Brand Voice:** {brand_voice}

**Performance:**
- Average Rating: {average_rating}/5 from {total_records} reviews
- Response Rate: {response_rate}%
- Growth Trend: {growth_trend}
- Sentiment Score: {sentiment_score}/100

**Strengths (what customers love):**
{strengths}

**Areas to Improve:**
{weaknesses}

**Common Customer Topics:**
{topics}

**Best Times to Post:**
{best_times}

**Communication Style (how the owner usually responds):**
- Tone: {tone}
- Length: {length}
- Uses Emojis: {emoji}

**Signature Phrases (owner often uses):**
{phrases}
"""

NO_PROFILE_SECTION = """## BUSINESS CONTEXT

No business profile is available yet. Do not guess figures about this business."""

MEMORY_SECTION = """## MEMORIES (things you remember about this operator)

{memories}"""

RULES_SECTION = """## RULES
1. Respond in the same language the user writes in.
2. Cite concrete figures from the business context when they are available (ratings, counts, rates).
3. Never fabricate data you do not have. If something is unknown, say so and state your uncertainty.
4. When drafting replies, match the owner's communication style.
5. Suggest concrete next steps when they would help.

## ACTION TYPES you can suggest:
{actions}"""


def _bullets(items: List[str], empty: str) -> str:
    return "\n".join(f"- {item}" for item in items) if items else f"- {empty}"


def render_profile(profile: BehavioralProfile) -> str:
    return PROFILE_SECTION.format(
        summary=generate_profile_summary(profile),
        name=profile.name,
        primary_category=profile.primary_category,
        category=profile.category or "-",
        brand_voice=profile.brand_voice,
        average_rating=profile.average_rating,
        total_records=profile.total_records,
        response_rate=profile.response_rate,
        growth_trend=profile.growth_trend,
        sentiment_score=profile.sentiment_score,
        strengths=_bullets(profile.strengths, "Not enough data yet"),
        weaknesses=_bullets(profile.weaknesses, "None identified"),
        topics=_bullets(
            [f"{t.topic}: {t.mention_count} mentions ({t.sentiment})" for t in profile.topics[:5]],
            "Not enough data yet",
        ),
        best_times=_bullets(
            [f"{t.day} at {t.hour}:00" for t in profile.best_contact_times[:3]],
            "Not enough data yet",
        ),
        tone=profile.reply_style.tone,
        length=profile.reply_style.length,
        emoji="Yes" if profile.reply_style.uses_emoji else "No",
        phrases=_bullets([f'"{p}"' for p in profile.signature_phrases], "None identified"),
    )


def build_system_prompt(
    profile: Optional[BehavioralProfile], memories: List[MemoryRecord]
) -> str:
    """
    Render the system prompt for one turn.

    Args:
        profile: The operator's behavioral profile, or None if unavailable
        memories: Ranked memories, already bounded to top-K

    Returns:
        The system prompt text
    """
    sections = [ASSISTANT_INTRO]
    sections.append(render_profile(profile) if profile is not None else NO_PROFILE_SECTION)
    if memories:
        sections.append(
            MEMORY_SECTION.format(memories="\n".join(f"- {m.content}" for m in memories))
        )
    sections.append(
        RULES_SECTION.format(
            actions="\n".join(f"- {rule.type}: {rule.label}" for rule in ACTION_RULES)
        )
    )
    return "\n\n".join(sections)
