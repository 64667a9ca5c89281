"""
Daily briefing: a morning digest of new feedback, pending questions and
profile-based suggestions.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from business_dna.analysis import DEFAULT_TUNABLES
from business_dna.models import BehavioralProfile, InteractionRecord

RESPONSE_RATE_TARGET = 80


class DailyBriefing(BaseModel):
    greeting: str
    summary: str
    highlights: List[Dict[str, Any]] = Field(default_factory=list)
    alerts: List[Dict[str, Any]] = Field(default_factory=list)
    suggestions: List[Dict[str, Any]] = Field(default_factory=list)
    tasks: List[Dict[str, Any]] = Field(default_factory=list)
    stats: Dict[str, Any] = Field(default_factory=dict)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def greeting_for(hour: int) -> str:
    if hour < 12:
        return "Good morning"
    if hour < 18:
        return "Good afternoon"
    return "Good evening"


def build_daily_briefing(
    profile: Optional[BehavioralProfile],
    recent_feedback: Sequence[InteractionRecord],
    pending_questions: Sequence[InteractionRecord],
    now: datetime,
) -> DailyBriefing:
    """
    Build the daily briefing. Pure: the caller supplies the recent records.

    Args:
        profile: The operator's profile, or None if none is available yet
        recent_feedback: Feedback received since the last briefing
        pending_questions: Unanswered customer questions
        now: Local time of the briefing (drives the greeting)
    """
    positive_min = DEFAULT_TUNABLES.positive_min_score
    negative_max = DEFAULT_TUNABLES.negative_max_score

    highlights: List[Dict[str, Any]] = []
    alerts: List[Dict[str, Any]] = []
    suggestions: List[Dict[str, Any]] = []
    tasks: List[Dict[str, Any]] = []

    if recent_feedback:
        positive = sum(1 for r in recent_feedback if r.score is not None and r.score >= positive_min)
        negative = sum(1 for r in recent_feedback if r.score is not None and r.score <= negative_max)
        highlights.append(
            {
                "type": "new_feedback",
                "count": len(recent_feedback),
                "sentiment": "positive" if positive > negative else "mixed",
                "message": f"{_plural(len(recent_feedback), 'new review')} ({positive} positive)",
            }
        )
        if negative:
            alerts.append(
                {
                    "priority": "high",
                    "message": f"{_plural(negative, 'negative review')} "
                    f"need{'s' if negative == 1 else ''} attention",
                    "action": "reply_review",
                }
            )

    if pending_questions:
        tasks.append(
            {
                "task": f"Answer {_plural(len(pending_questions), 'pending question')}",
                "priority": 1,
                "status": "pending",
            }
        )

    if profile is not None:
        if profile.response_rate < RESPONSE_RATE_TARGET:
            suggestions.append(
                {
                    "action": "improve_response_rate",
                    "reason": f"Your response rate is {profile.response_rate}%. "
                    "Aim for 90%+ for better engagement.",
                }
            )
        if profile.best_contact_times:
            best = profile.best_contact_times[0]
            suggestions.append(
                {
                    "action": "schedule_post",
                    "reason": f"Best time to post: {best.day} at {best.hour}:00",
                    "data": {"day": best.day, "hour": best.hour},
                }
            )

    if recent_feedback:
        summary = f"You received {_plural(len(recent_feedback), 'new review')}."
    else:
        summary = "No new reviews today."
    if profile is not None:
        summary += f" Your overall rating is {profile.average_rating}/5."
        if profile.growth_trend == "growing":
            summary += " Business is showing positive growth!"

    name = profile.name if profile is not None else "there"
    return DailyBriefing(
        greeting=f"{greeting_for(now.hour)}, {name}!",
        summary=summary,
        highlights=highlights,
        alerts=alerts,
        suggestions=suggestions,
        tasks=tasks,
        stats={
            "new_reviews": len(recent_feedback),
            "average_rating": profile.average_rating if profile is not None else 0,
            "response_rate": profile.response_rate if profile is not None else 0,
            "pending_questions": len(pending_questions),
        },
    )
