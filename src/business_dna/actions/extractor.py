"""
Pattern-based extraction of suggested actions from assistant output.

Each action type fires when every one of its cue groups matches somewhere in
the text (a group matches if any of its alternatives does). Matching is
case-insensitive on word prefixes. Cues are stems where a word changes
spelling when inflected: "replie" covers "replies" and "replied", "schedul"
covers "scheduled" and "scheduling".
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from business_dna.models import BehavioralProfile, SuggestedAction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionRule:
    type: str
    label: str
    cue_groups: Sequence[Sequence[str]]

    def matches(self, text: str) -> bool:
        return all(
            any(re.search(rf"\b{re.escape(cue)}", text, re.IGNORECASE) for cue in group)
            for group in self.cue_groups
        )


# Vocabulary, in output order
ACTION_RULES: List[ActionRule] = [
    ActionRule("reply_review", "Draft Reply", [("draft", "respond"), ("reply", "replie", "response")]),
    ActionRule("create_post", "Create Post", [("post",), ("suggest", "creat", "writ", "wrote")]),
    ActionRule("schedule_post", "Schedule Post", [("schedul", "best time"), ("post",)]),
    ActionRule("view_analytics", "View Analytics", [("analytics", "details", "insights")]),
    ActionRule(
        "contact_customer",
        "Contact Customer",
        [("contact", "reach out", "call", "follow up"), ("customer", "client", "guest")],
    ),
    ActionRule(
        "update_business_info",
        "Update Business Info",
        [("updat", "chang", "edit"), ("hours", "business info", "description", "phone", "address")],
    ),
]

ACTION_TYPES = [rule.type for rule in ACTION_RULES]


class ActionSuggestionExtractor:
    """
    Classifies assistant output into the fixed action vocabulary.

    Deterministic. Returns each matching type once, in vocabulary order, and
    an empty list when nothing matches.
    """

    def __init__(self, rules: Optional[List[ActionRule]] = None):
        self.rules = rules if rules is not None else ACTION_RULES

    def extract(
        self, content: str, profile: Optional[BehavioralProfile] = None
    ) -> List[SuggestedAction]:
        if not content:
            return []

        actions: List[SuggestedAction] = []
        seen = set()
        for rule in self.rules:
            if rule.type in seen or not rule.matches(content):
                continue
            seen.add(rule.type)
            actions.append(
                SuggestedAction(type=rule.type, label=rule.label, data=self._data_for(rule, profile))
            )

        logger.debug(f"Extracted {len(actions)} suggested actions: {[a.type for a in actions]}")
        return actions

    def _data_for(self, rule: ActionRule, profile: Optional[BehavioralProfile]):
        if rule.type == "schedule_post" and profile and profile.best_contact_times:
            best = profile.best_contact_times[0]
            return {"day": best.day, "hour": best.hour}
        return None
