from business_dna.actions.extractor import (
    ACTION_RULES,
    ACTION_TYPES,
    ActionRule,
    ActionSuggestionExtractor,
)

__all__ = ["ActionSuggestionExtractor", "ActionRule", "ACTION_RULES", "ACTION_TYPES"]
