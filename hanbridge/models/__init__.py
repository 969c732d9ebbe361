"""
Data models for the translation assistant
"""

from .profile import TranslationProfile, EffectiveProfile, Formality
from .translation_request import TranslationRequest
from .workflow_state import WorkflowState, is_terminal_state, can_transition, VALID_TRANSITIONS
from .results import (
    ProviderTranslation,
    RuleTransformation,
    AccuracyScore,
    TranslationResult,
    VariationResult,
    Alternative,
)

__all__ = [
    # Profiles
    "TranslationProfile",
    "EffectiveProfile",
    "Formality",

    # Request
    "TranslationRequest",

    # Workflow state
    "WorkflowState",
    "is_terminal_state",
    "can_transition",
    "VALID_TRANSITIONS",

    # Provider results
    "ProviderTranslation",
    "RuleTransformation",

    # Caller results
    "AccuracyScore",
    "TranslationResult",
    "VariationResult",
    "Alternative",
]
