"""
hanbridge - Korean↔English Translation Assistant

Translation pipeline with:
- Script-ratio language detection
- Profile-driven style (formality dial or generative style rules)
- DeepL (formality-aware) or AWS Bedrock (generative) providers
- Literal back-translation and 0-100 accuracy scoring
- Alternate phrasings and word alternatives
"""

__version__ = "0.1.0"

# Re-export key components for convenience
from .errors import (
    HanbridgeError,
    ValidationError,
    ProviderError,
    ProfileNotFoundError,
    ProfileProtectedError,
)
from .models import (
    TranslationProfile,
    TranslationRequest,
    TranslationResult,
    AccuracyScore,
    VariationResult,
    Alternative,
    WorkflowState,
)
from .prompts import (
    load_prompt,
    get_template_loader,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "HanbridgeError",
    "ValidationError",
    "ProviderError",
    "ProfileNotFoundError",
    "ProfileProtectedError",
    # Models
    "TranslationProfile",
    "TranslationRequest",
    "TranslationResult",
    "AccuracyScore",
    "VariationResult",
    "Alternative",
    "WorkflowState",
    # Prompts
    "load_prompt",
    "get_template_loader",
]
