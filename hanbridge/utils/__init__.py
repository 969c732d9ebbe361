"""
Utility modules for the translation assistant
"""

# Language detection & similarity scoring
from .language import (
    detect_language,
    opposite_language,
    normalize_language_code,
)
from .similarity import (
    SimilarityScorer,
    calculate_text_similarity,
    explain_score,
)

# Generative response parsing
from .json_parsing import (
    extract_json,
    parse_or_default,
    parse_list_or_default,
)

# Strands Agent utilities
from .strands_utils import (
    # Configuration
    ModelConfig,
    StrandsConfig,
    load_config as load_strands_config,
    get_config as get_strands_config,
    # Model & Agent Creation
    get_model,
    get_agent,
    # Execution
    extract_usage_from_agent,
    run_agent_async,
)

# Observability (OpenTelemetry-based)
from .observability import (
    get_session_id,
    get_tracer,
    add_span_event,
    set_span_attribute,
    trace_agent,
    trace_workflow,
)

# Config loader
from .config import (
    ConfigLoader,
    AssistantSettings,
    load_settings,
    get_config_loader,
)

__all__ = [
    # Language & similarity
    "detect_language",
    "opposite_language",
    "normalize_language_code",
    "SimilarityScorer",
    "calculate_text_similarity",
    "explain_score",
    # Parsing
    "extract_json",
    "parse_or_default",
    "parse_list_or_default",
    # Strands Agent utilities
    "ModelConfig",
    "StrandsConfig",
    "load_strands_config",
    "get_strands_config",
    "get_model",
    "get_agent",
    "extract_usage_from_agent",
    "run_agent_async",
    # Observability (OpenTelemetry-based)
    "get_session_id",
    "get_tracer",
    "add_span_event",
    "set_span_attribute",
    "trace_agent",
    "trace_workflow",
    # Config loader
    "ConfigLoader",
    "AssistantSettings",
    "load_settings",
    "get_config_loader",
]
