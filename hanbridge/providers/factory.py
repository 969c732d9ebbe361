"""
Provider factory - Select the translation backend once from settings
"""

import logging
from typing import Optional, Tuple

from hanbridge.providers.base import TranslationProvider
from hanbridge.providers.bedrock_provider import BedrockProvider
from hanbridge.providers.deepl_provider import DeepLProvider
from hanbridge.utils.config import AssistantSettings

logger = logging.getLogger(__name__)


def create_providers(
    settings: AssistantSettings
) -> Tuple[TranslationProvider, Optional[BedrockProvider]]:
    """
    Build the primary provider and the optional generative helper.

    The helper serves rule transformation and alternative suggestions.
    It is the primary itself when the primary is generative, a separate
    BedrockProvider when enable_generative_helper is set, otherwise None.

    Returns:
        (primary, helper)
    """
    if settings.provider == "bedrock":
        primary = BedrockProvider(
            timeout_seconds=settings.timeout_seconds,
            region=settings.aws_region
        )
        logger.info("Primary provider: bedrock (generative)")
        return primary, primary

    primary = DeepLProvider(
        api_key=settings.deepl_api_key,
        server_url=settings.deepl_server_url,
        timeout_seconds=settings.timeout_seconds,
        formality_languages=settings.formality_languages
    )

    helper = None
    if settings.enable_generative_helper:
        helper = BedrockProvider(
            timeout_seconds=settings.timeout_seconds,
            region=settings.aws_region
        )

    logger.info(f"Primary provider: deepl (formality), generative helper: {'bedrock' if helper else 'none'}")
    return primary, helper
