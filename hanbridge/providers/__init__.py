"""
Translation providers
"""

from .base import TranslationProvider
from .deepl_provider import DeepLProvider
from .bedrock_provider import BedrockProvider
from .factory import create_providers

__all__ = [
    "TranslationProvider",
    "DeepLProvider",
    "BedrockProvider",
    "create_providers",
]
