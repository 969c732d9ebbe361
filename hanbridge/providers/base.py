"""
Translation Provider - Abstract interface for translation backends

Two implementations conform to this interface:
- DeepLProvider: formality-aware, deterministic
- BedrockProvider: generative, instruction-following
"""

from abc import ABC, abstractmethod

from hanbridge.models import EffectiveProfile, ProviderTranslation


class TranslationProvider(ABC):
    """
    Abstract base class for translation providers.
    All providers must implement these methods.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name used in logs and errors"""
        pass

    @property
    @abstractmethod
    def supports_instructions(self) -> bool:
        """Whether the provider follows free-form style rules (generative)"""
        pass

    @abstractmethod
    async def translate(
        self,
        text: str,
        source_language: str,
        target_language: str,
        profile: EffectiveProfile
    ) -> ProviderTranslation:
        """
        Translate text between ko and en.

        Args:
            text: Text to translate
            source_language: "ko" or "en"
            target_language: "ko" or "en"
            profile: Resolved style parameters (formality or rules)

        Returns:
            ProviderTranslation

        Raises:
            ProviderError: On network/auth/quota/timeout failure
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
