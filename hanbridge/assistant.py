"""
Translation Assistant - Exposed surface for the HTTP layer

Wires settings → providers → profile store → pipeline graph once, then serves
translate / alternatives / variation / revalidation / profile CRUD / health.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from hanbridge.errors import ValidationError
from hanbridge.graph import TranslationWorkflowGraph
from hanbridge.models import (
    Alternative,
    TranslationProfile,
    TranslationRequest,
    TranslationResult,
    VariationResult,
)
from hanbridge.profile_store import ProfileStore
from hanbridge.providers import TranslationProvider, create_providers
from hanbridge.utils.config import AssistantSettings, load_settings
from hanbridge.utils.language import normalize_language_code
from hanbridge.utils.observability import trace_workflow
from sops.profile_policy import ProfileResolver
from sops.variation import VariationGenerator

logger = logging.getLogger(__name__)

NO_GENERATIVE_ALTERNATIVES = [
    "Original translation (DeepL)",
    "Alternative suggestions require AI features",
]


class TranslationAssistant:
    """
    Korean↔English translation assistant.

    Usage:
        assistant = TranslationAssistant.from_settings()
        result = await assistant.translate("안녕하세요", profile_id="parent-talk")
        print(result.to_dict())
    """

    def __init__(
        self,
        primary: TranslationProvider,
        store: ProfileStore,
        helper: Optional[Any] = None,
        settings: Optional[AssistantSettings] = None,
        variation_generator: Optional[VariationGenerator] = None
    ):
        self.settings = settings or AssistantSettings()
        self.primary = primary
        self.helper = helper
        self.store = store
        self.resolver = ProfileResolver(store)
        self.graph = TranslationWorkflowGraph(primary, helper=helper, resolver=self.resolver)
        self.variations = variation_generator or VariationGenerator(primary, self.resolver)

    @classmethod
    def from_settings(cls, settings: Optional[AssistantSettings] = None) -> "TranslationAssistant":
        """Build providers and store once from settings (or config/settings.yaml + env)"""
        settings = settings or load_settings()
        primary, helper = create_providers(settings)
        store = ProfileStore(settings.profiles_path)
        logger.info(f"TranslationAssistant ready (provider={primary.name}, profiles={settings.profiles_path})")
        return cls(primary, store, helper=helper, settings=settings)

    # =========================================================================
    # 번역
    # =========================================================================

    async def translate(
        self,
        text: str,
        profile_id: str = "natural",
        custom_rules: Optional[List[str]] = None
    ) -> TranslationResult:
        """
        Raises:
            ValidationError: Empty text or malformed rules
            ProviderError: Translation or back-translation failed
        """
        try:
            request = TranslationRequest(
                text=text or "",
                profile_id=profile_id or "natural",
                custom_rules=custom_rules or []
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid translation request: {e.errors()[0]['msg']}") from e
        return await self.graph.run(request)

    async def revalidate(
        self,
        original_text: str,
        translation: str,
        profile_id: str = "natural"
    ) -> TranslationResult:
        """Back-translate an edited translation and re-score it against the original"""
        if not isinstance(original_text, str) or not isinstance(translation, str):
            raise ValidationError("Original text and translation must be strings")
        return await self.graph.revalidate(original_text, translation, profile_id)

    async def get_alternatives(
        self,
        word: str,
        context: str,
        source_language: str,
        target_language: str
    ) -> List[Alternative]:
        """
        Raises:
            ValidationError: Empty word
            ProviderError: Generative backend failure
        """
        if not word or not word.strip():
            raise ValidationError("Word is required")

        if self.helper is None:
            return [Alternative(text=word, nuance=nuance) for nuance in NO_GENERATIVE_ALTERNATIVES]

        with trace_workflow("alternatives"):
            return await self.helper.alternatives(
                word,
                context or word,
                normalize_language_code(source_language),
                normalize_language_code(target_language)
            )

    async def generate_variation(
        self,
        original_text: str,
        current_translation: str,
        profile_id: str = "natural",
        custom_rules: Optional[List[str]] = None
    ) -> VariationResult:
        """Never raises on backend failure; see VariationGenerator"""
        if not original_text or not original_text.strip():
            raise ValidationError("Original text is required")
        if not current_translation or not current_translation.strip():
            raise ValidationError("Current translation is required")

        with trace_workflow("variation"):
            return await self.variations.generate(
                original_text,
                current_translation,
                profile_id,
                custom_rules
            )

    # =========================================================================
    # 프로파일
    # =========================================================================

    def list_profiles(self) -> List[TranslationProfile]:
        return self.store.list_profiles()

    def get_profile(self, profile_id: str) -> Optional[TranslationProfile]:
        return self.store.get_profile(profile_id)

    def save_profile(
        self,
        profile: Union[TranslationProfile, Mapping[str, Any]]
    ) -> TranslationProfile:
        return self.store.save_profile(profile)

    def delete_profile(self, profile_id: str) -> None:
        self.store.delete_profile(profile_id)

    def health(self) -> Dict[str, Any]:
        return {
            "status": "ok",
            "provider": self.primary.name,
            "hasApiKey": self.settings.has_api_key,
        }
