"""
Pytest configuration and shared fixtures for hanbridge tests.

Providers are replaced by deterministic fakes; nothing here touches the network.
"""
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from hanbridge.errors import ProviderError
from hanbridge.models import (
    AccuracyScore,
    Alternative,
    EffectiveProfile,
    ProviderTranslation,
    RuleTransformation,
    VariationResult,
)
from hanbridge.profile_store import ProfileStore
from hanbridge.providers.base import TranslationProvider
from sops.profile_policy import ProfileResolver


# ============================================================================
# Fake providers
# ============================================================================

class FakeFormalityProvider(TranslationProvider):
    """
    Deterministic stand-in for the DeepL provider.

    Lookup order: (text, target, formality) → (text, target) → "<text> [<target>]".
    Texts listed in fail_texts raise ProviderError.
    """

    def __init__(
        self,
        table: Optional[Dict[Tuple[str, ...], str]] = None,
        fail_texts: Optional[List[str]] = None
    ):
        self.table = table or {}
        self.fail_texts = set(fail_texts or [])
        self.calls: List[dict] = []

    @property
    def name(self) -> str:
        return "fake-formality"

    @property
    def supports_instructions(self) -> bool:
        return False

    async def translate(self, text, source_language, target_language, profile: EffectiveProfile):
        formality = profile.formality.value
        self.calls.append({
            "text": text,
            "source": source_language,
            "target": target_language,
            "formality": formality,
            "profile_id": profile.profile_id,
            "rules": list(profile.rules),
        })
        if text in self.fail_texts:
            raise ProviderError("quota exceeded", provider=self.name)

        translated = self.table.get(
            (text, target_language, formality),
            self.table.get((text, target_language), f"{text} [{target_language}]")
        )
        return ProviderTranslation(translation=translated, notes=profile.note)


class FakeGenerativeProvider(FakeFormalityProvider):
    """Deterministic stand-in for the Bedrock provider"""

    def __init__(
        self,
        table=None,
        fail_texts=None,
        score_result: Optional[AccuracyScore] = None,
        score_error: Optional[Exception] = None,
        variation: Optional[VariationResult] = None,
        alternatives_result: Optional[List[Alternative]] = None,
        transformation: Optional[RuleTransformation] = None
    ):
        super().__init__(table, fail_texts)
        self.score_result = score_result or AccuracyScore(score=92, explanation="Meaning preserved")
        self.score_error = score_error
        self.variation = variation
        self.alternatives_result = alternatives_result
        self.transformation = transformation
        self.score_calls: List[Tuple[str, str]] = []
        self.rule_calls: List[Tuple[str, List[str], str]] = []

    @property
    def name(self) -> str:
        return "fake-generative"

    @property
    def supports_instructions(self) -> bool:
        return True

    async def translate(self, text, source_language, target_language, profile):
        result = await super().translate(text, source_language, target_language, profile)
        return ProviderTranslation(translation=result.translation, confidence=0.9, notes="generative")

    async def score(self, original, candidate):
        self.score_calls.append((original, candidate))
        if self.score_error is not None:
            raise self.score_error
        return self.score_result

    async def vary(self, original_text, current_translation, source_language, target_language, profile):
        if self.variation is None:
            raise ProviderError("model unavailable", provider=self.name)
        return self.variation

    async def alternatives(self, word, context, source_language, target_language):
        return self.alternatives_result or [Alternative(text=word, nuance="Original selection")]

    async def apply_rules(self, text, rules, source_language):
        self.rule_calls.append((text, list(rules), source_language))
        if self.transformation is not None:
            return self.transformation
        return RuleTransformation(transformed_text=text, applied_rules=list(rules))


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def profiles_path(tmp_path: Path) -> Path:
    """Profile file inside a not-yet-existing directory"""
    return tmp_path / "data" / "profiles.json"


@pytest.fixture
def profile_store(profiles_path: Path) -> ProfileStore:
    return ProfileStore(profiles_path)


@pytest.fixture
def resolver(profile_store: ProfileStore) -> ProfileResolver:
    return ProfileResolver(profile_store)


@pytest.fixture
def round_trip_table() -> Dict[Tuple[str, ...], str]:
    """안녕하세요 ↔ Hello"""
    return {
        ("안녕하세요", "en"): "Hello",
        ("Hello", "ko"): "안녕하세요",
        ("The weather is nice today", "ko"): "오늘 날씨가 좋네요",
        ("오늘 날씨가 좋네요", "en"): "Today the weather is nice",
    }


@pytest.fixture
def formality_provider(round_trip_table) -> FakeFormalityProvider:
    return FakeFormalityProvider(round_trip_table)


@pytest.fixture
def generative_provider(round_trip_table) -> FakeGenerativeProvider:
    return FakeGenerativeProvider(round_trip_table)
