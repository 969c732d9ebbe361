"""
Tests for the TranslationAssistant surface.
"""
import pytest

from conftest import FakeFormalityProvider, FakeGenerativeProvider
from hanbridge.assistant import NO_GENERATIVE_ALTERNATIVES, TranslationAssistant
from hanbridge.errors import ProfileNotFoundError, ProfileProtectedError, ValidationError
from hanbridge.models import Alternative, VariationResult
from hanbridge.providers import DeepLProvider
from hanbridge.utils.config import AssistantSettings


@pytest.fixture
def assistant(formality_provider, profile_store):
    return TranslationAssistant(
        formality_provider,
        profile_store,
        settings=AssistantSettings(deepl_api_key="test-key")
    )


class TestTranslate:

    @pytest.mark.asyncio
    async def test_translate(self, assistant):
        result = await assistant.translate("안녕하세요", "natural")

        assert result.translation == "Hello"
        assert result.profile_used == "Natural"

    @pytest.mark.asyncio
    async def test_missing_profile_defaults_to_natural(self, assistant):
        result = await assistant.translate("안녕하세요", "")

        assert result.profile_used == "Natural"

    @pytest.mark.asyncio
    async def test_empty_text_rejected(self, assistant):
        with pytest.raises(ValidationError):
            await assistant.translate("")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("custom_rules", [[1, 2], "Be brief"])
    async def test_malformed_rules_rejected(self, assistant, formality_provider, custom_rules):
        with pytest.raises(ValidationError, match="Invalid translation request"):
            await assistant.translate("안녕하세요", "natural", custom_rules)
        assert formality_provider.calls == []

    @pytest.mark.asyncio
    async def test_custom_profile_used(self, assistant):
        saved = assistant.save_profile({"name": "Work", "description": "Short and polite"})

        result = await assistant.translate("안녕하세요", saved.id)

        assert result.profile_used == "Work"
        assert 'Using custom profile "Work"' in result.translation_notes


class TestAlternatives:

    @pytest.mark.asyncio
    async def test_fallback_without_generative_backend(self, assistant):
        alternatives = await assistant.get_alternatives("nice", "The weather is nice", "en", "ko")

        assert [a.text for a in alternatives] == ["nice", "nice"]
        assert [a.nuance for a in alternatives] == NO_GENERATIVE_ALTERNATIVES

    @pytest.mark.asyncio
    @pytest.mark.parametrize("word", ["", "  "])
    async def test_empty_word_rejected(self, assistant, word):
        with pytest.raises(ValidationError, match="Word is required"):
            await assistant.get_alternatives(word, "context", "en", "ko")

    @pytest.mark.asyncio
    async def test_generative_helper(self, profile_store):
        suggestions = [Alternative(text="lovely", nuance="Warmer"), Alternative(text="pleasant", nuance="Neutral")]
        helper = FakeGenerativeProvider(alternatives_result=suggestions)
        assistant = TranslationAssistant(FakeFormalityProvider(), profile_store, helper=helper)

        alternatives = await assistant.get_alternatives("nice", "", "EN", "ko")

        assert alternatives == suggestions


class TestVariation:

    @pytest.mark.asyncio
    async def test_requires_both_texts(self, assistant):
        with pytest.raises(ValidationError):
            await assistant.generate_variation("", "Hello")
        with pytest.raises(ValidationError):
            await assistant.generate_variation("안녕하세요", " ")

    @pytest.mark.asyncio
    async def test_generative_variation(self, profile_store):
        expected = VariationResult(translation="Hi there", difference="Friendlier")
        provider = FakeGenerativeProvider(variation=expected)
        assistant = TranslationAssistant(provider, profile_store, helper=provider)

        assert await assistant.generate_variation("안녕하세요", "Hello") == expected


class TestRevalidate:

    @pytest.mark.asyncio
    async def test_revalidate(self, assistant):
        result = await assistant.revalidate("안녕하세요", "Hello")

        assert result.translation == "Hello"
        assert result.accuracy_score.score == 100

    @pytest.mark.asyncio
    async def test_non_string_translation_rejected(self, assistant):
        with pytest.raises(ValidationError):
            await assistant.revalidate("안녕하세요", None)

    @pytest.mark.asyncio
    async def test_empty_translation_rejected(self, assistant):
        with pytest.raises(ValidationError):
            await assistant.revalidate("안녕하세요", "")


class TestProfilesAndHealth:

    def test_profile_crud(self, assistant):
        saved = assistant.save_profile({"name": "Work", "description": "Short", "rules": ["Be brief"]})

        assert assistant.get_profile(saved.id).rules == ["Be brief"]
        assert [p.id for p in assistant.list_profiles()][:3] == ["natural", "parent-talk", "direct"]

        assistant.delete_profile(saved.id)
        assert assistant.get_profile(saved.id) is None

    def test_malformed_profile_payload_rejected(self, assistant):
        with pytest.raises(ValidationError):
            assistant.save_profile({"name": 5, "description": "x"})
        with pytest.raises(ValidationError):
            assistant.save_profile(["not", "a", "profile"])

    def test_builtin_delete_rejected(self, assistant):
        with pytest.raises(ProfileProtectedError):
            assistant.delete_profile("natural")

    def test_unknown_delete_rejected(self, assistant):
        with pytest.raises(ProfileNotFoundError):
            assistant.delete_profile("custom-0")

    def test_health(self, assistant):
        assert assistant.health() == {"status": "ok", "provider": "fake-formality", "hasApiKey": True}

    def test_from_settings_without_key(self, profiles_path):
        settings = AssistantSettings(provider="deepl", profiles_path=profiles_path)

        assistant = TranslationAssistant.from_settings(settings)

        assert isinstance(assistant.primary, DeepLProvider)
        assert assistant.helper is None
        assert assistant.health() == {"status": "ok", "provider": "deepl", "hasApiKey": False}
