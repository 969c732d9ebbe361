"""
Tests for profile resolution and the fixed formality policy table.
"""
import pytest

from hanbridge.models import Formality
from sops.profile_policy import FORMALITY_POLICY, ProfileResolver


class TestPolicyTable:

    @pytest.mark.parametrize("profile_id,formality", [
        ("natural", Formality.PREFER_MORE),
        ("parent-talk", Formality.DEFAULT),
        ("direct", Formality.PREFER_LESS),
    ])
    def test_builtin_formality(self, resolver, profile_id, formality):
        assert resolver.resolve(profile_id).formality == formality
        assert FORMALITY_POLICY[profile_id].formality == formality

    def test_custom_profile_uses_default_formality(self, resolver, profile_store):
        saved = profile_store.save_profile({"name": "Work Chat", "description": "Concise"})
        profile = resolver.resolve(saved.id)
        assert profile.formality == Formality.DEFAULT
        assert profile.note == 'Using custom profile "Work Chat"'


class TestResolve:

    def test_unknown_id_falls_back_to_natural(self, resolver):
        profile = resolver.resolve("does-not-exist")
        assert profile.profile_id == "natural"
        assert profile.name == "Natural"

    def test_missing_id_falls_back_to_natural(self, resolver):
        assert resolver.resolve(None).profile_id == "natural"

    def test_generative_merge_appends_and_dedupes(self, resolver):
        profile = resolver.resolve(
            "direct",
            ["Keep it short", "Translate as literally as possible", "Keep it short", "  "],
            merge_custom_rules=True
        )
        assert profile.rules[-1] == "Keep it short"
        assert profile.rules.count("Translate as literally as possible") == 1
        assert profile.custom_rules == []

    def test_formality_path_carries_rules_separately(self, resolver):
        profile = resolver.resolve("natural", ["Keep it short"], merge_custom_rules=False)
        assert "Keep it short" not in profile.rules
        assert profile.custom_rules == ["Keep it short"]

    def test_literal_is_direct(self, resolver):
        profile = resolver.literal()
        assert profile.profile_id == "direct"
        assert profile.formality == Formality.PREFER_LESS
        assert profile.note == ""

    def test_direct_profile_keeps_its_note(self, resolver):
        assert resolver.resolve("direct").note == "Using direct/literal translation style"

    def test_resolver_without_store_uses_builtins(self):
        assert ProfileResolver().resolve("parent-talk").name == "Parent Talk"
