"""
Tests for the JSON-file profile store.
"""
import json

import pytest

from hanbridge.errors import ProfileNotFoundError, ProfileProtectedError, ValidationError
from hanbridge.models import TranslationProfile
from hanbridge.profile_store import BUILTIN_PROFILES, ProfileStore


class TestListAndGet:

    def test_builtins_listed_first(self, profile_store):
        profiles = profile_store.list_profiles()
        assert [p.id for p in profiles[:3]] == ["natural", "parent-talk", "direct"]
        assert all(p.is_default and not p.can_delete for p in profiles[:3])

    def test_missing_file_means_no_custom_profiles(self, profile_store):
        assert len(profile_store.list_profiles()) == len(BUILTIN_PROFILES)

    def test_get_unknown_returns_none(self, profile_store):
        assert profile_store.get_profile("nope") is None

    def test_corrupt_file_is_ignored(self, profiles_path):
        profiles_path.parent.mkdir(parents=True)
        profiles_path.write_text("{not json", encoding="utf-8")
        store = ProfileStore(profiles_path)
        assert len(store.list_profiles()) == len(BUILTIN_PROFILES)


class TestSaveProfile:

    def test_assigns_custom_id_and_creates_directory(self, profile_store, profiles_path):
        saved = profile_store.save_profile({"name": "Work", "description": "Polite and brief"})

        assert saved.id.startswith("custom-")
        assert saved.is_default is False
        assert saved.can_delete is True
        assert profiles_path.exists()
        stored = json.loads(profiles_path.read_text(encoding="utf-8"))
        assert stored[0]["id"] == saved.id
        assert stored[0]["canDelete"] is True

    def test_forces_flags(self, profile_store):
        saved = profile_store.save_profile({
            "name": "Sneaky",
            "description": "Tries to be default",
            "isDefault": True,
            "canDelete": False,
        })
        assert saved.is_default is False
        assert saved.can_delete is True

    def test_upsert_by_id(self, profile_store):
        first = profile_store.save_profile({"name": "Work", "description": "v1"})
        profile_store.save_profile({"id": first.id, "name": "Work", "description": "v2"})

        customs = [p for p in profile_store.list_profiles() if not p.is_default]
        assert len(customs) == 1
        assert customs[0].description == "v2"

    def test_ids_unique_for_rapid_saves(self, profile_store):
        a = profile_store.save_profile({"name": "A", "description": "a"})
        b = profile_store.save_profile({"name": "B", "description": "b"})
        assert a.id != b.id

    def test_accepts_model_instance(self, profile_store):
        profile = TranslationProfile(id="custom-1", name="Kids", description="Simple words", rules=["Short"])
        saved = profile_store.save_profile(profile)
        assert profile_store.get_profile("custom-1").rules == ["Short"]
        assert saved.name == "Kids"

    @pytest.mark.parametrize("payload", [
        {"name": "", "description": "x"},
        {"name": "x"},
        {"description": "x"},
        {"name": "   ", "description": "x"},
    ])
    def test_requires_name_and_description(self, profile_store, payload):
        with pytest.raises(ValidationError, match="name and description"):
            profile_store.save_profile(payload)

    def test_rejects_builtin_id(self, profile_store):
        with pytest.raises(ValidationError):
            profile_store.save_profile({"id": "natural", "name": "Hijack", "description": "x"})

    def test_rejects_non_string_rules(self, profile_store):
        with pytest.raises(ValidationError):
            profile_store.save_profile({"name": "x", "description": "y", "rules": "not a list"})

    @pytest.mark.parametrize("payload", [
        {"name": 5, "description": "x"},
        {"name": "x", "description": ["y"]},
        {"id": ["custom-1"], "name": "x", "description": "y"},
    ])
    def test_rejects_non_string_fields(self, profile_store, profiles_path, payload):
        with pytest.raises(ValidationError):
            profile_store.save_profile(payload)
        assert not profiles_path.exists()


class TestDeleteProfile:

    def test_delete_custom(self, profile_store):
        saved = profile_store.save_profile({"name": "Temp", "description": "x"})
        profile_store.delete_profile(saved.id)
        assert profile_store.get_profile(saved.id) is None

    def test_delete_missing_raises_not_found(self, profile_store):
        with pytest.raises(ProfileNotFoundError, match="Profile not found"):
            profile_store.delete_profile("custom-missing")

    def test_delete_twice_raises_not_found(self, profile_store):
        saved = profile_store.save_profile({"name": "Temp", "description": "x"})
        profile_store.delete_profile(saved.id)
        with pytest.raises(ProfileNotFoundError):
            profile_store.delete_profile(saved.id)

    @pytest.mark.parametrize("profile_id", ["natural", "parent-talk", "direct"])
    def test_builtins_cannot_be_deleted(self, profile_store, profile_id):
        with pytest.raises(ProfileProtectedError, match="Cannot delete default profiles"):
            profile_store.delete_profile(profile_id)
