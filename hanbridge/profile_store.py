"""
Profile Store - Built-in and custom translation profiles

Custom profiles are persisted as a JSON array; built-ins live in code and are
always listed first.
"""

import json
import logging
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from hanbridge.errors import ProfileNotFoundError, ProfileProtectedError, ValidationError
from hanbridge.models import TranslationProfile

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_ID = "natural"

BUILTIN_PROFILES: List[TranslationProfile] = [
    TranslationProfile(
        id="natural",
        name="Natural",
        description=(
            "Give a rough translation using common phrases instead of a direct "
            "translation to make the translation seem more natural"
        ),
        rules=[
            "Use common expressions and idioms in the target language",
            "Prioritize natural flow over literal accuracy",
            "Adapt cultural references to be more understandable",
        ],
        is_default=True,
        can_delete=False,
    ),
    TranslationProfile(
        id="parent-talk",
        name="Parent Talk",
        description=(
            "Give a rough translation based on informal Korean but appropriate "
            "for talking to your parents"
        ),
        rules=[
            "Use respectful but warm language (존댓말 with friendly tone)",
            "Avoid overly formal or stiff expressions",
            "Include appropriate honorifics for parents",
            "Soften direct statements to be more respectful",
        ],
        is_default=True,
        can_delete=False,
    ),
    TranslationProfile(
        id="direct",
        name="Direct",
        description="Provide a literal word-for-word translation preserving the exact meaning",
        rules=[
            "Translate as literally as possible",
            "Preserve original sentence structure when possible",
            "Keep cultural references intact with explanation if needed",
        ],
        is_default=True,
        can_delete=False,
    ),
]

BUILTIN_IDS = frozenset(p.id for p in BUILTIN_PROFILES)


class ProfileStore:
    """
    JSON-file profile store.

    Usage:
        store = ProfileStore("data/profiles.json")
        store.list_profiles()
        saved = store.save_profile({"name": "Work", "description": "Polite and short"})
        store.delete_profile(saved.id)
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    # =========================================================================
    # 파일 I/O
    # =========================================================================

    def _load_custom(self) -> List[TranslationProfile]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading profiles from {self.path}: {e}")
            return []

        if not isinstance(raw, list):
            logger.error(f"Profiles file {self.path} does not contain a list")
            return []

        profiles = []
        for entry in raw:
            try:
                profiles.append(TranslationProfile.model_validate(entry))
            except PydanticValidationError as e:
                logger.warning(f"Skipping malformed profile entry: {e}")
        return profiles

    def _write_custom(self, profiles: List[TranslationProfile]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([p.to_dict() for p in profiles], f, ensure_ascii=False, indent=2)

    # =========================================================================
    # CRUD
    # =========================================================================

    def list_profiles(self) -> List[TranslationProfile]:
        """Built-ins first, then custom profiles in file order"""
        return list(BUILTIN_PROFILES) + self._load_custom()

    def get_profile(self, profile_id: str) -> Optional[TranslationProfile]:
        """Returns None when no profile has this id. Built-ins never touch the file."""
        for profile in BUILTIN_PROFILES:
            if profile.id == profile_id:
                return profile
        for profile in self._load_custom():
            if profile.id == profile_id:
                return profile
        return None

    def save_profile(
        self,
        profile: Union[TranslationProfile, Mapping[str, Any]]
    ) -> TranslationProfile:
        """
        Create or replace a custom profile.

        A missing id is assigned as custom-<ms timestamp>. Built-in flags are
        always forced to is_default=False, can_delete=True.

        Raises:
            ValidationError: Missing name/description, malformed rules, or a built-in id
        """
        if isinstance(profile, TranslationProfile):
            payload: Dict[str, Any] = profile.to_dict()
        elif isinstance(profile, Mapping):
            payload = dict(profile)
        else:
            raise ValidationError("Profile payload must be an object")

        name = payload.get("name") or ""
        description = payload.get("description") or ""
        if not isinstance(name, str) or not isinstance(description, str):
            raise ValidationError("Profile name and description must be strings")

        name, description = name.strip(), description.strip()
        if not name or not description:
            raise ValidationError("Profile must have a name and description")

        rules = payload.get("rules") or []
        if not isinstance(rules, list) or not all(isinstance(r, str) for r in rules):
            raise ValidationError("Profile rules must be a list of strings")

        profile_id = payload.get("id")
        if profile_id is not None and not isinstance(profile_id, str):
            raise ValidationError("Profile id must be a string")
        if profile_id in BUILTIN_IDS:
            raise ValidationError("Cannot modify default profiles")

        with self._lock:
            custom = self._load_custom()
            existing_ids = {p.id for p in custom}

            if not profile_id:
                profile_id = self._new_id(existing_ids)

            saved = TranslationProfile(
                id=profile_id,
                name=name,
                description=description,
                rules=[r for r in rules if r.strip()],
                is_default=False,
                can_delete=True,
            )

            for i, existing in enumerate(custom):
                if existing.id == profile_id:
                    custom[i] = saved
                    break
            else:
                custom.append(saved)

            self._write_custom(custom)

        logger.info(f"Saved profile {saved.id} ({saved.name})")
        return saved

    def delete_profile(self, profile_id: str) -> None:
        """
        Raises:
            ProfileNotFoundError: No profile with this id
            ProfileProtectedError: Built-in profile
        """
        with self._lock:
            profile = self.get_profile(profile_id)
            if profile is None:
                raise ProfileNotFoundError("Profile not found")
            if not profile.can_delete:
                raise ProfileProtectedError("Cannot delete default profiles")

            custom = [p for p in self._load_custom() if p.id != profile_id]
            self._write_custom(custom)

        logger.info(f"Deleted profile {profile_id}")

    @staticmethod
    def _new_id(existing_ids) -> str:
        timestamp = int(time.time() * 1000)
        while f"custom-{timestamp}" in existing_ids:
            timestamp += 1
        return f"custom-{timestamp}"
