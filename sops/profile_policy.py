"""
프로파일 정책 SOP - 프로파일 ID → 생성 파라미터 매핑

목적: 프로파일 ID와 사용자 규칙을 프로바이더가 사용할 구체적 파라미터로 변환

비즈니스 규칙:
- 알 수 없는 프로파일 ID: natural 기본 프로파일로 대체
- 기본 프로파일 → formality 다이얼은 고정 정책 테이블 (추론하지 않음)
  - natural → prefer_more
  - parent-talk → default
  - direct → prefer_less
  - 사용자 정의 프로파일 → default
- 생성형 경로: 사용자 규칙을 프로파일 규칙 뒤에 추가 (중복 제거, 순서 유지)
- formality 경로: 규칙은 그대로 두고 사용자 규칙은 규칙 변환 단계로 별도 전달
- 역번역은 항상 direct 프로파일 (리터럴 바이어스), 번역 노트 없음
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from hanbridge.models import EffectiveProfile, Formality, TranslationProfile
from hanbridge.profile_store import BUILTIN_PROFILES, DEFAULT_PROFILE_ID, ProfileStore

logger = logging.getLogger(__name__)

LITERAL_PROFILE_ID = "direct"


@dataclass(frozen=True)
class ProfilePolicy:
    """formality 다이얼과 번역 노트"""
    formality: Formality
    note: str


FORMALITY_POLICY: Dict[str, ProfilePolicy] = {
    "natural": ProfilePolicy(Formality.PREFER_MORE, "Using formal tone for respectful communication"),
    "parent-talk": ProfilePolicy(Formality.DEFAULT, "Using standard polite tone"),
    "direct": ProfilePolicy(Formality.PREFER_LESS, "Using direct/literal translation style"),
}


def policy_for(profile: TranslationProfile) -> ProfilePolicy:
    """정책 테이블 조회, 사용자 정의 프로파일은 default"""
    policy = FORMALITY_POLICY.get(profile.id)
    if policy is not None:
        return policy
    return ProfilePolicy(Formality.DEFAULT, f'Using custom profile "{profile.name}"')


def _clean_rules(rules: Optional[List[str]]) -> List[str]:
    """공백 규칙 제거 및 중복 제거 (순서 유지)"""
    seen = set()
    cleaned = []
    for rule in rules or []:
        rule = rule.strip()
        if rule and rule not in seen:
            seen.add(rule)
            cleaned.append(rule)
    return cleaned


class ProfileResolver:
    """
    프로파일 해석 SOP

    프로파일 저장소에서 프로파일을 찾아 EffectiveProfile로 변환합니다.
    """

    def __init__(self, store: Optional[ProfileStore] = None):
        """
        Args:
            store: 프로파일 저장소. 미제공시 기본 프로파일만 사용.
        """
        self.store = store

    def _lookup(self, profile_id: Optional[str]) -> TranslationProfile:
        profile = None
        if profile_id:
            if self.store is not None:
                profile = self.store.get_profile(profile_id)
            else:
                profile = next((p for p in BUILTIN_PROFILES if p.id == profile_id), None)

        if profile is None:
            if profile_id and profile_id != DEFAULT_PROFILE_ID:
                logger.warning(f"Unknown profile '{profile_id}', falling back to {DEFAULT_PROFILE_ID}")
            profile = next(p for p in BUILTIN_PROFILES if p.id == DEFAULT_PROFILE_ID)
        return profile

    def resolve(
        self,
        profile_id: Optional[str],
        custom_rules: Optional[List[str]] = None,
        merge_custom_rules: bool = True
    ) -> EffectiveProfile:
        """
        프로파일 ID와 사용자 규칙을 생성 파라미터로 변환.

        Args:
            profile_id: 프로파일 ID (없거나 알 수 없으면 natural)
            custom_rules: 이번 요청에만 적용할 추가 규칙
            merge_custom_rules: True면 규칙 목록에 병합 (생성형 경로),
                                False면 별도 보관 (formality 경로)

        Returns:
            EffectiveProfile
        """
        profile = self._lookup(profile_id)
        policy = policy_for(profile)
        extra = _clean_rules(custom_rules)

        if merge_custom_rules:
            rules = _clean_rules(list(profile.rules) + extra)
            carried: List[str] = []
        else:
            rules = list(profile.rules)
            carried = extra

        return EffectiveProfile(
            profile_id=profile.id,
            name=profile.name,
            description=profile.description,
            rules=rules,
            formality=policy.formality,
            note=policy.note,
            custom_rules=carried,
            source_profile=profile,
        )

    def literal(self) -> EffectiveProfile:
        """역번역용 direct 프로파일 (역번역에는 스타일 노트를 붙이지 않음)"""
        return replace(self.resolve(LITERAL_PROFILE_ID), note="")
