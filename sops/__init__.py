"""
SOPs (Standard Operating Procedures) - 의사결정 로직 레이어

번역 파이프라인의 정책 로직을 담당하는 모듈:

- ProfileResolver: 프로파일 ID + 사용자 규칙 → formality 다이얼 / 규칙 목록
- VariationGenerator: 기존 번역의 대체 표현 생성
"""

from sops.profile_policy import (
    ProfileResolver,
    ProfilePolicy,
    FORMALITY_POLICY,
    policy_for,
)
from sops.variation import (
    VariationGenerator,
    DIFFERENCE_NOTES,
    ALREADY_OPTIMAL,
)

__all__ = [
    # 프로파일 정책
    "ProfileResolver",
    "ProfilePolicy",
    "FORMALITY_POLICY",
    "policy_for",
    # 변형 생성
    "VariationGenerator",
    "DIFFERENCE_NOTES",
    "ALREADY_OPTIMAL",
]
