"""
변형 생성 SOP - 기존 번역의 대체 표현 생성

목적: 같은 의미를 다른 표현으로 전달하는 번역 변형 생성

비즈니스 규칙:
- 생성형 프로바이더: 다른 표현을 요청하는 프롬프트로 재생성
- formality 프로바이더:
  1. 현재 번역을 원문 언어로 역번역 (direct 프로파일, prefer_less)
  2. 프로파일이 의미하는 formality를 제외한 두 단계 중 무작위로 선택해 재번역
  3. 결과가 현재 번역과 같으면 남은 formality로 한 번 더 시도
  4. 그래도 같으면 "이미 최적" 메시지와 함께 현재 번역 반환
- 어떤 전략이든 백엔드 실패는 예외 없이 "Variation unavailable: <원인>"으로 보고
"""

import asyncio
import dataclasses
import logging
import random
from typing import List, Optional

from hanbridge.models import EffectiveProfile, Formality, VariationResult
from hanbridge.providers.base import TranslationProvider
from hanbridge.utils.language import detect_language, opposite_language
from sops.profile_policy import ProfileResolver

logger = logging.getLogger(__name__)

FORMALITY_LEVELS = [Formality.PREFER_LESS, Formality.DEFAULT, Formality.PREFER_MORE]

DIFFERENCE_NOTES = {
    Formality.PREFER_MORE: "More formal/polite variation",
    Formality.PREFER_LESS: "More casual/direct variation",
    Formality.DEFAULT: "Standard formality variation",
}

ALREADY_OPTIMAL = "This translation is already optimal. Try a different phrase."


class VariationGenerator:
    """
    변형 생성 SOP

    Usage:
        generator = VariationGenerator(provider, resolver)
        result = await generator.generate("안녕하세요", "Hello", "natural")
    """

    def __init__(
        self,
        provider: TranslationProvider,
        resolver: ProfileResolver,
        rng: Optional[random.Random] = None
    ):
        """
        Args:
            provider: 주 번역 프로바이더
            resolver: 프로파일 해석기
            rng: formality 선택용 난수 생성기 (테스트에서 시드 고정)
        """
        self.provider = provider
        self.resolver = resolver
        self.rng = rng or random.Random()

    async def generate(
        self,
        original_text: str,
        current_translation: str,
        profile_id: Optional[str],
        custom_rules: Optional[List[str]] = None
    ) -> VariationResult:
        """
        현재 번역의 변형 생성. 예외를 던지지 않습니다.

        Args:
            original_text: 사용자 원문
            current_translation: 현재 번역
            profile_id: 현재 번역에 사용된 프로파일 ID
            custom_rules: 추가 규칙 (생성형 경로에서만 사용)

        Returns:
            VariationResult
        """
        source_language = detect_language(original_text)
        target_language = opposite_language(source_language)

        try:
            if self.provider.supports_instructions:
                profile = await asyncio.to_thread(self.resolver.resolve, profile_id, custom_rules, True)
                return await self.provider.vary(
                    original_text,
                    current_translation,
                    source_language,
                    target_language,
                    profile
                )

            profile = await asyncio.to_thread(self.resolver.resolve, profile_id, custom_rules, False)
            return await self._cycle_formality(
                current_translation,
                source_language,
                target_language,
                profile
            )
        except Exception as e:
            logger.error(f"Variation error: {e}")
            return VariationResult(
                translation=current_translation,
                difference=f"Variation unavailable: {e}"
            )

    async def _cycle_formality(
        self,
        current_translation: str,
        source_language: str,
        target_language: str,
        profile: EffectiveProfile
    ) -> VariationResult:
        back = await self.provider.translate(
            current_translation,
            target_language,
            source_language,
            self.resolver.literal()
        )

        remaining = [f for f in FORMALITY_LEVELS if f != profile.formality]
        first = self.rng.choice(remaining)
        candidates = [first] + [f for f in remaining if f != first]

        for formality in candidates:
            forward = await self.provider.translate(
                back.translation,
                source_language,
                target_language,
                dataclasses.replace(profile, formality=formality)
            )
            if forward.translation != current_translation:
                return VariationResult(
                    translation=forward.translation,
                    difference=DIFFERENCE_NOTES[formality]
                )
            logger.debug(f"formality={formality.value} reproduced the current translation")

        return VariationResult(translation=current_translation, difference=ALREADY_OPTIMAL)
