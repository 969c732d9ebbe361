"""
워크플로우 노드 - 번역 파이프라인의 각 단계 구현

각 노드는 하나의 워크플로우 단계를 담당:
- detect_node: 소스 언어 감지 + 프로파일 해석
- transform_rules_node: 사용자 규칙 변환 (formality 경로 전용, 비치명적)
- translate_node: 주 번역 (치명적)
- backtranslate_node: 리터럴 바이어스 역번역 (치명적)
- score_node: 정확도 점수 (비치명적)
- assemble_result: TranslationResult 조립
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from hanbridge.errors import ProviderError
from hanbridge.models import (
    AccuracyScore,
    ProviderTranslation,
    TranslationRequest,
    TranslationResult,
    WorkflowState,
    can_transition,
)
from hanbridge.providers.base import TranslationProvider
from hanbridge.utils.language import detect_language, normalize_language_code, opposite_language
from hanbridge.utils.similarity import SimilarityScorer
from sops.profile_policy import ProfileResolver

logger = logging.getLogger(__name__)

RULES_REQUIRE_GENERATIVE_NOTE = "Custom rules require a generative provider"
SCORING_UNAVAILABLE = AccuracyScore(score=0, explanation="Scoring temporarily unavailable")


@dataclass
class PipelineContext:
    """노드가 공유하는 협력 객체 (요청 간 불변)"""
    primary: TranslationProvider
    resolver: ProfileResolver
    scorer: SimilarityScorer
    helper: Optional[Any] = None      # 생성형 보조 프로바이더 (apply_rules 제공)


def advance_state(state: Dict[str, Any], new_state: WorkflowState) -> None:
    """상태 전이 기록 (잘못된 전이는 경고만)"""
    current = state.get("workflow_state", WorkflowState.INITIALIZED)
    if current != new_state and not can_transition(current, new_state):
        logger.warning(f"예상치 못한 상태 전이: {current.value} → {new_state.value}")
    state["workflow_state"] = new_state


def _record_latency(state: Dict[str, Any], step: str, start_time: float) -> int:
    latency_ms = int((time.time() - start_time) * 1000)
    state.setdefault("latencies", {})[step] = latency_ms
    return latency_ms


def _fail(state: Dict[str, Any], message: str, cause: Exception) -> ProviderError:
    state["workflow_state"] = WorkflowState.FAILED
    state["error"] = message
    provider = cause.provider if isinstance(cause, ProviderError) else None
    return ProviderError(message, provider=provider, cause=cause)


async def detect_node(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    언어 감지 노드.

    소스/대상 언어를 결정하고 프로파일을 해석합니다.
    생성형 프로바이더는 사용자 규칙을 프로파일 규칙에 병합하고,
    formality 프로바이더는 규칙 변환 단계로 별도 전달합니다.

    Args:
        state: 워크플로우 상태
            - request: TranslationRequest (필수)
            - context: PipelineContext (필수)

    Returns:
        업데이트된 상태:
            - source_language, target_language
            - profile: EffectiveProfile
            - text_to_translate: 번역할 텍스트
            - notes: 번역 노트 리스트
    """
    request: TranslationRequest = state["request"]
    ctx: PipelineContext = state["context"]
    advance_state(state, WorkflowState.DETECTING)

    source_language = detect_language(request.text)
    target_language = opposite_language(source_language)

    # 사용자 정의 프로파일은 파일에서 읽으므로 이벤트 루프 밖에서 해석
    profile = await asyncio.to_thread(
        ctx.resolver.resolve,
        request.profile_id,
        request.custom_rules,
        ctx.primary.supports_instructions
    )

    state["source_language"] = source_language
    state["target_language"] = target_language
    state["profile"] = profile
    state["text_to_translate"] = request.text
    state.setdefault("notes", [])

    logger.info(f"언어 감지: {source_language} → {target_language}, 프로파일: {profile.name}")
    return state


async def transform_rules_node(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    규칙 변환 노드 (formality 경로 전용).

    사용자 규칙을 같은 언어 안에서 먼저 적용한 뒤 변환된 텍스트를 번역합니다.
    실패해도 파이프라인은 원문으로 계속 진행합니다.
    """
    ctx: PipelineContext = state["context"]
    profile = state["profile"]
    notes: List[str] = state["notes"]

    if ctx.primary.supports_instructions or not profile.custom_rules:
        return state

    if ctx.helper is None:
        logger.warning("사용자 규칙 무시: 생성형 프로바이더 없음")
        notes.append(RULES_REQUIRE_GENERATIVE_NOTE)
        return state

    advance_state(state, WorkflowState.TRANSFORMING)
    start_time = time.time()
    original_text = state["text_to_translate"]

    transformation = await ctx.helper.apply_rules(
        original_text,
        profile.custom_rules,
        state["source_language"]
    )
    latency_ms = _record_latency(state, "transform", start_time)

    if transformation.error:
        logger.warning(f"규칙 변환 건너뜀: {transformation.error}")
        notes.append(f"Custom rules not applied: {transformation.error}")
        return state

    if transformation.transformed_text != original_text:
        state["text_to_translate"] = transformation.transformed_text
        state["transformed_text"] = transformation.transformed_text

    if transformation.applied_rules:
        notes.append(f"Applied rules: {', '.join(transformation.applied_rules)}")

    logger.info(f"규칙 변환 완료: {len(transformation.applied_rules)}개 규칙 ({latency_ms}ms)")
    return state


async def translate_node(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    번역 노드.

    Raises:
        ProviderError: "Translation failed: <원인>"
    """
    ctx: PipelineContext = state["context"]
    advance_state(state, WorkflowState.TRANSLATING)
    start_time = time.time()

    logger.info(f"번역 시작 ({ctx.primary.name})")

    try:
        result: ProviderTranslation = await ctx.primary.translate(
            state["text_to_translate"],
            state["source_language"],
            state["target_language"],
            state["profile"]
        )
    except Exception as e:
        logger.error(f"번역 실패: {e}")
        raise _fail(state, f"Translation failed: {e}", e) from e

    state["translation_result"] = result
    latency_ms = _record_latency(state, "translate", start_time)
    logger.info(f"번역 완료 ({latency_ms}ms)")
    return state


async def backtranslate_node(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    역번역 노드.

    원본 프로파일과 무관하게 항상 direct(리터럴) 프로파일을 사용하여
    스타일 변환이 의미 손실을 가리지 않도록 합니다.

    Raises:
        ProviderError: "Back-translation failed: <원인>"
    """
    ctx: PipelineContext = state["context"]
    translation: ProviderTranslation = state["translation_result"]
    advance_state(state, WorkflowState.BACKTRANSLATING)
    start_time = time.time()

    logger.info("역번역 시작")

    try:
        result: ProviderTranslation = await ctx.primary.translate(
            translation.translation,
            state["target_language"],
            state["source_language"],
            ctx.resolver.literal()
        )
    except Exception as e:
        logger.error(f"역번역 실패: {e}")
        raise _fail(state, f"Back-translation failed: {e}", e) from e

    state["backtranslation_result"] = result
    latency_ms = _record_latency(state, "backtranslate", start_time)
    logger.info(f"역번역 완료 ({latency_ms}ms)")
    return state


async def score_node(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    점수 노드.

    생성형 프로바이더는 의미 비교 프롬프트, formality 프로바이더는
    토큰 겹침 유사도로 원문과 역번역을 비교합니다.
    실패 시 {0, "Scoring temporarily unavailable"}.
    """
    ctx: PipelineContext = state["context"]
    request: TranslationRequest = state["request"]
    back: ProviderTranslation = state["backtranslation_result"]
    advance_state(state, WorkflowState.SCORING)
    start_time = time.time()

    try:
        if ctx.primary.supports_instructions:
            score = await ctx.primary.score(request.text, back.translation)
        else:
            score = ctx.scorer.score(request.text, back.translation)
    except Exception as e:
        logger.error(f"점수 계산 실패: {e}")
        score = SCORING_UNAVAILABLE

    state["accuracy_score"] = score
    latency_ms = _record_latency(state, "score", start_time)
    logger.info(f"점수: {score.score} ({latency_ms}ms)")
    return state


def assemble_result(state: Dict[str, Any]) -> TranslationResult:
    """최종 TranslationResult 조립"""
    request: TranslationRequest = state["request"]
    translation: ProviderTranslation = state["translation_result"]
    back: ProviderTranslation = state["backtranslation_result"]

    notes = [translation.notes] + state.get("notes", [])
    result = TranslationResult(
        original=request.text,
        source_language=normalize_language_code(state["source_language"]),
        target_language=normalize_language_code(state["target_language"]),
        translation=translation.translation,
        translation_confidence=translation.confidence,
        translation_notes="; ".join(n for n in notes if n),
        re_translation=back.translation,
        re_translation_notes=back.notes,
        accuracy_score=state["accuracy_score"],
        profile_used=state["profile"].name,
        transformed_text=state.get("transformed_text"),
    )

    advance_state(state, WorkflowState.COMPLETED)
    state["result"] = result
    return result
