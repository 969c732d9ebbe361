"""
워크플로우 그래프 빌더 - 번역 파이프라인 오케스트레이션

워크플로우 흐름:
    INIT → DETECT → (TRANSFORM) → TRANSLATE → BACKTRANSLATE → SCORE → COMPLETED
                                      ↓              ↓
                                    FAILED         FAILED

각 요청은 독립적으로 처리되며, 요청 간 공유되는 것은 프로바이더 클라이언트뿐입니다.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from hanbridge.models import (
    ProviderTranslation,
    TranslationRequest,
    TranslationResult,
    WorkflowState,
)
from hanbridge.graph.nodes import (
    PipelineContext,
    advance_state,
    assemble_result,
    backtranslate_node,
    detect_node,
    score_node,
    transform_rules_node,
    translate_node,
)
from hanbridge.providers.base import TranslationProvider
from hanbridge.utils.observability import set_span_attribute, trace_workflow
from hanbridge.utils.similarity import SimilarityScorer
from sops.profile_policy import ProfileResolver

logger = logging.getLogger(__name__)


@dataclass
class WorkflowMetrics:
    """워크플로우 메트릭"""
    total_latency_ms: int = 0
    transform_latency_ms: int = 0
    translation_latency_ms: int = 0
    backtranslation_latency_ms: int = 0
    scoring_latency_ms: int = 0
    token_usage: Dict[str, int] = field(default_factory=dict)


class TranslationWorkflowGraph:
    """
    번역 워크플로우 그래프.

    흐름:
    1. 언어 감지 + 프로파일 해석
    2. 사용자 규칙 변환 (formality 경로, 선택)
    3. 주 번역
    4. 리터럴 역번역
    5. 정확도 점수
    6. 결과 조립

    사용 예:
        graph = TranslationWorkflowGraph(primary, resolver=ProfileResolver(store))
        result = await graph.run(TranslationRequest(text="안녕하세요"))
        print(result.accuracy_score.score)
    """

    def __init__(
        self,
        primary: TranslationProvider,
        helper: Optional[Any] = None,
        resolver: Optional[ProfileResolver] = None,
        scorer: Optional[SimilarityScorer] = None
    ):
        """
        Args:
            primary: 주 번역 프로바이더
            helper: 생성형 보조 프로바이더 (규칙 변환용)
            resolver: 프로파일 해석기. 미제공시 기본 프로파일만 사용.
            scorer: 결정적 유사도 점수기
        """
        self.context = PipelineContext(
            primary=primary,
            resolver=resolver or ProfileResolver(),
            scorer=scorer or SimilarityScorer(),
            helper=helper,
        )

    def _initial_state(self, request: TranslationRequest) -> Dict[str, Any]:
        return {
            "request": request,
            "context": self.context,
            "workflow_state": WorkflowState.INITIALIZED,
            "notes": [],
            "latencies": {},
            "created_at": datetime.now(),
        }

    async def run(self, request: TranslationRequest) -> TranslationResult:
        """
        워크플로우 실행.

        Raises:
            ValidationError: 빈 텍스트
            ProviderError: 번역 또는 역번역 실패
        """
        state = await self.run_with_state(request)
        return state["result"]

    async def run_with_state(self, request: TranslationRequest) -> Dict[str, Any]:
        """
        워크플로우 실행 후 전체 상태 반환.

        Returns:
            최종 워크플로우 상태 딕셔너리:
                - result: TranslationResult
                - workflow_state: COMPLETED
                - metrics: WorkflowMetrics
                - 각 노드의 중간 결과
        """
        request.ensure_valid()
        start_time = datetime.now()
        state = self._initial_state(request)

        with trace_workflow("translate") as (span, session_id):
            set_span_attribute(span, "provider", self.context.primary.name)
            set_span_attribute(span, "profile.id", request.profile_id)
            logger.info(f"워크플로우 시작 (session={session_id})")

            try:
                state = await self._run_pipeline(state)
            finally:
                state["metrics"] = self._calculate_metrics(state, start_time, datetime.now())
                logger.info(
                    f"워크플로우 종료: {state['workflow_state'].value} "
                    f"({state['metrics'].total_latency_ms}ms)"
                )

        return state

    async def _run_pipeline(self, state: Dict[str, Any]) -> Dict[str, Any]:
        state = await detect_node(state)
        state = await transform_rules_node(state)
        state = await translate_node(state)
        state = await backtranslate_node(state)
        state = await score_node(state)
        assemble_result(state)
        return state

    async def revalidate(
        self,
        original_text: str,
        translation: str,
        profile_id: str = "natural"
    ) -> TranslationResult:
        """
        편집된 번역을 다시 역번역하고 원문과 비교하여 점수를 재계산.

        Args:
            original_text: 사용자 원문
            translation: 사용자가 편집한 번역
            profile_id: 원래 번역에 사용된 프로파일 (profileUsed 표시용)

        Raises:
            ValidationError: 빈 원문 또는 빈 번역
            ProviderError: 역번역 실패
        """
        request = TranslationRequest(text=original_text, profile_id=profile_id).ensure_valid()
        TranslationRequest(text=translation).ensure_valid()
        start_time = datetime.now()
        state = self._initial_state(request)

        with trace_workflow("revalidate"):
            try:
                state = await detect_node(state)
                advance_state(state, WorkflowState.TRANSLATING)
                state["translation_result"] = ProviderTranslation(translation=translation)
                state = await backtranslate_node(state)
                state = await score_node(state)
                result = assemble_result(state)
            finally:
                state["metrics"] = self._calculate_metrics(state, start_time, datetime.now())

        logger.info(f"재검증 완료: {result.accuracy_score.score}")
        return result

    def _calculate_metrics(
        self,
        state: Dict[str, Any],
        start_time: datetime,
        end_time: datetime
    ) -> WorkflowMetrics:
        """워크플로우 메트릭 계산"""
        latencies = state.get("latencies", {})
        token_usage = {"input": 0, "output": 0, "total": 0}

        for key in ("translation_result", "backtranslation_result"):
            result = state.get(key)
            if result is not None and result.token_usage:
                token_usage["input"] += result.token_usage.get("input_tokens", 0)
                token_usage["output"] += result.token_usage.get("output_tokens", 0)
                token_usage["total"] += result.token_usage.get("total_tokens", 0)

        return WorkflowMetrics(
            total_latency_ms=int((end_time - start_time).total_seconds() * 1000),
            transform_latency_ms=latencies.get("transform", 0),
            translation_latency_ms=latencies.get("translate", 0),
            backtranslation_latency_ms=latencies.get("backtranslate", 0),
            scoring_latency_ms=latencies.get("score", 0),
            token_usage=token_usage
        )

    async def run_batch(
        self,
        requests: List[TranslationRequest],
        concurrency: int = 5
    ) -> List[Union[TranslationResult, Exception]]:
        """
        배치 워크플로우 실행.

        여러 요청을 동시에 처리합니다. 실패한 요청은 예외 객체로 반환됩니다.

        Args:
            requests: 번역 요청 리스트
            concurrency: 동시 처리 수
        """
        semaphore = asyncio.Semaphore(concurrency)

        async def run_with_semaphore(request: TranslationRequest) -> TranslationResult:
            async with semaphore:
                return await self.run(request)

        logger.info(f"배치 처리 시작: {len(requests)}개 항목, 동시성 {concurrency}")

        results = await asyncio.gather(
            *[run_with_semaphore(request) for request in requests],
            return_exceptions=True
        )

        failed = sum(1 for r in results if isinstance(r, Exception))
        logger.info(f"배치 처리 완료: 성공 {len(results) - failed}, 실패 {failed}")

        return list(results)
