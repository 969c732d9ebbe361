"""
번역 워크플로우 그래프

감지 → 규칙 변환 → 번역 → 역번역 → 점수 파이프라인 오케스트레이션.

사용 예:
    from hanbridge.graph import TranslationWorkflowGraph
    from hanbridge.models import TranslationRequest

    graph = TranslationWorkflowGraph(primary, helper=helper, resolver=resolver)
    result = await graph.run(TranslationRequest(text="안녕하세요", profile_id="direct"))

    # 편집된 번역 재검증
    result = await graph.revalidate("안녕하세요", "Hi there")
"""

# 그래프 빌더
from hanbridge.graph.builder import (
    TranslationWorkflowGraph,
    WorkflowMetrics
)

# 개별 노드 (고급 사용자용)
from hanbridge.graph.nodes import (
    PipelineContext,
    detect_node,
    transform_rules_node,
    translate_node,
    backtranslate_node,
    score_node,
    assemble_result
)

__all__ = [
    # 메인 API
    "TranslationWorkflowGraph",
    "WorkflowMetrics",
    # 노드 (고급)
    "PipelineContext",
    "detect_node",
    "transform_rules_node",
    "translate_node",
    "backtranslate_node",
    "score_node",
    "assemble_result",
]
