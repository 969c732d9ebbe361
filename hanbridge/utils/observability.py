"""
Observability - OpenTelemetry 트레이싱 헬퍼

- 공개 작업(translate, revalidate, variation, alternatives)마다 루트 스팬 + 세션 baggage
- 프로바이더 호출(deepl.translate, bedrock.<role>)마다 하위 스팬

SDK/exporter가 설정되지 않으면 no-op tracer가 사용됩니다.
"""

import logging
import os
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from opentelemetry import baggage, context, trace
from opentelemetry.trace import Status, StatusCode

logger = logging.getLogger(__name__)

TRACER_NAME = os.getenv("TRACER_MODULE_NAME", "hanbridge")
TRACER_VERSION = os.getenv("TRACER_LIBRARY_VERSION", "0.1.0")

MAX_ATTRIBUTE_LENGTH = 1000

EventRecorder = Callable[[str, Optional[Dict[str, Any]]], None]


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(TRACER_NAME, TRACER_VERSION)


def _attribute_value(value: Any) -> Any:
    if isinstance(value, (str, bool, int, float)):
        return value
    return str(value)[:MAX_ATTRIBUTE_LENGTH]


def set_span_attribute(span: trace.Span, key: str, value: Any) -> None:
    if span.is_recording():
        span.set_attribute(key, _attribute_value(value))


def add_span_event(span: trace.Span, name: str, attributes: Optional[Dict[str, Any]] = None) -> None:
    if span.is_recording():
        span.add_event(name, {k: _attribute_value(v) for k, v in (attributes or {}).items()})


def _mark_failed(span: trace.Span, exception: BaseException) -> None:
    if span.is_recording():
        span.record_exception(exception)
        span.set_status(Status(StatusCode.ERROR, str(exception)))


@contextmanager
def trace_agent(name: str) -> Iterator[Tuple[trace.Span, EventRecorder]]:
    """
    프로바이더 호출 하나를 스팬으로 감쌉니다.

    Yields:
        (span, record) - record(event_name, attributes)로 스팬 이벤트 추가

    Example:
        with trace_agent("deepl.translate") as (span, record):
            record("input", {"length": len(text)})
    """
    with get_tracer().start_as_current_span(name, record_exception=False) as span:
        def record(event_name: str, attributes: Optional[Dict[str, Any]] = None) -> None:
            add_span_event(span, event_name, attributes)

        try:
            yield span, record
        except Exception as e:
            _mark_failed(span, e)
            raise
        span.set_status(Status(StatusCode.OK))


@contextmanager
def trace_workflow(
    workflow_name: str,
    session_id: Optional[str] = None
) -> Iterator[Tuple[trace.Span, str]]:
    """
    공개 작업 하나를 루트 스팬으로 감싸고 session.id를 baggage로 전파합니다.

    Yields:
        (span, session_id)
    """
    session_id = session_id or str(uuid.uuid4())
    ctx = baggage.set_baggage("session.id", session_id)
    ctx = baggage.set_baggage("workflow.type", workflow_name, context=ctx)
    token = context.attach(ctx)

    try:
        with get_tracer().start_as_current_span(workflow_name, record_exception=False) as span:
            set_span_attribute(span, "session.id", session_id)
            try:
                yield span, session_id
            except Exception as e:
                _mark_failed(span, e)
                raise
            span.set_status(Status(StatusCode.OK))
    finally:
        context.detach(token)


def get_session_id() -> Optional[str]:
    """현재 컨텍스트의 session.id (워크플로우 밖이면 None)"""
    return baggage.get_baggage("session.id")


__all__ = [
    "get_tracer",
    "add_span_event",
    "set_span_attribute",
    "trace_agent",
    "trace_workflow",
    "get_session_id",
]
