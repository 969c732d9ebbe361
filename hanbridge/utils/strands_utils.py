"""
Strands 유틸리티 - 생성형 프로바이더용 BedrockModel / Agent 팩토리

- 역할별 모델 설정 (config/models.yaml, 누락된 역할은 기본값)
- 시스템 프롬프트 캐시 포인트
- 스로틀링 오류만 지수 백오프로 재시도
"""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError
from strands import Agent
from strands.models import BedrockModel
from strands.types.content import SystemContentBlock
from strands.types.exceptions import EventLoopException

logger = logging.getLogger(__name__)

MODELS_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "models.yaml"

SONNET = "us.anthropic.claude-sonnet-4-5-20250929-v1:0"
HAIKU = "us.anthropic.claude-haiku-4-5-20251001-v1:0"

THROTTLING_MARKERS = ("throttling", "too many requests")


@dataclass
class ModelConfig:
    """역할 하나에 대한 모델 파라미터"""
    model_id: str
    max_tokens: int = 2000
    temperature: float = 0.1
    description: str = ""


# 역할 → 기본 모델 (models.yaml에 없는 역할에 사용)
DEFAULT_MODELS: Dict[str, ModelConfig] = {
    "translator": ModelConfig(SONNET, max_tokens=2000, temperature=0.3),
    "scorer": ModelConfig(HAIKU, max_tokens=500, temperature=0.1),
    "alternatives": ModelConfig(HAIKU, max_tokens=1000, temperature=0.7),
    "variation": ModelConfig(SONNET, max_tokens=1500, temperature=0.9),
    "rule_transformer": ModelConfig(HAIKU, max_tokens=1500, temperature=0.2),
}


@dataclass
class StrandsConfig:
    region: str = "us-west-2"
    models: Dict[str, ModelConfig] = field(default_factory=lambda: dict(DEFAULT_MODELS))
    retry_max_attempts: int = 5
    timeout_seconds: int = 60


def load_config(config_path: Optional[str] = None) -> StrandsConfig:
    """
    models.yaml 로드. 파일이 없으면 기본 설정.

    AWS_REGION 환경 변수가 region보다 우선합니다.
    """
    path = Path(config_path) if config_path else MODELS_CONFIG_PATH

    if not path.exists():
        logger.warning(f"모델 설정 파일 없음: {path}, 기본값 사용")
        raw: Dict[str, Any] = {}
    else:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    config = StrandsConfig()
    for role, values in (raw.get("models") or {}).items():
        config.models[role] = ModelConfig(
            model_id=values["model_id"],
            max_tokens=values.get("max_tokens", 2000),
            temperature=values.get("temperature", 0.1),
            description=values.get("description", ""),
        )

    config.region = os.getenv("AWS_REGION", raw.get("region", config.region))
    config.retry_max_attempts = (raw.get("retry") or {}).get("max_attempts", config.retry_max_attempts)
    config.timeout_seconds = raw.get("timeout_seconds", config.timeout_seconds)
    return config


_config: Optional[StrandsConfig] = None


def get_config(config_path: Optional[str] = None) -> StrandsConfig:
    """프로세스 단위 설정 싱글톤"""
    global _config
    if _config is None:
        _config = load_config(config_path)
    return _config


# =============================================================================
# 모델 및 에이전트
# =============================================================================

def get_model(
    role: str,
    streaming: bool = True,
    config: Optional[StrandsConfig] = None
) -> BedrockModel:
    """
    역할 설정으로 BedrockModel 생성.

    Raises:
        ValueError: 설정에 없는 역할
    """
    config = config or get_config()
    model_config = config.models.get(role)
    if model_config is None:
        raise ValueError(f"알 수 없는 역할: {role}. 사용 가능: {sorted(config.models)}")

    return BedrockModel(
        model_id=model_config.model_id,
        region_name=config.region,
        streaming=streaming,
        max_tokens=model_config.max_tokens,
        temperature=model_config.temperature,
        additional_request_fields={"thinking": {"type": "disabled"}},
        boto_client_config=BotoConfig(
            read_timeout=config.timeout_seconds,
            connect_timeout=config.timeout_seconds,
            retries={"max_attempts": config.retry_max_attempts, "mode": "adaptive"}
        )
    )


def get_agent(
    role: str,
    system_prompt: str,
    agent_name: Optional[str] = None,
    prompt_cache: bool = True,
    model: Optional[BedrockModel] = None,
    config: Optional[StrandsConfig] = None
) -> Agent:
    """
    요청 하나를 처리할 Strands Agent 생성.

    Agent는 대화 기록을 가지므로 호출마다 새로 만들고, 모델만 재사용합니다.

    Example:
        agent = get_agent("scorer", system_prompt=prompt, model=cached_model)
    """
    name = (agent_name or role).upper()
    model = model or get_model(role, config=config)

    if prompt_cache:
        logger.debug(f"[{name}] 시스템 프롬프트 캐시 사용")
        system_prompt_content = [
            SystemContentBlock(text=system_prompt),
            SystemContentBlock(cachePoint={"type": "default"}),
        ]
    else:
        system_prompt_content = system_prompt

    # stream_async 이벤트를 직접 소비하므로 콘솔 콜백 비활성화
    return Agent(model=model, system_prompt=system_prompt_content, callback_handler=None)


# =============================================================================
# 실행
# =============================================================================

def _is_throttling(e: Exception) -> bool:
    if isinstance(e, ClientError):
        return e.response.get("Error", {}).get("Code") == "ThrottlingException"
    message = str(e).lower()
    return any(marker in message for marker in THROTTLING_MARKERS)


async def _stream_with_retry(agent: Agent, message: str, max_attempts: int = 3, base_delay: float = 2.0):
    """스로틀링만 재시도, 나머지 오류는 그대로 전파"""
    for attempt in range(1, max_attempts + 1):
        try:
            async for event in agent.stream_async(message):
                yield event
            return
        except (EventLoopException, ClientError) as e:
            if not _is_throttling(e) or attempt == max_attempts:
                logger.error(f"에이전트 스트리밍 실패 ({attempt}/{max_attempts}): {e}")
                raise
            delay = base_delay * 2 ** (attempt - 1)
            logger.info(f"스로틀링 - {delay:.0f}초 후 재시도 ({attempt}/{max_attempts})")
            await asyncio.sleep(delay)


def extract_usage_from_agent(agent: Agent) -> Dict[str, int]:
    """event_loop_metrics의 누적 토큰 사용량 (없으면 0)"""
    metrics = getattr(agent, "event_loop_metrics", None)
    accumulated = getattr(metrics, "accumulated_usage", None) or {}
    return {
        "input_tokens": accumulated.get("inputTokens", 0),
        "output_tokens": accumulated.get("outputTokens", 0),
        "total_tokens": accumulated.get("totalTokens", 0),
    }


async def run_agent_async(agent: Agent, message: str, use_retry: bool = True) -> Dict[str, Any]:
    """
    에이전트를 스트리밍으로 실행하고 텍스트를 모아 반환.

    Returns:
        {"text": 응답 전체, "usage": 토큰 사용량}
    """
    stream = _stream_with_retry(agent, message) if use_retry else agent.stream_async(message)
    chunks = [event["data"] async for event in stream if "data" in event]
    return {"text": "".join(chunks), "usage": extract_usage_from_agent(agent)}


__all__ = [
    "ModelConfig",
    "StrandsConfig",
    "DEFAULT_MODELS",
    "load_config",
    "get_config",
    "get_model",
    "get_agent",
    "extract_usage_from_agent",
    "run_agent_async",
]
