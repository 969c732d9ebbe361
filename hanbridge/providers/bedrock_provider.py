"""
Bedrock 프로바이더 - Strands Agent 기반 생성형 번역

역할별 모델(translator, scorer, alternatives, variation, rule_transformer)은
첫 사용 시 생성되어 캐시됩니다. 에이전트는 호출마다 새로 만들어
대화 히스토리가 요청 간에 누적되지 않도록 합니다.

모든 JSON 응답은 parse-or-default로 디코딩되며, 파싱 실패는 밖으로 전파되지 않습니다.
백엔드 오류와 타임아웃은 ProviderError로 변환됩니다.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import boto3
from pydantic import BaseModel, Field
from strands.models import BedrockModel

from hanbridge.errors import ProviderError
from hanbridge.models import (
    AccuracyScore,
    Alternative,
    EffectiveProfile,
    ProviderTranslation,
    RuleTransformation,
    VariationResult,
)
from hanbridge.prompts.template import get_template_loader
from hanbridge.providers.base import TranslationProvider
from hanbridge.utils.json_parsing import parse_list_or_default, parse_or_default
from hanbridge.utils.observability import get_session_id, trace_agent
from hanbridge.utils.strands_utils import StrandsConfig, get_agent, get_model, load_config, run_agent_async

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {
    "ko": "Korean",
    "en": "English",
}

DEFAULT_TRANSLATION_CONFIDENCE = 0.8
SCORE_FALLBACK = AccuracyScore(score=75, explanation="Unable to calculate precise score")
ALTERNATIVES_COUNT = 5

# 규칙 변환 응답에서 제거할 감싸는 따옴표
_WRAPPING_QUOTES = "\"'“”‘’「」『』"


class _TranslationPayload(BaseModel):
    """translator 역할 JSON 응답"""
    translation: str = Field(..., min_length=1)
    confidence: float = DEFAULT_TRANSLATION_CONFIDENCE
    notes: Optional[str] = ""


class _VariationPayload(BaseModel):
    """variation 역할 JSON 응답"""
    translation: str = Field(..., min_length=1)
    difference: str = ""


def _format_rules(rules: List[str]) -> str:
    if not rules:
        return "(no additional rules)"
    return "\n".join(f"{i}. {rule}" for i, rule in enumerate(rules, 1))


def _strip_wrapping_quotes(text: str) -> str:
    text = text.strip()
    while len(text) >= 2 and text[0] in _WRAPPING_QUOTES and text[-1] in _WRAPPING_QUOTES:
        text = text[1:-1].strip()
    return text


class BedrockProvider(TranslationProvider):
    """
    Generative provider backed by Anthropic models on AWS Bedrock.

    Usage:
        provider = BedrockProvider()
        result = await provider.translate("안녕하세요", "ko", "en", profile)
        score = await provider.score("안녕하세요", "안녕하세요")
    """

    def __init__(
        self,
        config: Optional[StrandsConfig] = None,
        timeout_seconds: float = 30.0,
        region: Optional[str] = None,
        prompt_cache: bool = True
    ):
        self._config = config or load_config()
        if region:
            self._config.region = region
        self._timeout_seconds = timeout_seconds
        self._prompt_cache = prompt_cache
        self._models: Dict[str, BedrockModel] = {}
        self._templates = get_template_loader()

        if boto3.Session().get_credentials() is None:
            logger.warning("AWS credentials not found; Bedrock calls will fail until they are configured")

    @property
    def name(self) -> str:
        return "bedrock"

    @property
    def supports_instructions(self) -> bool:
        return True

    # =========================================================================
    # 백엔드 호출
    # =========================================================================

    def _get_model(self, role: str) -> BedrockModel:
        if role not in self._models:
            self._models[role] = get_model(role, config=self._config)
            logger.info(f"[{role.upper()}] BedrockModel initialized ({self._config.models[role].model_id})")
        return self._models[role]

    async def _invoke(self, role: str, system_prompt: str, user_message: str) -> Dict[str, Any]:
        """
        Run one prompt against the model for role.

        Returns:
            {"text": response text, "usage": token usage}

        Raises:
            ProviderError: On backend failure or timeout
        """
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"\n{'='*60}\n"
                f"[{role.upper()}] USER PROMPT\n"
                f"{'='*60}\n"
                f"{user_message}\n"
                f"{'='*60}"
            )

        with trace_agent(f"bedrock.{role}") as (span, record):
            record("input", {"role": role, "length": len(user_message)})
            try:
                agent = get_agent(
                    role=role,
                    system_prompt=system_prompt,
                    agent_name=role,
                    prompt_cache=self._prompt_cache,
                    model=self._get_model(role),
                    config=self._config
                )
                result = await asyncio.wait_for(
                    run_agent_async(agent, user_message),
                    timeout=self._timeout_seconds
                )
            except asyncio.TimeoutError as e:
                raise ProviderError(
                    f"Bedrock request timed out after {self._timeout_seconds}s",
                    provider=self.name,
                    cause=e
                ) from e
            except ProviderError:
                raise
            except Exception as e:
                logger.error(f"[{role.upper()}] 에이전트 실행 실패 (session={get_session_id()}): {e}")
                raise ProviderError(str(e), provider=self.name, cause=e) from e

            record("output", {"length": len(result["text"])})

        return result

    def _render(self, name: str, **kwargs) -> str:
        return self._templates.load(name).render(**kwargs)

    # =========================================================================
    # 번역
    # =========================================================================

    async def translate(
        self,
        text: str,
        source_language: str,
        target_language: str,
        profile: EffectiveProfile
    ) -> ProviderTranslation:
        start_time = time.time()

        system_prompt = self._render(
            "translator",
            source_language=LANGUAGE_NAMES[source_language],
            target_language=LANGUAGE_NAMES[target_language],
            profile_description=profile.description,
            rules=_format_rules(profile.rules)
        )
        user_message = f"<source_text>\n{text}\n</source_text>"

        result = await self._invoke("translator", system_prompt, user_message)
        response_text = result["text"]

        parsed = parse_or_default(
            response_text,
            _TranslationPayload,
            lambda: _TranslationPayload.model_construct(
                translation=response_text.strip(),
                confidence=DEFAULT_TRANSLATION_CONFIDENCE,
                notes=""
            ),
            label="translator"
        )

        return ProviderTranslation(
            translation=parsed.translation,
            confidence=min(1.0, max(0.0, parsed.confidence)),
            notes=parsed.notes or "",
            token_usage=result.get("usage"),
            latency_ms=int((time.time() - start_time) * 1000)
        )

    # =========================================================================
    # 의미 비교 점수
    # =========================================================================

    async def score(self, original: str, candidate: str) -> AccuracyScore:
        """Semantic comparison of original text and its back-translation"""
        user_message = "\n".join([
            "<original>", original, "</original>",
            "",
            "<back_translation>", candidate, "</back_translation>",
        ])

        result = await self._invoke("scorer", self._render("scorer"), user_message)
        return parse_or_default(result["text"], AccuracyScore, SCORE_FALLBACK, label="scorer")

    # =========================================================================
    # 대체 표현
    # =========================================================================

    async def alternatives(
        self,
        word: str,
        context: str,
        source_language: str,
        target_language: str
    ) -> List[Alternative]:
        """Ask for alternative wordings of word as used inside context"""
        system_prompt = self._render(
            "alternatives",
            source_language=LANGUAGE_NAMES.get(source_language, source_language),
            target_language=LANGUAGE_NAMES.get(target_language, target_language)
        )
        user_message = "\n".join([
            "<context>", context or word, "</context>",
            "",
            "<highlighted>", word, "</highlighted>",
            "",
            f"Suggest {ALTERNATIVES_COUNT} alternatives for the highlighted text.",
        ])

        result = await self._invoke("alternatives", system_prompt, user_message)
        return parse_list_or_default(
            result["text"],
            Alternative,
            lambda: [Alternative(text=word, nuance="Original selection")],
            label="alternatives"
        )

    # =========================================================================
    # 규칙 변환 (같은 언어 내)
    # =========================================================================

    async def apply_rules(
        self,
        text: str,
        rules: List[str],
        source_language: str
    ) -> RuleTransformation:
        """
        Rewrite text in its own language according to rules.

        Never raises: on backend failure the original text is returned with
        the cause in RuleTransformation.error.
        """
        if not rules:
            return RuleTransformation(transformed_text=text)

        system_prompt = self._render(
            "rule_transformer",
            source_language=LANGUAGE_NAMES[source_language],
            rules=_format_rules(rules)
        )

        try:
            result = await self._invoke("rule_transformer", system_prompt, text)
        except ProviderError as e:
            logger.warning(f"규칙 변환 실패, 원문 사용: {e}")
            return RuleTransformation(transformed_text=text, applied_rules=[], error=str(e))

        transformed = _strip_wrapping_quotes(result["text"])
        if not transformed:
            return RuleTransformation(
                transformed_text=text,
                applied_rules=[],
                error="Empty response from rule transformer"
            )

        return RuleTransformation(transformed_text=transformed, applied_rules=list(rules))

    # =========================================================================
    # 변형 생성
    # =========================================================================

    async def vary(
        self,
        original_text: str,
        current_translation: str,
        source_language: str,
        target_language: str,
        profile: EffectiveProfile
    ) -> VariationResult:
        """Re-prompt for a differently-worded translation with the same meaning"""
        system_prompt = self._render(
            "variation",
            source_language=LANGUAGE_NAMES[source_language],
            target_language=LANGUAGE_NAMES[target_language],
            profile_description=profile.description,
            rules=_format_rules(profile.rules)
        )
        user_message = "\n".join([
            "<original_text>", original_text, "</original_text>",
            "",
            "<current_translation>", current_translation, "</current_translation>",
        ])

        result = await self._invoke("variation", system_prompt, user_message)
        parsed = parse_or_default(
            result["text"],
            _VariationPayload,
            lambda: _VariationPayload.model_construct(
                translation=current_translation,
                difference="Could not generate variation"
            ),
            label="variation"
        )
        return VariationResult(translation=parsed.translation, difference=parsed.difference)
