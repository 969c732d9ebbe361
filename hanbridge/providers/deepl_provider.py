"""
DeepL 프로바이더 - 포맷(formality) 다이얼 기반 결정적 번역

- 클라이언트는 첫 호출 시 생성되어 프로바이더 수명 동안 재사용
- formality는 지원 언어(기본: ko)로 번역할 때만 전송
- formality 거부 시 경고 로그 후 formality 없이 1회 재시도
- 블로킹 호출은 executor에서 실행, 호출당 타임아웃 적용
"""

import asyncio
import logging
import threading
import time
from typing import Any, Iterable, Optional

import deepl

from hanbridge.errors import FormalityNotSupportedError, ProviderError
from hanbridge.models import EffectiveProfile, Formality, ProviderTranslation
from hanbridge.providers.base import TranslationProvider
from hanbridge.utils.observability import trace_agent

logger = logging.getLogger(__name__)

# 내부 언어 코드 -> DeepL 대상 언어 코드
DEEPL_TARGET_CODES = {
    "ko": "KO",
    "en": "EN-US",
}


class DeepLProvider(TranslationProvider):
    """
    Formality-aware provider backed by the DeepL API.

    Usage:
        provider = DeepLProvider(api_key=os.environ["DEEPL_API_KEY"])
        result = await provider.translate("안녕하세요", "ko", "en", profile)
    """

    def __init__(
        self,
        api_key: str = "",
        server_url: Optional[str] = None,
        timeout_seconds: float = 30.0,
        formality_languages: Iterable[str] = ("ko",),
        client: Optional[Any] = None
    ):
        """
        Args:
            api_key: DeepL auth key
            server_url: Optional API endpoint override
            timeout_seconds: Per-call timeout
            formality_languages: Target languages that accept a formality hint
            client: Pre-built translator (tests inject a fake here)
        """
        self._api_key = api_key
        self._server_url = server_url
        self._timeout_seconds = timeout_seconds
        self._formality_languages = set(formality_languages)
        self._client = client
        self._client_lock = threading.Lock()

        if client is None and not api_key:
            logger.warning("DEEPL_API_KEY not configured; DeepL calls will fail until it is set")

    @property
    def name(self) -> str:
        return "deepl"

    @property
    def supports_instructions(self) -> bool:
        return False

    def _get_client(self):
        """Build the translator once; later calls return the same instance"""
        if self._client is not None:
            return self._client

        with self._client_lock:
            if self._client is None:
                if not self._api_key:
                    raise ProviderError("DeepL API key is not configured", provider=self.name)
                self._client = deepl.Translator(self._api_key, server_url=self._server_url)
                logger.info("DeepL client initialized")
        return self._client

    def _translate_sync(self, text: str, target_code: str, formality: Optional[str]) -> str:
        client = self._get_client()
        kwargs = {"target_lang": target_code}
        if formality is not None:
            kwargs["formality"] = formality

        try:
            result = client.translate_text(text, **kwargs)
        except deepl.DeepLException as e:
            if formality is not None:
                raise FormalityNotSupportedError(str(e), provider=self.name, cause=e) from e
            raise ProviderError(str(e), provider=self.name, cause=e) from e

        return result.text

    async def _call(self, text: str, target_code: str, formality: Optional[str]) -> str:
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(None, self._translate_sync, text, target_code, formality),
                timeout=self._timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"DeepL request timed out after {self._timeout_seconds}s",
                provider=self.name,
                cause=e
            ) from e

    async def translate(
        self,
        text: str,
        source_language: str,
        target_language: str,
        profile: EffectiveProfile
    ) -> ProviderTranslation:
        start_time = time.time()
        target_code = DEEPL_TARGET_CODES[target_language]

        formality: Optional[str] = None
        if target_language in self._formality_languages:
            formality = Formality(profile.formality).value

        with trace_agent("deepl.translate") as (span, record):
            record("input", {
                "source_language": source_language,
                "target_code": target_code,
                "formality": formality or "none",
                "length": len(text)
            })

            try:
                translated = await self._call(text, target_code, formality)
            except FormalityNotSupportedError as e:
                logger.warning(
                    f"DeepL rejected formality={formality} for {target_code}, retrying without: {e}"
                )
                translated = await self._call(text, target_code, None)

            record("output", {"length": len(translated)})

        latency_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"[DeepL] {source_language}->{target_language} ({latency_ms}ms)")

        return ProviderTranslation(
            translation=translated,
            confidence=1.0,
            notes=profile.note,
            latency_ms=latency_ms
        )
