"""
결과 모델 - 파이프라인 및 프로바이더 반환 타입

프로바이더 호출 결과(dataclass)와 호출자에게 반환되는 결과(pydantic)를 정의합니다.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


# =============================================================================
# 프로바이더 결과 (내부용)
# =============================================================================

@dataclass
class ProviderTranslation:
    """단일 번역 호출 결과"""
    translation: str                              # 번역 텍스트
    confidence: float = 1.0                       # 번역 신뢰도 (0~1)
    notes: str = ""                               # 번역 노트
    token_usage: Optional[Dict[str, int]] = None  # 토큰 사용량
    latency_ms: int = 0                           # 응답 시간 (밀리초)


@dataclass
class RuleTransformation:
    """규칙 변환 결과 (같은 언어 내 스타일 변환)"""
    transformed_text: str
    applied_rules: List[str] = field(default_factory=list)
    error: Optional[str] = None                   # 실패 시 원인 (비치명적)


# =============================================================================
# 호출자 결과
# =============================================================================

class AccuracyScore(BaseModel):
    """Meaning-preservation estimate for a round trip"""

    score: int = Field(..., ge=0, le=100, description="0-100")
    explanation: str = Field(default="", description="Human-readable band")

    class Config:
        frozen = True


class TranslationResult(BaseModel):
    """번역 결과 - Immutable once returned"""

    original: str
    source_language: Literal["ko", "en"] = Field(..., alias="sourceLanguage")
    target_language: Literal["ko", "en"] = Field(..., alias="targetLanguage")
    translation: str
    translation_confidence: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        alias="translationConfidence"
    )
    translation_notes: str = Field(default="", alias="translationNotes")
    re_translation: str = Field(..., alias="reTranslation")
    re_translation_notes: str = Field(default="", alias="reTranslationNotes")
    accuracy_score: AccuracyScore = Field(..., alias="accuracyScore")
    profile_used: str = Field(..., alias="profileUsed")
    transformed_text: Optional[str] = Field(default=None, alias="transformedText")

    class Config:
        populate_by_name = True
        frozen = True
        json_schema_extra = {
            "example": {
                "original": "안녕하세요",
                "sourceLanguage": "ko",
                "targetLanguage": "en",
                "translation": "Hello",
                "translationConfidence": 1.0,
                "translationNotes": "Using formal tone for respectful communication",
                "reTranslation": "안녕하세요",
                "reTranslationNotes": "",
                "accuracyScore": {"score": 100, "explanation": "Excellent semantic preservation"},
                "profileUsed": "Natural",
                "transformedText": None
            }
        }

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class VariationResult(BaseModel):
    """Alternate phrasing of an existing translation"""

    translation: str
    difference: str = ""

    class Config:
        frozen = True


class Alternative(BaseModel):
    """Alternative wording for a highlighted span"""

    text: str
    nuance: str = ""
