"""
Translation Request - Single user translation request
"""

from pydantic import BaseModel, Field
from typing import List

from hanbridge.errors import ValidationError


class TranslationRequest(BaseModel):
    """번역 요청 - 단일 사용자 입력"""

    text: str = Field(..., description="Text to translate (Korean or English)")
    profile_id: str = Field(
        default="natural",
        alias="profileId",
        description="Translation profile id"
    )
    custom_rules: List[str] = Field(
        default_factory=list,
        alias="customRules",
        description="Extra style rules for this request only"
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "text": "오늘 날씨가 좋네요",
                "profileId": "parent-talk",
                "customRules": ["Keep it short"]
            }
        }

    def ensure_valid(self) -> "TranslationRequest":
        """Raise ValidationError for empty or whitespace-only text"""
        if not self.text or not self.text.strip():
            raise ValidationError("Text is required")
        return self
