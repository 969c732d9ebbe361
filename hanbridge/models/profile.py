"""
Translation Profile - Named style rule sets that bias translation output
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Formality(str, Enum):
    """Formality dial accepted by the formality-aware backend"""

    PREFER_MORE = "prefer_more"
    DEFAULT = "default"
    PREFER_LESS = "prefer_less"


class TranslationProfile(BaseModel):
    """번역 프로파일 - Named bundle of style rules"""

    id: str = Field(..., description="Unique profile id (e.g., natural)")
    name: str = Field(..., description="Display name")
    description: str = Field(..., description="Free-form style description")
    rules: List[str] = Field(
        default_factory=list,
        description="Ordered style rules"
    )
    is_default: bool = Field(
        default=False,
        alias="isDefault",
        description="Built-in profile"
    )
    can_delete: bool = Field(
        default=True,
        alias="canDelete",
        description="False for built-in profiles"
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": "custom-1718000000000",
                "name": "Work Chat",
                "description": "Polite but concise tone for coworkers",
                "rules": ["Use 해요체", "Avoid slang"],
                "isDefault": False,
                "canDelete": True
            }
        }

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


@dataclass
class EffectiveProfile:
    """Concrete generation parameters resolved from a profile id + custom rules"""
    profile_id: str
    name: str
    description: str
    rules: List[str] = field(default_factory=list)
    formality: Formality = Formality.DEFAULT
    note: str = ""                                        # translationNotes for the formality path
    custom_rules: List[str] = field(default_factory=list)  # unmerged, for rule transformation
    source_profile: Optional[TranslationProfile] = None
