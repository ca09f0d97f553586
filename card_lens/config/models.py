"""Pydantic models for configuration validation."""

from typing import List
from pydantic import BaseModel, Field, field_validator, ConfigDict


# Keywords used by card tools (SillyTavern / CCV2 / CCV3 / MetaCapture and friends)
DEFAULT_CARD_KEYWORDS = (
    "chara",
    "chara_card",
    "chara_card_v2",
    "chara_card_v3",
    "json",
    "ai_character",
    "persona",
    "character",
    "v2card",
    "izk_v2_card",
    "story_plot",
    "world_setting",
)


class ExtractorConfig(BaseModel):
    """Card metadata extraction configuration."""
    
    recognized_keywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CARD_KEYWORDS),
        description="Text chunk keywords tried ahead of all others (case-insensitive)"
    )
    max_inflated_bytes: int = Field(
        default=16 * 1024 * 1024,
        gt=0,
        description="Upper bound on the size of a single decompressed text chunk"
    )
    stream_chunk_size: int = Field(default=64 * 1024, gt=0)
    decode_base64: bool = Field(
        default=True,
        description="Try base64-decoding chunk text when it does not parse as JSON"
    )
    envelope_field: str = Field(default="data", min_length=1)
    
    @field_validator('recognized_keywords')
    @classmethod
    def normalize_keywords(cls, v: List[str]) -> List[str]:
        """Store keywords lowercase, dropping blanks and duplicates."""
        seen = []
        for keyword in v:
            keyword = keyword.strip().lower()
            if keyword and keyword not in seen:
                seen.append(keyword)
        return seen


class SystemConfig(BaseModel):
    """Top-level system configuration."""
    
    model_config = ConfigDict(extra='ignore')
    
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    debug: bool = False
    api_host: str = "localhost"
    api_port: int = Field(default=8080, gt=0, le=65535)
