"""
Character Card Data Models
=========================

Pydantic models for extraction results and the in-memory card record
built from recovered metadata.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Dict, List, Any
from pydantic import BaseModel, ConfigDict, Field

from card_lens.services.json_extraction import ParseMode

from .png_chunks import ChunkType


# Recovered card documents are open-ended: any JSON object is accepted
CardMetadata = Dict[str, Any]


class ExtractionStatus(str, Enum):
    """Outcome of a metadata extraction."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    NOT_CONTAINER_FORMAT = "not_container_format"


class CardFormat(str, Enum):
    """Envelope the recovered card was stored in."""
    SILLYTAVERN_V2 = "chara_card_v2"
    SILLYTAVERN_V3 = "chara_card_v3"
    ENVELOPED = "enveloped"
    BARE = "bare"
    UNKNOWN = "unknown"


class CardKind(str, Enum):
    """What the card describes."""
    CHARACTER = "character"
    WORLD_SETTING = "world_setting"
    STORY_PLOT = "story_plot"


class PlotBeats(BaseModel):
    """Story plot beats carried by story-plot cards."""
    model_config = ConfigDict(extra='ignore')

    setup: Optional[str] = None
    conflict: Optional[str] = None
    twist: Optional[str] = None
    climax: Optional[str] = None
    resolution: Optional[str] = None


class ExtractionResult(BaseModel):
    """Result of a card metadata extraction."""
    status: ExtractionStatus
    metadata: Optional[CardMetadata] = None
    keyword: Optional[str] = None
    chunk_type: Optional[ChunkType] = None
    card_format: CardFormat = CardFormat.UNKNOWN
    card_kind: Optional[CardKind] = None
    parse_mode: Optional[ParseMode] = None
    truncated: bool = False
    chunk_count: int = 0

    @property
    def found(self) -> bool:
        return self.status == ExtractionStatus.FOUND


class CardRecord(BaseModel):
    """Card as held by the application after import."""
    id: str
    title: str
    name: str
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    personality: str = ""
    first_mes: str = ""
    plot_beats: Optional[PlotBeats] = None
    character_data: CardMetadata = Field(default_factory=dict)
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())
