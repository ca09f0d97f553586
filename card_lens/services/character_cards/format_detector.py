"""
Card Format Detector
===================

Classifies a recovered card document by envelope and by what it describes.
"""

import logging
from typing import Any, Dict, Optional

from .models import CardFormat, CardKind

logger = logging.getLogger(__name__)


class FormatDetector:
    """Detect card envelope format and card kind."""

    SPEC_FORMATS = {
        "chara_card_v2": CardFormat.SILLYTAVERN_V2,
        "chara_card_v3": CardFormat.SILLYTAVERN_V3,
    }
    STORY_PLOT_KEYWORD = "story_plot"
    WORLD_SETTING_KEYWORD = "world_setting"

    @classmethod
    def detect_format(cls, document: Dict[str, Any], envelope_field: str = "data") -> CardFormat:
        """
        Detect the envelope of a recovered top-level object.

        Args:
            document: Parsed JSON object, before envelope unwrapping
            envelope_field: Name of the wrapping field

        Returns:
            CardFormat for the document
        """
        spec = document.get("spec")
        if isinstance(spec, str) and spec in cls.SPEC_FORMATS:
            return cls.SPEC_FORMATS[spec]
        if isinstance(spec, str) and spec:
            logger.debug(f"Unrecognized card spec: {spec}")
        if isinstance(document.get(envelope_field), dict):
            return CardFormat.ENVELOPED
        return CardFormat.BARE

    @classmethod
    def detect_kind(cls, metadata: Dict[str, Any], keyword: Optional[str] = None) -> CardKind:
        """
        Detect what an unwrapped card describes.

        Story plots are recognized by plot beats or a story_plot tag, world
        settings only by the chunk keyword they were stored under.
        """
        keyword = (keyword or "").lower()
        tags = metadata.get("tags")

        if metadata.get("plot_beats") or keyword == cls.STORY_PLOT_KEYWORD:
            return CardKind.STORY_PLOT
        if isinstance(tags, list) and cls.STORY_PLOT_KEYWORD in tags:
            return CardKind.STORY_PLOT
        if keyword == cls.WORLD_SETTING_KEYWORD:
            return CardKind.WORLD_SETTING
        return CardKind.CHARACTER

    @classmethod
    def get_format_name(cls, format: CardFormat) -> str:
        """Get human-readable format name."""
        names = {
            CardFormat.SILLYTAVERN_V2: "SillyTavern V2",
            CardFormat.SILLYTAVERN_V3: "SillyTavern V3",
            CardFormat.ENVELOPED: "Enveloped card",
            CardFormat.BARE: "Bare JSON card",
            CardFormat.UNKNOWN: "Unknown Format"
        }
        return names.get(format, "Unknown")
