"""
Character Card Importer
======================

Build in-memory card records from PNG images carrying card metadata.
"""

import logging
import re
import time
from typing import Any, List, Optional

from pydantic import ValidationError

from .metadata_extractor import CardMetadataExtractor
from .models import CardMetadata, CardRecord, ExtractionStatus, PlotBeats

logger = logging.getLogger(__name__)

STORY_PLOT_TAG = "Story Plot"


class CardImportError(Exception):
    """Base exception for card import failures."""
    pass


class UnsupportedFileError(CardImportError):
    """File is not a PNG image."""
    pass


class NoCardDataError(CardImportError):
    """PNG carries no recognizable card."""
    pass


class CardImporter:
    """Import cards from PNG files into CardRecords."""

    def __init__(self, extractor: Optional[CardMetadataExtractor] = None):
        self.extractor = extractor or CardMetadataExtractor()

    def import_png(self, png_data: bytes, filename: Optional[str] = None) -> CardRecord:
        """
        Import a card from PNG data.

        Args:
            png_data: PNG file data as bytes
            filename: Original file name, used as a fallback title

        Returns:
            CardRecord populated from the card metadata

        Raises:
            UnsupportedFileError: If the data is not a PNG
            NoCardDataError: If the PNG contains no card data
        """
        result = self.extractor.extract(png_data)

        if result.status == ExtractionStatus.NOT_CONTAINER_FORMAT:
            raise UnsupportedFileError("Unsupported file: not a PNG image")
        if not result.found:
            raise NoCardDataError("No character card data found in PNG")

        record = self.build_record(result.metadata, filename)
        logger.info(f"Imported card '{record.title}' ({result.card_format.value})")
        return record

    def build_record(self, metadata: CardMetadata, filename: Optional[str] = None) -> CardRecord:
        """
        Map recovered metadata onto a CardRecord.

        Missing fields fall back to the filename (title), creator notes
        (description) or empty values. Story plots get a "Story Plot" tag.
        """
        name = _text(metadata.get("name"))
        tags = _string_list(metadata.get("tags"))
        plot_beats = self._parse_plot_beats(metadata.get("plot_beats"))

        if metadata.get("plot_beats") or "story_plot" in tags:
            if STORY_PLOT_TAG not in tags:
                tags.append(STORY_PLOT_TAG)

        return CardRecord(
            id=_text(metadata.get("id")) or str(int(time.time() * 1000)),
            title=name or self._title_from_filename(filename) or "Untitled",
            name=name or "Unknown",
            description=_text(metadata.get("description")) or _text(metadata.get("creator_notes")),
            tags=tags,
            personality=_text(metadata.get("personality")),
            first_mes=_text(metadata.get("first_mes")),
            plot_beats=plot_beats,
            character_data=metadata,
        )

    @staticmethod
    def _parse_plot_beats(value: Any) -> Optional[PlotBeats]:
        if not isinstance(value, dict):
            return None
        try:
            return PlotBeats.model_validate(value)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed plot_beats: {e}")
            return None

    @staticmethod
    def _title_from_filename(filename: Optional[str]) -> str:
        if not filename:
            return ""
        return re.sub(r"\.png$", "", filename, flags=re.IGNORECASE)


def _text(value: Any) -> str:
    """Card fields are strings; numbers are tolerated, anything else is dropped."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]
