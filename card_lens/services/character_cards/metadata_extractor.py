"""
Card Metadata Extractor
======================

Recovers a character card from the text chunks of a PNG image.

Pipeline: signature check -> chunk scan -> chunk decoding (with inflate) ->
candidate selection -> JSON recovery -> envelope unwrapping. Every stage is a
pure function of the input bytes, so extractions are independent and may run
concurrently.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from card_lens.config.models import ExtractorConfig
from card_lens.services.json_extraction import ParseMode, decode_base64_text, extract_json_object

from .candidate_selector import CandidateEntry, select_candidates
from .chunk_decoder import ChunkDecoder
from .format_detector import FormatDetector
from .inflate import Inflater, OneShotInflateBackend, StreamInflateBackend
from .models import CardMetadata, ExtractionResult, ExtractionStatus
from .png_chunks import NotContainerFormatError, scan_text_chunks

logger = logging.getLogger(__name__)


class CardMetadataExtractor:
    """Extract embedded card metadata from PNG bytes."""

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        inflater: Optional[Inflater] = None,
    ):
        """
        Initialize extractor.

        Args:
            config: Extraction settings (defaults used if omitted)
            inflater: Decompressor for compressed chunks (built from config if omitted)
        """
        self.config = config or ExtractorConfig()
        if inflater is None:
            inflater = Inflater(
                backends=[
                    StreamInflateBackend(chunk_size=self.config.stream_chunk_size),
                    OneShotInflateBackend(),
                ],
                max_output=self.config.max_inflated_bytes,
            )
        self.decoder = ChunkDecoder(inflater)

    def extract(self, data: bytes) -> ExtractionResult:
        """
        Run the full extraction pipeline.

        Args:
            data: Complete image file contents

        Returns:
            ExtractionResult; status is NOT_CONTAINER_FORMAT for non-PNG data
            and NOT_FOUND when no chunk holds a JSON object
        """
        data = bytes(data)

        try:
            scan = scan_text_chunks(data)
        except NotContainerFormatError as e:
            logger.warning(f"Failed to extract metadata: {e}")
            return ExtractionResult(status=ExtractionStatus.NOT_CONTAINER_FORMAT)

        if scan.truncated:
            logger.debug("PNG chunk stream is truncated, using chunks read so far")

        entries = self.decoder.decode_all(scan.chunks)
        candidates = select_candidates(entries, self.config.recognized_keywords)

        recovered = self._first_recovered(candidates, self.recover_document)
        if recovered is None and self.config.decode_base64:
            # Base64 is a separate pass, run only after every candidate failed
            # as plain text
            recovered = self._first_recovered(candidates, self.recover_base64_document)

        if recovered is None:
            logger.debug(f"No card metadata in {len(candidates)} candidate chunk(s)")
            return ExtractionResult(
                status=ExtractionStatus.NOT_FOUND,
                truncated=scan.truncated,
                chunk_count=len(scan.chunks),
            )

        candidate, document, parse_mode = recovered
        metadata = self.unwrap_envelope(document)
        card_format = FormatDetector.detect_format(document, self.config.envelope_field)
        card_kind = FormatDetector.detect_kind(metadata, candidate.keyword)
        logger.info(
            f"Recovered {FormatDetector.get_format_name(card_format)} "
            f"({card_kind.value}) from {candidate.chunk_type.value} chunk '{candidate.keyword}'"
        )
        return ExtractionResult(
            status=ExtractionStatus.FOUND,
            metadata=metadata,
            keyword=candidate.keyword,
            chunk_type=candidate.chunk_type,
            card_format=card_format,
            card_kind=card_kind,
            parse_mode=parse_mode,
            truncated=scan.truncated,
            chunk_count=len(scan.chunks),
        )

    async def extract_async(self, data: bytes) -> ExtractionResult:
        """Run extract() off the event loop."""
        return await asyncio.to_thread(self.extract, data)

    @staticmethod
    def _first_recovered(
        candidates: List[CandidateEntry],
        recover: Callable[[CandidateEntry], Tuple[Optional[Dict[str, Any]], ParseMode]],
    ) -> Optional[Tuple[CandidateEntry, Dict[str, Any], ParseMode]]:
        for candidate in candidates:
            document, parse_mode = recover(candidate)
            if document is not None:
                return candidate, document, parse_mode
            logger.debug(f"Chunk '{candidate.keyword}' holds no JSON object")
        return None

    def recover_document(self, candidate: CandidateEntry) -> Tuple[Optional[Dict[str, Any]], ParseMode]:
        """
        Recover a JSON object from one candidate.

        Tries the decoded text, then the raw bytes re-decoded as UTF-8.

        Returns:
            (parsed object or None, parse mode)
        """
        parsed, mode = extract_json_object(candidate.text)
        if parsed is not None:
            return parsed, mode

        return extract_json_object(candidate.raw_text.decode("utf-8", errors="replace"))

    def recover_base64_document(self, candidate: CandidateEntry) -> Tuple[Optional[Dict[str, Any]], ParseMode]:
        """Recover a JSON object from a candidate whose text is base64."""
        decoded = decode_base64_text(candidate.text)
        if decoded is None:
            return None, "failed"
        parsed, _ = extract_json_object(decoded)
        if parsed is None:
            return None, "failed"
        return parsed, "base64"

    def unwrap_envelope(self, document: Dict[str, Any]) -> CardMetadata:
        """Return the envelope's inner object if present, else the document (one level only)."""
        inner = document.get(self.config.envelope_field)
        if isinstance(inner, dict):
            return inner
        return document


def extract_card_metadata(
    data: bytes,
    config: Optional[ExtractorConfig] = None,
) -> Optional[CardMetadata]:
    """
    Extract card metadata from PNG bytes.

    Returns:
        Card metadata, or None if the data is not a PNG or carries no card
    """
    result = CardMetadataExtractor(config).extract(data)
    return result.metadata if result.found else None
