"""
Text Chunk Decoder
==================

Turns scanned tEXt / iTXt / zTXt chunks into decoded text entries.

tEXt payloads are Latin-1. iTXt payloads carry a compression flag, a
language tag and a translated keyword ahead of UTF-8 text. zTXt payloads are
always deflate-compressed.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .inflate import DecompressionFailedError, Inflater
from .png_chunks import ChunkRecord, ChunkType

logger = logging.getLogger(__name__)

COMPRESSION_METHOD_DEFLATE = 0


class MalformedChunkError(Exception):
    """A text chunk's header fields are cut short."""
    pass


@dataclass(frozen=True)
class TextEntry:
    """Decoded text of one chunk."""
    keyword: str
    chunk_type: ChunkType
    text: str
    raw_text: bytes
    language_tag: str = ""
    translated_keyword: str = ""


def _read_field(payload: bytes, start: int, name: str) -> tuple[bytes, int]:
    """Read a NUL-terminated field, returning (field, offset after the NUL)."""
    end = payload.find(b"\x00", start)
    if end == -1:
        raise MalformedChunkError(f"iTXt {name} is not terminated")
    return payload[start:end], end + 1


class ChunkDecoder:
    """Decode text chunks, inflating compressed variants."""

    def __init__(self, inflater: Optional[Inflater] = None):
        self.inflater = inflater or Inflater()

    def decode(self, record: ChunkRecord) -> Optional[TextEntry]:
        """
        Decode a single chunk.

        Returns:
            TextEntry, or None if the chunk could not be decompressed or is malformed
        """
        try:
            if record.chunk_type == ChunkType.TEXT:
                return self._decode_text(record)
            if record.chunk_type == ChunkType.INTERNATIONAL_TEXT:
                return self._decode_international_text(record)
            if record.chunk_type == ChunkType.COMPRESSED_TEXT:
                return self._decode_compressed_text(record)
        except DecompressionFailedError as e:
            logger.warning(f"Dropping {record.chunk_type.value} chunk '{record.keyword}': {e}")
            return None
        except MalformedChunkError as e:
            logger.warning(f"Dropping malformed chunk '{record.keyword}': {e}")
            return None

        logger.debug(f"Ignoring unsupported chunk type {record.chunk_type}")
        return None

    def decode_all(self, records: Iterable[ChunkRecord]) -> List[TextEntry]:
        """Decode chunks in order, skipping the ones that fail."""
        entries = []
        for record in records:
            entry = self.decode(record)
            if entry is not None:
                entries.append(entry)
        return entries

    @staticmethod
    def _decode_text(record: ChunkRecord) -> TextEntry:
        return TextEntry(
            keyword=record.keyword,
            chunk_type=record.chunk_type,
            text=record.raw_payload.decode("latin-1"),
            raw_text=record.raw_payload,
        )

    def _decode_international_text(self, record: ChunkRecord) -> TextEntry:
        payload = record.raw_payload
        if len(payload) < 2:
            raise MalformedChunkError("iTXt compression fields are missing")

        compression_flag = payload[0]
        compression_method = payload[1]
        language_tag, offset = _read_field(payload, 2, "language tag")
        translated_keyword, offset = _read_field(payload, offset, "translated keyword")
        text_bytes = payload[offset:]

        if compression_flag == 1:
            if compression_method != COMPRESSION_METHOD_DEFLATE:
                raise DecompressionFailedError(
                    f"Unsupported compression method {compression_method}"
                )
            text_bytes = self.inflater.inflate(text_bytes)

        return TextEntry(
            keyword=record.keyword,
            chunk_type=record.chunk_type,
            text=text_bytes.decode("utf-8", errors="replace"),
            raw_text=text_bytes,
            language_tag=language_tag.decode("latin-1"),
            translated_keyword=translated_keyword.decode("utf-8", errors="replace"),
        )

    def _decode_compressed_text(self, record: ChunkRecord) -> TextEntry:
        payload = record.raw_payload
        if not payload:
            raise MalformedChunkError("zTXt compression method is missing")

        compression_method = payload[0]
        if compression_method != COMPRESSION_METHOD_DEFLATE:
            raise DecompressionFailedError(
                f"Unsupported compression method {compression_method}"
            )

        inflated = self.inflater.inflate(payload[1:])
        return TextEntry(
            keyword=record.keyword,
            chunk_type=record.chunk_type,
            text=inflated.decode("utf-8", errors="replace"),
            raw_text=inflated,
        )
