"""
PNG Chunk Scanner
=================

Validates the PNG signature and walks the chunk stream, collecting the
ancillary text chunks (tEXt, iTXt, zTXt) that character cards are stored in.

Checksums are never verified. A chunk whose declared length runs past the
end of the buffer ends the scan; everything collected before it is kept.
"""

import logging
import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import List

logger = logging.getLogger(__name__)

PNG_SIGNATURE = bytes([137, 80, 78, 71, 13, 10, 26, 10])

# length (4) + type (4)
CHUNK_HEADER_SIZE = 8
CHUNK_CRC_SIZE = 4
END_CHUNK_TYPE = b"IEND"

_HEADER = struct.Struct(">I4s")


class NotContainerFormatError(Exception):
    """Data does not start with the PNG signature."""
    pass


class ChunkType(str, Enum):
    """Text-bearing chunk types materialized by the scanner."""
    TEXT = "tEXt"
    INTERNATIONAL_TEXT = "iTXt"
    COMPRESSED_TEXT = "zTXt"


TEXT_CHUNK_TYPES = {chunk_type.value.encode("ascii"): chunk_type for chunk_type in ChunkType}


@dataclass(frozen=True)
class ChunkRecord:
    """One text chunk, keyword already split from the payload."""
    keyword: str
    chunk_type: ChunkType
    raw_payload: bytes
    offset: int = 0


@dataclass
class ScanResult:
    """Text chunks collected by a single pass over the container."""
    chunks: List[ChunkRecord] = field(default_factory=list)
    truncated: bool = False
    reached_end: bool = False


def validate_signature(data: bytes) -> None:
    """
    Check that data starts with the 8-byte PNG signature.

    Raises:
        NotContainerFormatError: If the signature is missing or short
    """
    if len(data) < len(PNG_SIGNATURE) or data[:len(PNG_SIGNATURE)] != PNG_SIGNATURE:
        raise NotContainerFormatError("Data is not a PNG image (signature mismatch)")


def split_keyword(data: bytes) -> tuple[str, bytes]:
    """
    Split a text chunk's data at the first NUL.

    Returns (keyword, payload). A chunk without a NUL is all keyword.
    """
    separator = data.find(b"\x00")
    if separator == -1:
        return data.decode("latin-1"), b""
    return data[:separator].decode("latin-1"), data[separator + 1:]


def scan_text_chunks(data: bytes) -> ScanResult:
    """
    Walk the chunk stream of a PNG and collect its text chunks.

    Args:
        data: Complete PNG file contents

    Returns:
        ScanResult with text chunks in file order

    Raises:
        NotContainerFormatError: If data is not a PNG
    """
    validate_signature(data)

    result = ScanResult()
    view = memoryview(data)
    size = len(data)
    offset = len(PNG_SIGNATURE)

    while offset + CHUNK_HEADER_SIZE <= size:
        length, chunk_type = _HEADER.unpack_from(view, offset)
        chunk_offset = offset
        offset += CHUNK_HEADER_SIZE

        if chunk_type == END_CHUNK_TYPE:
            result.reached_end = True
            break

        if offset + length > size:
            logger.debug(
                f"Chunk {chunk_type!r} at offset {chunk_offset} declares {length} bytes "
                f"but only {size - offset} remain, stopping scan"
            )
            result.truncated = True
            break

        text_type = TEXT_CHUNK_TYPES.get(chunk_type)
        if text_type is not None:
            keyword, payload = split_keyword(bytes(view[offset:offset + length]))
            result.chunks.append(ChunkRecord(
                keyword=keyword,
                chunk_type=text_type,
                raw_payload=payload,
                offset=chunk_offset,
            ))
            logger.debug(f"Found {text_type.value} chunk '{keyword}' ({length} bytes)")

        offset += length + CHUNK_CRC_SIZE

    logger.debug(
        f"Scanned PNG: {len(result.chunks)} text chunk(s), "
        f"truncated={result.truncated}, reached_end={result.reached_end}"
    )
    return result
