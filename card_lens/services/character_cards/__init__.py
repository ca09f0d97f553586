"""
Character Card System
====================

Recovers character cards embedded in the text chunks of PNG images.

Supports:
- tEXt, iTXt (plain or compressed) and zTXt chunks
- SillyTavern V2/V3 enveloped cards and bare JSON cards
- Raw, brace-delimited and base64-encoded JSON payloads
"""

from .card_importer import CardImporter, CardImportError, NoCardDataError, UnsupportedFileError
from .format_detector import FormatDetector
from .inflate import DecompressionFailedError, Inflater
from .metadata_extractor import CardMetadataExtractor, extract_card_metadata
from .models import CardFormat, CardKind, CardRecord, ExtractionResult, ExtractionStatus, PlotBeats
from .png_chunks import ChunkType, NotContainerFormatError

__all__ = [
    'CardImporter',
    'CardImportError',
    'NoCardDataError',
    'UnsupportedFileError',
    'FormatDetector',
    'DecompressionFailedError',
    'Inflater',
    'CardMetadataExtractor',
    'extract_card_metadata',
    'CardFormat',
    'CardKind',
    'CardRecord',
    'ExtractionResult',
    'ExtractionStatus',
    'PlotBeats',
    'ChunkType',
    'NotContainerFormatError',
]
