"""
Deflate Decompression
=====================

Inflates compressed text chunk payloads. Two interchangeable backends are
tried in order: an incremental stream decoder, then a one-shot decoder that
also accepts gzip headers and raw deflate data. Callers only ever see
DecompressionFailedError when both give up.
"""

import io
import logging
import zlib
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_MAX_OUTPUT = 16 * 1024 * 1024
DEFAULT_CHUNK_SIZE = 64 * 1024


class DecompressionFailedError(Exception):
    """Compressed data could not be inflated by any backend."""
    pass


class InflatedSizeExceededError(DecompressionFailedError):
    """Compressed data inflates past the configured limit."""
    pass


class InflateBackend(ABC):
    """A single strategy for inflating deflate-compressed bytes."""

    name = "base"

    def is_available(self) -> bool:
        """Whether this backend can run in the current interpreter."""
        return True

    @abstractmethod
    def inflate(self, data: bytes, max_output: int) -> bytes:
        """
        Inflate data.

        Raises:
            DecompressionFailedError: If the data is invalid or inflates past max_output
        """
        pass


class StreamInflateBackend(InflateBackend):
    """Incremental zlib decoder fed in fixed-size blocks."""

    name = "stream"

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.chunk_size = chunk_size

    def is_available(self) -> bool:
        return hasattr(zlib, "decompressobj")

    def inflate(self, data: bytes, max_output: int) -> bytes:
        decompressor = zlib.decompressobj()
        output = bytearray()

        try:
            with io.BytesIO(data) as source:
                for block in iter(lambda: source.read(self.chunk_size), b""):
                    pending = block
                    while pending and not decompressor.eof:
                        output += decompressor.decompress(pending, max_output - len(output) + 1)
                        if len(output) > max_output:
                            raise InflatedSizeExceededError(
                                f"Inflated data exceeds {max_output} bytes"
                            )
                        pending = decompressor.unconsumed_tail
                    if decompressor.eof:
                        break
                output += decompressor.flush()
        except zlib.error as e:
            raise DecompressionFailedError(f"Invalid deflate stream: {e}") from e

        if not decompressor.eof:
            raise DecompressionFailedError("Deflate stream is truncated")
        if len(output) > max_output:
            raise InflatedSizeExceededError(f"Inflated data exceeds {max_output} bytes")
        return bytes(output)


class OneShotInflateBackend(InflateBackend):
    """Whole-buffer decoder tolerant of zlib, gzip and raw deflate framing."""

    name = "one-shot"

    # zlib or gzip header (auto-detected), then headerless deflate
    WINDOW_BITS = (zlib.MAX_WBITS | 32, -zlib.MAX_WBITS)

    def inflate(self, data: bytes, max_output: int) -> bytes:
        last_error: Optional[Exception] = None
        for wbits in self.WINDOW_BITS:
            decompressor = zlib.decompressobj(wbits)
            try:
                # Never produce more than one byte past the limit
                output = decompressor.decompress(data, max_output + 1)
                if len(output) > max_output:
                    raise InflatedSizeExceededError(f"Inflated data exceeds {max_output} bytes")
                output += decompressor.flush()
            except zlib.error as e:
                last_error = e
                continue
            if not decompressor.eof:
                last_error = zlib.error("incomplete or truncated stream")
                continue
            if len(output) > max_output:
                raise InflatedSizeExceededError(f"Inflated data exceeds {max_output} bytes")
            return output
        raise DecompressionFailedError(f"Invalid deflate stream: {last_error}")


class Inflater:
    """Try each inflate backend in turn until one succeeds."""

    def __init__(
        self,
        backends: Optional[Sequence[InflateBackend]] = None,
        max_output: int = DEFAULT_MAX_OUTPUT,
    ):
        if backends is None:
            backends = [StreamInflateBackend(), OneShotInflateBackend()]
        self.backends: List[InflateBackend] = list(backends)
        self.max_output = max_output

    def inflate(self, data: bytes) -> bytes:
        """
        Inflate deflate-compressed bytes.

        Args:
            data: Compressed bytes (zlib stream as written into PNG chunks)

        Returns:
            Inflated bytes

        Raises:
            DecompressionFailedError: If no backend could inflate the data
        """
        errors = []
        for backend in self.backends:
            if not backend.is_available():
                logger.debug(f"Inflate backend '{backend.name}' unavailable, skipping")
                continue
            try:
                return backend.inflate(data, self.max_output)
            except InflatedSizeExceededError:
                raise
            except Exception as e:
                logger.debug(f"Inflate backend '{backend.name}' failed: {e}")
                errors.append(f"{backend.name}: {e}")

        if not errors:
            raise DecompressionFailedError("No inflate backend available")
        raise DecompressionFailedError("; ".join(errors))
