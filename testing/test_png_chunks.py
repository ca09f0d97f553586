"""
Tests for PNG signature validation and the text chunk scanner.
"""

import struct

import pytest

from card_lens.services.character_cards.png_chunks import (
    ChunkType,
    NotContainerFormatError,
    scan_text_chunks,
    split_keyword,
    validate_signature,
)

from png_builders import (
    PNG_SIGNATURE,
    build_png,
    itxt_chunk,
    make_chunk,
    text_chunk,
    ztxt_chunk,
)


class TestSignature:
    """Signature validation."""

    def test_accepts_png_signature(self):
        validate_signature(PNG_SIGNATURE + b"rest")

    @pytest.mark.parametrize("data", [
        b"",
        PNG_SIGNATURE[:7],
        b"GIF89a\x00\x00\x00\x00",
        b"\x89PNG\r\n\x1a\x0b",
    ])
    def test_rejects_non_png(self, data):
        with pytest.raises(NotContainerFormatError):
            validate_signature(data)

    def test_scan_rejects_non_png(self):
        with pytest.raises(NotContainerFormatError):
            scan_text_chunks(b"\xff\xd8\xff\xe0 jpeg data")


class TestScanner:
    """Chunk stream walking."""

    def test_collects_text_chunks_in_file_order(self):
        png = build_png(
            text_chunk("first", "a"),
            itxt_chunk("second", "b"),
            ztxt_chunk("third", "c"),
        )
        result = scan_text_chunks(png)

        assert [c.keyword for c in result.chunks] == ["first", "second", "third"]
        assert [c.chunk_type for c in result.chunks] == [
            ChunkType.TEXT,
            ChunkType.INTERNATIONAL_TEXT,
            ChunkType.COMPRESSED_TEXT,
        ]
        assert result.reached_end is True
        assert result.truncated is False

    def test_keyword_split_before_payload(self):
        result = scan_text_chunks(build_png(text_chunk("chara", "{}")))

        record = result.chunks[0]
        assert record.keyword == "chara"
        assert record.raw_payload == b"{}"

    def test_ignores_other_chunk_types(self):
        png = build_png(make_chunk(b"tIME", b"\x07\xe8\x01\x01\x00\x00\x00"))
        result = scan_text_chunks(png)

        assert result.chunks == []
        assert result.reached_end is True

    def test_stops_at_iend(self):
        png = build_png(text_chunk("before", "x")) + text_chunk("after", "y")
        result = scan_text_chunks(png)

        assert [c.keyword for c in result.chunks] == ["before"]

    def test_truncated_chunk_keeps_earlier_chunks(self):
        png = build_png(text_chunk("chara", "{}"), end=False)
        # Declare far more data than remains
        png += struct.pack(">I", 10_000) + b"tEXt" + b"short"
        result = scan_text_chunks(png)

        assert [c.keyword for c in result.chunks] == ["chara"]
        assert result.truncated is True
        assert result.reached_end is False

    def test_missing_iend_is_partial_success(self):
        png = build_png(text_chunk("chara", "{}"), end=False)
        result = scan_text_chunks(png)

        assert len(result.chunks) == 1
        assert result.truncated is False
        assert result.reached_end is False

    def test_signature_only(self):
        result = scan_text_chunks(PNG_SIGNATURE)

        assert result.chunks == []

    def test_records_chunk_offsets(self):
        png = build_png(text_chunk("chara", "{}"))
        record = scan_text_chunks(png).chunks[0]

        assert png[record.offset + 4:record.offset + 8] == b"tEXt"


class TestSplitKeyword:
    """Keyword / payload separation."""

    def test_splits_at_first_nul(self):
        assert split_keyword(b"chara\x00a\x00b") == ("chara", b"a\x00b")

    def test_no_nul_is_all_keyword(self):
        assert split_keyword(b"lonely") == ("lonely", b"")

    def test_keyword_is_latin1(self):
        keyword, _ = split_keyword(b"caf\xe9\x00x")
        assert keyword == "café"
