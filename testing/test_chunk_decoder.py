"""
Tests for tEXt / iTXt / zTXt decoding.
"""

import zlib

from card_lens.services.character_cards.chunk_decoder import ChunkDecoder
from card_lens.services.character_cards.inflate import InflateBackend, Inflater
from card_lens.services.character_cards.png_chunks import ChunkRecord, ChunkType, scan_text_chunks

from png_builders import build_png, itxt_chunk, text_chunk, ztxt_chunk


class FailingBackend(InflateBackend):
    name = "failing"

    def inflate(self, data, max_output):
        raise RuntimeError("no inflate today")


def decode_single(chunk: bytes, decoder: ChunkDecoder = None):
    decoder = decoder or ChunkDecoder()
    records = scan_text_chunks(build_png(chunk)).chunks
    assert len(records) == 1
    return decoder.decode(records[0])


class TestPlainText:
    """tEXt chunks."""

    def test_decodes_latin1(self):
        entry = decode_single(text_chunk("comment", "café"))

        assert entry.keyword == "comment"
        assert entry.chunk_type == ChunkType.TEXT
        assert entry.text == "café"
        assert entry.raw_text == b"caf\xe9"

    def test_utf8_bytes_are_decoded_byte_for_byte(self):
        record = ChunkRecord(keyword="chara", chunk_type=ChunkType.TEXT, raw_payload="é".encode("utf-8"))
        entry = ChunkDecoder().decode(record)

        assert entry.text == "Ã©"
        assert entry.raw_text.decode("utf-8") == "é"


class TestInternationalText:
    """iTXt chunks."""

    def test_uncompressed(self):
        entry = decode_single(itxt_chunk("chara", "héllo ✨", language="en", translated_keyword="キャラ"))

        assert entry.chunk_type == ChunkType.INTERNATIONAL_TEXT
        assert entry.text == "héllo ✨"
        assert entry.language_tag == "en"
        assert entry.translated_keyword == "キャラ"

    def test_compressed(self):
        entry = decode_single(itxt_chunk("chara", '{"name": "Zoë"}', compressed=True))

        assert entry.text == '{"name": "Zoë"}'
        assert entry.raw_text == '{"name": "Zoë"}'.encode("utf-8")

    def test_unknown_compression_method_is_dropped(self):
        assert decode_single(itxt_chunk("chara", "{}", compressed=True, method=7)) is None

    def test_truncated_header_is_dropped(self):
        record = ChunkRecord(keyword="chara", chunk_type=ChunkType.INTERNATIONAL_TEXT, raw_payload=b"\x00")
        assert ChunkDecoder().decode(record) is None

    def test_unterminated_language_tag_is_dropped(self):
        record = ChunkRecord(
            keyword="chara",
            chunk_type=ChunkType.INTERNATIONAL_TEXT,
            raw_payload=b"\x00\x00en-US",
        )
        assert ChunkDecoder().decode(record) is None

    def test_invalid_utf8_is_replaced(self):
        record = ChunkRecord(
            keyword="chara",
            chunk_type=ChunkType.INTERNATIONAL_TEXT,
            raw_payload=b"\x00\x00\x00\x00ab\xffcd",
        )
        entry = ChunkDecoder().decode(record)
        assert entry.text == "ab�cd"


class TestCompressedText:
    """zTXt chunks."""

    def test_inflates_payload(self):
        entry = decode_single(ztxt_chunk("chara", '{"name": "Aria"}'))

        assert entry.chunk_type == ChunkType.COMPRESSED_TEXT
        assert entry.text == '{"name": "Aria"}'

    def test_unknown_method_is_dropped(self):
        assert decode_single(ztxt_chunk("chara", "{}", method=1)) is None

    def test_corrupt_payload_is_dropped(self):
        record = ChunkRecord(
            keyword="chara",
            chunk_type=ChunkType.COMPRESSED_TEXT,
            raw_payload=b"\x00not-deflate",
        )
        assert ChunkDecoder().decode(record) is None

    def test_empty_payload_is_dropped(self):
        record = ChunkRecord(keyword="chara", chunk_type=ChunkType.COMPRESSED_TEXT, raw_payload=b"")
        assert ChunkDecoder().decode(record) is None


class TestDecodeAll:
    """Failures stay local to one chunk."""

    def test_failed_chunk_does_not_stop_others(self):
        png = build_png(
            ztxt_chunk("broken", "{}", method=9),
            text_chunk("chara", "{}"),
        )
        entries = ChunkDecoder().decode_all(scan_text_chunks(png).chunks)

        assert [e.keyword for e in entries] == ["chara"]

    def test_decompression_failure_drops_only_compressed_chunks(self):
        decoder = ChunkDecoder(Inflater(backends=[FailingBackend()]))
        png = build_png(
            itxt_chunk("chara", "{}", compressed=True),
            text_chunk("comment", "plain"),
            ztxt_chunk("persona", "{}"),
        )
        entries = decoder.decode_all(scan_text_chunks(png).chunks)

        assert [e.keyword for e in entries] == ["comment"]

    def test_zlib_compressed_text_round_trip(self):
        text = "x" * 10_000
        record = ChunkRecord(
            keyword="big",
            chunk_type=ChunkType.COMPRESSED_TEXT,
            raw_payload=b"\x00" + zlib.compress(text.encode("utf-8")),
        )
        assert ChunkDecoder().decode(record).text == text
