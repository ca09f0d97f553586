"""Shared fixtures for Card Lens tests."""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from card_lens.config import ExtractorConfig
from card_lens.services.character_cards import CardMetadataExtractor

from png_builders import build_png, text_chunk


@pytest.fixture
def extractor():
    return CardMetadataExtractor(ExtractorConfig())


@pytest.fixture
def aria_png():
    """PNG with a single plain chara chunk."""
    return build_png(text_chunk("chara", '{"name":"Aria","tags":["test"]}'))
