"""
Candidate selection for card text chunks.

Entries with a recognized keyword are tried first. Within the chosen set the
entry closest to the end of the file wins, since card tools append the
authoritative card last.
"""

from dataclasses import dataclass
from typing import Iterable, List

from card_lens.config.models import DEFAULT_CARD_KEYWORDS

from .chunk_decoder import TextEntry
from .png_chunks import ChunkType

RANK_RECOGNIZED = 0
RANK_UNRECOGNIZED = 1


@dataclass(frozen=True)
class CandidateEntry:
    """A decoded text entry queued for JSON recovery."""
    keyword: str
    text: str
    raw_text: bytes
    chunk_type: ChunkType
    priority_rank: int


def select_candidates(
    entries: Iterable[TextEntry],
    keywords: Iterable[str] = DEFAULT_CARD_KEYWORDS,
) -> List[CandidateEntry]:
    """
    Order decoded entries for JSON recovery.

    If any entry carries a recognized keyword, only recognized entries are
    returned; otherwise every entry is. Either way the result is in reverse
    scan order.

    Args:
        entries: Decoded text entries in file order
        keywords: Recognized keywords (compared case-insensitively)

    Returns:
        Candidates in the order they should be tried
    """
    recognized_set = {k.lower() for k in keywords}
    entries = list(entries)

    recognized = [e for e in entries if (e.keyword or "").lower() in recognized_set]
    if recognized:
        chosen, rank = recognized, RANK_RECOGNIZED
    else:
        chosen, rank = entries, RANK_UNRECOGNIZED

    return [
        CandidateEntry(
            keyword=entry.keyword,
            text=entry.text,
            raw_text=entry.raw_text,
            chunk_type=entry.chunk_type,
            priority_rank=rank,
        )
        for entry in reversed(chosen)
    ]
