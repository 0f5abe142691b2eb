from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Sequence

from .types import Candidate

CHANNEL_MARKERS = ("official", "music", "records")
UNWANTED_MARKERS = ("cover", "remix", "karaoke")

_SUFFIX_RE = re.compile(
    r"\s*[\(\[]\s*(?:official\s+(?:music\s+|lyric\s+)?(?:video|audio)|lyrics)\s*[\)\]]",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class ScoreWeights:
    title_match: int = 10
    artist_match: int = 10
    official_channel: int = 5
    official_title: int = 3
    unwanted_version: int = -5


def score_candidate(candidate: Candidate, title: str, artist: str, weights: ScoreWeights | None = None) -> int:
    w = weights or ScoreWeights()
    video_title = candidate.title.lower()
    channel = candidate.channel.lower()

    score = 0
    if title and title.lower() in video_title:
        score += w.title_match
    if artist and artist.lower() in video_title:
        score += w.artist_match
    if any(m in channel for m in CHANNEL_MARKERS):
        score += w.official_channel
    if "official" in video_title:
        score += w.official_title
    if any(m in video_title for m in UNWANTED_MARKERS):
        score += w.unwanted_version
    return score


def pick_best(
    candidates: Sequence[Candidate],
    title: str,
    artist: str,
    weights: ScoreWeights | None = None,
) -> Candidate | None:
    """
    Highest scoring candidate; on a tie the earlier (better ranked) one wins.
    """
    best: Candidate | None = None
    best_score = 0
    for c in candidates:
        score = score_candidate(c, title, artist, weights)
        if best is None or score > best_score:
            best, best_score = c, score
    return best


def strip_marketing_suffixes(text: str) -> str:
    return _SUFFIX_RE.sub("", text).strip()


def _contains(haystack: str, needle: str) -> bool:
    return bool(needle) and needle.lower() in haystack.lower()


def _split_artist_title(cleaned: str, title: str) -> tuple[str | None, str]:
    # "Artist - Title" → (artist, title); the side holding the query title is the title
    if " - " not in cleaned:
        return None, cleaned
    left, right = (part.strip() for part in cleaned.split(" - ", 1))
    if _contains(left, title) and not _contains(right, title):
        return right, left
    return left, right


def extract_title(video_title: str, query_title: str) -> str:
    cleaned = strip_marketing_suffixes(video_title)
    _, derived = _split_artist_title(cleaned, query_title)
    if not _contains(derived, query_title):
        return query_title
    return derived


def extract_artist(video_title: str, query_artist: str, query_title: str = "") -> str:
    cleaned = strip_marketing_suffixes(video_title)
    derived, _ = _split_artist_title(cleaned, query_title)
    if not derived or not _contains(derived, query_artist):
        return query_artist
    return derived
