from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qs, urlparse

SPOTIFY = "Spotify"
APPLE_MUSIC = "Apple Music"
YOUTUBE_MUSIC = "YouTube Music"
YOUTUBE = "YouTube"

# checked in order; music.youtube.com must win over youtube.com
PLATFORM_DOMAINS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (SPOTIFY, ("open.spotify.com", "spotify.com")),
    (APPLE_MUSIC, ("music.apple.com", "itunes.apple.com")),
    (YOUTUBE_MUSIC, ("music.youtube.com",)),
    (YOUTUBE, ("youtube.com", "youtu.be")),
)


@dataclass(frozen=True, slots=True)
class ParsedLink:
    platform: str
    track_id: str
    url: str


def detect_platform(url: str) -> str | None:
    host = urlparse(url.strip()).hostname
    if not host:
        return None
    for platform, domains in PLATFORM_DOMAINS:
        if any(host == d or host.endswith("." + d) for d in domains):
            return platform
    return None


def _query_value(query: str, name: str) -> str | None:
    values = parse_qs(query).get(name)
    return values[0] if values and values[0] else None


def parse_music_url(url: str) -> ParsedLink | None:
    """
    Extract the track id from a track link of a supported platform.

    Supported shapes:
    - open.spotify.com/track/<id>, open.spotify.com/album/<a>/track/<id>
    - music.apple.com/<cc>/album/<name>/<album>?i=<id>, music.apple.com/<cc>/song/<name>/<id>
    - music.youtube.com/watch?v=<id>
    - youtube.com/watch?v=<id>, youtu.be/<id>
    """
    url = url.strip()
    platform = detect_platform(url)
    if platform is None:
        return None

    parsed = urlparse(url)
    parts = [p for p in parsed.path.split("/") if p]
    track_id: str | None = None

    if platform == SPOTIFY:
        if "track" in parts:
            idx = parts.index("track") + 1
            track_id = parts[idx] if idx < len(parts) else None
    elif platform == APPLE_MUSIC:
        track_id = _query_value(parsed.query, "i")
        if track_id is None and "song" in parts:
            # /song/<name>/<id>
            idx = parts.index("song") + 2
            track_id = parts[idx] if idx < len(parts) else None
    elif platform == YOUTUBE_MUSIC:
        track_id = _query_value(parsed.query, "v")
    elif platform == YOUTUBE:
        if (parsed.hostname or "").endswith("youtu.be"):
            track_id = parts[-1] if parts else None
        else:
            track_id = _query_value(parsed.query, "v")

    if not track_id:
        return None
    return ParsedLink(platform=platform, track_id=track_id, url=url)
