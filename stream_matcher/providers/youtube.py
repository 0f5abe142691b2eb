from __future__ import annotations

import logging
from typing import Any

import requests

from stream_matcher.keystore import YOUTUBE_API_KEY, SecretStore

from .base import MusicProvider
from .errors import InvalidResponse, SearchFailed
from .scoring import ScoreWeights, extract_artist, extract_title, pick_best, strip_marketing_suffixes
from .types import Candidate, SearchMatch, TrackSnapshot

logger = logging.getLogger(__name__)

API_URL = "https://www.googleapis.com/youtube/v3"


class YouTubeMusicProvider(MusicProvider):
    """
    Video search is free text, so both tiers score the returned videos
    instead of trusting the raw ranking.
    """

    name = "YouTube Music"
    required_keys = (YOUTUBE_API_KEY,)

    def __init__(
        self,
        secrets: SecretStore,
        *,
        session: requests.Session | None = None,
        timeout_s: float = 10.0,
        weights: ScoreWeights | None = None,
    ):
        super().__init__(secrets, session=session, timeout_s=timeout_s)
        self.weights = weights or ScoreWeights()

    def search_exact(self, title: str, artist: str, album: str) -> SearchMatch | None:
        self._ensure_configured()
        query = " ".join(x for x in (title, artist, album, "music") if x)
        return self._search(query, title=title, artist=artist, album=album)

    def search_fallback(self, title: str, artist: str) -> SearchMatch | None:
        self._ensure_configured()
        query = " ".join(x for x in (title, artist, "music") if x)
        return self._search(query, title=title, artist=artist, album="")

    def _search(self, query: str, *, title: str, artist: str, album: str) -> SearchMatch | None:
        params = {
            "part": "snippet",
            "type": "video",
            "q": query,
            "maxResults": 5,
            "key": self._require_key(YOUTUBE_API_KEY),
        }
        data = self._get_json(f"{API_URL}/search", params=params, headers={"Accept": "application/json"})
        candidates = self._parse_candidates(data)

        best = pick_best(candidates, title, artist, self.weights)
        if best is None:
            return None

        logger.debug("YouTube picked '%s' (%s) for %s - %s", best.title, best.channel, artist, title)
        return SearchMatch(
            provider=self.name,
            track_id=best.id,
            title=extract_title(best.title, title),
            artist=extract_artist(best.title, artist, title),
            album=album,
            share_url=f"https://youtu.be/{best.id}",
            web_player_url=f"https://music.youtube.com/watch?v={best.id}",
            app_url=f"https://music.youtube.com/watch?v={best.id}",
        )

    def _parse_candidates(self, data: Any) -> list[Candidate]:
        try:
            items = data["items"]
            return [
                Candidate(
                    id=str(item["id"]["videoId"]),
                    title=str(item["snippet"]["title"]),
                    channel=str(item["snippet"].get("channelTitle", "")),
                )
                for item in items
            ]
        except (KeyError, TypeError, AttributeError) as e:
            raise InvalidResponse(self.name, f"malformed search response: {e}") from e

    def video_details(self, video_id: str) -> TrackSnapshot:
        """Best-effort metadata of a single video: its channel stands in for the artist."""
        self._ensure_configured()
        params = {"part": "snippet", "id": video_id, "key": self._require_key(YOUTUBE_API_KEY)}
        data = self._get_json(f"{API_URL}/videos", params=params)
        try:
            items = data["items"]
        except (KeyError, TypeError) as e:
            raise InvalidResponse(self.name, "malformed videos response") from e
        if not items:
            raise SearchFailed(self.name, f"video {video_id} not found")

        try:
            snippet = items[0]["snippet"]
            video_title = str(snippet["title"])
            channel = str(snippet.get("channelTitle", ""))
        except (KeyError, TypeError, AttributeError) as e:
            raise InvalidResponse(self.name, "malformed video snippet") from e

        artist = channel.removesuffix(" - Topic").strip()
        title = video_title
        if " - " in video_title:
            left, right = (p.strip() for p in video_title.split(" - ", 1))
            artist, title = left, right
        return TrackSnapshot(title=strip_marketing_suffixes(title), artist=artist, track_id=video_id)
