from __future__ import annotations

import hashlib
import logging
from typing import Any
from urllib.parse import quote

from .base import MusicProvider
from .errors import InvalidResponse, SearchFailed
from .types import SearchMatch, TrackSnapshot

logger = logging.getLogger(__name__)

ITUNES_URL = "https://itunes.apple.com"


class AppleMusicProvider(MusicProvider):
    """
    Needs no credentials: exact matches come from the public iTunes Search
    API, and the fallback is a catalog search link for the query.
    """

    name = "Apple Music"
    required_keys = ()

    def search_exact(self, title: str, artist: str, album: str) -> SearchMatch | None:
        term = " ".join(x for x in (title, artist, album) if x)
        data = self._get_json(
            f"{ITUNES_URL}/search",
            params={"term": term, "media": "music", "entity": "song", "limit": 5},
        )
        for item in self._results(data):
            track_name = str(item.get("trackName", ""))
            artist_name = str(item.get("artistName", ""))
            if title.lower() in track_name.lower() and artist.lower() in artist_name.lower():
                return self._to_match(item)
        return None

    def search_fallback(self, title: str, artist: str) -> SearchMatch | None:
        term = quote(f"{title} {artist}".strip())
        search_url = f"https://music.apple.com/search?term={term}"
        return SearchMatch(
            provider=self.name,
            track_id=_query_id(title, artist),
            title=title,
            artist=artist,
            album="",
            share_url=search_url,
            web_player_url=search_url,
            app_url=f"music://search?term={term}",
        )

    def lookup(self, track_id: str) -> TrackSnapshot:
        data = self._get_json(f"{ITUNES_URL}/lookup", params={"id": track_id})
        results = self._results(data)
        if not results:
            raise SearchFailed(self.name, f"track {track_id} not found")
        m = self._to_match(results[0])
        return TrackSnapshot(title=m.title, artist=m.artist, album=m.album, track_id=m.track_id)

    def _results(self, data: Any) -> list[dict[str, Any]]:
        try:
            results = data["results"]
        except (KeyError, TypeError) as e:
            raise InvalidResponse(self.name, "response has no results") from e
        if not isinstance(results, list):
            raise InvalidResponse(self.name, "results is not a list")
        return results

    def _to_match(self, item: dict[str, Any]) -> SearchMatch:
        try:
            track_id = str(item["trackId"])
            title = str(item["trackName"])
            artist = str(item["artistName"])
            album = str(item.get("collectionName", ""))
        except (KeyError, TypeError) as e:
            raise InvalidResponse(self.name, f"malformed track: {e}") from e

        view_url = item.get("trackViewUrl")
        if view_url:
            share_url = str(view_url).replace("itunes.apple.com", "music.apple.com")
        else:
            share_url = f"https://music.apple.com/search?term={quote(f'{artist} {title}')}"
        return SearchMatch(
            provider=self.name,
            track_id=track_id,
            title=title,
            artist=artist,
            album=album,
            share_url=share_url,
            web_player_url=share_url,
            app_url=f"music://music.apple.com/song/{track_id}",
        )


def _query_id(title: str, artist: str) -> str:
    # stable across runs, unlike hash()
    return hashlib.sha1(f"{artist}-{title}".lower().encode("utf-8")).hexdigest()[:16]
