from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

import requests

from stream_matcher.keystore import SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET, SecretStore

from .base import MusicProvider
from .errors import AuthenticationFailed, InvalidResponse
from .types import SearchMatch, TrackSnapshot

logger = logging.getLogger(__name__)

API_URL = "https://api.spotify.com/v1"
TOKEN_URL = "https://accounts.spotify.com/api/token"


class SpotifyProvider(MusicProvider):
    name = "Spotify"
    required_keys = (SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET)

    def __init__(
        self,
        secrets: SecretStore,
        *,
        session: requests.Session | None = None,
        timeout_s: float = 10.0,
        expiry_buffer_s: float = 60.0,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(secrets, session=session, timeout_s=timeout_s)
        self.expiry_buffer_s = expiry_buffer_s
        self._clock = clock
        self._token: str | None = None
        self._token_expires_at = 0.0
        self._token_lock = threading.Lock()

    # --- auth ---

    def _access_token(self) -> str:
        with self._token_lock:
            if self._token and self._clock() < self._token_expires_at - self.expiry_buffer_s:
                return self._token
            return self._request_token()

    def _request_token(self) -> str:
        client_id = self._require_key(SPOTIFY_CLIENT_ID)
        client_secret = self._require_key(SPOTIFY_CLIENT_SECRET)

        requested_at = self._clock()
        try:
            r = self.session.post(
                TOKEN_URL,
                data={"grant_type": "client_credentials"},
                auth=(client_id, client_secret),
                timeout=self.timeout_s,
            )
        except requests.RequestException as e:
            raise AuthenticationFailed(self.name, str(e)) from e
        if r.status_code != 200:
            raise AuthenticationFailed(self.name, f"token endpoint returned HTTP {r.status_code}")

        try:
            data = r.json()
            token = str(data["access_token"])
            expires_in = int(data["expires_in"])
        except (ValueError, KeyError, TypeError) as e:
            raise InvalidResponse(self.name, "malformed token response") from e

        self._token = token
        self._token_expires_at = requested_at + expires_in
        logger.debug("Spotify token refreshed, valid for %ss", expires_in)
        return token

    def _api_get(self, path: str, params: dict[str, Any]) -> Any:
        token = self._access_token()
        return self._get_json(f"{API_URL}{path}", params=params, headers={"Authorization": f"Bearer {token}"})

    # --- search ---

    def search_exact(self, title: str, artist: str, album: str) -> SearchMatch | None:
        self._ensure_configured()
        query = f"{title} artist:{artist}"
        if album:
            query += f" album:{album}"
        items = self._search_items(query, limit=1)
        if not items:
            return None
        return self._to_match(items[0])

    def search_fallback(self, title: str, artist: str) -> SearchMatch | None:
        self._ensure_configured()
        items = self._search_items(f"{title} {artist}", limit=5)
        if not items:
            return None

        wanted = artist.lower()
        for item in items:
            found = self._first_artist(item).lower()
            if wanted and found and (wanted in found or found in wanted):
                return self._to_match(item)
        return self._to_match(items[0])

    def _search_items(self, query: str, *, limit: int) -> list[dict[str, Any]]:
        data = self._api_get("/search", {"q": query, "type": "track", "limit": limit})
        try:
            items = data["tracks"]["items"]
        except (KeyError, TypeError) as e:
            raise InvalidResponse(self.name, "search response has no tracks") from e
        if not isinstance(items, list):
            raise InvalidResponse(self.name, "tracks.items is not a list")
        return items

    def track_details(self, track_id: str) -> TrackSnapshot:
        self._ensure_configured()
        item = self._api_get(f"/tracks/{track_id}", {})
        match = self._to_match(item)
        return TrackSnapshot(title=match.title, artist=match.artist, album=match.album, track_id=match.track_id)

    # --- parsing ---

    def _first_artist(self, item: dict[str, Any]) -> str:
        try:
            artists = item.get("artists") or []
            return str(artists[0]["name"]) if artists else ""
        except (AttributeError, KeyError, TypeError) as e:
            raise InvalidResponse(self.name, "malformed artist list") from e

    def _to_match(self, item: dict[str, Any]) -> SearchMatch:
        try:
            track_id = str(item["id"])
            url = str(item["external_urls"]["spotify"])
            return SearchMatch(
                provider=self.name,
                track_id=track_id,
                title=str(item["name"]),
                artist=self._first_artist(item),
                album=str(item["album"]["name"]),
                share_url=url,
                web_player_url=url,
                app_url=f"spotify:track:{track_id}",
            )
        except (KeyError, TypeError) as e:
            raise InvalidResponse(self.name, f"malformed track: {e}") from e
