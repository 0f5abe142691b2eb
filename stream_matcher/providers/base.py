from __future__ import annotations

import logging
from typing import Any

import requests

from stream_matcher.keystore import SecretStore

from .errors import InvalidResponse, NotConfigured, SearchFailed
from .types import SearchMatch, TrackSnapshot

logger = logging.getLogger(__name__)


class MusicProvider:
    name: str
    required_keys: tuple[str, ...] = ()

    def __init__(self, secrets: SecretStore, *, session: requests.Session | None = None, timeout_s: float = 10.0):
        self.secrets = secrets
        self.session = session or requests.Session()
        self.timeout_s = timeout_s

    def is_configured(self) -> bool:
        return all(self.secrets.has(k) for k in self.required_keys)

    def search_exact(self, title: str, artist: str, album: str) -> SearchMatch | None:
        raise NotImplementedError

    def search_fallback(self, title: str, artist: str) -> SearchMatch | None:
        raise NotImplementedError

    def find_match(self, track: TrackSnapshot) -> SearchMatch | None:
        match = self.search_exact(track.title, track.artist, track.album)
        if match is None:
            logger.debug("%s: no exact match for %s, trying fallback", self.name, track.display)
            match = self.search_fallback(track.title, track.artist)
        return match

    def _require_key(self, key: str) -> str:
        value = self.secrets.get(key)
        if not value:
            raise NotConfigured(self.name, f"missing {key}")
        return value

    def _ensure_configured(self) -> None:
        if not self.is_configured():
            raise NotConfigured(self.name, "credentials missing")

    def _get_json(self, url: str, *, params: dict[str, Any], headers: dict[str, str] | None = None) -> Any:
        try:
            r = self.session.get(url, params=params, headers=headers, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise SearchFailed(self.name, str(e)) from e
        if r.status_code != 200:
            raise SearchFailed(self.name, f"HTTP {r.status_code}")
        try:
            return r.json()
        except ValueError as e:
            raise InvalidResponse(self.name, "response is not JSON") from e
