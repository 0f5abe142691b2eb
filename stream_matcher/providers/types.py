from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TrackSnapshot:
    title: str
    artist: str
    album: str = ""
    # player-native id, when the player exposes one
    track_id: str | None = None

    @property
    def identity(self) -> tuple[str, str]:
        return (self.title, self.artist)

    @property
    def display(self) -> str:
        if self.artist and self.title:
            return f"{self.title} - {self.artist}"
        return self.title or self.artist or "Unknown track"


@dataclass(frozen=True, slots=True)
class SearchMatch:
    """A provider's best match for a track."""
    provider: str
    track_id: str
    title: str
    artist: str
    album: str
    share_url: str
    web_player_url: str | None = None
    app_url: str | None = None

    @property
    def preferred_url(self) -> str:
        return self.app_url or self.web_player_url or self.share_url


@dataclass(frozen=True, slots=True)
class Candidate:
    """A raw, loosely structured search hit (e.g. a video title + channel)."""
    id: str
    title: str
    channel: str = ""
