from __future__ import annotations

from typing import Any

from stream_matcher.player.errors import NoPlayersFound, PlayerUnavailable
from stream_matcher.providers.types import TrackSnapshot


class MockMprisClient:
    """
    Mock MPRIS client for testing.

    Simulates a player with controllable state:
    - playback_status: "Playing", "Paused", "Stopped"
    - metadata: track info dict
    - unavailable: make every property read fail like a vanished player
    """

    def __init__(
        self,
        service_name: str = "org.mpris.MediaPlayer2.mock",
        playback_status: str = "Playing",
        metadata: dict[str, Any] | None = None,
    ):
        self.service_name = service_name
        self.unavailable = False
        self._playback_status = playback_status
        self._metadata: dict[str, Any] = dict(metadata) if metadata else {
            "xesam:title": "Test Track",
            "xesam:artist": ["Test Artist"],
            "xesam:album": "Test Album",
            "mpris:trackid": "/org/mpris/MediaPlayer2/Track/1",
        }

    @staticmethod
    def list_players() -> list[str]:
        return ["org.mpris.MediaPlayer2.mock"]

    @staticmethod
    def pick_player(preferred: str | None = None) -> MockMprisClient:
        if preferred and preferred != "mock":
            raise NoPlayersFound(f"Preferred player '{preferred}' not found")
        return MockMprisClient()

    def _check(self) -> None:
        if self.unavailable:
            raise PlayerUnavailable("org.freedesktop.DBus.Error.ServiceUnknown")

    def playback_status(self) -> str:
        self._check()
        return self._playback_status

    def is_playing(self) -> bool:
        return self.playback_status().lower() == "playing"

    def metadata(self) -> dict[str, Any]:
        self._check()
        return self._metadata.copy()

    def snapshot(self) -> TrackSnapshot:
        md = self.metadata()
        artist_list = md.get("xesam:artist", [])
        if isinstance(artist_list, (list, tuple)):
            artist = ", ".join(str(x) for x in artist_list if str(x))
        else:
            artist = str(artist_list)
        return TrackSnapshot(
            title=str(md.get("xesam:title", "")),
            artist=artist,
            album=str(md.get("xesam:album", "")),
            track_id=str(md.get("mpris:trackid", "")) or None,
        )

    def set_track(self, title: str, artist: str | list[str], album: str = "") -> None:
        """Helper to set track metadata."""
        artist_list = [artist] if isinstance(artist, str) else artist
        self._metadata.update({
            "xesam:title": title,
            "xesam:artist": artist_list,
            "xesam:album": album,
            "mpris:trackid": f"/org/mpris/MediaPlayer2/Track/{abs(hash((title, tuple(artist_list), album)))}",
        })

    def pause(self) -> None:
        self._playback_status = "Paused"

    def play(self) -> None:
        self._playback_status = "Playing"
