from __future__ import annotations

import logging
from typing import Any

import dbus

from stream_matcher.providers.types import TrackSnapshot

from .errors import NoPlayersFound, PlayerUnavailable

logger = logging.getLogger(__name__)

MPRIS_PREFIX = "org.mpris.MediaPlayer2."
PLAYER_IFACE = "org.mpris.MediaPlayer2.Player"


def _to_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return ""


def _join_artist(value: Any) -> str:
    if isinstance(value, (list, tuple, dbus.Array)):
        return ", ".join(_to_str(x) for x in value if _to_str(x))
    return _to_str(value)


class MprisClient:
    def __init__(self, service_name: str):
        self.service_name = service_name
        self._bus = dbus.SessionBus()
        self._obj = self._bus.get_object(service_name, "/org/mpris/MediaPlayer2")
        self._props = dbus.Interface(self._obj, "org.freedesktop.DBus.Properties")

    @staticmethod
    def list_players() -> list[str]:
        try:
            bus = dbus.SessionBus()
            return [s for s in bus.list_names() if s.startswith(MPRIS_PREFIX)]
        except dbus.DBusException as e:
            # No session bus (CI, sandbox, headless): same as no players
            logger.debug("Unable to connect to D-Bus session bus: %s", e)
            return []

    @staticmethod
    def pick_player(preferred: str | None = None) -> "MprisClient":
        players = MprisClient.list_players()
        if not players:
            raise NoPlayersFound("No active MPRIS players")

        if preferred:
            # allow passing short name like "vlc"
            for s in players:
                if s == preferred or s.endswith("." + preferred):
                    return MprisClient(s)
            logger.warning("Preferred player '%s' not found, falling back", preferred)

        for s in players:
            try:
                c = MprisClient(s)
                if c.playback_status().lower() == "playing":
                    return c
            except (dbus.DBusException, PlayerUnavailable):
                continue

        return MprisClient(players[0])

    @property
    def short_name(self) -> str:
        return self.service_name.removeprefix(MPRIS_PREFIX)

    def _get(self, prop: str) -> Any:
        try:
            return self._props.Get(PLAYER_IFACE, prop)
        except dbus.DBusException as e:
            raise PlayerUnavailable(str(e)) from e

    def playback_status(self) -> str:
        return _to_str(self._get("PlaybackStatus"))

    def is_playing(self) -> bool:
        return self.playback_status().lower() == "playing"

    def metadata(self) -> dict[str, Any]:
        # dbus.Dictionary acts like dict
        return dict(self._get("Metadata"))

    def snapshot(self) -> TrackSnapshot:
        md = self.metadata()
        return TrackSnapshot(
            title=_to_str(md.get("xesam:title", "")),
            artist=_join_artist(md.get("xesam:artist", [])),
            album=_to_str(md.get("xesam:album", "")),
            track_id=_to_str(md.get("mpris:trackid", "")) or None,
        )
