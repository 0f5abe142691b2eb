from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable

from stream_matcher.providers.types import TrackSnapshot

from .client import MprisClient
from .errors import NoPlayersFound, PlayerUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlayerState:
    track: TrackSnapshot | None = None
    playing: bool = False
    player: str | None = None
    error: str | None = None


class TrackMonitor:
    """
    Pulls the now-playing track from the active player.

    A track missing its title or artist counts as no track. Play/pause is
    reported separately and never changes the track itself.
    """

    def __init__(self, preferred: str | None = None, pick_player: Callable[..., Any] = MprisClient.pick_player):
        self.preferred = preferred
        self._pick_player = pick_player

    def poll(self) -> PlayerState:
        try:
            client = self._pick_player(preferred=self.preferred)
        except NoPlayersFound:
            return PlayerState()

        try:
            track = client.snapshot()
            playing = client.is_playing()
        except PlayerUnavailable as e:
            logger.debug("Player %s unavailable: %s", client.service_name, e)
            return PlayerState(player=client.service_name, error=str(e))

        if not track.title or not track.artist:
            return PlayerState(playing=playing, player=client.service_name)
        return PlayerState(track=track, playing=playing, player=client.service_name)
