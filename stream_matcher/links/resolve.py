from __future__ import annotations

import logging
from typing import Sequence, TypeVar

from stream_matcher.providers.apple_music import AppleMusicProvider
from stream_matcher.providers.base import MusicProvider
from stream_matcher.providers.errors import NotConfigured
from stream_matcher.providers.spotify import SpotifyProvider
from stream_matcher.providers.types import TrackSnapshot
from stream_matcher.providers.youtube import YouTubeMusicProvider

from .parse import APPLE_MUSIC, SPOTIFY, YOUTUBE, YOUTUBE_MUSIC, ParsedLink

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=MusicProvider)


class LinkError(ValueError):
    pass


def _find(providers: Sequence[MusicProvider], kind: type[P]) -> P:
    for p in providers:
        if isinstance(p, kind):
            return p
    raise LinkError(f"No {kind.__name__} registered")


def resolve_link(link: ParsedLink, providers: Sequence[MusicProvider]) -> TrackSnapshot:
    """
    Look up the track behind a link on its own platform. Provider errors
    propagate; a platform without credentials raises NotConfigured.
    """
    if link.platform == SPOTIFY:
        spotify = _find(providers, SpotifyProvider)
        if not spotify.is_configured():
            raise NotConfigured(spotify.name, "Spotify API not configured")
        track = spotify.track_details(link.track_id)
    elif link.platform in (YOUTUBE_MUSIC, YOUTUBE):
        youtube = _find(providers, YouTubeMusicProvider)
        if not youtube.is_configured():
            raise NotConfigured(youtube.name, "YouTube API not configured")
        track = youtube.video_details(link.track_id)
    elif link.platform == APPLE_MUSIC:
        track = _find(providers, AppleMusicProvider).lookup(link.track_id)
    else:
        raise LinkError(f"Unsupported platform: {link.platform}")

    logger.info("Resolved %s link %s to %s", link.platform, link.track_id, track.display)
    return track
