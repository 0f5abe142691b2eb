from __future__ import annotations

import logging

import requests

from stream_matcher.config import AppConfig
from stream_matcher.keystore import SecretStore

from .apple_music import AppleMusicProvider
from .base import MusicProvider
from .spotify import SpotifyProvider
from .youtube import YouTubeMusicProvider

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: tuple[type[MusicProvider], ...] = (SpotifyProvider, YouTubeMusicProvider, AppleMusicProvider)


def build_providers(
    cfg: AppConfig, secrets: SecretStore, *, session: requests.Session | None = None
) -> list[MusicProvider]:
    session = session or requests.Session()
    providers: list[MusicProvider] = [
        SpotifyProvider(
            secrets,
            session=session,
            timeout_s=cfg.request_timeout_s,
            expiry_buffer_s=cfg.token_expiry_buffer_s,
        ),
        YouTubeMusicProvider(
            secrets,
            session=session,
            timeout_s=cfg.request_timeout_s,
            weights=cfg.scoring,
        ),
        AppleMusicProvider(secrets, session=session, timeout_s=cfg.request_timeout_s),
    ]

    names = [p.name for p in providers]
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate provider names: {names}")
    for name in cfg.enabled_providers:
        if name not in names:
            logger.info("Unknown provider '%s' in config, skipping", name)
    return providers
