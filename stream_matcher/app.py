from __future__ import annotations

import logging
import signal
import threading
import time

import requests

from stream_matcher.config import AppConfig
from stream_matcher.keystore import FileSecretStore, SecretStore
from stream_matcher.matching.manager import MatchingManager
from stream_matcher.player.monitor import PlayerState, TrackMonitor
from stream_matcher.providers.base import MusicProvider
from stream_matcher.providers.registry import build_providers
from stream_matcher.render.ansi import AnsiRenderer
from stream_matcher.render.view import build_view
from stream_matcher.settings import ProviderSettings

logger = logging.getLogger(__name__)


def build_services(
    cfg: AppConfig,
    *,
    secrets: SecretStore | None = None,
    session: requests.Session | None = None,
) -> tuple[list[MusicProvider], ProviderSettings, MatchingManager]:
    secrets = secrets or FileSecretStore(cfg.keys_path)
    providers = build_providers(cfg, secrets, session=session)
    settings = ProviderSettings(cfg, secrets)
    manager = MatchingManager(providers, settings, max_workers=cfg.max_workers)
    return providers, settings, manager


def watch(
    cfg: AppConfig,
    *,
    preferred_player: str | None,
    manager: MatchingManager | None = None,
    monitor: TrackMonitor | None = None,
    renderer: AnsiRenderer | None = None,
    max_ticks: int | None = None,
) -> int:
    """
    Main watch loop:
    poll player -> observe track (starts a round on change) -> render.

    The loop is the only writer of the current track. Store updates from
    provider threads just wake the loop so partial results show up
    without waiting for the next poll.

    SIGUSR1 re-runs the current track. The handler only raises a flag the
    loop picks up on its next pass: it interrupts the main thread, which
    may be holding the manager's locks at that moment.
    """
    if manager is None:
        _, _, manager = build_services(cfg)
    monitor = monitor or TrackMonitor(preferred=preferred_player)
    renderer = renderer or AnsiRenderer(use_alt_screen=cfg.use_alt_screen)

    wake = threading.Event()
    unsubscribe = manager.store.subscribe(lambda _snap: wake.set())

    refresh_requested = False

    def _request_refresh(signum, frame):
        nonlocal refresh_requested
        refresh_requested = True

    if hasattr(signal, "SIGUSR1"):
        signal.signal(signal.SIGUSR1, _request_refresh)

    renderer.enter()
    state = PlayerState()
    next_poll = 0.0
    ticks = 0
    try:
        while max_ticks is None or ticks < max_ticks:
            ticks += 1
            now = time.monotonic()
            if now >= next_poll:
                state = monitor.poll()
                manager.observe(state.track)
                next_poll = now + cfg.poll_interval_s
            if refresh_requested:
                refresh_requested = False
                manager.refresh()
            renderer.render(build_view(state, manager.store.snapshot()))

            wake.wait(max(next_poll - time.monotonic(), 0.0))
            wake.clear()
    except KeyboardInterrupt:
        logger.debug("Interrupted, leaving watch loop")
    finally:
        unsubscribe()
        if hasattr(signal, "SIGUSR1"):
            signal.signal(signal.SIGUSR1, signal.SIG_DFL)
        renderer.exit()
        manager.close()
    return 0
