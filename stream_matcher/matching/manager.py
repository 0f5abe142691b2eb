from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import replace
import logging
import threading
from typing import Protocol, Sequence

from stream_matcher.i18n import t
from stream_matcher.providers.base import MusicProvider
from stream_matcher.providers.errors import ProviderError
from stream_matcher.providers.types import SearchMatch, TrackSnapshot

from .store import ResultStore, StoreSnapshot

logger = logging.getLogger(__name__)


class EnablementPolicy(Protocol):
    def is_eligible(self, name: str) -> bool: ...


class MatchingManager:
    """
    Fans one track out to every eligible provider and publishes matches
    into the result store as they arrive.

    Each round takes a fresh round id from the store and gets its own
    worker pool, so provider calls still stuck in an older round never
    occupy the threads of a newer one. A newer round does not wait for or
    cancel an older one; older tasks that have not started yet are skipped
    and the store refuses the older round's late writes.
    """

    def __init__(
        self,
        providers: Sequence[MusicProvider],
        policy: EnablementPolicy,
        store: ResultStore | None = None,
        *,
        max_workers: int = 8,
    ):
        names = [p.name for p in providers]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate provider names: {names}")

        self.providers = list(providers)
        self.policy = policy
        self.store = store or ResultStore()
        self.max_workers = max(max_workers, 1)
        self._track_lock = threading.Lock()
        self._current_track: TrackSnapshot | None = None
        self._closed = False

    def __enter__(self) -> "MatchingManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def current_track(self) -> TrackSnapshot | None:
        with self._track_lock:
            return self._current_track

    def eligible_providers(self) -> list[MusicProvider]:
        return [p for p in self.providers if self.policy.is_eligible(p.name)]

    def search(self, track: TrackSnapshot) -> StoreSnapshot:
        """Run one round in the calling thread; returns this round's outcome."""
        round_id = self.store.begin_round()
        eligible = self.eligible_providers()

        if not eligible:
            error = t("no_providers_enabled")
            logger.info("Round %s: no eligible providers", round_id)
            self.store.settle(round_id, error=error)
            return StoreSnapshot(round_id=round_id, last_error=error)

        logger.info(
            "Round %s: searching %s on %s",
            round_id,
            track.display,
            ", ".join(p.name for p in eligible),
        )

        pool = ThreadPoolExecutor(
            max_workers=min(len(eligible), self.max_workers),
            thread_name_prefix=f"round{round_id}",
        )
        results: dict[str, SearchMatch] = {}
        try:
            futures = {pool.submit(self._find, p, track, round_id): p.name for p in eligible}
            for fut in as_completed(futures):
                name = futures[fut]
                match = self._result_of(fut, name)
                if match is None:
                    continue
                if match.provider != name:
                    match = replace(match, provider=name)
                results[name] = match
                self.store.publish(round_id, match)
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        if self.store.settle(round_id):
            logger.info("Round %s settled: %d/%d providers matched", round_id, len(results), len(eligible))
        else:
            logger.debug("Round %s finished after being superseded", round_id)
        return StoreSnapshot(round_id=round_id, results=results)

    def _find(self, provider: MusicProvider, track: TrackSnapshot, round_id: int) -> SearchMatch | None:
        if self.store.current_round != round_id:
            logger.debug("Skipping %s for superseded round %s", provider.name, round_id)
            return None
        return provider.find_match(track)

    @staticmethod
    def _result_of(fut: Future, name: str) -> SearchMatch | None:
        try:
            return fut.result()
        except ProviderError as e:
            logger.warning("%s search failed: %s", name, e)
        except Exception:
            logger.exception("%s search crashed", name)
        return None

    def submit(self, track: TrackSnapshot) -> Future:
        """
        Run a round on its own thread. A round waiting on a stalled
        provider holds only that thread, so later rounds start at once.
        """
        if self._closed:
            raise RuntimeError("MatchingManager is closed")

        future: Future = Future()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(self.search(track))
            except Exception as e:
                logger.exception("Round for %s crashed", track.display)
                future.set_exception(e)

        threading.Thread(target=run, name="round", daemon=True).start()
        return future

    def observe(self, track: TrackSnapshot | None) -> Future | None:
        """
        Feed the latest polled track. Starts a round only when title or
        artist changed since the previous observation.
        """
        with self._track_lock:
            previous = self._current_track
            self._current_track = track
        if track is None:
            return None
        if previous is not None and previous.identity == track.identity:
            return None
        logger.info("Track changed: %s", track.display)
        return self.submit(track)

    def refresh(self) -> Future | None:
        track = self.current_track
        if track is None:
            return None
        return self.submit(track)

    def close(self) -> None:
        # running rounds are not interrupted
        self._closed = True
