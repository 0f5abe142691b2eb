from __future__ import annotations

from dataclasses import dataclass, field
import logging
import threading
from typing import Callable

from stream_matcher.providers.types import SearchMatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    round_id: int = 0
    results: dict[str, SearchMatch] = field(default_factory=dict)
    searching: bool = False
    last_error: str | None = None

    @property
    def has_results(self) -> bool:
        return bool(self.results)


Listener = Callable[[StoreSnapshot], None]


class ResultStore:
    """
    Published aggregate of the current round.

    Writes are serialised by one lock and tagged with a round id; a write
    from any round but the current one is rejected, so readers never see
    results of two tracks mixed together.

    Listeners are called one delivery at a time, outside the state lock,
    with the snapshot current at delivery time. They must not write to the
    store.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._round_id = 0
        self._results: dict[str, SearchMatch] = {}
        self._searching = False
        self._last_error: str | None = None
        self._listeners: list[Listener] = []
        # serialises deliveries so listeners see states in the order they happened
        self._notify_lock = threading.Lock()

    @property
    def current_round(self) -> int:
        with self._lock:
            return self._round_id

    def begin_round(self) -> int:
        with self._lock:
            self._round_id += 1
            self._results = {}
            self._searching = True
            self._last_error = None
            round_id = self._round_id
        self._notify()
        return round_id

    def publish(self, round_id: int, match: SearchMatch) -> bool:
        with self._lock:
            accepted = round_id == self._round_id
            if accepted:
                self._results[match.provider] = match
        if not accepted:
            logger.debug("Dropping %s result from superseded round %s", match.provider, round_id)
            return False
        self._notify()
        return True

    def settle(self, round_id: int, error: str | None = None) -> bool:
        with self._lock:
            if round_id != self._round_id:
                return False
            self._searching = False
            self._last_error = error
        self._notify()
        return True

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> StoreSnapshot:
        return StoreSnapshot(
            round_id=self._round_id,
            results=dict(self._results),
            searching=self._searching,
            last_error=self._last_error,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        # deliver the state current at delivery time, not the one the writer saw
        with self._notify_lock:
            with self._lock:
                snap = self._snapshot_locked()
                listeners = list(self._listeners)
            for listener in listeners:
                try:
                    listener(snap)
                except Exception:
                    logger.exception("Result store listener failed")
