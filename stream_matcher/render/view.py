from __future__ import annotations

from dataclasses import dataclass

from stream_matcher.i18n import t
from stream_matcher.matching.store import StoreSnapshot
from stream_matcher.player.monitor import PlayerState

NORMAL = "normal"
DIM = "dim"
ACCENT = "accent"
WARNING = "warning"


@dataclass(frozen=True, slots=True)
class ViewLine:
    text: str
    style: str = NORMAL


@dataclass(frozen=True, slots=True)
class View:
    title: str
    lines: tuple[ViewLine, ...]

    @property
    def texts(self) -> list[str]:
        return [ln.text for ln in self.lines]


def _result_lines(snap: StoreSnapshot) -> list[ViewLine]:
    out: list[ViewLine] = []
    for name in sorted(snap.results):
        m = snap.results[name]
        out.append(ViewLine(t("found_on", provider=name), ACCENT))
        out.append(ViewLine(f"   {m.title} - {m.artist}"))
        out.append(ViewLine("   " + t("open_link", url=m.preferred_url), DIM))
        out.append(ViewLine("   " + t("share_link", url=m.share_url), DIM))
    return out


def build_view(state: PlayerState, snap: StoreSnapshot) -> View:
    title = t("app_title")

    if state.track is None:
        if state.error:
            return View(title, (ViewLine(t("player_unavailable", error=state.error), WARNING),))
        if state.player is None:
            return View(title, (ViewLine(t("no_mpris_players"), DIM),))
        return View(title, (ViewLine(t("no_music_playing"), DIM),))

    track = state.track
    lines = [ViewLine(f"♪ {track.display}")]
    if track.album:
        lines.append(ViewLine("   " + t("from_album", album=track.album), DIM))
    lines.append(ViewLine(""))

    if not state.playing:
        lines.append(ViewLine(t("music_paused"), WARNING))
        return View(title, tuple(lines))

    lines.extend(_result_lines(snap))
    if snap.searching:
        lines.append(ViewLine(t("searching"), DIM))
    elif not snap.has_results:
        if snap.last_error:
            lines.append(ViewLine(snap.last_error, WARNING))
        else:
            lines.append(ViewLine(t("no_matches"), DIM))
    return View(title, tuple(lines))
