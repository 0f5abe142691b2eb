from __future__ import annotations

import shutil
import signal
import sys
from dataclasses import dataclass
from typing import Callable

import colorama

from .view import ACCENT, DIM, WARNING, View


CSI = "\x1b["


def _sgr(*codes: int) -> str:
    return CSI + ";".join(str(c) for c in codes) + "m"


@dataclass(frozen=True, slots=True)
class Theme:
    title: str = _sgr(36, 1)  # cyan bold
    accent: str = _sgr(32, 1)  # green bold
    dim: str = _sgr(90)  # bright black
    warning: str = _sgr(33, 1)  # yellow bold
    reset: str = _sgr(0)

    def style(self, name: str) -> str:
        return {ACCENT: self.accent, DIM: self.dim, WARNING: self.warning}.get(name, "")


class AnsiRenderer:
    def __init__(self, use_alt_screen: bool = True, theme: Theme | None = None):
        self.use_alt_screen = use_alt_screen
        self.theme = theme or Theme()
        self._entered = False
        self._resize_handler: Callable[..., None] | None = None
        self._last_view: View | None = None

    def __enter__(self):
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exit()

    def enter(self) -> None:
        if self._entered:
            return
        colorama.just_fix_windows_console()
        if self.use_alt_screen:
            sys.stdout.write(CSI + "?1049h")  # alt screen
        sys.stdout.write(CSI + "?25l")  # hide cursor
        sys.stdout.write(CSI + "H" + CSI + "2J")  # home + clear
        sys.stdout.flush()
        self._entered = True

        # redraw last frame on resize
        def _on_resize(signum=None, frame=None):
            if self._last_view is not None:
                self.render(self._last_view)

        self._resize_handler = _on_resize
        if hasattr(signal, "SIGWINCH"):
            signal.signal(signal.SIGWINCH, _on_resize)

    def exit(self) -> None:
        if not self._entered:
            return
        if self._resize_handler and hasattr(signal, "SIGWINCH"):
            signal.signal(signal.SIGWINCH, signal.SIG_DFL)
        self._resize_handler = None
        sys.stdout.write(self.theme.reset)
        sys.stdout.write(CSI + "?25h")  # show cursor
        if self.use_alt_screen:
            sys.stdout.write(CSI + "?1049l")  # normal screen
        sys.stdout.flush()
        self._entered = False
        self._last_view = None

    def render(self, view: View) -> None:
        self._last_view = view

        cols, rows = shutil.get_terminal_size(fallback=(80, 24))
        # reserve 1 line for title
        body_rows = max(rows - 1, 1)

        out: list[str] = [f"{self.theme.title}♫ {view.title} ♫{self.theme.reset}"]
        for line in view.lines[:body_rows]:
            text = line.text[:cols]
            style = self.theme.style(line.style)
            out.append(f"{style}{text}{self.theme.reset}" if style else text)

        # move home + clear, then print full frame
        sys.stdout.write(CSI + "H" + CSI + "2J")
        sys.stdout.write("\n".join(out))
        sys.stdout.write(self.theme.reset)
        sys.stdout.flush()
