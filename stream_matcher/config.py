from __future__ import annotations

import json
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
from typing import Any, Iterable

from stream_matcher.i18n import DEFAULT_LANG, normalize_lang
from stream_matcher.providers.scoring import ScoreWeights

logger = logging.getLogger(__name__)

DEFAULT_ENABLED_PROVIDERS = ("Spotify", "YouTube Music")
MIN_TOKEN_EXPIRY_BUFFER_S = 60.0


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "stream-matcher"
    return Path.home() / ".config" / "stream-matcher"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    # Storage
    config_dir: Path
    keys_path: Path

    # Locale
    lang: str

    # Providers
    enabled_providers: tuple[str, ...]
    request_timeout_s: float
    token_expiry_buffer_s: float
    max_workers: int
    scoring: ScoreWeights = field(default_factory=ScoreWeights)

    # Player
    preferred_player: str | None = None
    poll_interval_s: float = 2.0

    # Rendering
    use_alt_screen: bool = True


def load_config() -> AppConfig:
    config_dir = _config_dir()
    data = _read_config_json(config_dir / "config.json")

    token_buffer = float(os.getenv("STREAM_MATCHER_TOKEN_BUFFER", str(MIN_TOKEN_EXPIRY_BUFFER_S)))

    return AppConfig(
        config_dir=config_dir,
        keys_path=config_dir / "keys.json",
        lang=_load_lang(data),
        enabled_providers=_load_enabled(data),
        request_timeout_s=float(os.getenv("STREAM_MATCHER_REQUEST_TIMEOUT", "10.0")),
        token_expiry_buffer_s=max(token_buffer, MIN_TOKEN_EXPIRY_BUFFER_S),
        max_workers=max(int(os.getenv("STREAM_MATCHER_MAX_WORKERS", "8")), 1),
        scoring=_load_scoring(data),
        preferred_player=os.getenv("STREAM_MATCHER_PLAYER") or None,
        poll_interval_s=float(os.getenv("STREAM_MATCHER_POLL_INTERVAL", "2.0")),
        use_alt_screen=os.getenv("STREAM_MATCHER_ALT_SCREEN", "1") not in ("0", "false", "False"),
    )


def _read_config_json(cfg_path: Path) -> dict[str, Any]:
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _load_lang(data: dict[str, Any]) -> str:
    # Priority: config.json → STREAM_MATCHER_LANG → "EN"
    for raw in (data.get("lang"), os.getenv("STREAM_MATCHER_LANG")):
        code = normalize_lang(str(raw or ""))
        if code:
            return code.upper()
    return DEFAULT_LANG.upper()


def _load_enabled(data: dict[str, Any]) -> tuple[str, ...]:
    raw = data.get("enabled_providers")
    if not isinstance(raw, list):
        return DEFAULT_ENABLED_PROVIDERS
    return tuple(str(name) for name in raw)


def _load_scoring(data: dict[str, Any]) -> ScoreWeights:
    raw = data.get("scoring")
    if not isinstance(raw, dict):
        return ScoreWeights()
    known = ScoreWeights.__dataclass_fields__
    overrides = {k: int(v) for k, v in raw.items() if k in known}
    return ScoreWeights(**overrides)


def _update_config_json(**values: Any) -> None:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data = _read_config_json(cfg_path)
    data.update(values)
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def save_config_lang(lang: str) -> None:
    _update_config_json(lang=lang.upper())


def save_enabled_providers(names: Iterable[str]) -> None:
    _update_config_json(enabled_providers=sorted(set(names)))
