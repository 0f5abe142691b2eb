"""
Interface strings. Each `<code>.json` next to this module is one catalog;
dropping in a new file is all it takes to add a language.
"""

from __future__ import annotations

from functools import lru_cache
import json
import logging
from importlib.resources import files

logger = logging.getLogger(__name__)

DEFAULT_LANG = "en"

_current = DEFAULT_LANG
_catalog: dict[str, str] = {}


@lru_cache(maxsize=1)
def available_langs() -> tuple[str, ...]:
    return tuple(
        sorted(entry.name[: -len(".json")] for entry in files(__name__).iterdir() if entry.name.endswith(".json"))
    )


def normalize_lang(lang: str | None) -> str | None:
    """Lower-cased catalog code for `lang`, or None when there is no such catalog."""
    code = (lang or "").strip().lower()
    return code if code in available_langs() else None


def _read_catalog(code: str) -> dict[str, str]:
    try:
        data = json.loads((files(__name__) / f"{code}.json").read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Unable to load %s strings: %s", code, e)
        return {}
    return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}


def set_lang(lang: str | None) -> None:
    global _current, _catalog
    _current = normalize_lang(lang) or DEFAULT_LANG
    _catalog = _read_catalog(_current)


def current_lang() -> str:
    return _current


def t(key: str, **kwargs: str | int) -> str:
    if not _catalog:
        set_lang(_current)
    s = _catalog.get(key, key)
    if kwargs:
        try:
            return s.format(**kwargs)
        except KeyError:
            return s
    return s


set_lang(DEFAULT_LANG)
