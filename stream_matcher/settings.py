from __future__ import annotations

from dataclasses import dataclass
import logging

from stream_matcher.config import DEFAULT_ENABLED_PROVIDERS, AppConfig, save_enabled_providers
from stream_matcher.keystore import SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET, YOUTUBE_API_KEY, SecretStore
from stream_matcher.providers.registry import PROVIDER_CLASSES

logger = logging.getLogger(__name__)

# provider name -> credentials it needs
SERVICE_KEYS: dict[str, tuple[str, ...]] = {cls.name: cls.required_keys for cls in PROVIDER_CLASSES}

ALL_KEYS = tuple(dict.fromkeys(k for keys in SERVICE_KEYS.values() for k in keys))

KEY_LABELS = {
    SPOTIFY_CLIENT_ID: "Spotify Client ID",
    SPOTIFY_CLIENT_SECRET: "Spotify Client Secret",
    YOUTUBE_API_KEY: "YouTube API Key",
}


class InvalidKey(ValueError):
    pass


def validate_key(key_name: str, value: str) -> None:
    """Raise InvalidKey when `value` cannot be a credential of kind `key_name`."""
    if key_name not in KEY_LABELS:
        raise InvalidKey(f"Unknown key '{key_name}'")
    if not value.strip():
        raise InvalidKey("API key cannot be empty")
    if key_name in (SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET) and len(value) < 32:
        raise InvalidKey(f"{KEY_LABELS[key_name]} should be at least 32 characters")
    if key_name == YOUTUBE_API_KEY and not value.startswith("AIza"):
        raise InvalidKey("YouTube API key should start with 'AIza'")


@dataclass(frozen=True, slots=True)
class ProviderStatus:
    name: str
    configured: bool
    enabled: bool

    @property
    def eligible(self) -> bool:
        return self.configured and self.enabled


class ProviderSettings:
    """
    Enablement policy: a provider is eligible when it is both configured
    (credentials present) and enabled (user toggle).
    """

    def __init__(self, cfg: AppConfig, secrets: SecretStore, *, persist: bool = True):
        self.secrets = secrets
        self.persist = persist
        self._enabled = set(cfg.enabled_providers)

    def is_enabled(self, name: str) -> bool:
        return name in self._enabled

    def set_enabled(self, name: str, enabled: bool) -> None:
        if enabled:
            self._enabled.add(name)
        else:
            self._enabled.discard(name)
        logger.info("Provider %s %s", name, "enabled" if enabled else "disabled")
        if self.persist:
            save_enabled_providers(self._enabled)

    def enabled_providers(self) -> list[str]:
        return sorted(self._enabled)

    def is_configured(self, name: str) -> bool:
        required = SERVICE_KEYS.get(name)
        if required is None:
            return False
        return all(self.secrets.has(k) for k in required)

    def is_eligible(self, name: str) -> bool:
        return self.is_enabled(name) and self.is_configured(name)

    def status(self) -> list[ProviderStatus]:
        return [
            ProviderStatus(name=name, configured=self.is_configured(name), enabled=self.is_enabled(name))
            for name in SERVICE_KEYS
        ]

    def store_key(self, key_name: str, value: str) -> None:
        validate_key(key_name, value)
        self.secrets.set(key_name, value.strip())

    def delete_key(self, key_name: str) -> None:
        self.secrets.delete(key_name)

    def reset(self) -> None:
        for key_name in ALL_KEYS:
            self.secrets.delete(key_name)
        self._enabled = set(DEFAULT_ENABLED_PROVIDERS)
        if self.persist:
            save_enabled_providers(self._enabled)
