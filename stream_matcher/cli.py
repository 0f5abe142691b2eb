from __future__ import annotations

import dataclasses
import json

import typer

from stream_matcher.app import build_services, watch as watch_loop
from stream_matcher.config import load_config, save_config_lang
from stream_matcher.i18n import available_langs, normalize_lang, set_lang, t
from stream_matcher.keystore import FileSecretStore
from stream_matcher.links.parse import parse_music_url
from stream_matcher.links.resolve import LinkError, resolve_link
from stream_matcher.logging_setup import setup_logging
from stream_matcher.matching.store import StoreSnapshot
from stream_matcher.player.client import MprisClient
from stream_matcher.providers.errors import ProviderError
from stream_matcher.providers.types import TrackSnapshot
from stream_matcher.settings import KEY_LABELS, SERVICE_KEYS, InvalidKey, ProviderSettings


app = typer.Typer(no_args_is_help=True, add_completion=False)


@app.callback()
def main_options(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    setup_logging(debug)
    set_lang(load_config().lang)


def _settings() -> ProviderSettings:
    cfg = load_config()
    return ProviderSettings(cfg, FileSecretStore(cfg.keys_path))


def _print_results(track: TrackSnapshot, snap: StoreSnapshot, json_output: bool) -> None:
    if json_output:
        typer.echo(
            json.dumps(
                {
                    "track": dataclasses.asdict(track),
                    "results": {name: dataclasses.asdict(m) for name, m in sorted(snap.results.items())},
                    "error": snap.last_error,
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    typer.echo(f"♪ {track.display}")
    if snap.last_error:
        typer.echo(snap.last_error, err=True)
        return
    if not snap.has_results:
        typer.echo(t("no_matches"))
        return
    for name in sorted(snap.results):
        m = snap.results[name]
        typer.echo(t("found_on", provider=name))
        typer.echo(f"   {m.title} - {m.artist}" + (f" ({m.album})" if m.album else ""))
        typer.echo("   " + t("open_link", url=m.preferred_url))
        typer.echo("   " + t("share_link", url=m.share_url))


@app.command()
def watch(
    player: str | None = typer.Option(None, "--player", help="MPRIS service or short name (e.g. vlc)"),
    poll_interval: float | None = typer.Option(None, "--interval", help="Player polling interval (seconds)"),
    no_alt_screen: bool = typer.Option(False, "--no-alt-screen", help="Do not use alternate screen buffer"),
):
    """
    Follow the playing track and show where it can be found.
    """
    cfg = load_config()
    if poll_interval is not None:
        cfg = dataclasses.replace(cfg, poll_interval_s=max(poll_interval, 0.5))
    if no_alt_screen:
        cfg = dataclasses.replace(cfg, use_alt_screen=False)

    raise typer.Exit(code=watch_loop(cfg, preferred_player=player or cfg.preferred_player))


@app.command()
def players():
    """List available MPRIS players."""
    for p in MprisClient.list_players():
        typer.echo(p)


@app.command()
def search(
    title: str = typer.Option(..., "--title", "-t", help="Track title"),
    artist: str = typer.Option(..., "--artist", "-a", help="Artist name"),
    album: str = typer.Option("", "--album", help="Album name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Search all enabled services for one track."""
    cfg = load_config()
    _, _, manager = build_services(cfg)
    track = TrackSnapshot(title=title, artist=artist, album=album)
    with manager:
        snap = manager.search(track)
    _print_results(track, snap, json_output)


@app.command()
def url(
    link: str = typer.Argument(..., help="Spotify, Apple Music or YouTube track link"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Find a track shared from another service."""
    parsed = parse_music_url(link)
    if parsed is None:
        typer.echo(t("unsupported_url"), err=True)
        raise typer.Exit(code=1)

    cfg = load_config()
    providers, _, manager = build_services(cfg)
    with manager:
        try:
            track = resolve_link(parsed, providers)
        except (LinkError, ProviderError) as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(code=1)
        snap = manager.search(track)
    _print_results(track, snap, json_output)


@app.command()
def providers():
    """Show configuration state of each music service."""
    settings = _settings()
    for st in settings.status():
        configured = "✓" if st.configured else "✗"
        enabled = "✓" if st.enabled else "✗"
        typer.echo(f"{st.name:<14} configured: {configured}  enabled: {enabled}")
        missing = [KEY_LABELS[k] for k in SERVICE_KEYS[st.name] if not settings.secrets.has(k)]
        if missing:
            typer.echo(f"{'':<14} missing: {', '.join(missing)}")


def _toggle(name: str, enabled: bool) -> None:
    if name not in SERVICE_KEYS:
        typer.echo(t("unknown_provider", provider=name), err=True)
        raise typer.Exit(code=1)
    settings = _settings()
    settings.set_enabled(name, enabled)
    typer.echo(t("provider_enabled" if enabled else "provider_disabled", provider=name))


@app.command()
def enable(name: str = typer.Argument(..., help="Service name, e.g. 'Spotify'")):
    """Enable a music service."""
    _toggle(name, True)


@app.command()
def disable(name: str = typer.Argument(..., help="Service name, e.g. 'YouTube Music'")):
    """Disable a music service."""
    _toggle(name, False)


@app.command("set-key")
def set_key(
    key: str = typer.Argument(..., help="|".join(KEY_LABELS)),
    value: str = typer.Option(..., "--value", prompt=True, hide_input=True),
):
    """Store an API credential."""
    settings = _settings()
    try:
        settings.store_key(key, value)
    except InvalidKey as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    typer.echo(t("key_saved", key=KEY_LABELS[key]))


@app.command("delete-key")
def delete_key(key: str = typer.Argument(..., help="|".join(KEY_LABELS))):
    """Remove an API credential."""
    if key not in KEY_LABELS:
        typer.echo(f"Unknown key '{key}'", err=True)
        raise typer.Exit(code=1)
    settings = _settings()
    settings.delete_key(key)
    typer.echo(t("key_deleted", key=KEY_LABELS[key]))


@app.command()
def lang(code: str = typer.Argument(..., help="|".join(available_langs()))):
    """Set interface language."""
    if normalize_lang(code) is None:
        raise typer.BadParameter("language must be one of: " + ", ".join(available_langs()))
    save_config_lang(code)
    set_lang(code)
    typer.echo(t("lang_saved", lang=code.upper()))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
