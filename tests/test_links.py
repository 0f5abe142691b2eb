import pytest

from stream_matcher.links.parse import APPLE_MUSIC, SPOTIFY, YOUTUBE, YOUTUBE_MUSIC, detect_platform, parse_music_url
from stream_matcher.links.resolve import LinkError, resolve_link
from stream_matcher.providers.apple_music import ITUNES_URL, AppleMusicProvider
from stream_matcher.providers.errors import NotConfigured
from stream_matcher.providers.spotify import API_URL as SPOTIFY_API, TOKEN_URL, SpotifyProvider
from stream_matcher.providers.types import TrackSnapshot
from stream_matcher.providers.youtube import API_URL as YOUTUBE_API, YouTubeMusicProvider
from stream_matcher.keystore import SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET

from tests.mocks.http import FakeResponse, FakeSession
from tests.mocks.providers import DictSecretStore


@pytest.mark.parametrize(
    "url, platform, track_id",
    [
        ("https://open.spotify.com/track/4iV5W9uYEdYUVa79Axb7Rh?si=abc", SPOTIFY, "4iV5W9uYEdYUVa79Axb7Rh"),
        ("https://open.spotify.com/intl-de/track/4iV5W9uYEdYUVa79Axb7Rh", SPOTIFY, "4iV5W9uYEdYUVa79Axb7Rh"),
        ("https://music.apple.com/us/album/yesterday/1441164426?i=1441164430", APPLE_MUSIC, "1441164430"),
        ("https://music.apple.com/us/song/yesterday/1441164430", APPLE_MUSIC, "1441164430"),
        ("https://music.youtube.com/watch?v=NrgmdOz227I&feature=share", YOUTUBE_MUSIC, "NrgmdOz227I"),
        ("https://www.youtube.com/watch?v=NrgmdOz227I", YOUTUBE, "NrgmdOz227I"),
        ("https://youtu.be/NrgmdOz227I", YOUTUBE, "NrgmdOz227I"),
        ("  https://youtu.be/NrgmdOz227I  ", YOUTUBE, "NrgmdOz227I"),
    ],
)
def test_parse_supported_links(url, platform, track_id):
    link = parse_music_url(url)
    assert link is not None
    assert link.platform == platform
    assert link.track_id == track_id


@pytest.mark.parametrize(
    "url",
    [
        "https://open.spotify.com/album/1vANZV20H5B4Fk6yf7Ot9a",
        "https://music.apple.com/us/album/help/1441164426",
        "https://www.youtube.com/channel/UCc4K7bAqpdBP8jh1j9XZAww",
        "https://soundcloud.com/artist/track",
        "not a url",
        "",
    ],
)
def test_parse_rejects_non_track_links(url):
    assert parse_music_url(url) is None


def test_music_youtube_is_not_plain_youtube():
    assert detect_platform("https://music.youtube.com/watch?v=x") == YOUTUBE_MUSIC
    assert detect_platform("https://m.youtube.com/watch?v=x") == YOUTUBE
    assert detect_platform("https://notyoutube.com/watch?v=x") is None


def _providers(routes, secrets=None):
    session = FakeSession(routes)
    secrets = secrets or DictSecretStore()
    return [
        SpotifyProvider(secrets, session=session),
        YouTubeMusicProvider(secrets, session=session),
        AppleMusicProvider(secrets, session=session),
    ], session


def test_resolve_spotify_link():
    secrets = DictSecretStore({SPOTIFY_CLIENT_ID: "a" * 32, SPOTIFY_CLIENT_SECRET: "b" * 32})
    item = {
        "id": "abc",
        "name": "Yesterday",
        "artists": [{"name": "The Beatles"}],
        "album": {"name": "Help!"},
        "external_urls": {"spotify": "https://open.spotify.com/track/abc"},
    }
    providers, _ = _providers(
        {
            TOKEN_URL: FakeResponse(200, {"access_token": "t", "expires_in": 3600}),
            f"{SPOTIFY_API}/tracks/abc": FakeResponse(200, item),
        },
        secrets,
    )

    track = resolve_link(parse_music_url("https://open.spotify.com/track/abc"), providers)

    assert track == TrackSnapshot(title="Yesterday", artist="The Beatles", album="Help!", track_id="abc")


def test_resolve_apple_link_needs_no_keys():
    song = {"trackId": 7, "trackName": "Yesterday", "artistName": "The Beatles", "collectionName": "Help!"}
    providers, session = _providers({f"{ITUNES_URL}/lookup": FakeResponse(200, {"results": [song]})})

    track = resolve_link(parse_music_url("https://music.apple.com/us/song/yesterday/7"), providers)

    assert track.title == "Yesterday"
    assert session.calls[0]["params"] == {"id": "7"}


@pytest.mark.parametrize(
    "url",
    ["https://open.spotify.com/track/abc", "https://youtu.be/NrgmdOz227I"],
)
def test_resolve_without_credentials(url):
    providers, session = _providers({})
    with pytest.raises(NotConfigured):
        resolve_link(parse_music_url(url), providers)
    assert session.calls == []


def test_resolve_youtube_link():
    video = {"id": "v", "snippet": {"title": "The Beatles - Yesterday", "channelTitle": "The Beatles - Topic"}}
    secrets = DictSecretStore({"youtube_api_key": "AIza" + "k" * 35})
    providers, _ = _providers({f"{YOUTUBE_API}/videos": FakeResponse(200, {"items": [video]})}, secrets)

    track = resolve_link(parse_music_url("https://music.youtube.com/watch?v=v"), providers)

    assert (track.title, track.artist) == ("Yesterday", "The Beatles")


def test_resolve_without_matching_provider():
    with pytest.raises(LinkError):
        resolve_link(parse_music_url("https://music.apple.com/us/song/yesterday/7"), [])
