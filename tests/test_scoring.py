import pytest

from stream_matcher.providers.scoring import (
    ScoreWeights,
    extract_artist,
    extract_title,
    pick_best,
    score_candidate,
    strip_marketing_suffixes,
)
from stream_matcher.providers.types import Candidate


OFFICIAL = Candidate(id="a", title="Yesterday - The Beatles (Official Audio)", channel="Beatles Official")
COVER = Candidate(id="b", title="Yesterday Cover by X", channel="randomuser")


def test_official_upload_beats_cover():
    assert score_candidate(OFFICIAL, "Yesterday", "Beatles") == 28
    assert score_candidate(COVER, "Yesterday", "Beatles") == 5
    assert pick_best([OFFICIAL, COVER], "Yesterday", "Beatles") is OFFICIAL
    assert pick_best([COVER, OFFICIAL], "Yesterday", "Beatles") is OFFICIAL


def test_scoring_is_case_insensitive():
    c = Candidate(id="x", title="YESTERDAY (the BEATLES)", channel="THE BEATLES RECORDS")
    assert score_candidate(c, "yesterday", "beatles") == 25


@pytest.mark.parametrize("word", ["cover", "Remix", "KARAOKE"])
def test_unwanted_versions_are_penalised(word):
    c = Candidate(id="x", title=f"Yesterday {word}", channel="someone")
    assert score_candidate(c, "Yesterday", "Beatles") == 5


def test_tie_keeps_first_seen():
    first = Candidate(id="1", title="Yesterday", channel="a")
    second = Candidate(id="2", title="Yesterday", channel="b")
    assert pick_best([first, second], "Yesterday", "Beatles") is first


def test_negative_scores_still_pick_something():
    c = Candidate(id="1", title="karaoke night", channel="x")
    assert pick_best([c], "Yesterday", "Beatles") is c


def test_pick_best_empty():
    assert pick_best([], "Yesterday", "Beatles") is None


def test_custom_weights():
    w = ScoreWeights(title_match=1, artist_match=1, official_channel=0, official_title=0, unwanted_version=-100)
    assert score_candidate(OFFICIAL, "Yesterday", "Beatles", w) == 2
    assert pick_best([COVER, OFFICIAL], "Yesterday", "Beatles", w) is OFFICIAL


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Song (Official Video)", "Song"),
        ("Song (Official Audio)", "Song"),
        ("Song (Official Music Video)", "Song"),
        ("Song [Official Video]", "Song"),
        ("Song [official audio]", "Song"),
        ("Song (Lyrics)", "Song"),
        ("Song (Live)", "Song (Live)"),
    ],
)
def test_strip_marketing_suffixes(raw, expected):
    assert strip_marketing_suffixes(raw) == expected


def test_extract_title_from_title_artist_format():
    assert extract_title("Yesterday - The Beatles (Official Audio)", "Yesterday") == "Yesterday"
    assert extract_title("The Beatles - Yesterday [Official Video]", "Yesterday") == "Yesterday"


def test_extract_title_falls_back_to_query_when_cleanup_misfires():
    assert extract_title("Completely different upload", "Yesterday") == "Yesterday"


def test_extract_artist():
    assert extract_artist("The Beatles - Yesterday (Official Video)", "Beatles", "Yesterday") == "The Beatles"
    assert extract_artist("Yesterday - The Beatles", "Beatles", "Yesterday") == "The Beatles"
    # no "Artist - Title" structure
    assert extract_artist("Yesterday (Official Video)", "The Beatles", "Yesterday") == "The Beatles"
    # derived artist does not look like the query artist
    assert extract_artist("Some Channel - Yesterday", "The Beatles", "Yesterday") == "The Beatles"
