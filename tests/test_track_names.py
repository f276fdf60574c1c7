from models.track import (
    TrackMetadata,
    UNKNOWN_ARTIST,
    UNKNOWN_ALBUM,
    describe_track,
    parse_track_name,
)
from tests.conftest import make_entry


def test_parse_artist_and_title():
    assert parse_track_name("Daft Punk - Around the World.mp3") == ("Daft Punk", "Around the World", True)


def test_parse_keeps_only_first_two_segments():
    assert parse_track_name("A - B - C.ogg") == ("A", "B", True)


def test_parse_without_separator():
    assert parse_track_name("interlude.wav") == (UNKNOWN_ARTIST, "interlude", False)


def test_parse_hyphen_without_spaces_is_not_a_separator():
    assert parse_track_name("lo-fi.mp3") == (UNKNOWN_ARTIST, "lo-fi", False)


def test_describe_uses_metadata():
    entry = make_entry("whatever.mp3", TrackMetadata(title="Song", artist="Band", duration_seconds=61.0))
    now_playing = describe_track(entry)

    assert now_playing.title == "Song"
    assert now_playing.artist == "Band"
    assert now_playing.album == UNKNOWN_ALBUM
    assert now_playing.duration_seconds == 61.0
    assert now_playing.lyrics_lookup
    assert not now_playing.degraded
    assert now_playing.message == "Song by Band"


def test_describe_without_metadata_parses_file_name():
    now_playing = describe_track(make_entry("Nina Simone - Feeling Good.mp3"))

    assert now_playing.degraded
    assert now_playing.artist == "Nina Simone"
    assert now_playing.title == "Feeling Good"
    assert now_playing.lyrics_lookup


def test_describe_without_metadata_or_separator():
    now_playing = describe_track(make_entry("demo.ogg"))

    assert now_playing.degraded
    assert now_playing.artist == UNKNOWN_ARTIST
    assert now_playing.title == "demo"
    assert not now_playing.lyrics_lookup


def test_defaults_use_file_stem():
    metadata = TrackMetadata.defaults("/music/Some Track.mp3")
    assert metadata.title == "Some Track"
    assert metadata.artist == UNKNOWN_ARTIST
    assert metadata.cover_art is None
    assert metadata.duration_seconds == 0.0
