import base64

from mutagen.flac import Picture

from models.track import UNKNOWN_ALBUM, UNKNOWN_ARTIST
from services import metadata_resolver
from services.metadata_resolver import resolve_metadata


class FakeInfo:
    length = 215.4
    bitrate = 320000
    sample_rate = 44100
    channels = 2


class FakeAudio:
    def __init__(self, tags, pictures=None):
        self.tags = tags
        self.info = FakeInfo()
        if pictures is not None:
            self.pictures = pictures


def test_vorbis_tags(monkeypatch):
    tags = {
        "title": ["Wave"],
        "artist": ["", "Tide"],
        "album": ["Shore"],
        "date": ["2019-05-01"],
        "genre": ["Ambient", "Drone"],
    }
    monkeypatch.setattr(metadata_resolver, "MutagenFile", lambda path: FakeAudio(tags))

    metadata = resolve_metadata("/music/wave.ogg")

    assert metadata.title == "Wave"
    assert metadata.artist == "Tide"
    assert metadata.album == "Shore"
    assert metadata.year == "2019"
    assert metadata.genre == "Ambient"
    assert metadata.duration_seconds == 215.4
    assert metadata.bitrate == 320000
    assert metadata.channels == 2
    assert metadata.cover_art is None


def test_missing_tags_use_defaults(monkeypatch):
    monkeypatch.setattr(metadata_resolver, "MutagenFile", lambda path: FakeAudio(None))

    metadata = resolve_metadata("/music/untitled take.wav")

    assert metadata.title == "untitled take"
    assert metadata.artist == UNKNOWN_ARTIST
    assert metadata.album == UNKNOWN_ALBUM
    assert metadata.year == ""
    assert metadata.duration_seconds == 215.4


def test_album_artist_used_when_artist_missing(monkeypatch):
    tags = {"albumartist": ["Various"]}
    monkeypatch.setattr(metadata_resolver, "MutagenFile", lambda path: FakeAudio(tags))
    assert resolve_metadata("/music/x.ogg").artist == "Various"


def test_embedded_picture_block(monkeypatch):
    picture = Picture()
    picture.mime = "image/png"
    picture.data = b"\x89PNG fake"
    encoded = base64.b64encode(picture.write()).decode("ascii")
    tags = {"title": ["Cover"], "metadata_block_picture": [encoded]}
    monkeypatch.setattr(metadata_resolver, "MutagenFile", lambda path: FakeAudio(tags))

    cover = resolve_metadata("/music/cover.ogg").cover_art

    assert cover.format == "image/png"
    assert base64.b64decode(cover.base64_data) == b"\x89PNG fake"


def test_pictures_attribute_preferred(monkeypatch):
    picture = Picture()
    picture.mime = ""
    picture.data = b"jpegdata"
    monkeypatch.setattr(
        metadata_resolver, "MutagenFile", lambda path: FakeAudio({}, pictures=[picture])
    )

    cover = resolve_metadata("/music/p.ogg").cover_art
    assert cover.format == "image/jpeg"
    assert cover.base64_data == base64.b64encode(b"jpegdata").decode("ascii")


def test_unrecognised_file_gives_defaults(monkeypatch):
    monkeypatch.setattr(metadata_resolver, "MutagenFile", lambda path: None)

    metadata = resolve_metadata("/music/Artist - Song.mp3")

    assert metadata.title == "Artist - Song"
    assert metadata.artist == UNKNOWN_ARTIST


def test_unreadable_file_never_raises(tmp_path):
    broken = tmp_path / "broken.mp3"
    broken.write_bytes(b"this is not audio")

    metadata = resolve_metadata(broken)

    assert metadata.title == "broken"
    assert metadata.artist == UNKNOWN_ARTIST
    assert metadata.cover_art is None


def test_missing_file_never_raises(tmp_path):
    assert resolve_metadata(tmp_path / "gone.ogg").title == "gone"
