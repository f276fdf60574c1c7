import asyncio
import time
from pathlib import Path

import pytest

from models.track import TrackMetadata
from services.music_library import MusicLibrary


@pytest.fixture
def folder(tmp_path):
    for name in ("b.mp3", "A.ogg", "notes.txt", "d.WAV", "cover.jpg"):
        (tmp_path / name).write_bytes(b"\0" * 16)
    (tmp_path / "Sub").mkdir()
    (tmp_path / "archive.mp3").mkdir()
    (tmp_path / ".hidden").mkdir()
    return tmp_path


@pytest.fixture
def library():
    return MusicLibrary(resolver=TrackMetadata.defaults)


def test_lists_supported_files_in_name_order(library, folder):
    entries = asyncio.run(library.list_audio_entries(folder))

    assert [entry.display_name for entry in entries] == ["A.ogg", "b.mp3", "d.WAV"]
    assert all(entry.size_bytes == 16 for entry in entries)
    assert entries[1].path == str(folder / "b.mp3")
    assert entries[1].metadata.title == "b"


def test_resolver_runs_for_every_file(folder):
    seen = []

    def resolver(path):
        seen.append(path)
        return TrackMetadata.defaults(path)

    asyncio.run(MusicLibrary(resolver=resolver).list_audio_entries(folder))
    assert sorted(seen) == sorted(str(folder / name) for name in ("A.ogg", "b.mp3", "d.WAV"))


def test_listing_order_ignores_resolver_completion_order(folder):
    delays = {"A.ogg": 0.3, "b.mp3": 0.15, "d.WAV": 0.0}
    finished = []

    def slow_resolver(path):
        name = Path(path).name
        time.sleep(delays[name])
        finished.append(name)
        return TrackMetadata.defaults(path)

    entries = asyncio.run(MusicLibrary(resolver=slow_resolver).list_audio_entries(folder))

    assert finished == ["d.WAV", "b.mp3", "A.ogg"]
    assert [entry.display_name for entry in entries] == ["A.ogg", "b.mp3", "d.WAV"]


def test_dangling_link_is_skipped(library, tmp_path):
    (tmp_path / "good.mp3").write_bytes(b"\0" * 16)
    (tmp_path / "gone.mp3").symlink_to(tmp_path / "missing.mp3")

    entries = asyncio.run(library.list_audio_entries(tmp_path))

    assert [entry.display_name for entry in entries] == ["good.mp3"]


def test_empty_folder(library, tmp_path):
    assert asyncio.run(library.list_audio_entries(tmp_path)) == []


def test_missing_folder_raises(library, tmp_path):
    with pytest.raises(FileNotFoundError):
        asyncio.run(library.list_audio_entries(tmp_path / "nope"))


def test_file_is_not_a_folder(library, folder):
    with pytest.raises(NotADirectoryError):
        asyncio.run(library.list_audio_entries(folder / "b.mp3"))


def test_subfolders_skip_hidden(library, folder):
    names = [path.name for path in library.list_subfolders(folder)]
    assert names == ["archive.mp3", "Sub"]


def test_parent_folder(tmp_path):
    assert MusicLibrary.parent_folder(tmp_path / "a") == tmp_path
    assert MusicLibrary.parent_folder(tmp_path.anchor) is None


def test_breadcrumb_runs_from_root(tmp_path):
    crumbs = MusicLibrary.breadcrumb(tmp_path / "rock")
    assert crumbs[0][0] == "Root"
    assert crumbs[-1] == ("rock", tmp_path / "rock")
