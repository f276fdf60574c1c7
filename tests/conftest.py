from datetime import datetime

import pytest

from models.track import TrackEntry, TrackMetadata


class FakeSink:
    """In-memory stand-in for AudioPlayer that records transport calls."""

    def __init__(self, duration: float = 180.0):
        self.duration = duration
        self.position = 0.0
        self.volume = 1.0
        self.loaded: list[str] = []
        self.seeks: list[float] = []
        self.current_path = None
        self.playing = False
        self.ended = False
        self.fail_loads = 0
        self.fail_resume = False

    def load(self, path):
        if self.fail_loads:
            self.fail_loads -= 1
            raise RuntimeError(f"cannot decode {path}")
        self.loaded.append(path)
        self.current_path = path
        return self.duration

    def play(self, start=0.0):
        self.position = start
        self.playing = True

    def pause(self):
        self.playing = False

    def resume(self):
        if self.fail_resume:
            raise RuntimeError("output device refused")
        self.playing = True

    def stop(self):
        self.playing = False

    def unload(self):
        self.playing = False
        self.current_path = None

    def seek(self, position):
        self.seeks.append(position)
        self.position = position
        return position

    def set_volume(self, level):
        self.volume = level

    def get_volume(self):
        return self.volume

    def get_position(self):
        return self.position

    def get_duration(self):
        return self.duration if self.current_path else 0.0

    def get_current_path(self):
        return self.current_path

    def is_playing(self):
        return self.playing

    def track_ended_naturally(self):
        ended, self.ended = self.ended, False
        return ended


def make_entry(name: str, metadata: TrackMetadata | None = None) -> TrackEntry:
    return TrackEntry(
        path=f"/music/{name}",
        display_name=name,
        size_bytes=2048,
        modified_at=datetime(2024, 1, 1),
        metadata=metadata,
    )


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def entries():
    return [
        make_entry("Alpha - One.mp3"),
        make_entry("Beta - Two.ogg"),
        make_entry("Gamma - Three.wav"),
    ]
