from __future__ import annotations

import logging
import time
from typing import Optional

import numpy as np
import pygame

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
NUM_CHANNELS = 2
MIXER_BUFFER = 512


class AudioPlayer:
    """Audio sink: decodes one track into memory and plays it on a mixer channel.

    Only the playback controller drives transport. Analysis code reads
    sample windows through get_latest_audio_buffer().
    """

    def __init__(self) -> None:
        """Initialize the pygame mixer.

        Raises:
            RuntimeError: If no audio output is available.
        """
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=NUM_CHANNELS, buffer=MIXER_BUFFER)
        except pygame.error as e:
            raise RuntimeError(f"Failed to initialize audio output: {e}") from e

        frequency, _size, channels = pygame.mixer.get_init()
        self.sample_rate: int = frequency
        self.channels: int = channels

        self._path: Optional[str] = None
        self._samples: Optional[np.ndarray] = None
        self._channel: Optional[pygame.mixer.Channel] = None
        self._sound: Optional[pygame.mixer.Sound] = None
        self._volume: float = 1.0
        self._playing: bool = False
        self._paused: bool = False
        self._start_time: float = 0
        self._pause_position: float = 0
        logger.info(f"Audio output ready ({self.sample_rate}Hz, {self.channels}ch)")

    def load(self, path: str) -> float:
        """Decode an audio file into memory, replacing the current one.

        Blocking; callers on the event loop should run it in a thread.

        Args:
            path: Audio file path.

        Returns:
            Track duration in seconds.

        Raises:
            pygame.error: If the file cannot be decoded.
        """
        self.stop()
        sound = pygame.mixer.Sound(path)
        samples = pygame.sndarray.array(sound)
        if samples.ndim == 1:
            samples = samples.reshape(-1, 1)

        self._path = path
        self._samples = np.ascontiguousarray(samples)
        logger.info(f"Loaded {path} ({self.get_duration():.1f}s)")
        return self.get_duration()

    def play(self, start: float = 0.0) -> None:
        """Start playback of the loaded track from a position.

        Raises:
            RuntimeError: If nothing is loaded or no mixer channel is free.
        """
        if self._samples is None:
            raise RuntimeError("No track loaded")

        if self._channel is not None:
            self._channel.stop()

        start = max(0.0, min(start, self.get_duration()))
        first_frame = int(start * self.sample_rate)
        self._sound = pygame.sndarray.make_sound(np.ascontiguousarray(self._samples[first_frame:]))
        self._channel = self._sound.play()

        if self._channel is None:
            raise RuntimeError("No free mixer channel")

        self._channel.set_volume(self._volume)
        self._playing = True
        self._paused = False
        self._start_time = time.time() - start
        self._pause_position = start

    def pause(self) -> None:
        if self._playing and not self._paused and self._channel is not None:
            self._channel.pause()
            self._paused = True
            self._pause_position = time.time() - self._start_time

    def resume(self) -> None:
        """Resume paused playback.

        Raises:
            RuntimeError: If there is nothing to resume.
        """
        if self._channel is None or not self._playing:
            raise RuntimeError("Nothing to resume")
        if self._paused:
            self._channel.unpause()
            self._paused = False
            self._start_time = time.time() - self._pause_position

    def stop(self) -> None:
        """Stop playback and reset position, keeping the decoded track."""
        if self._channel is not None:
            self._channel.stop()
        self._channel = None
        self._sound = None
        self._playing = False
        self._paused = False
        self._start_time = 0
        self._pause_position = 0

    def unload(self) -> None:
        """Stop playback and drop the decoded track."""
        self.stop()
        self._path = None
        self._samples = None

    def seek(self, position: float) -> float:
        """Jump to a position, clamped to the track length.

        Returns:
            The position actually applied.
        """
        position = max(0.0, min(position, self.get_duration()))
        if self._samples is None or not self._playing:
            return position

        was_paused = self._paused
        self.play(start=position)
        if was_paused:
            self.pause()
            self._pause_position = position
        return position

    def set_volume(self, level: float) -> None:
        """Set volume level (0.0 to 1.0)."""
        self._volume = max(0.0, min(1.0, level))
        if self._channel is not None:
            self._channel.set_volume(self._volume)

    def get_volume(self) -> float:
        return self._volume

    def get_position(self) -> float:
        """Return current playback position in seconds."""
        if not self._playing:
            return 0.0
        if self._paused:
            return self._pause_position
        return min(time.time() - self._start_time, self.get_duration())

    def get_duration(self) -> float:
        if self._samples is None:
            return 0.0
        return len(self._samples) / self.sample_rate

    def get_current_path(self) -> Optional[str]:
        return self._path

    def is_playing(self) -> bool:
        return self._playing and not self._paused

    def track_ended_naturally(self) -> bool:
        """Report, once, that the channel ran out of audio while playing."""
        if not self._playing or self._paused or self._channel is None:
            return False
        if self._channel.get_busy():
            return False
        self._playing = False
        return True

    def get_latest_audio_buffer(self, frames: int = 2048) -> Optional[np.ndarray]:
        """Return the PCM window that ends at the current play position.

        Args:
            frames: Number of sample frames to return.

        Returns:
            int16 array of shape (frames, channels), zero-padded at the
            track start, or None when nothing is playing.
        """
        if self._samples is None or not self._playing:
            return None

        end = int(self.get_position() * self.sample_rate)
        end = max(0, min(end, len(self._samples)))
        start = max(0, end - frames)
        window = self._samples[start:end]

        if len(window) < frames:
            padding = np.zeros((frames - len(window), self._samples.shape[1]), dtype=self._samples.dtype)
            window = np.concatenate([padding, window])
        return window
