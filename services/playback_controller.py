from __future__ import annotations

import asyncio
import logging
from typing import Callable

from models.playback import PlaybackState, PlaybackStatus
from models.queue import NO_SELECTION
from models.session import PlayerSession
from models.track import NowPlaying, TrackEntry, TrackMetadata, describe_track
from services.audio_player import AudioPlayer
from services.metadata_resolver import resolve_metadata
from services.settings_store import SettingsStore

logger = logging.getLogger(__name__)

RESTART_THRESHOLD_SECONDS = 3.0
VOLUME_STEP = 5

MEDIA_PLAY_PAUSE = "play-pause"
MEDIA_PREVIOUS = "previous"
MEDIA_NEXT = "next"

StateListener = Callable[[PlaybackStatus], None]
NowPlayingListener = Callable[[NowPlaying], None]


class PlaybackController:
    """State machine that owns the audio sink for one player session.

    States: IDLE -> LOADING -> PLAYING <-> PAUSED, with LOADING falling back
    to IDLE when the sink cannot start. Every successful load re-resolves
    metadata and emits a now-playing event to registered listeners.
    """

    def __init__(
        self,
        session: PlayerSession,
        sink: AudioPlayer,
        settings: SettingsStore | None = None,
        resolver: Callable[[str], TrackMetadata] = resolve_metadata,
    ) -> None:
        """Initialize the controller.

        Args:
            session: Session whose queue and status this controller mutates.
            sink: Audio output. No other component may drive its transport.
            settings: Store that persists the volume, if any.
            resolver: Metadata resolver used for the fresh pre-play lookup.
        """
        self.session = session
        self._sink = sink
        self._settings = settings
        self._resolver = resolver
        self._load_token = 0
        self._sink_lock = asyncio.Lock()
        self._state_listeners: list[StateListener] = []
        self._now_playing_listeners: list[NowPlayingListener] = []

    @property
    def state(self) -> PlaybackState:
        return self.session.status.state

    @property
    def status(self) -> PlaybackStatus:
        return self.session.status

    def add_state_listener(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def add_now_playing_listener(self, listener: NowPlayingListener) -> None:
        self._now_playing_listeners.append(listener)

    def _set_state(self, state: PlaybackState) -> None:
        if self.session.status.state != state:
            logger.debug(f"Playback state {self.session.status.state.value} -> {state.value}")
        self.session.status.state = state
        self._notify_state()

    def _notify_state(self) -> None:
        for listener in list(self._state_listeners):
            try:
                listener(self.session.status)
            except Exception as e:
                logger.error(f"State listener failed: {e}", exc_info=True)

    def _emit_now_playing(self, now_playing: NowPlaying) -> None:
        self.session.now_playing = now_playing
        for listener in list(self._now_playing_listeners):
            try:
                listener(now_playing)
            except Exception as e:
                logger.error(f"Now-playing listener failed: {e}", exc_info=True)

    def load_queue(self, entries: list[TrackEntry], folder: str | None = None) -> None:
        """Replace the queue with a new folder listing.

        Halts playback when a track was loaded, since the old index no
        longer refers to anything.
        """
        had_selection = self.session.queue.rebuild(entries)
        if folder is not None:
            self.session.current_folder = str(folder)
        if had_selection or self.state != PlaybackState.IDLE:
            self.stop()

    async def play_track(self, index: int) -> bool:
        """Load and start the queue entry at index.

        Metadata is resolved fresh before playback. If resolution or the
        sink fails, playback is retried once with the raw path and no
        metadata; if that fails too the controller returns to IDLE.

        Returns:
            True if the track is now playing.
        """
        queue = self.session.queue
        if not 0 <= index < len(queue):
            logger.warning(f"Ignoring play request for index {index} (queue length {len(queue)})")
            return False

        self._load_token += 1
        token = self._load_token

        queue.current_index = index
        entry = queue[index]
        self.session.status.position_seconds = 0.0
        self._set_state(PlaybackState.LOADING)

        try:
            metadata = await asyncio.to_thread(self._resolver, entry.path)
            if token != self._load_token:
                return False
            entry.metadata = metadata
            started = await self._start_sink(entry.path, token)
        except Exception as e:
            if token != self._load_token:
                return False
            logger.error(f"Error playing audio {entry.path}: {e}")
            entry.metadata = None
            try:
                started = await self._start_sink(entry.path, token)
            except Exception as play_error:
                if token != self._load_token:
                    return False
                logger.error(f"Error playing audio after metadata failure {entry.path}: {play_error}")
                self._sink.unload()
                self.session.status.duration_seconds = 0.0
                self._set_state(PlaybackState.IDLE)
                return False

        if not started:
            return False

        self.session.status.duration_seconds = self._sink.get_duration() or entry.duration_seconds
        self._set_state(PlaybackState.PLAYING)
        self._emit_now_playing(describe_track(entry))
        logger.info(f"Now playing: {entry.path}")
        return True

    async def _start_sink(self, path: str, token: int) -> bool:
        """Load and play a file unless a newer request superseded this one."""
        async with self._sink_lock:
            if token != self._load_token:
                return False
            await asyncio.to_thread(self._sink.load, path)
            if token != self._load_token:
                # stop() or a newer request ran while decoding; drop this file
                self._sink.unload()
                return False
            self._sink.set_volume(self.session.status.volume / 100)
            self._sink.play()
            return True

    def stop(self) -> None:
        """Stop and clear the sink, returning to IDLE."""
        self._load_token += 1
        self._sink.unload()
        self.session.status.position_seconds = 0.0
        self.session.status.duration_seconds = 0.0
        self.session.now_playing = None
        self._set_state(PlaybackState.IDLE)

    def pause(self) -> bool:
        if self.state != PlaybackState.PLAYING:
            return False
        self._sink.pause()
        self.session.status.position_seconds = self._sink.get_position()
        self._set_state(PlaybackState.PAUSED)
        return True

    def resume(self) -> bool:
        """Resume from PAUSED; stays PAUSED if the sink refuses."""
        if self.state != PlaybackState.PAUSED:
            return False
        try:
            self._sink.resume()
        except Exception as e:
            logger.error(f"Error resuming playback: {e}")
            return False
        self._set_state(PlaybackState.PLAYING)
        return True

    async def toggle_play_pause(self) -> None:
        if self.session.queue.is_empty():
            return

        if self.state == PlaybackState.IDLE:
            await self.play_track(0)
        elif self.state == PlaybackState.PLAYING:
            self.pause()
        elif self.state == PlaybackState.PAUSED:
            self.resume()

    async def previous(self) -> bool:
        """Restart the current track past the 3 second mark, else go back one."""
        queue = self.session.queue
        if queue.is_empty():
            return False

        if self.status.is_active and self._sink.get_position() > RESTART_THRESHOLD_SECONDS:
            self._sink.seek(0)
            self.session.status.position_seconds = 0.0
            self._notify_state()
            return True

        return await self.play_track(queue.previous_index())

    async def next(self) -> bool:
        queue = self.session.queue
        if queue.is_empty():
            return False
        return await self.play_track(queue.next_index())

    async def check_track_end(self) -> bool:
        """Poll the sink and advance when the track finished by itself."""
        if self.state != PlaybackState.PLAYING:
            return False
        if not self._sink.track_ended_naturally():
            return False
        await self.handle_track_end()
        return True

    async def handle_track_end(self) -> None:
        if self.session.queue.is_empty() or self.session.queue.current_index == NO_SELECTION:
            logger.info("Track ended with nothing left to play")
            self.stop()
            return
        await self.play_track(self.session.queue.next_index())

    def seek(self, target_seconds: float) -> float | None:
        """Seek within the current track; ignored unless playing or paused."""
        if not self.status.is_active:
            return None
        target = max(0.0, min(target_seconds, self.status.duration_seconds))
        position = self._sink.seek(target)
        self.session.status.position_seconds = position
        self._notify_state()
        return position

    def seek_relative(self, delta_seconds: float) -> float | None:
        return self.seek(self._sink.get_position() + delta_seconds)

    def set_volume(self, volume: int) -> int:
        """Apply and persist a 0-100 volume; playback state is untouched."""
        volume = int(max(0, min(100, round(volume))))
        self._sink.set_volume(volume / 100)
        self.session.status.volume = volume
        if self._settings is not None:
            self._settings.volume = volume
        self._notify_state()
        return volume

    def change_volume(self, delta: int = VOLUME_STEP) -> int:
        return self.set_volume(self.session.status.volume + delta)

    async def handle_media_key(self, key: str) -> None:
        """Route a media-key signal to its transition."""
        if key == MEDIA_PLAY_PAUSE:
            await self.toggle_play_pause()
        elif key == MEDIA_PREVIOUS:
            await self.previous()
        elif key == MEDIA_NEXT:
            await self.next()
        else:
            logger.warning(f"Unknown media key: {key}")

    def refresh_status(self) -> PlaybackStatus:
        """Copy the sink's position into the session status."""
        if self.status.is_active:
            self.session.status.position_seconds = self._sink.get_position()
            duration = self._sink.get_duration()
            if duration:
                self.session.status.duration_seconds = duration
        return self.session.status
