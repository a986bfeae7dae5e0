"""QMediaPlayer-backed media widget driven by the playback adapter."""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from loguru import logger
from PyQt6.QtCore import QObject, QThreadPool, QUrl, pyqtSignal
from PyQt6.QtMultimedia import QAudioOutput, QMediaPlayer

from ..playback import PlaybackState
from .workers import WORKER_FAILED, Worker, WorkerError

StreamResolver = Callable[[str], str]


class QtMediaWidget(QObject):
    """Resolve a stream for a video id off the UI thread and play it.

    State changes are reported through ``stateReported`` with a
    ``PlaybackState`` so the adapter never sees Qt enums.
    """

    stateReported = pyqtSignal(object)
    streamFailed = pyqtSignal(str)

    def __init__(
        self,
        resolver: StreamResolver,
        thread_pool: Optional[QThreadPool] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._resolver = resolver
        self._pool = thread_pool or QThreadPool.globalInstance()
        self.player = QMediaPlayer(self)
        self.audio_output = QAudioOutput(self)
        self.player.setAudioOutput(self.audio_output)
        self._requested_video_id: Optional[str] = None
        self._play_requested = False
        self.player.playbackStateChanged.connect(self._on_playback_state)
        self.player.mediaStatusChanged.connect(self._on_media_status)
        self.player.errorOccurred.connect(self._on_media_error)

    def load_video(self, video_id: str) -> None:
        self._requested_video_id = video_id
        self.player.stop()
        self.player.setSource(QUrl())
        worker = Worker(self._resolve, video_id, context="stream")
        worker.signals.finished.connect(self._on_stream_resolved)
        worker.signals.error.connect(lambda error, vid=video_id: self._on_stream_error(vid, error))
        self._pool.start(worker)

    def _resolve(self, video_id: str) -> Tuple[str, str]:
        return video_id, self._resolver(video_id)

    def _on_stream_resolved(self, payload) -> None:
        if payload is WORKER_FAILED:
            return
        video_id, url = payload
        if video_id != self._requested_video_id:
            return
        self.player.setSource(QUrl(url))
        if self._play_requested:
            self.player.play()

    def _on_stream_error(self, video_id: str, error: WorkerError) -> None:
        if video_id != self._requested_video_id:
            logger.debug(f"Dropping stream failure for {video_id}: {error.message}")
            return
        self.streamFailed.emit(error.message)

    def play(self) -> None:
        self._play_requested = True
        if not self.player.source().isEmpty():
            self.player.play()

    def pause(self) -> None:
        self._play_requested = False
        self.player.pause()

    def seek(self, seconds: float) -> None:
        self.player.setPosition(int(seconds * 1000))

    def set_volume(self, volume: int) -> None:
        self.audio_output.setVolume(volume / 100)

    def mute(self) -> None:
        self.audio_output.setMuted(True)

    def unmute(self) -> None:
        self.audio_output.setMuted(False)

    def is_muted(self) -> bool:
        return self.audio_output.isMuted()

    def current_time(self) -> float:
        return self.player.position() / 1000

    def duration(self) -> float:
        return self.player.duration() / 1000

    def _on_playback_state(self, state: QMediaPlayer.PlaybackState) -> None:
        if state == QMediaPlayer.PlaybackState.PlayingState:
            self.stateReported.emit(PlaybackState.PLAYING)
        elif state == QMediaPlayer.PlaybackState.PausedState:
            self.stateReported.emit(PlaybackState.PAUSED)

    def _on_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            self.stateReported.emit(PlaybackState.ENDED)
        elif status in (
            QMediaPlayer.MediaStatus.BufferingMedia,
            QMediaPlayer.MediaStatus.StalledMedia,
        ):
            self.stateReported.emit(PlaybackState.BUFFERING)

    def _on_media_error(self, error: QMediaPlayer.Error, message: str = "") -> None:
        if error != QMediaPlayer.Error.NoError:
            logger.error(f"Media error: {self.player.errorString()}")
            self.streamFailed.emit(self.player.errorString())
