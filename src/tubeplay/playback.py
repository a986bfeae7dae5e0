"""Normalized wrapper around an embeddable media widget."""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Optional, Protocol


class PlaybackState(str, Enum):
    NOT_READY = "not_ready"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    BUFFERING = "buffering"
    ENDED = "ended"


class MediaWidget(Protocol):
    def load_video(self, video_id: str) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, seconds: float) -> None: ...

    def set_volume(self, volume: int) -> None: ...

    def mute(self) -> None: ...

    def unmute(self) -> None: ...

    def is_muted(self) -> bool: ...

    def current_time(self) -> float: ...

    def duration(self) -> float: ...


StateListener = Callable[[PlaybackState], None]
EndedListener = Callable[[], None]


class PlaybackAdapter:
    """Gate widget controls on readiness and fan out state notifications.

    Every control call is a no-op until ``mark_ready`` has been called; the
    widget then reports changes back through ``handle_widget_state``.
    """

    def __init__(self, widget: MediaWidget) -> None:
        self.widget = widget
        self.state = PlaybackState.NOT_READY
        self.current_video_id: Optional[str] = None
        self._ended_listeners: List[EndedListener] = []
        self._state_listeners: List[StateListener] = []
        self._ready_listeners: List[Callable[[], None]] = []

    @property
    def is_ready(self) -> bool:
        return self.state is not PlaybackState.NOT_READY

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    def mark_ready(self) -> None:
        if self.is_ready:
            return
        self.state = PlaybackState.READY
        for listener in list(self._ready_listeners):
            listener()

    def on_ready(self, listener: Callable[[], None]) -> None:
        self._ready_listeners.append(listener)

    def on_ended(self, listener: EndedListener) -> None:
        self._ended_listeners.append(listener)

    def on_state_change(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def load(self, video_id: str) -> None:
        if not self.is_ready:
            return
        self.current_video_id = video_id
        self.widget.load_video(video_id)

    def play(self) -> None:
        if self.is_ready:
            self.widget.play()

    def pause(self) -> None:
        if self.is_ready:
            self.widget.pause()

    def toggle_play_pause(self) -> None:
        if not self.is_ready:
            return
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def seek(self, seconds: float) -> None:
        if self.is_ready:
            self.widget.seek(max(0.0, float(seconds)))

    def set_volume(self, volume: int) -> None:
        if self.is_ready:
            self.widget.set_volume(max(0, min(100, int(volume))))

    def mute(self) -> None:
        if self.is_ready:
            self.widget.mute()

    def unmute(self) -> None:
        if self.is_ready:
            self.widget.unmute()

    def is_muted(self) -> bool:
        return self.widget.is_muted() if self.is_ready else False

    def current_time(self) -> float:
        return (self.widget.current_time() or 0.0) if self.is_ready else 0.0

    def duration(self) -> float:
        return (self.widget.duration() or 0.0) if self.is_ready else 0.0

    def handle_widget_state(self, state: PlaybackState) -> None:
        """Entry point for the widget to report playing/paused/buffering/ended."""
        if not self.is_ready or state in (PlaybackState.NOT_READY, PlaybackState.READY):
            return
        self.state = state
        if state is PlaybackState.ENDED:
            for listener in list(self._ended_listeners):
                listener()
        for listener in list(self._state_listeners):
            listener(state)
