"""Now-playing bar: track info, transport, seek and volume controls."""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QSlider,
    QStyle,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from ...commands import Action, Command
from ...queue import RepeatMode
from ...track import Track, format_duration

REPEAT_LABELS = {
    RepeatMode.OFF: "Repeat",
    RepeatMode.ALL: "Repeat All",
    RepeatMode.ONE: "Repeat One",
}


class NowPlayingBar(QFrame):
    commandRequested = pyqtSignal(object)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("nowPlaying")
        self._seeking = False

        self.title_label = QLabel("Select a track to play")
        self.title_label.setStyleSheet("font-weight: 600; font-size: 15px;")
        self.channel_label = QLabel("")
        self.channel_label.setObjectName("muted")
        meta_layout = QVBoxLayout()
        meta_layout.addWidget(self.title_label)
        meta_layout.addWidget(self.channel_label)

        self.prev_button = self._tool_button(QStyle.StandardPixmap.SP_MediaSkipBackward, "Previous")
        self.prev_button.clicked.connect(lambda: self._emit(Action.PREVIOUS))
        self.play_button = self._tool_button(QStyle.StandardPixmap.SP_MediaPlay, "Play")
        self.play_button.clicked.connect(lambda: self._emit(Action.TOGGLE_PLAY))
        self.next_button = self._tool_button(QStyle.StandardPixmap.SP_MediaSkipForward, "Next")
        self.next_button.clicked.connect(lambda: self._emit(Action.NEXT))

        self.shuffle_button = QToolButton()
        self.shuffle_button.setText("Shuffle")
        self.shuffle_button.setCheckable(True)
        self.shuffle_button.clicked.connect(lambda: self._emit(Action.TOGGLE_SHUFFLE))
        self.repeat_button = QToolButton()
        self.repeat_button.setText(REPEAT_LABELS[RepeatMode.OFF])
        self.repeat_button.setCheckable(True)
        self.repeat_button.clicked.connect(lambda: self._emit(Action.CYCLE_REPEAT))
        self.favorite_button = QToolButton()
        self.favorite_button.setText("♡")
        self.favorite_button.setToolTip("Favorite current track")
        self.favorite_button.clicked.connect(lambda: self._emit(Action.FAVORITE_CURRENT))
        self.download_button = QToolButton()
        self.download_button.setText("Download")
        self.download_button.clicked.connect(lambda: self._emit(Action.DOWNLOAD_CURRENT))

        controls = QHBoxLayout()
        controls.addWidget(self.shuffle_button)
        controls.addWidget(self.prev_button)
        controls.addWidget(self.play_button)
        controls.addWidget(self.next_button)
        controls.addWidget(self.repeat_button)

        self.elapsed_label = QLabel("0:00")
        self.duration_label = QLabel("0:00")
        self.seek_slider = QSlider(Qt.Orientation.Horizontal)
        self.seek_slider.setRange(0, 100)
        self.seek_slider.sliderPressed.connect(self._begin_seek)
        self.seek_slider.sliderReleased.connect(self._finish_seek)
        seek_layout = QHBoxLayout()
        seek_layout.addWidget(self.elapsed_label)
        seek_layout.addWidget(self.seek_slider, 1)
        seek_layout.addWidget(self.duration_label)

        center = QVBoxLayout()
        center.addLayout(controls)
        center.addLayout(seek_layout)

        self.mute_button = self._tool_button(QStyle.StandardPixmap.SP_MediaVolume, "Mute")
        self.mute_button.clicked.connect(lambda: self._emit(Action.TOGGLE_MUTE))
        self.volume_slider = QSlider(Qt.Orientation.Horizontal)
        self.volume_slider.setRange(0, 100)
        self.volume_slider.setFixedWidth(110)
        # valueChanged fires once on release while dragging
        self.volume_slider.setTracking(False)
        self.volume_slider.sliderMoved.connect(self._show_volume_icon)
        self.volume_slider.valueChanged.connect(self._change_volume)
        side = QHBoxLayout()
        side.addWidget(self.favorite_button)
        side.addWidget(self.download_button)
        side.addWidget(self.mute_button)
        side.addWidget(self.volume_slider)

        layout = QHBoxLayout()
        layout.addLayout(meta_layout, 2)
        layout.addLayout(center, 3)
        layout.addLayout(side, 2)
        self.setLayout(layout)

    def _tool_button(self, icon: QStyle.StandardPixmap, tooltip: str) -> QToolButton:
        button = QToolButton()
        button.setIcon(self.style().standardIcon(icon))
        button.setToolTip(tooltip)
        return button

    def _emit(self, action: Action) -> None:
        self.commandRequested.emit(Command(action))

    def _begin_seek(self) -> None:
        self._seeking = True

    def _finish_seek(self) -> None:
        self._seeking = False
        self.commandRequested.emit(Command(Action.SEEK, value=self.seek_slider.value()))

    def _change_volume(self, value: int) -> None:
        self._show_volume_icon(value)
        self.commandRequested.emit(Command(Action.SET_VOLUME, value=value))

    def _show_volume_icon(self, volume: int) -> None:
        muted = volume == 0
        icon = QStyle.StandardPixmap.SP_MediaVolumeMuted if muted else QStyle.StandardPixmap.SP_MediaVolume
        self.mute_button.setIcon(self.style().standardIcon(icon))
        self.mute_button.setToolTip("Unmute" if muted else "Mute")

    def update_track(self, track: Optional[Track], is_favorite: bool = False) -> None:
        if track is None:
            self.title_label.setText("Select a track to play")
            self.channel_label.setText("")
            self.favorite_button.setText("♡")
            self.update_progress(0, 0)
            return
        self.title_label.setText(track.title)
        self.channel_label.setText(track.channel)
        self.favorite_button.setText("♥" if is_favorite else "♡")

    def update_play_state(self, playing: bool) -> None:
        icon = QStyle.StandardPixmap.SP_MediaPause if playing else QStyle.StandardPixmap.SP_MediaPlay
        self.play_button.setIcon(self.style().standardIcon(icon))
        self.play_button.setToolTip("Pause" if playing else "Play")

    def update_progress(self, current: float, duration: float) -> None:
        if self._seeking:
            return
        percent = int(current / duration * 100) if duration > 0 else 0
        self.seek_slider.blockSignals(True)
        self.seek_slider.setValue(max(0, min(100, percent)))
        self.seek_slider.blockSignals(False)
        self.elapsed_label.setText(format_duration(int(current)) or "0:00")
        self.duration_label.setText(format_duration(int(duration)) or "0:00")

    def update_shuffle(self, enabled: bool) -> None:
        self.shuffle_button.setChecked(enabled)

    def update_repeat(self, mode: RepeatMode) -> None:
        self.repeat_button.setText(REPEAT_LABELS[mode])
        self.repeat_button.setChecked(mode is not RepeatMode.OFF)

    def update_volume(self, volume: int) -> None:
        self.volume_slider.blockSignals(True)
        self.volume_slider.setValue(volume)
        self.volume_slider.blockSignals(False)
        self._show_volume_icon(volume)
