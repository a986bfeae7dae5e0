"""Queue view: the ordered play list with the current track highlighted."""

from __future__ import annotations

from typing import List, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ...commands import Action, Command
from ...track import Track
from ..theme import CURRENT_ROW


class QueueView(QWidget):
    commandRequested = pyqtSignal(object)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.list_widget = QListWidget()
        self.list_widget.itemDoubleClicked.connect(
            lambda item: self._emit(Action.PLAY_FROM_QUEUE, self.list_widget.row(item))
        )
        self.count_label = QLabel("Queue is empty")
        self.count_label.setObjectName("muted")

        play_btn = QPushButton("Play")
        play_btn.clicked.connect(lambda: self._emit_selected(Action.PLAY_FROM_QUEUE))
        remove_btn = QPushButton("Remove")
        remove_btn.clicked.connect(lambda: self._emit_selected(Action.REMOVE_FROM_QUEUE))
        up_btn = QPushButton("Move Up")
        up_btn.clicked.connect(lambda: self._move_selected(-1))
        down_btn = QPushButton("Move Down")
        down_btn.clicked.connect(lambda: self._move_selected(1))
        download_btn = QPushButton("Download Link")
        download_btn.clicked.connect(self._download_selected)
        clear_btn = QPushButton("Clear")
        clear_btn.clicked.connect(lambda: self.commandRequested.emit(Command(Action.CLEAR_QUEUE)))

        controls = QHBoxLayout()
        controls.addWidget(self.count_label)
        controls.addStretch()
        for button in (play_btn, remove_btn, up_btn, down_btn, download_btn, clear_btn):
            controls.addWidget(button)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addLayout(controls)
        layout.addWidget(self.list_widget)
        self.setLayout(layout)
        self._tracks: List[Track] = []

    def render_queue(self, tracks: List[Track], current_index: int) -> None:
        selected = self.list_widget.currentRow()
        self._tracks = list(tracks)
        self.list_widget.clear()
        for position, track in enumerate(tracks):
            marker = "▶ " if position == current_index else ""
            item = QListWidgetItem(f"{marker}{position + 1}. {track.title} - {track.channel}")
            if position == current_index:
                item.setBackground(QColor(CURRENT_ROW))
            self.list_widget.addItem(item)
        if 0 <= selected < len(tracks):
            self.list_widget.setCurrentRow(selected)
        self.count_label.setText(
            f"{len(tracks)} tracks in queue" if tracks else "Queue is empty"
        )

    def _emit(self, action: Action, index: int) -> None:
        if 0 <= index < len(self._tracks):
            self.commandRequested.emit(Command(action, index=index))

    def _emit_selected(self, action: Action) -> None:
        self._emit(action, self.list_widget.currentRow())

    def _move_selected(self, delta: int) -> None:
        row = self.list_widget.currentRow()
        target = row + delta
        if row < 0 or not 0 <= target < len(self._tracks):
            return
        self.commandRequested.emit(Command(Action.MOVE_IN_QUEUE, index=row, to_index=target))
        self.list_widget.setCurrentRow(target)

    def _download_selected(self) -> None:
        row = self.list_widget.currentRow()
        if 0 <= row < len(self._tracks):
            self.commandRequested.emit(Command(Action.DOWNLOAD, track=self._tracks[row]))
