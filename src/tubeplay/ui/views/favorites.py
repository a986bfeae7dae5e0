"""Favorites view."""

from __future__ import annotations

from typing import List, Optional

from PyQt6.QtCore import QModelIndex, Qt, pyqtSignal
from PyQt6.QtWidgets import QLabel, QMenu, QStackedWidget, QVBoxLayout, QWidget

from ...commands import Action, Command
from ...track import Track
from ..models import TrackTableModel
from .search import build_track_table


class FavoritesView(QWidget):
    commandRequested = pyqtSignal(object)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.model = TrackTableModel(self)
        self.table = build_track_table(self.model)
        self.table.doubleClicked.connect(self._play_index)
        self.table.customContextMenuRequested.connect(self._show_context_menu)

        self.empty_label = QLabel("No favorites yet.")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.setObjectName("muted")
        self.stack = QStackedWidget()
        self.stack.addWidget(self.empty_label)
        self.stack.addWidget(self.table)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.stack)
        self.setLayout(layout)

    def set_favorites(self, tracks: List[Track]) -> None:
        self.model.set_tracks(tracks)
        self.model.set_favorite_ids(track.id for track in tracks)
        self.stack.setCurrentWidget(self.table if tracks else self.empty_label)

    def _play_index(self, index: QModelIndex) -> None:
        track = self.model.track_at(index.row())
        self.commandRequested.emit(Command(Action.PLAY_TRACK, track=track))

    def _show_context_menu(self, position) -> None:
        index = self.table.indexAt(position)
        if not index.isValid():
            return
        track = self.model.track_at(index.row())
        menu = QMenu(self)
        actions = {
            menu.addAction("Play"): Action.PLAY_TRACK,
            menu.addAction("Add to Queue"): Action.ADD_TO_QUEUE,
            menu.addAction("Remove from Favorites"): Action.TOGGLE_FAVORITE,
            menu.addAction("Download Link"): Action.DOWNLOAD,
        }
        chosen = menu.exec(self.table.viewport().mapToGlobal(position))
        if chosen in actions:
            self.commandRequested.emit(Command(actions[chosen], track=track))
