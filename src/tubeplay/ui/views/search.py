"""Search results view: paged results table with per-track actions."""

from __future__ import annotations

from typing import List, Optional

from PyQt6.QtCore import QModelIndex, Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QMenu,
    QPushButton,
    QStackedWidget,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from ...commands import Action, Command
from ...track import Track
from ..models import TrackTableModel


def build_track_table(model: TrackTableModel) -> QTableView:
    table = QTableView()
    table.setModel(model)
    table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
    table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
    table.setAlternatingRowColors(True)
    table.verticalHeader().setVisible(False)
    table.verticalHeader().setDefaultSectionSize(52)
    header = table.horizontalHeader()
    header.setSectionResizeMode(0, QHeaderView.ResizeMode.Fixed)
    table.setColumnWidth(0, 26)
    header.setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
    header.setSectionResizeMode(2, QHeaderView.ResizeMode.Interactive)
    table.setColumnWidth(2, 180)
    for col in (3, 4):
        header.setSectionResizeMode(col, QHeaderView.ResizeMode.ResizeToContents)
    table.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
    return table


class SearchView(QWidget):
    commandRequested = pyqtSignal(object)
    pageRequested = pyqtSignal(int)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.model = TrackTableModel(self)
        self.table = build_track_table(self.model)
        self.table.doubleClicked.connect(self._play_index)
        self.table.customContextMenuRequested.connect(self._show_context_menu)
        self._current_page = 1

        self.empty_label = QLabel("No results yet. Search for a song or artist.")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.setObjectName("muted")
        self.empty_label.setWordWrap(True)
        self.table_stack = QStackedWidget()
        self.table_stack.addWidget(self.empty_label)
        self.table_stack.addWidget(self.table)

        self.info_label = QLabel("")
        self.info_label.setObjectName("muted")
        self.prev_button = QPushButton("Previous")
        self.prev_button.clicked.connect(lambda: self.pageRequested.emit(self._current_page - 1))
        self.page_label = QLabel("")
        self.next_button = QPushButton("Next")
        self.next_button.clicked.connect(lambda: self.pageRequested.emit(self._current_page + 1))

        pagination = QHBoxLayout()
        pagination.addWidget(self.info_label)
        pagination.addStretch()
        pagination.addWidget(self.prev_button)
        pagination.addWidget(self.page_label)
        pagination.addWidget(self.next_button)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.table_stack)
        layout.addLayout(pagination)
        self.setLayout(layout)
        self.show_page([], 1, 0, 0, 20)

    def show_page(
        self,
        tracks: List[Track],
        page: int,
        total_pages: int,
        total_results: int,
        page_size: int,
    ) -> None:
        self._current_page = page
        self.model.set_tracks(tracks)
        if total_results == 0:
            self.table_stack.setCurrentWidget(self.empty_label)
            self.info_label.setText("")
        else:
            self.table_stack.setCurrentWidget(self.table)
            first = (page - 1) * page_size + 1
            last = min(page * page_size, total_results)
            self.info_label.setText(f"Showing {first}-{last} of {total_results} results")
            self.table.scrollToTop()
        multi_page = total_pages > 1
        self.page_label.setText(f"Page {page} of {total_pages}" if multi_page else "")
        self.prev_button.setVisible(multi_page)
        self.next_button.setVisible(multi_page)
        self.prev_button.setEnabled(page > 1)
        self.next_button.setEnabled(page < total_pages)

    def selected_track(self) -> Optional[Track]:
        rows = self.table.selectionModel().selectedRows()
        if not rows:
            return None
        return self.model.track_at(rows[0].row())

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
            menu.addAction("Favorite / Unfavorite"): Action.TOGGLE_FAVORITE,
            menu.addAction("Download Link"): Action.DOWNLOAD,
        }
        chosen = menu.exec(self.table.viewport().mapToGlobal(position))
        if chosen in actions:
            self.commandRequested.emit(Command(actions[chosen], track=track))
