"""Qt table model shared by the search and favorites views."""

from __future__ import annotations

from typing import Iterable, List, Optional

from PyQt6.QtCore import QAbstractTableModel, QModelIndex, QObject, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QIcon, QPixmap

from ..track import Track
from .theme import ACCENT_COLOR


class TrackTableModel(QAbstractTableModel):
    HEADERS = ["", "Title", "Channel", "Duration", "Views"]

    thumbnailRequested = pyqtSignal(str)
    THUMBNAIL_SIZE = 48

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._tracks: List[Track] = []
        self._favorite_ids: set[str] = set()
        self._thumbnail_cache: dict[str, QPixmap] = {}
        self._thumbnail_pending: set[str] = set()
        self._thumbnail_failed: set[str] = set()

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._tracks)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self.HEADERS)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):
        if not index.isValid():
            return None
        track = self._tracks[index.row()]
        column = index.column()
        if role == Qt.ItemDataRole.DecorationRole and column == 1:
            return self._thumbnail_for_track(track)
        if role == Qt.ItemDataRole.ForegroundRole and column == 0:
            return QColor(ACCENT_COLOR)
        if role == Qt.ItemDataRole.DisplayRole:
            match column:
                case 0:
                    return "♥" if track.id in self._favorite_ids else ""
                case 1:
                    return track.title
                case 2:
                    return track.channel
                case 3:
                    return track.duration or "N/A"
                case 4:
                    return self._format_views(track.views)
        if role == Qt.ItemDataRole.ToolTipRole:
            return track.description or track.title
        return None

    def headerData(
        self,
        section: int,
        orientation: Qt.Orientation,
        role: int = Qt.ItemDataRole.DisplayRole,
    ):
        if (
            role == Qt.ItemDataRole.DisplayRole
            and orientation == Qt.Orientation.Horizontal
        ):
            return self.HEADERS[section]
        return None

    def flags(self, index: QModelIndex):
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        return Qt.ItemFlag.ItemIsSelectable | Qt.ItemFlag.ItemIsEnabled

    def set_tracks(self, tracks: Iterable[Track]) -> None:
        self.beginResetModel()
        self._tracks = list(tracks)
        self.endResetModel()

    def set_favorite_ids(self, video_ids: Iterable[str]) -> None:
        self._favorite_ids = set(video_ids)
        if self._tracks:
            top = self.index(0, 0)
            bottom = self.index(len(self._tracks) - 1, 0)
            self.dataChanged.emit(top, bottom, [Qt.ItemDataRole.DisplayRole])

    def track_at(self, row: int) -> Track:
        return self._tracks[row]

    def set_thumbnail_data(self, url: str, payload: bytes) -> None:
        pixmap = QPixmap()
        if not pixmap.loadFromData(payload):
            self.mark_thumbnail_failed(url)
            return
        scaled = pixmap.scaled(
            self.THUMBNAIL_SIZE,
            self.THUMBNAIL_SIZE,
            Qt.AspectRatioMode.KeepAspectRatioByExpanding,
            Qt.TransformationMode.SmoothTransformation,
        )
        self._thumbnail_cache[url] = scaled
        self._thumbnail_pending.discard(url)
        for row, track in enumerate(self._tracks):
            if track.thumbnail == url:
                idx = self.index(row, 1)
                self.dataChanged.emit(idx, idx, [Qt.ItemDataRole.DecorationRole])

    def mark_thumbnail_failed(self, url: str) -> None:
        self._thumbnail_pending.discard(url)
        self._thumbnail_failed.add(url)

    def _thumbnail_for_track(self, track: Track) -> Optional[QIcon]:
        url = track.thumbnail
        if not url or url in self._thumbnail_failed:
            return None
        if url in self._thumbnail_cache:
            return QIcon(self._thumbnail_cache[url])
        if url not in self._thumbnail_pending:
            self._thumbnail_pending.add(url)
            self.thumbnailRequested.emit(url)
        return None

    @staticmethod
    def _format_views(views: Optional[int]) -> str:
        return f"{views:,}" if views else "N/A"
