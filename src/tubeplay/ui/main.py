"""Main window and application entry point for the GUI."""

from __future__ import annotations

import sys
import urllib.parse
import urllib.request
from collections import deque
from typing import List, Optional, Union

from loguru import logger
from PyQt6.QtCore import QThreadPool, QTimer, pyqtSignal
from PyQt6.QtGui import QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from ..clients import ApiClient, DownloadInfo, FavoritesClient, SearchClient
from ..commands import Action, Command
from ..config import PlayerDefaults, load_defaults
from ..extractor import YouTubeExtractor
from ..logs import setup_logging
from ..playback import PlaybackAdapter, PlaybackState
from ..queue import QueueController
from ..session import PlayerSession
from ..storage import StateStore
from .media import QtMediaWidget
from .theme import apply_dark_theme
from .views.favorites import FavoritesView
from .views.player import NowPlayingBar
from .views.queue import QueueView
from .views.search import SearchView
from .workers import WORKER_FAILED, Worker, WorkerError

THUMBNAIL_WORKERS_LIMIT = 6
THUMBNAIL_MAX_BYTES = 2 * 1024 * 1024
THUMBNAIL_HOST_ALLOWLIST = ("ytimg.com", "ggpht.com", "googleusercontent.com", "youtube.com")
PROGRESS_INTERVAL_MS = 1000

# Actions that reach the API server run on the thread pool.
NETWORK_ACTIONS = {
    Action.TOGGLE_FAVORITE,
    Action.FAVORITE_CURRENT,
    Action.DOWNLOAD,
    Action.DOWNLOAD_CURRENT,
}


class MainWindow(QMainWindow):
    statusMessage = pyqtSignal(str)

    def __init__(self, defaults: Optional[PlayerDefaults] = None) -> None:
        super().__init__()
        self.setWindowTitle("TubePlay")
        self.resize(1100, 720)
        self.thread_pool = QThreadPool()
        self.defaults = defaults or load_defaults()
        self._thumbnail_queue: deque[str] = deque()
        self._thumbnail_inflight = 0

        self.state_store = StateStore(self.defaults.state_file)
        self.queue = QueueController(self.state_store)
        self.api = ApiClient(self.defaults.api_url, timeout=self.defaults.request_timeout)
        self.extractor = YouTubeExtractor(
            js_runtime=self.defaults.js_runtime,
            remote_components=self.defaults.remote_components,
        )
        self.media = QtMediaWidget(self.extractor.stream_url, self.thread_pool, self)
        self.playback = PlaybackAdapter(self.media)
        self.session = PlayerSession(
            queue=self.queue,
            search=SearchClient(self.api, page_size=self.defaults.page_size),
            favorites=FavoritesClient(self.api),
            playback=self.playback,
            api=self.api,
            state_store=self.state_store,
            notify=self.statusMessage.emit,
            search_limit=self.defaults.search_limit,
        )

        self.search_view = SearchView(self)
        self.favorites_view = FavoritesView(self)
        self.queue_view = QueueView(self)
        self.now_playing = NowPlayingBar(self)
        self.status_label = QLabel("Ready")
        self.status_label.setObjectName("muted")
        self.stack = QStackedWidget()
        self.stack.addWidget(self.search_view)
        self.stack.addWidget(self.favorites_view)
        self.stack.addWidget(self.queue_view)
        self._build_ui()

        self.statusMessage.connect(self._set_status)
        for view in (self.search_view, self.favorites_view, self.queue_view, self.now_playing):
            view.commandRequested.connect(self.handle_command)
        self.search_view.pageRequested.connect(self._go_to_page)
        self.search_view.model.thumbnailRequested.connect(self._on_thumbnail_requested)
        self.favorites_view.model.thumbnailRequested.connect(self._on_thumbnail_requested)
        self.media.stateReported.connect(self._on_media_state)
        self.media.streamFailed.connect(self._on_stream_failed)
        self.playback.on_state_change(self._on_playback_state)
        self.queue.subscribe(self._render_queue)

        self.progress_timer = QTimer(self)
        self.progress_timer.setInterval(PROGRESS_INTERVAL_MS)
        self.progress_timer.timeout.connect(self._update_progress)
        self.progress_timer.start()

        self.now_playing.update_shuffle(self.queue.shuffle_mode)
        self.now_playing.update_repeat(self.queue.repeat_mode)
        self.now_playing.update_volume(self.session.saved_volume)
        self._render_queue()
        self._wire_shortcuts()
        self._load_favorites()
        # QMediaPlayer accepts calls as soon as it exists.
        QTimer.singleShot(0, self.playback.mark_ready)

    def _build_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(self._build_navigation_bar())
        layout.addWidget(self.stack, 1)
        layout.addWidget(self.now_playing)
        central.setLayout(layout)
        self.setCentralWidget(central)
        help_menu = self.menuBar().addMenu("Help")
        shortcuts_action = help_menu.addAction("Keyboard shortcuts")
        shortcuts_action.triggered.connect(self._show_shortcuts_dialog)

    def _build_navigation_bar(self) -> QWidget:
        container = QWidget()
        layout = QHBoxLayout()
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search songs, artists, videos...")
        self.search_input.returnPressed.connect(self._start_search)
        self.search_button = QPushButton("Search")
        self.search_button.setProperty("primary", True)
        self.search_button.clicked.connect(self._start_search)
        layout.addWidget(self.search_input, 1)
        layout.addWidget(self.search_button)
        for label, view in (
            ("Results", self.search_view),
            ("Favorites", self.favorites_view),
            ("Queue", self.queue_view),
        ):
            button = QPushButton(label)
            button.clicked.connect(lambda _checked=False, v=view: self.stack.setCurrentWidget(v))
            layout.addWidget(button)
        layout.addWidget(self.status_label)
        container.setLayout(layout)
        return container

    def _spawn_worker(
        self,
        fn,
        *args,
        context: Optional[str] = None,
        on_finished=None,
        on_error=None,
        **kwargs,
    ) -> Worker:
        worker = Worker(fn, *args, context=context, **kwargs)
        if on_finished:
            def _handle_finished(payload):
                if payload is WORKER_FAILED:
                    return
                on_finished(payload)

            worker.signals.finished.connect(_handle_finished)
        if on_error:
            worker.signals.error.connect(on_error)
        else:
            worker.signals.error.connect(self._on_worker_error)
        self.thread_pool.start(worker)
        return worker

    def _set_status(self, message: str) -> None:
        self.status_label.setText(message)

    def _on_worker_error(self, error: Union[WorkerError, str]) -> None:
        if isinstance(error, WorkerError):
            context = f"{error.context}: " if error.context else ""
            message = f"{context}{error.message}"
        else:
            message = error
        self._set_status(f"Error: {message}")

    # Commands

    def handle_command(self, command: Command) -> None:
        if command.action is Action.SEARCH:
            self.search_input.setText(command.query or "")
            self._start_search()
            return
        if command.action in NETWORK_ACTIONS:
            self._spawn_worker(
                self._dispatch_in_worker,
                command,
                context=command.action.name.lower(),
                on_finished=self._on_command_finished,
            )
            return
        self._on_command_finished((command, self.session.dispatch(command)))

    def _dispatch_in_worker(self, command: Command):
        return command, self.session.dispatch(command)

    def _on_command_finished(self, payload) -> None:
        command, result = payload
        action = command.action
        if action in (Action.TOGGLE_FAVORITE, Action.FAVORITE_CURRENT):
            self._render_favorites()
        elif action in (Action.DOWNLOAD, Action.DOWNLOAD_CURRENT):
            if result is not None:
                self._show_download_info(result)
        elif action is Action.TOGGLE_SHUFFLE:
            self.now_playing.update_shuffle(result)
        elif action is Action.CYCLE_REPEAT:
            self.now_playing.update_repeat(result)
        elif action in (Action.TOGGLE_MUTE, Action.SET_VOLUME) and result is not None:
            self.now_playing.update_volume(result)

    # Search

    def _start_search(self) -> None:
        query = self.search_input.text()
        ticket = self.session.start_search(query)
        if ticket is None:
            return
        self._spawn_worker(
            self._run_search,
            ticket,
            query.strip(),
            context="search",
            on_finished=self._on_search_finished,
            on_error=lambda error, t=ticket: self._on_search_error(t, error),
        )
        self.stack.setCurrentWidget(self.search_view)

    def _run_search(self, ticket: int, query: str):
        return ticket, self.session.search.fetch(query, self.session.search_limit)

    def _on_search_finished(self, payload) -> None:
        ticket, tracks = payload
        if self.session.finish_search(ticket, tracks):
            self._render_search_page()

    def _on_search_error(self, ticket: int, error: WorkerError) -> None:
        self.session.fail_search(ticket, error.message)

    def _go_to_page(self, page: int) -> None:
        if self.session.search.go_to_page(page):
            self._render_search_page()

    def _render_search_page(self) -> None:
        search = self.session.search
        self.search_view.show_page(
            search.page_results(),
            search.current_page,
            search.total_pages,
            len(search.results),
            search.page_size,
        )
        self.search_view.model.set_favorite_ids(self._favorite_ids())

    # Favorites

    def _load_favorites(self) -> None:
        self._spawn_worker(
            self.session.load_favorites,
            context="favorites",
            on_finished=lambda _favorites: self._render_favorites(),
        )

    def _favorite_ids(self) -> List[str]:
        return [track.id for track in self.session.favorites.favorites]

    def _render_favorites(self) -> None:
        self.favorites_view.set_favorites(self.session.favorites.favorites)
        self.search_view.model.set_favorite_ids(self._favorite_ids())
        self._render_now_playing()

    # Queue and playback

    def _render_queue(self) -> None:
        self.queue_view.render_queue(self.queue.queue, self.queue.current_index)
        self._render_now_playing()

    def _render_now_playing(self) -> None:
        current = self.queue.get_current_track()
        is_favorite = current is not None and self.session.favorites.is_favorite(current.id)
        self.now_playing.update_track(current, is_favorite)

    def _on_media_state(self, state: PlaybackState) -> None:
        self.playback.handle_widget_state(state)

    def _on_playback_state(self, state: PlaybackState) -> None:
        self.now_playing.update_play_state(state is PlaybackState.PLAYING)

    def _on_stream_failed(self, message: str) -> None:
        logger.error(f"Playback failed: {message}")
        self._set_status(f"Playback error: {message}")

    def _update_progress(self) -> None:
        if not self.playback.is_ready:
            return
        self.now_playing.update_progress(self.playback.current_time(), self.playback.duration())

    def _show_download_info(self, info: DownloadInfo) -> None:
        lines = [info.message, "", info.youtube_url, ""]
        for suggestion in info.suggestions:
            target = suggestion.get("url") or suggestion.get("link") or ""
            lines.append(f"{suggestion.get('name', '')}: {target}")
        box = QMessageBox(self)
        box.setWindowTitle("Download")
        box.setText("\n".join(lines))
        copy_button = box.addButton("Copy Link", QMessageBox.ButtonRole.ActionRole)
        box.addButton(QMessageBox.StandardButton.Close)
        box.exec()
        if box.clickedButton() is copy_button:
            QApplication.clipboard().setText(info.youtube_url)
            self._set_status("Link copied to clipboard")

    # Thumbnails

    def _on_thumbnail_requested(self, url: str) -> None:
        self._thumbnail_queue.append(url)
        self._start_next_thumbnail()

    def _start_next_thumbnail(self) -> None:
        if self._thumbnail_inflight >= THUMBNAIL_WORKERS_LIMIT:
            return
        if not self._thumbnail_queue:
            return
        url = self._thumbnail_queue.popleft()
        self._thumbnail_inflight += 1
        self._spawn_worker(
            self._download_thumbnail_bytes,
            url,
            context="thumbnail_fetch",
            on_finished=lambda payload, u=url: self._on_thumbnail_finished(u, payload),
            on_error=lambda error, u=url: self._on_thumbnail_error(u, error),
        )

    def _on_thumbnail_finished(self, url: str, payload: bytes) -> None:
        for model in (self.search_view.model, self.favorites_view.model):
            model.set_thumbnail_data(url, payload)
        self._thumbnail_inflight = max(0, self._thumbnail_inflight - 1)
        self._start_next_thumbnail()

    def _on_thumbnail_error(self, url: str, error: Union[WorkerError, str]) -> None:
        for model in (self.search_view.model, self.favorites_view.model):
            model.mark_thumbnail_failed(url)
        self._thumbnail_inflight = max(0, self._thumbnail_inflight - 1)
        self._start_next_thumbnail()

    @staticmethod
    def _download_thumbnail_bytes(url: str) -> bytes:
        _validate_thumbnail_url(url)
        request = urllib.request.Request(url, headers={"User-Agent": "Mozilla/5.0"})
        with urllib.request.urlopen(request, timeout=10) as response:
            data = response.read(THUMBNAIL_MAX_BYTES + 1)
        if len(data) > THUMBNAIL_MAX_BYTES:
            raise RuntimeError("Thumbnail exceeded the size limit.")
        return data

    # Shortcuts

    def _wire_shortcuts(self) -> None:
        QShortcut(QKeySequence("Space"), self, activated=lambda: self.handle_command(Command(Action.TOGGLE_PLAY)))
        QShortcut(QKeySequence("Ctrl+Right"), self, activated=lambda: self.handle_command(Command(Action.NEXT)))
        QShortcut(QKeySequence("Ctrl+Left"), self, activated=lambda: self.handle_command(Command(Action.PREVIOUS)))
        QShortcut(QKeySequence("Ctrl+S"), self, activated=lambda: self.handle_command(Command(Action.TOGGLE_SHUFFLE)))
        QShortcut(QKeySequence("Ctrl+R"), self, activated=lambda: self.handle_command(Command(Action.CYCLE_REPEAT)))
        QShortcut(QKeySequence("Ctrl+M"), self, activated=lambda: self.handle_command(Command(Action.TOGGLE_MUTE)))
        QShortcut(QKeySequence("Ctrl+F"), self, activated=self.search_input.setFocus)

    def _show_shortcuts_dialog(self) -> None:
        QMessageBox.information(
            self,
            "Keyboard shortcuts",
            "\n".join(
                [
                    "Space: Play/Pause",
                    "Ctrl+Right / Ctrl+Left: Next / Previous",
                    "Ctrl+S: Toggle shuffle",
                    "Ctrl+R: Cycle repeat mode",
                    "Ctrl+M: Mute / unmute",
                    "Ctrl+F: Focus search",
                ]
            ),
        )


def _validate_thumbnail_url(url: str) -> None:
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme != "https":
        raise ValueError(f"Refusing non-HTTPS thumbnail URL: {url}")
    host = (parsed.hostname or "").lower()
    if not any(host == allowed or host.endswith(f".{allowed}") for allowed in THUMBNAIL_HOST_ALLOWLIST):
        raise ValueError(f"Thumbnail host is not allowed: {host}")


def run_gui(defaults: Optional[PlayerDefaults] = None) -> None:
    defaults = defaults or load_defaults()
    setup_logging(defaults.log_level, defaults.log_file)
    app = QApplication(sys.argv)
    apply_dark_theme(app)
    window = MainWindow(defaults)
    window.show()
    app.exec()
