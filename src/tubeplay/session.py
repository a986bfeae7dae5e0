"""Player session: wires the queue, API clients and playback adapter together.

The view layer never touches the collaborators directly; it builds a
``Command`` and hands it to ``PlayerSession.dispatch``. Results flow back as
return values and as short notifications sent through ``notify``.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Union

from loguru import logger

from .clients import ApiClient, DownloadInfo, FavoritesClient, SearchClient
from .commands import Action, Command
from .exceptions import ApiError, FavoritesError
from .playback import PlaybackAdapter
from .queue import QueueController, RepeatMode, StateBackend
from .track import Track

VOLUME_KEY = "volume"
DEFAULT_VOLUME = 50
NOT_READY_MESSAGE = "Player is starting, please wait..."

REPEAT_MESSAGES = {
    RepeatMode.OFF: "Repeat off",
    RepeatMode.ONE: "Repeating one track",
    RepeatMode.ALL: "Repeating all tracks",
}

Notifier = Callable[[str], None]


def _log_notification(message: str) -> None:
    logger.info(message)


class PlayerSession:
    def __init__(
        self,
        *,
        queue: QueueController,
        search: SearchClient,
        favorites: FavoritesClient,
        playback: PlaybackAdapter,
        api: ApiClient,
        state_store: Optional[StateBackend] = None,
        notify: Optional[Notifier] = None,
        search_limit: int = 100,
    ) -> None:
        self.queue = queue
        self.search = search
        self.favorites = favorites
        self.playback = playback
        self.api = api
        self.state_store = state_store
        self.notify: Notifier = notify or _log_notification
        self.search_limit = search_limit
        self._handlers: Dict[Action, Callable[[Command], Any]] = {
            Action.SEARCH: self._handle_search,
            Action.PLAY_TRACK: self._handle_play_track,
            Action.ADD_TO_QUEUE: self._handle_add_to_queue,
            Action.TOGGLE_FAVORITE: self._handle_toggle_favorite,
            Action.FAVORITE_CURRENT: self._handle_favorite_current,
            Action.DOWNLOAD: self._handle_download,
            Action.DOWNLOAD_CURRENT: self._handle_download_current,
            Action.PLAY_FROM_QUEUE: self._handle_play_from_queue,
            Action.REMOVE_FROM_QUEUE: self._handle_remove_from_queue,
            Action.MOVE_IN_QUEUE: self._handle_move_in_queue,
            Action.CLEAR_QUEUE: self._handle_clear_queue,
            Action.NEXT: self._handle_next,
            Action.PREVIOUS: self._handle_previous,
            Action.TOGGLE_PLAY: self._handle_toggle_play,
            Action.TOGGLE_SHUFFLE: self._handle_toggle_shuffle,
            Action.CYCLE_REPEAT: self._handle_cycle_repeat,
            Action.SEEK: self._handle_seek,
            Action.SET_VOLUME: self._handle_set_volume,
            Action.TOGGLE_MUTE: self._handle_toggle_mute,
        }
        playback.on_ended(lambda: self.dispatch(Command(Action.NEXT)))
        playback.on_ready(self._apply_saved_volume)

    def dispatch(self, command: Command) -> Any:
        handler = self._handlers[command.action]
        logger.debug(f"Dispatching {command.action.name}")
        return handler(command)

    def load_favorites(self) -> List[Track]:
        try:
            return self.favorites.load()
        except ApiError as exc:
            logger.error(f"Failed to load favorites: {exc}")
            return self.favorites.favorites

    @property
    def saved_volume(self) -> int:
        if self.state_store is None:
            return DEFAULT_VOLUME
        value = self.state_store.get(VOLUME_KEY, DEFAULT_VOLUME)
        try:
            return max(0, min(100, int(value)))
        except (TypeError, ValueError):
            return DEFAULT_VOLUME

    # Search, split so the view can run the network call off the UI thread

    def start_search(self, query: Optional[str]) -> Optional[int]:
        if not query or not query.strip():
            self.notify("Please enter a search term")
            return None
        self.notify("Searching...")
        return self.search.begin()

    def finish_search(self, ticket: int, tracks: List[Track]) -> bool:
        if not self.search.accept(ticket, tracks):
            return False
        self.notify(f"Found {len(tracks)} results")
        return True

    def fail_search(self, ticket: int, error: Union[Exception, str]) -> bool:
        if not self.search.is_latest(ticket):
            logger.info(f"Ignoring failure of stale search (ticket {ticket}): {error}")
            return False
        logger.error(f"Search failed: {error}")
        self.notify(f"Search failed: {error}")
        return True

    def _handle_search(self, command: Command) -> List[Track]:
        ticket = self.start_search(command.query)
        if ticket is None:
            return []
        try:
            tracks = self.search.fetch(command.query or "", self.search_limit)
        except (ApiError, ValueError) as exc:
            self.fail_search(ticket, exc)
            return []
        self.finish_search(ticket, tracks)
        return self.search.results

    # Queue and transport

    def _player_ready(self) -> bool:
        if not self.playback.is_ready:
            self.notify(NOT_READY_MESSAGE)
            return False
        return True

    def _start(self, track: Track) -> None:
        self.playback.load(track.id)
        self.playback.play()

    def _handle_play_track(self, command: Command) -> Optional[Track]:
        if not self._player_ready() or command.track is None:
            return None
        self.queue.add(command.track)
        track = self.queue.play_at(len(self.queue) - 1)
        if track is not None:
            self._start(track)
            self.notify(f"Now playing: {track.title}")
        return track

    def _handle_add_to_queue(self, command: Command) -> None:
        if command.track is None:
            return
        self.queue.add(command.track)
        self.notify("Added to queue")

    def _handle_play_from_queue(self, command: Command) -> Optional[Track]:
        if not self._player_ready() or command.index is None:
            return None
        track = self.queue.play_at(command.index)
        if track is not None:
            self._start(track)
        return track

    def _handle_remove_from_queue(self, command: Command) -> None:
        if command.index is None:
            return
        self.queue.remove(command.index)
        self.notify("Removed from queue")

    def _handle_move_in_queue(self, command: Command) -> None:
        if command.index is None or command.to_index is None:
            return
        self.queue.move_track(command.index, command.to_index)

    def _handle_clear_queue(self, command: Command) -> None:
        self.queue.clear()
        self.notify("Queue cleared")

    def _handle_next(self, command: Command) -> Optional[Track]:
        if not self._player_ready():
            return None
        track = self.queue.next()
        if track is not None:
            self._start(track)
        else:
            self.notify("Reached the end of the queue")
            self.playback.pause()
        return track

    def _handle_previous(self, command: Command) -> Optional[Track]:
        if not self._player_ready():
            return None
        track = self.queue.previous()
        if track is not None:
            self._start(track)
        return track

    def _handle_toggle_play(self, command: Command) -> None:
        if self._player_ready():
            self.playback.toggle_play_pause()

    def _handle_toggle_shuffle(self, command: Command) -> bool:
        enabled = self.queue.toggle_shuffle()
        self.notify("Shuffle on" if enabled else "Shuffle off")
        return enabled

    def _handle_cycle_repeat(self, command: Command) -> RepeatMode:
        mode = self.queue.cycle_repeat_mode()
        self.notify(REPEAT_MESSAGES[mode])
        return mode

    def _handle_seek(self, command: Command) -> None:
        if not self.playback.is_ready or command.value is None:
            return
        percentage = max(0.0, min(100.0, float(command.value)))
        self.playback.seek(percentage / 100 * self.playback.duration())

    def _handle_set_volume(self, command: Command) -> int:
        volume = max(0, min(100, int(command.value or 0)))
        self.playback.set_volume(volume)
        if self.state_store is not None:
            try:
                self.state_store.set(VOLUME_KEY, volume)
            except OSError as exc:
                logger.error(f"Failed to save volume: {exc}")
        return volume

    def _handle_toggle_mute(self, command: Command) -> Optional[int]:
        """Return the volume to display afterwards, or None before the player is ready."""
        if not self.playback.is_ready:
            return None
        if self.playback.is_muted():
            self.playback.unmute()
            return self.saved_volume
        self.playback.mute()
        return 0

    def _apply_saved_volume(self) -> None:
        self.playback.set_volume(self.saved_volume)

    # Favorites and downloads

    def _handle_toggle_favorite(self, command: Command) -> Optional[bool]:
        if command.track is None:
            return None
        try:
            is_favorite = self.favorites.toggle(command.track)
        except (ApiError, FavoritesError) as exc:
            logger.error(f"Toggle favorite failed: {exc}")
            self.notify(str(exc) or "Action failed")
            return None
        self.notify("Added to favorites" if is_favorite else "Removed from favorites")
        return is_favorite

    def _handle_favorite_current(self, command: Command) -> Optional[bool]:
        current = self.queue.get_current_track()
        if current is None:
            return None
        return self._handle_toggle_favorite(Command(Action.TOGGLE_FAVORITE, track=current))

    def _handle_download(self, command: Command) -> Optional[DownloadInfo]:
        if command.track is None:
            return None
        try:
            return self.api.download_info(command.track.id)
        except ApiError as exc:
            logger.error(f"Download lookup failed: {exc}")
            self.notify(f"Error: {exc}")
            return None

    def _handle_download_current(self, command: Command) -> Optional[DownloadInfo]:
        current = self.queue.get_current_track()
        if current is None:
            self.notify("Nothing is playing")
            return None
        return self._handle_download(Command(Action.DOWNLOAD, track=current))
