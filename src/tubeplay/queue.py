"""Playback queue: ordering, current position, shuffle and repeat handling.

The controller never raises for out-of-range input coming from the UI.
Operations that cannot act return ``None`` (no track) or leave the state
untouched, and the current position uses ``NO_INDEX`` when nothing is loaded.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from loguru import logger

from .track import Track

NO_INDEX = -1
STATE_KEY = "playlist"


class RepeatMode(str, Enum):
    OFF = "off"
    ONE = "one"
    ALL = "all"

    @classmethod
    def parse(cls, value: Union["RepeatMode", str, None]) -> Optional["RepeatMode"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


REPEAT_CYCLE = (RepeatMode.OFF, RepeatMode.ALL, RepeatMode.ONE)


class StateBackend(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


QueueListener = Callable[["QueueController"], None]


class QueueController:
    """Owns the ordered queue and the pointer to the track being played."""

    def __init__(
        self,
        store: Optional[StateBackend] = None,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._store = store
        self._random = rng or random.Random()
        self._queue: List[Track] = []
        self._original_queue: List[Track] = []
        self._current_index = NO_INDEX
        self._shuffle_mode = False
        self._repeat_mode = RepeatMode.OFF
        self._listeners: List[QueueListener] = []
        if store is not None:
            self._restore()

    @property
    def queue(self) -> List[Track]:
        return list(self._queue)

    @property
    def original_queue(self) -> List[Track]:
        return list(self._original_queue)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def shuffle_mode(self) -> bool:
        return self._shuffle_mode

    @property
    def repeat_mode(self) -> RepeatMode:
        return self._repeat_mode

    def __len__(self) -> int:
        return len(self._queue)

    def subscribe(self, listener: QueueListener) -> None:
        self._listeners.append(listener)

    def add(self, track: Track) -> None:
        self._queue.append(track)
        self._changed()

    def remove(self, index: int) -> None:
        if not self._in_bounds(index):
            return
        del self._queue[index]
        # Removing the current track moves the pointer to the previous slot.
        if self._current_index >= index:
            self._current_index -= 1
        self._changed()

    def clear(self) -> None:
        self._queue = []
        self._current_index = NO_INDEX
        self._changed()

    def play_at(self, index: int) -> Optional[Track]:
        if not self._in_bounds(index):
            return None
        self._current_index = index
        self._changed()
        return self._queue[index]

    def next(self) -> Optional[Track]:
        """Advance according to the repeat and shuffle modes.

        Returns ``None`` for an empty queue, and when the last track has been
        passed with repeat off. In that case the position stays on the last
        track so the caller can pause.
        """
        if not self._queue:
            return None

        if self._repeat_mode is RepeatMode.ONE:
            return self.get_current_track()

        if self._shuffle_mode:
            # Independent draws; the same track may come up twice in a row.
            self._current_index = self._random.randrange(len(self._queue))
        else:
            self._current_index += 1
            if self._current_index >= len(self._queue):
                if self._repeat_mode is RepeatMode.ALL:
                    self._current_index = 0
                else:
                    self._current_index = len(self._queue) - 1
                    return None

        self._changed()
        return self._queue[self._current_index]

    def previous(self) -> Optional[Track]:
        """Step back one track.

        Unlike ``next`` this never reports running out: at the head it wraps
        under repeat all and otherwise stays on the first track.
        """
        if not self._queue:
            return None

        self._current_index -= 1
        if self._current_index < 0:
            if self._repeat_mode is RepeatMode.ALL:
                self._current_index = len(self._queue) - 1
            else:
                self._current_index = 0

        self._changed()
        return self._queue[self._current_index]

    def toggle_shuffle(self) -> bool:
        self._shuffle_mode = not self._shuffle_mode

        if self._shuffle_mode:
            self._original_queue = list(self._queue)
        elif self._original_queue:
            current = self.get_current_track()
            self._queue = list(self._original_queue)
            self._current_index = 0
            if current is not None:
                for position, track in enumerate(self._queue):
                    if track.id == current.id:
                        self._current_index = position
                        break
            self._original_queue = []

        self._changed()
        return self._shuffle_mode

    def cycle_repeat_mode(self) -> RepeatMode:
        position = REPEAT_CYCLE.index(self._repeat_mode)
        self._repeat_mode = REPEAT_CYCLE[(position + 1) % len(REPEAT_CYCLE)]
        self._changed()
        return self._repeat_mode

    def set_repeat_mode(self, mode: Union[RepeatMode, str]) -> bool:
        parsed = RepeatMode.parse(mode)
        if parsed is None:
            return False
        self._repeat_mode = parsed
        self._changed()
        return True

    def get_current_track(self) -> Optional[Track]:
        if self._in_bounds(self._current_index):
            return self._queue[self._current_index]
        return None

    def move_track(self, from_index: int, to_index: int) -> None:
        if not (self._in_bounds(from_index) and self._in_bounds(to_index)):
            return
        moved = self._queue.pop(from_index)
        self._queue.insert(to_index, moved)

        current = self._current_index
        if current == from_index:
            self._current_index = to_index
        elif from_index < current <= to_index:
            self._current_index -= 1
        elif to_index <= current < from_index:
            self._current_index += 1
        self._changed()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "queue": [track.to_dict() for track in self._queue],
            "currentIndex": self._current_index,
            "shuffleMode": self._shuffle_mode,
            "repeatMode": self._repeat_mode.value,
        }

    def _in_bounds(self, index: int) -> bool:
        return 0 <= index < len(self._queue)

    def _changed(self) -> None:
        self._persist()
        for listener in list(self._listeners):
            listener(self)

    def _persist(self) -> None:
        if self._store is None:
            return
        try:
            self._store.set(STATE_KEY, self.to_dict())
        except (OSError, TypeError, ValueError) as exc:
            logger.error(f"Failed to save queue state: {exc}")

    def _restore(self) -> None:
        data = self._store.get(STATE_KEY)
        if not data:
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring saved queue state: expected an object")
            return
        try:
            queue = [Track.from_dict(item) for item in data.get("queue") or []]
        except (AttributeError, TypeError) as exc:
            logger.warning(f"Ignoring saved queue state: {exc}")
            return
        index = data.get("currentIndex", NO_INDEX)
        if isinstance(index, bool) or not isinstance(index, int):
            index = NO_INDEX
        if not 0 <= index < len(queue):
            index = NO_INDEX
        self._queue = queue
        self._current_index = index
        self._shuffle_mode = bool(data.get("shuffleMode", False))
        self._repeat_mode = RepeatMode.parse(data.get("repeatMode")) or RepeatMode.OFF
        logger.debug(f"Restored queue with {len(queue)} tracks")
