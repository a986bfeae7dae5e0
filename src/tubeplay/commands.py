"""User actions the view layer sends to the player session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .track import Track


class Action(Enum):
    SEARCH = auto()
    PLAY_TRACK = auto()
    ADD_TO_QUEUE = auto()
    TOGGLE_FAVORITE = auto()
    FAVORITE_CURRENT = auto()
    DOWNLOAD = auto()
    DOWNLOAD_CURRENT = auto()
    PLAY_FROM_QUEUE = auto()
    REMOVE_FROM_QUEUE = auto()
    MOVE_IN_QUEUE = auto()
    CLEAR_QUEUE = auto()
    NEXT = auto()
    PREVIOUS = auto()
    TOGGLE_PLAY = auto()
    TOGGLE_SHUFFLE = auto()
    CYCLE_REPEAT = auto()
    SEEK = auto()
    SET_VOLUME = auto()
    TOGGLE_MUTE = auto()


@dataclass(frozen=True)
class Command:
    action: Action
    track: Optional[Track] = None
    index: Optional[int] = None
    to_index: Optional[int] = None
    query: Optional[str] = None
    value: Optional[float] = None
