"""Top-level exports for the tubeplay music player."""

from .commands import Action, Command
from .config import PlayerDefaults, load_defaults
from .exceptions import (
    ApiError,
    FavoriteExistsError,
    FavoriteNotFoundError,
    FavoritesError,
    SearchError,
    TubeplayError,
)
from .queue import NO_INDEX, QueueController, RepeatMode
from .storage import FavoritesStore, StateStore
from .track import Track

__all__ = [
    "Action",
    "Command",
    "PlayerDefaults",
    "load_defaults",
    "ApiError",
    "FavoriteExistsError",
    "FavoriteNotFoundError",
    "FavoritesError",
    "SearchError",
    "TubeplayError",
    "NO_INDEX",
    "QueueController",
    "RepeatMode",
    "FavoritesStore",
    "StateStore",
    "Track",
]
