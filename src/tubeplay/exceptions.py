"""Error types raised across the player, API server and HTTP clients."""

from __future__ import annotations

from typing import Optional


class TubeplayError(Exception):
    """Base class for all tubeplay failures."""


class SearchError(TubeplayError):
    """The search collaborator could not complete a lookup."""


class FavoritesError(TubeplayError):
    """The favorites file could not be read or written."""


class FavoriteExistsError(FavoritesError):
    def __init__(self, video_id: str) -> None:
        super().__init__("Video already in favorites")
        self.video_id = video_id


class FavoriteNotFoundError(FavoritesError):
    def __init__(self, video_id: str) -> None:
        super().__init__("Video not found in favorites")
        self.video_id = video_id


class ApiError(TubeplayError):
    """Non-success response returned by the tubeplay API server."""

    def __init__(self, status: Optional[int], message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
