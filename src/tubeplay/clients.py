"""HTTP clients the player uses to talk to the tubeplay API server."""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from loguru import logger

from .exceptions import ApiError, FavoriteExistsError, FavoriteNotFoundError
from .track import Track

DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class DownloadInfo:
    video_id: str
    youtube_url: str
    message: str = ""
    suggestions: List[dict] = field(default_factory=list)


class ApiClient:
    """Thin wrapper over ``requests`` that unwraps ``{success, ...}`` payloads."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error(f"{method} {path} failed: {exc}")
            raise ApiError(None, f"Unable to reach the tubeplay server: {exc}") from exc
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        if not response.ok:
            message = payload.get("error") or f"Request failed with HTTP {response.status_code}"
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise ApiError(response.status_code, message)
        return payload

    def search(self, query: str, max_results: int = 100) -> List[Track]:
        payload = self._request(
            "GET", "/api/search", params={"q": query, "max": max_results}
        )
        return [Track.from_dict(item) for item in payload.get("data") or []]

    def list_favorites(self) -> List[dict]:
        payload = self._request("GET", "/api/favorites")
        return list(payload.get("data") or [])

    def add_favorite(self, track: Track) -> dict:
        body = {
            "id": track.id,
            "title": track.title,
            "thumbnail": track.thumbnail,
            "channel": track.channel,
        }
        payload = self._request("POST", "/api/favorites", json=body)
        return payload.get("data") or body

    def remove_favorite(self, video_id: str) -> None:
        self._request("DELETE", f"/api/favorites/{video_id}")

    def download_info(self, video_id: str) -> DownloadInfo:
        payload = self._request("GET", f"/api/download/{video_id}")
        return DownloadInfo(
            video_id=payload.get("videoId", video_id),
            youtube_url=payload.get("youtubeUrl", ""),
            message=payload.get("message", ""),
            suggestions=list(payload.get("suggestions") or []),
        )

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")


class SearchClient:
    """Caches the latest search results and pages through them locally.

    Each request takes a ticket from ``begin``; ``accept`` only stores results
    for the newest ticket, so a slow earlier search cannot overwrite a later
    one.
    """

    def __init__(self, api: ApiClient, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.api = api
        self.page_size = max(1, page_size)
        self.results: List[Track] = []
        self.current_page = 1
        self._tickets = itertools.count(1)
        self._latest_ticket = 0

    def fetch(self, query: str, max_results: int = 100) -> List[Track]:
        if not query or not query.strip():
            raise ValueError("Search query cannot be empty")
        return self.api.search(query.strip(), max_results)

    def begin(self) -> int:
        self._latest_ticket = next(self._tickets)
        return self._latest_ticket

    def is_latest(self, ticket: int) -> bool:
        return ticket == self._latest_ticket

    def accept(self, ticket: int, tracks: List[Track]) -> bool:
        if not self.is_latest(ticket):
            logger.info(f"Discarding stale search results (ticket {ticket}, latest {self._latest_ticket})")
            return False
        self.results = list(tracks)
        self.current_page = 1
        return True

    def perform_search(self, query: str, max_results: int = 100) -> List[Track]:
        ticket = self.begin()
        tracks = self.fetch(query, max_results)
        self.accept(ticket, tracks)
        return self.results

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self.results) / self.page_size)

    def page_results(self) -> List[Track]:
        start = (self.current_page - 1) * self.page_size
        return self.results[start : start + self.page_size]

    def go_to_page(self, page: int) -> bool:
        if 1 <= page <= self.total_pages:
            self.current_page = page
            return True
        return False

    def next_page(self) -> bool:
        return self.go_to_page(self.current_page + 1)

    def previous_page(self) -> bool:
        return self.go_to_page(self.current_page - 1)

    def get_by_id(self, video_id: str) -> Optional[Track]:
        for track in self.results:
            if track.id == video_id:
                return track
        return None


class FavoritesClient:
    """Local mirror of the server's favorites for quick membership checks."""

    def __init__(self, api: ApiClient) -> None:
        self.api = api
        self.favorites: List[Track] = []

    def load(self) -> List[Track]:
        self.favorites = [Track.from_dict(item) for item in self.api.list_favorites()]
        return self.favorites

    def add(self, track: Track) -> Track:
        try:
            stored = self.api.add_favorite(track)
        except ApiError as exc:
            if exc.status == 409:
                raise FavoriteExistsError(track.id) from exc
            raise
        favorite = Track.from_dict(stored)
        self.favorites.append(favorite)
        return favorite

    def remove(self, video_id: str) -> None:
        try:
            self.api.remove_favorite(video_id)
        except ApiError as exc:
            if exc.status == 404:
                raise FavoriteNotFoundError(video_id) from exc
            raise
        self.favorites = [track for track in self.favorites if track.id != video_id]

    def is_favorite(self, video_id: str) -> bool:
        return any(track.id == video_id for track in self.favorites)

    def toggle(self, track: Track) -> bool:
        """Add ``track`` when absent from the cache, otherwise remove it.

        Returns:
            True when the track is a favorite afterwards.
        """
        if self.is_favorite(track.id):
            self.remove(track.id)
            return False
        self.add(track)
        return True

    def get_by_id(self, video_id: str) -> Optional[Track]:
        for track in self.favorites:
            if track.id == video_id:
                return track
        return None
