"""Application context shared by the API routers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol

from fastapi import Request

from ..storage import FavoritesStore
from ..track import Track


class SearchBackend(Protocol):
    def search(self, query: str, max_results: int = 20) -> List[Track]: ...

    def video_details(self, video_id: str) -> Track: ...


@dataclass
class AppContext:
    extractor: SearchBackend
    favorites: FavoritesStore
    default_search_limit: int = 100


def get_context(request: Request) -> AppContext:
    return request.app.state.context
