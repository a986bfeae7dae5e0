"""YouTube lookups through ``yt_dlp``: search, single-video details, stream URLs."""

from __future__ import annotations

import os
import shutil
from typing import Iterable, List, Optional

import yt_dlp
from loguru import logger
from yt_dlp.utils import DownloadError

from .exceptions import SearchError
from .track import Track, format_duration, watch_url

SEARCH_PREFIX = "ytsearch"
STREAM_FORMAT = "bestaudio/best"


class YouTubeExtractor:
    """Search collaborator used by the API server and the media widget."""

    def __init__(
        self,
        *,
        js_runtime: Optional[str] = None,
        remote_components: Optional[List[str]] = None,
    ) -> None:
        self.js_runtime = js_runtime
        self.remote_components = list(remote_components or [])

    def search(self, query: str, max_results: int = 20) -> List[Track]:
        """
        Search YouTube and return at most ``max_results`` tracks.

        Raises:
            ValueError: If ``query`` is empty.
            SearchError: When ``yt_dlp`` cannot complete the search.
        """
        if not query or not query.strip():
            raise ValueError("Search query cannot be empty")
        search_term = f"{SEARCH_PREFIX}{max_results}:{query.strip()}"
        opts = self._options(extract_flat="in_playlist")
        try:
            with yt_dlp.YoutubeDL(opts) as ydl:
                raw_result = ydl.extract_info(search_term, download=False)
        except DownloadError as exc:
            logger.error(f"Search for {query!r} failed: {exc}")
            raise SearchError(f"Failed to search videos: {exc}") from exc

        entries = _unwrap_entries(raw_result)
        tracks = [_entry_to_track(entry) for entry in entries if entry.get("id")]
        logger.debug(f"Search for {query!r} returned {len(tracks)} tracks")
        return tracks[:max_results]

    def video_details(self, video_id: str) -> Track:
        if not video_id or not video_id.strip():
            raise ValueError("Video ID cannot be empty")
        try:
            with yt_dlp.YoutubeDL(self._options()) as ydl:
                info = ydl.extract_info(watch_url(video_id.strip()), download=False)
        except DownloadError as exc:
            logger.error(f"Video lookup for {video_id} failed: {exc}")
            raise SearchError(f"Failed to get video details: {exc}") from exc
        if not info:
            raise SearchError(f"Failed to get video details: no data for {video_id}")
        return _entry_to_track(info)

    def stream_url(self, video_id: str) -> str:
        """Resolve a direct media URL the local player can open."""
        opts = self._options(format=STREAM_FORMAT)
        try:
            with yt_dlp.YoutubeDL(opts) as ydl:
                info = ydl.extract_info(watch_url(video_id), download=False)
        except DownloadError as exc:
            raise SearchError(f"Failed to resolve stream: {exc}") from exc
        info = info or {}
        if info.get("url"):
            return info["url"]
        for candidate in reversed(info.get("requested_formats") or info.get("formats") or []):
            if candidate.get("url") and candidate.get("acodec") not in (None, "none"):
                return candidate["url"]
        raise SearchError(f"No stream URL available for {video_id}")

    def _options(self, **extra) -> dict:
        opts = {
            "noplaylist": True,
            "skip_download": True,
            "quiet": True,
            "no_warnings": True,
            "cachedir": False,
        }
        opts.update(extra)
        if self.js_runtime:
            entry = _js_runtime_entry(self.js_runtime)
            opts["js_runtime"] = entry["name"]
            entry_config = {"path": entry["path"]} if entry.get("path") else {}
            opts["js_runtimes"] = {entry["name"]: entry_config}
        if self.remote_components:
            opts["remote_components"] = self.remote_components
        return opts


def _unwrap_entries(raw_result: Optional[dict]) -> Iterable[dict]:
    """Normalize the search payload into a list of dictionaries."""
    if not raw_result:
        return []
    entries = raw_result.get("entries") or []
    return [entry for entry in entries if isinstance(entry, dict)]


def _entry_to_track(entry: dict) -> Track:
    video_id = entry.get("id", "")
    seconds = entry.get("duration")
    if seconds is not None:
        seconds = int(seconds)
    webpage_url = entry.get("webpage_url") or entry.get("url")
    if not webpage_url or not str(webpage_url).startswith("http"):
        webpage_url = watch_url(video_id)
    return Track(
        id=video_id,
        title=entry.get("title", ""),
        channel=entry.get("channel") or entry.get("uploader") or "unknown",
        thumbnail=entry.get("thumbnail")
        or _select_thumbnail(entry.get("thumbnails"))
        or f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg",
        channel_url=entry.get("channel_url") or entry.get("uploader_url"),
        duration=format_duration(seconds),
        duration_seconds=seconds,
        views=entry.get("view_count"),
        url=webpage_url,
        description=entry.get("description"),
    )


def _select_thumbnail(thumbnails: Optional[List[dict]]) -> Optional[str]:
    if not thumbnails:
        return None
    for candidate in reversed(thumbnails):
        if candidate.get("url"):
            return candidate["url"]
    return None


def _js_runtime_entry(runtime: str) -> dict:
    name = os.path.splitext(os.path.basename(runtime))[0]
    entry = {"name": name}
    if os.path.isabs(runtime):
        entry["path"] = runtime
    else:
        lookup = shutil.which(runtime)
        if lookup:
            entry["path"] = lookup
    return entry
