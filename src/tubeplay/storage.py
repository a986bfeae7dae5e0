"""File-backed persistence for player state and the favorites list."""

from __future__ import annotations

import datetime
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from .exceptions import FavoriteExistsError, FavoriteNotFoundError, FavoritesError


def _write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


class StateStore:
    """Small key/value document persisted as one JSON object.

    Values are cached in memory; every ``set`` rewrites the whole file. A
    missing or unreadable file starts the store empty.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()
        self._values: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            logger.warning(f"Unable to read player state from {self.path}: {exc}")
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning(f"Ignoring corrupt player state in {self.path}: {exc}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring player state in {self.path}: expected an object")
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` and flush to disk.

        Raises:
            OSError: When the file cannot be written. The in-memory value is
                kept either way.
        """
        self._values[key] = value
        _write_json_atomic(self.path, self._values)


def _utc_timestamp() -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class FavoritesStore:
    """Favorites persisted as a JSON array of ``{id, title, thumbnail, channel, addedAt}``."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def _read(self) -> List[dict]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise FavoritesError("Failed to read favorites") from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise FavoritesError("Failed to read favorites") from exc
        if not isinstance(data, list) or not all(isinstance(entry, dict) for entry in data):
            raise FavoritesError("Failed to read favorites")
        return data

    def _write(self, favorites: List[dict]) -> None:
        try:
            _write_json_atomic(self.path, favorites)
        except OSError as exc:
            raise FavoritesError("Failed to write favorites") from exc

    def list(self) -> List[dict]:
        with self._lock:
            return self._read()

    def add(
        self,
        video_id: str,
        title: str,
        *,
        thumbnail: Optional[str] = None,
        channel: Optional[str] = None,
    ) -> dict:
        with self._lock:
            favorites = self._read()
            if any(entry.get("id") == video_id for entry in favorites):
                raise FavoriteExistsError(video_id)
            entry = {
                "id": video_id,
                "title": title,
                "thumbnail": thumbnail,
                "channel": channel,
                "addedAt": _utc_timestamp(),
            }
            favorites.append(entry)
            self._write(favorites)
        logger.info(f"Added favorite {video_id}")
        return entry

    def remove(self, video_id: str) -> None:
        with self._lock:
            favorites = self._read()
            remaining = [entry for entry in favorites if entry.get("id") != video_id]
            if len(remaining) == len(favorites):
                raise FavoriteNotFoundError(video_id)
            self._write(remaining)
        logger.info(f"Removed favorite {video_id}")
