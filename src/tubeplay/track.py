"""The track record shared by the queue, search results and favorites."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

_WIRE_KEYS = {
    "channel_url": "channelUrl",
    "duration_seconds": "durationSeconds",
}


@dataclass(frozen=True)
class Track:
    """A playable YouTube video."""

    id: str
    title: str
    channel: str = ""
    thumbnail: Optional[str] = None
    channel_url: Optional[str] = None
    duration: Optional[str] = None
    duration_seconds: Optional[int] = None
    views: Optional[int] = None
    url: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase keys the HTTP API speaks."""
        payload: Dict[str, Any] = {}
        for name, value in self.__dict__.items():
            payload[_WIRE_KEYS.get(name, name)] = value
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Track":
        def pick(name: str):
            wire = _WIRE_KEYS.get(name)
            if wire and wire in data:
                return data[wire]
            return data.get(name)

        return cls(
            id=str(data.get("id") or ""),
            title=data.get("title") or "",
            channel=data.get("channel") or "",
            thumbnail=data.get("thumbnail"),
            channel_url=pick("channel_url"),
            duration=data.get("duration"),
            duration_seconds=pick("duration_seconds"),
            views=data.get("views"),
            url=data.get("url"),
            description=data.get("description"),
        )


def format_duration(seconds: Optional[int]) -> Optional[str]:
    if seconds is None:
        return None
    seconds = int(seconds)
    hours, remainder = divmod(seconds, 3600)
    mins, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{mins:02}:{secs:02}"
    return f"{mins}:{secs:02}"


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"
