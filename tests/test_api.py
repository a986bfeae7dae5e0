import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tubeplay.api import AppContext, create_app
from tubeplay.exceptions import SearchError
from tubeplay.storage import FavoritesStore
from tubeplay.track import Track


class FakeExtractor:
    def __init__(self, error: Exception = None):
        self.error = error
        self.calls = []

    def search(self, query, max_results=20):
        self.calls.append((query, max_results))
        if self.error is not None:
            raise self.error
        return [
            Track(id=f"vid{i}", title=f"{query} {i}", channel="Chan", duration_seconds=60)
            for i in range(min(max_results, 3))
        ]

    def video_details(self, video_id):
        if self.error is not None:
            raise self.error
        return Track(id=video_id, title="Details", channel="Chan", channel_url="https://youtube.com/c/chan")


@pytest.fixture
def favorites_path(tmp_path: Path) -> Path:
    return tmp_path / "favorites.json"


def _client(favorites_path: Path, extractor=None) -> TestClient:
    context = AppContext(
        extractor=extractor or FakeExtractor(),
        favorites=FavoritesStore(favorites_path),
    )
    return TestClient(create_app(context, allowed_origins=["*"]))


def test_search_returns_tracks(favorites_path: Path) -> None:
    extractor = FakeExtractor()
    client = _client(favorites_path, extractor)
    response = client.get("/api/search", params={"q": "lofi", "max": "2"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert body["data"][0]["durationSeconds"] == 60
    assert extractor.calls == [("lofi", 2)]


def test_search_defaults_to_limit(favorites_path: Path) -> None:
    extractor = FakeExtractor()
    _client(favorites_path, extractor).get("/api/search", params={"q": "jazz"})
    assert extractor.calls == [("jazz", 100)]


@pytest.mark.parametrize("params", [{}, {"q": "   "}])
def test_search_requires_query(favorites_path: Path, params) -> None:
    response = _client(favorites_path).get("/api/search", params=params)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": 'Query parameter "q" is required'}


@pytest.mark.parametrize("value", ["0", "101", "ten", "-5", "", "abc10"])
def test_search_rejects_invalid_max(favorites_path: Path, value: str) -> None:
    response = _client(favorites_path).get("/api/search", params={"q": "x", "max": value})
    assert response.status_code == 400
    assert response.json()["error"] == 'Parameter "max" must be between 1 and 100'


@pytest.mark.parametrize("value, expected", [("10abc", 10), ("5.5", 5), (" 7", 7), ("+3", 3)])
def test_search_reads_leading_integer_of_max(favorites_path: Path, value: str, expected: int) -> None:
    extractor = FakeExtractor()
    response = _client(favorites_path, extractor).get("/api/search", params={"q": "x", "max": value})
    assert response.status_code == 200
    assert extractor.calls == [("x", expected)]


def test_search_surfaces_upstream_message(favorites_path: Path) -> None:
    client = _client(favorites_path, FakeExtractor(SearchError("Failed to search videos: boom")))
    response = client.get("/api/search", params={"q": "x"})
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to search videos: boom"}


def test_video_details(favorites_path: Path) -> None:
    response = _client(favorites_path).get("/api/video/abc123")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == "abc123"
    assert data["channelUrl"] == "https://youtube.com/c/chan"


def test_video_details_failure(favorites_path: Path) -> None:
    client = _client(favorites_path, FakeExtractor(SearchError("Failed to get video details: gone")))
    response = client.get("/api/video/abc123")
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to get video details: gone"


def test_favorites_lifecycle(favorites_path: Path) -> None:
    client = _client(favorites_path)
    assert client.get("/api/favorites").json() == {"success": True, "data": [], "count": 0}

    created = client.post(
        "/api/favorites",
        json={"id": "abc123", "title": "Song", "thumbnail": None, "channel": "Chan"},
    )
    assert created.status_code == 200
    assert created.json()["data"]["addedAt"].endswith("Z")

    listed = client.get("/api/favorites").json()
    assert listed["count"] == 1
    assert listed["data"][0]["id"] == "abc123"

    removed = client.delete("/api/favorites/abc123")
    assert removed.json() == {"success": True, "message": "Video removed from favorites"}
    assert client.get("/api/favorites").json()["count"] == 0


def test_duplicate_favorite_returns_409_and_keeps_list(favorites_path: Path) -> None:
    client = _client(favorites_path)
    client.post("/api/favorites", json={"id": "abc123", "title": "Song"})
    before = json.loads(favorites_path.read_text(encoding="utf-8"))

    response = client.post("/api/favorites", json={"id": "abc123", "title": "Song"})

    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "Video already in favorites"}
    assert json.loads(favorites_path.read_text(encoding="utf-8")) == before
    assert len(before) == 1


@pytest.mark.parametrize("body", [{"title": "Song"}, {"id": "abc123"}, {"id": "", "title": ""}])
def test_add_favorite_requires_id_and_title(favorites_path: Path, body) -> None:
    response = _client(favorites_path).post("/api/favorites", json=body)
    assert response.status_code == 400
    assert response.json()["error"] == "Video ID and title are required"


def test_add_favorite_rejects_malformed_body(favorites_path: Path) -> None:
    response = _client(favorites_path).post("/api/favorites", content="not json")
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_remove_unknown_favorite(favorites_path: Path) -> None:
    response = _client(favorites_path).delete("/api/favorites/missing")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Video not found in favorites"}


def test_corrupt_favorites_file(favorites_path: Path) -> None:
    favorites_path.write_text("{broken", encoding="utf-8")
    response = _client(favorites_path).get("/api/favorites")
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to read favorites"


@pytest.mark.parametrize(
    "method, path, kwargs, error",
    [
        ("post", "/api/favorites", {"json": {"id": "b", "title": "B"}}, "Failed to add favorite"),
        ("delete", "/api/favorites/a", {}, "Failed to remove favorite"),
        ("get", "/api/favorites", {}, "Failed to read favorites"),
    ],
)
def test_favorites_file_with_non_object_entry(favorites_path: Path, method, path, kwargs, error) -> None:
    favorites_path.write_text(json.dumps(["junk", {"id": "a", "title": "A"}]), encoding="utf-8")
    response = getattr(_client(favorites_path), method)(path, **kwargs)
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": error}
    assert json.loads(favorites_path.read_text(encoding="utf-8"))[0] == "junk"


def test_download_info(favorites_path: Path) -> None:
    response = _client(favorites_path).get("/api/download/abc123")
    body = response.json()
    assert response.status_code == 200
    assert body["videoId"] == "abc123"
    assert body["youtubeUrl"] == "https://www.youtube.com/watch?v=abc123"
    assert body["message"] == "Use external tools to download"
    assert body["suggestions"][-1]["link"] == body["youtubeUrl"]


def test_download_requires_id(favorites_path: Path) -> None:
    response = _client(favorites_path).get("/api/download/")
    assert response.status_code == 400
    assert response.json()["error"] == "Video ID is required"


def test_health(favorites_path: Path) -> None:
    body = _client(favorites_path).get("/health").json()
    assert body["status"] == "ok"
    assert isinstance(body["timestamp"], int)
    assert body["timestamp"] > 1_600_000_000_000


def test_cors_header(favorites_path: Path) -> None:
    response = _client(favorites_path).get("/health", headers={"Origin": "http://localhost:5173"})
    assert response.headers["access-control-allow-origin"] == "*"
