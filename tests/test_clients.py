import pytest
import requests

from tubeplay.clients import ApiClient, FavoritesClient, SearchClient
from tubeplay.exceptions import ApiError, FavoriteExistsError, FavoriteNotFoundError
from tubeplay.track import Track


class FakeResponse:
    def __init__(self, status_code: int, payload):
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _tracks(count: int):
    return [{"id": f"v{i}", "title": f"Track {i}", "channel": "C"} for i in range(count)]


def _api(*responses) -> ApiClient:
    return ApiClient("http://server:3000/", session=FakeSession(*responses))


def test_api_search_sends_params() -> None:
    api = _api(FakeResponse(200, {"success": True, "data": _tracks(2), "count": 2}))
    tracks = api.search("lofi", 50)
    assert [track.id for track in tracks] == ["v0", "v1"]
    method, url, kwargs = api.session.calls[0]
    assert (method, url) == ("GET", "http://server:3000/api/search")
    assert kwargs["params"] == {"q": "lofi", "max": 50}


def test_api_error_carries_status_and_message() -> None:
    api = _api(FakeResponse(500, {"success": False, "error": "Failed to search videos: boom"}))
    with pytest.raises(ApiError) as excinfo:
        api.search("x")
    assert excinfo.value.status == 500
    assert excinfo.value.message == "Failed to search videos: boom"


def test_api_error_without_json_body() -> None:
    api = _api(FakeResponse(502, ValueError("no json")))
    with pytest.raises(ApiError) as excinfo:
        api.health()
    assert excinfo.value.status == 502
    assert "502" in excinfo.value.message


def test_api_connection_failure() -> None:
    api = _api(requests.ConnectionError("refused"))
    with pytest.raises(ApiError) as excinfo:
        api.list_favorites()
    assert excinfo.value.status is None


def test_api_download_info() -> None:
    payload = {
        "success": True,
        "videoId": "abc",
        "youtubeUrl": "https://www.youtube.com/watch?v=abc",
        "message": "Use external tools to download",
        "suggestions": [{"name": "yt-dlp", "url": "https://github.com/yt-dlp/yt-dlp"}],
    }
    info = _api(FakeResponse(200, payload)).download_info("abc")
    assert info.youtube_url.endswith("abc")
    assert info.suggestions[0]["name"] == "yt-dlp"


def test_search_client_rejects_blank_query_before_network() -> None:
    session = FakeSession()
    client = SearchClient(ApiClient("http://server", session=session))
    with pytest.raises(ValueError):
        client.perform_search("  ")
    assert session.calls == []


def test_search_client_pagination() -> None:
    api = _api(FakeResponse(200, {"success": True, "data": _tracks(45)}))
    client = SearchClient(api, page_size=20)
    client.perform_search("rock")

    assert client.total_pages == 3
    assert [track.id for track in client.page_results()][:2] == ["v0", "v1"]
    assert client.next_page() is True
    assert client.page_results()[0].id == "v20"
    assert client.go_to_page(3) is True
    assert len(client.page_results()) == 5
    assert client.next_page() is False
    assert client.current_page == 3
    assert client.go_to_page(0) is False
    assert client.previous_page() is True
    assert client.current_page == 2
    assert client.get_by_id("v44").title == "Track 44"
    assert client.get_by_id("nope") is None


def test_search_client_empty_results_have_no_pages() -> None:
    client = SearchClient(_api(FakeResponse(200, {"success": True, "data": []})))
    client.perform_search("silence")
    assert client.total_pages == 0
    assert client.page_results() == []
    assert client.next_page() is False


def test_stale_search_completion_is_discarded() -> None:
    client = SearchClient(ApiClient("http://server", session=FakeSession()))
    older = client.begin()
    newer = client.begin()
    fresh = [Track(id="new", title="New")]
    assert client.accept(newer, fresh) is True
    client.go_to_page(1)
    assert client.accept(older, [Track(id="old", title="Old")]) is False
    assert [track.id for track in client.results] == ["new"]


def test_accept_resets_to_first_page() -> None:
    client = SearchClient(ApiClient("http://server", session=FakeSession()), page_size=1)
    client.accept(client.begin(), [Track(id="a", title="A"), Track(id="b", title="B")])
    client.next_page()
    client.accept(client.begin(), [Track(id="c", title="C"), Track(id="d", title="D")])
    assert client.current_page == 1


def test_favorites_toggle_adds_then_removes() -> None:
    stored = {"id": "abc", "title": "Song", "thumbnail": None, "channel": "C", "addedAt": "2024-01-01T00:00:00.000Z"}
    api = _api(
        FakeResponse(200, {"success": True, "data": stored}),
        FakeResponse(200, {"success": True, "message": "Video removed from favorites"}),
    )
    client = FavoritesClient(api)
    track = Track(id="abc", title="Song", channel="C")

    assert client.toggle(track) is True
    assert client.is_favorite("abc")
    assert client.get_by_id("abc").title == "Song"
    assert client.toggle(track) is False
    assert client.favorites == []
    assert [call[0] for call in api.session.calls] == ["POST", "DELETE"]


def test_favorites_load_replaces_cache() -> None:
    api = _api(FakeResponse(200, {"success": True, "data": _tracks(2), "count": 2}))
    client = FavoritesClient(api)
    client.favorites = [Track(id="stale", title="Stale")]
    client.load()
    assert [track.id for track in client.favorites] == ["v0", "v1"]


def test_favorites_add_conflict() -> None:
    api = _api(FakeResponse(409, {"success": False, "error": "Video already in favorites"}))
    client = FavoritesClient(api)
    with pytest.raises(FavoriteExistsError):
        client.add(Track(id="abc", title="Song"))
    assert client.favorites == []


def test_favorites_remove_missing() -> None:
    api = _api(FakeResponse(404, {"success": False, "error": "Video not found in favorites"}))
    client = FavoritesClient(api)
    client.favorites = [Track(id="abc", title="Song")]
    with pytest.raises(FavoriteNotFoundError):
        client.remove("abc")
    assert client.is_favorite("abc")
