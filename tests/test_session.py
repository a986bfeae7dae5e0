from tubeplay.clients import ApiClient, DownloadInfo, FavoritesClient, SearchClient
from tubeplay.commands import Action, Command
from tubeplay.playback import PlaybackAdapter, PlaybackState
from tubeplay.queue import QueueController, RepeatMode
from tubeplay.session import NOT_READY_MESSAGE, VOLUME_KEY, PlayerSession
from tubeplay.track import Track


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self.ok = status_code < 400
        self._payload = payload

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append((method, url))
        return self.responses.pop(0)


class FakeWidget:
    def __init__(self):
        self.calls = []
        self.muted = False

    def load_video(self, video_id):
        self.calls.append(("load", video_id))

    def play(self):
        self.calls.append(("play",))

    def pause(self):
        self.calls.append(("pause",))

    def seek(self, seconds):
        self.calls.append(("seek", seconds))

    def set_volume(self, volume):
        self.calls.append(("volume", volume))

    def mute(self):
        self.muted = True

    def unmute(self):
        self.muted = False

    def is_muted(self):
        return self.muted

    def current_time(self):
        return 0.0

    def duration(self):
        return 200.0


class MemoryStore:
    def __init__(self):
        self.values = {}

    def get(self, key, default=None):
        return self.values.get(key, default)

    def set(self, key, value):
        self.values[key] = value


def _track(video_id: str) -> Track:
    return Track(id=video_id, title=f"Song {video_id}", channel="Tester")


def _session(*responses, ready: bool = True, store=None):
    api = ApiClient("http://server", session=FakeSession(*responses))
    widget = FakeWidget()
    playback = PlaybackAdapter(widget)
    messages = []
    session = PlayerSession(
        queue=QueueController(),
        search=SearchClient(api, page_size=20),
        favorites=FavoritesClient(api),
        playback=playback,
        api=api,
        state_store=store if store is not None else MemoryStore(),
        notify=messages.append,
    )
    if ready:
        playback.mark_ready()
    widget.calls.clear()
    return session, widget, messages


def test_player_actions_wait_for_ready() -> None:
    session, widget, messages = _session(ready=False)
    assert session.dispatch(Command(Action.PLAY_TRACK, track=_track("a"))) is None
    session.dispatch(Command(Action.NEXT))
    assert messages == [NOT_READY_MESSAGE, NOT_READY_MESSAGE]
    assert len(session.queue) == 0
    assert widget.calls == []


def test_play_track_appends_and_starts() -> None:
    session, widget, messages = _session()
    session.dispatch(Command(Action.ADD_TO_QUEUE, track=_track("a")))
    track = session.dispatch(Command(Action.PLAY_TRACK, track=_track("b")))
    assert track.id == "b"
    assert session.queue.current_index == 1
    assert widget.calls == [("load", "b"), ("play",)]
    assert messages == ["Added to queue", "Now playing: Song b"]


def test_next_at_end_pauses_and_notifies() -> None:
    session, widget, messages = _session()
    session.dispatch(Command(Action.PLAY_TRACK, track=_track("a")))
    widget.calls.clear()
    assert session.dispatch(Command(Action.NEXT)) is None
    assert widget.calls == [("pause",)]
    assert messages[-1] == "Reached the end of the queue"


def test_ended_playback_advances_queue() -> None:
    session, widget, _ = _session()
    session.queue.add(_track("a"))
    session.queue.add(_track("b"))
    session.dispatch(Command(Action.PLAY_FROM_QUEUE, index=0))
    widget.calls.clear()
    session.playback.handle_widget_state(PlaybackState.ENDED)
    assert session.queue.current_index == 1
    assert widget.calls == [("load", "b"), ("play",)]


def test_queue_editing_commands() -> None:
    session, _, messages = _session()
    for video_id in ("a", "b", "c"):
        session.queue.add(_track(video_id))
    session.dispatch(Command(Action.MOVE_IN_QUEUE, index=0, to_index=2))
    assert [track.id for track in session.queue.queue] == ["b", "c", "a"]
    session.dispatch(Command(Action.REMOVE_FROM_QUEUE, index=1))
    session.dispatch(Command(Action.CLEAR_QUEUE))
    assert len(session.queue) == 0
    assert messages == ["Removed from queue", "Queue cleared"]


def test_shuffle_and_repeat_notifications() -> None:
    session, _, messages = _session()
    assert session.dispatch(Command(Action.TOGGLE_SHUFFLE)) is True
    assert session.dispatch(Command(Action.CYCLE_REPEAT)) is RepeatMode.ALL
    assert messages == ["Shuffle on", "Repeating all tracks"]


def test_seek_uses_percentage_of_duration() -> None:
    session, widget, _ = _session()
    session.dispatch(Command(Action.SEEK, value=25))
    assert widget.calls == [("seek", 50.0)]


def test_volume_is_saved_and_applied_when_ready() -> None:
    store = MemoryStore()
    session, widget, _ = _session(store=store)
    assert session.dispatch(Command(Action.SET_VOLUME, value=130)) == 100
    assert store.values[VOLUME_KEY] == 100

    store.values[VOLUME_KEY] = 35
    later, later_widget, _ = _session(store=store, ready=False)
    later.playback.mark_ready()
    assert later_widget.calls == [("volume", 35)]


def test_toggle_mute_restores_saved_volume() -> None:
    store = MemoryStore()
    store.values[VOLUME_KEY] = 70
    session, widget, _ = _session(store=store)
    assert session.dispatch(Command(Action.TOGGLE_MUTE)) == 0
    assert widget.muted
    assert session.dispatch(Command(Action.TOGGLE_MUTE)) == 70
    assert not widget.muted


def test_search_with_empty_query() -> None:
    session, _, messages = _session()
    assert session.dispatch(Command(Action.SEARCH, query="  ")) == []
    assert messages == ["Please enter a search term"]


def test_search_stores_results() -> None:
    data = [{"id": "a", "title": "A"}, {"id": "b", "title": "B"}]
    session, _, messages = _session(FakeResponse(200, {"success": True, "data": data, "count": 2}))
    results = session.dispatch(Command(Action.SEARCH, query="lofi"))
    assert [track.id for track in results] == ["a", "b"]
    assert messages == ["Searching...", "Found 2 results"]
    assert session.search.get_by_id("b").title == "B"


def test_search_failure_is_notified() -> None:
    session, _, messages = _session(FakeResponse(500, {"success": False, "error": "Failed to search videos: boom"}))
    assert session.dispatch(Command(Action.SEARCH, query="lofi")) == []
    assert messages[-1] == "Search failed: Failed to search videos: boom"


def test_stale_search_completion_is_ignored() -> None:
    session, _, messages = _session()
    older = session.start_search("first")
    newer = session.start_search("second")
    assert session.finish_search(newer, [_track("new")]) is True
    assert session.finish_search(older, [_track("old")]) is False
    assert [track.id for track in session.search.results] == ["new"]
    assert messages.count("Found 1 results") == 1


def test_stale_search_failure_is_ignored() -> None:
    session, _, messages = _session()
    older = session.start_search("first")
    newer = session.start_search("second")
    assert session.finish_search(newer, [_track("new")]) is True
    assert session.fail_search(older, "timeout") is False
    assert messages[-1] == "Found 1 results"
    assert [track.id for track in session.search.results] == ["new"]


def test_latest_search_failure_is_notified() -> None:
    session, _, messages = _session()
    session.start_search("first")
    latest = session.start_search("second")
    assert session.fail_search(latest, "timeout") is True
    assert messages[-1] == "Search failed: timeout"


def test_toggle_favorite_notifies() -> None:
    stored = {"id": "a", "title": "Song a", "channel": "Tester", "addedAt": "2024-01-01T00:00:00.000Z"}
    session, _, messages = _session(
        FakeResponse(200, {"success": True, "data": stored}),
        FakeResponse(200, {"success": True, "message": "Video removed from favorites"}),
    )
    assert session.dispatch(Command(Action.TOGGLE_FAVORITE, track=_track("a"))) is True
    assert session.dispatch(Command(Action.TOGGLE_FAVORITE, track=_track("a"))) is False
    assert messages == ["Added to favorites", "Removed from favorites"]


def test_toggle_favorite_error_is_surfaced() -> None:
    session, _, messages = _session(FakeResponse(409, {"success": False, "error": "Video already in favorites"}))
    assert session.dispatch(Command(Action.TOGGLE_FAVORITE, track=_track("a"))) is None
    assert messages == ["Video already in favorites"]


def test_favorite_current_without_track() -> None:
    session, _, messages = _session()
    assert session.dispatch(Command(Action.FAVORITE_CURRENT)) is None
    assert messages == []


def test_download_current() -> None:
    payload = {
        "success": True,
        "videoId": "a",
        "youtubeUrl": "https://www.youtube.com/watch?v=a",
        "message": "Use external tools to download",
        "suggestions": [],
    }
    session, _, messages = _session(FakeResponse(200, payload))
    assert session.dispatch(Command(Action.DOWNLOAD_CURRENT)) is None
    assert messages == ["Nothing is playing"]

    session.dispatch(Command(Action.PLAY_TRACK, track=_track("a")))
    info = session.dispatch(Command(Action.DOWNLOAD_CURRENT))
    assert isinstance(info, DownloadInfo)
    assert info.youtube_url == "https://www.youtube.com/watch?v=a"


def test_download_error_is_notified() -> None:
    session, _, messages = _session(FakeResponse(400, {"success": False, "error": "Video ID is required"}))
    assert session.dispatch(Command(Action.DOWNLOAD, track=_track("a"))) is None
    assert messages == ["Error: Video ID is required"]
