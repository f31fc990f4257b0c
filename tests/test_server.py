import pytest
from fastapi.testclient import TestClient

from songsync.config import Settings
from songsync.server import create_app

START = "startLivePage"
QUIT = {"event": "quitSession", "data": None}


@pytest.fixture
def client(songs_dir):
    with TestClient(create_app(Settings(songs_dir=songs_dir))) as test_client:
        yield test_client


# ---------------------------------------------------------------------------
# GET /songs
# ---------------------------------------------------------------------------


def test_list_songs(client):
    resp = client.get("/songs", params={"name": "grace"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["searchTerm"] == "grace"
    assert body["count"] == 2
    assert body["songs"][0] == {
        "songName": "amazing grace",
        "artist": "John Newton",
        "image": "https://example.com/amazing-grace.jpg",
    }


def test_list_songs_no_match(client):
    body = client.get("/songs", params={"name": "stairway"}).json()
    assert body["count"] == 0
    assert body["songs"] == []


def test_list_songs_requires_name(client):
    resp = client.get("/songs")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Song name parameter is required"}


def test_list_songs_empty_name(client):
    assert client.get("/songs", params={"name": ""}).status_code == 400


def test_list_songs_missing_directory(tmp_path):
    app = create_app(Settings(songs_dir=tmp_path / "missing"))
    with TestClient(app) as client:
        resp = client.get("/songs", params={"name": "x"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to read songs"}


# ---------------------------------------------------------------------------
# GET /song
# ---------------------------------------------------------------------------


def test_get_song(client):
    resp = client.get("/song", params={"name": "Amazing Grace"})
    assert resp.status_code == 200
    song = resp.json()["song"]
    assert song["songName"] == "amazing_grace"
    assert len(song["lyrics"]) == len(song["chords"]) == 4


def test_get_song_not_found(client):
    resp = client.get("/song", params={"name": "amazing"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Song not found"}


def test_get_song_malformed_document(client):
    resp = client.get("/song", params={"name": "broken_grace"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch song"}


def test_get_song_requires_name(client):
    assert client.get("/song").status_code == 400


def test_get_song_does_not_go_live(client):
    client.get("/song", params={"name": "wonderwall"})
    assert client.get("/current-song").json() == {"song": None}
    assert client.app.state.session.state.last_fetched()["songName"] == "wonderwall"


def test_get_song_goes_live_when_configured(songs_dir):
    app = create_app(Settings(songs_dir=songs_dir, fetch_marks_live=True))
    with TestClient(app) as client:
        client.get("/song", params={"name": "wonderwall"})
        live = client.get("/current-song").json()["song"]
    assert live["songName"] == "wonderwall"


# ---------------------------------------------------------------------------
# GET /current-song, /health
# ---------------------------------------------------------------------------


def test_current_song_idle_is_not_an_error(client):
    resp = client.get("/current-song")
    assert resp.status_code == 200
    assert resp.json() == {"song": None}


def test_health(client, songs_dir):
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["songsDir"] == str(songs_dir)
    assert body["live"] is False


# ---------------------------------------------------------------------------
# WS /ws
# ---------------------------------------------------------------------------


def test_go_live_and_quit_over_websocket(client):
    with client.websocket_connect("/ws") as a, client.websocket_connect(
        "/ws"
    ) as b, client.websocket_connect("/ws") as c:
        a.send_json({"event": START, "data": {"title": "X"}})
        assert b.receive_json() == {"event": START, "data": {"title": "X"}}
        assert c.receive_json() == {"event": START, "data": {"title": "X"}}

        # A late joiner pulls the live song
        assert client.get("/current-song").json() == {"song": {"title": "X"}}

        a.send_json({"event": "quitSession"})
        # The first message the sender ever receives is its own quit
        assert a.receive_json() == QUIT
        assert b.receive_json() == QUIT
        assert c.receive_json() == QUIT

    assert client.get("/current-song").json() == {"song": None}


def test_malformed_and_unknown_messages_are_ignored(client):
    with client.websocket_connect("/ws") as a, client.websocket_connect("/ws") as b:
        a.send_text("not json")
        a.send_json({"no": "event"})
        a.send_json({"event": "danceParty"})
        a.send_json({"event": START, "data": {"title": "Y"}})
        assert b.receive_json() == {"event": START, "data": {"title": "Y"}}


def test_open_socket_is_registered(client):
    with client.websocket_connect("/ws") as a:
        a.send_json({"event": "quitSession"})
        assert a.receive_json() == QUIT
        assert len(client.app.state.session.registry) == 1


def test_binary_frame_is_ignored_and_socket_stays_open(client):
    with client.websocket_connect("/ws") as a, client.websocket_connect("/ws") as b:
        a.send_bytes(b"\x00\x01")
        a.send_json({"event": START, "data": {"title": "Z"}})
        assert b.receive_json() == {"event": START, "data": {"title": "Z"}}
