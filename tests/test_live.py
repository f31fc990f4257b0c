import asyncio

import pytest

from songsync.events import Connected, Disconnected, Fetched, GoLive, Quit
from songsync.live import LiveSession


class FakeConnection:
    def __init__(self, connection_id: str):
        self.id = connection_id
        self.received: list[dict] = []

    def deliver(self, message: dict) -> bool:
        self.received.append(message)
        return True

    def close(self) -> None:
        pass


def _session(*ids: str) -> tuple[LiveSession, dict[str, FakeConnection]]:
    session = LiveSession()
    connections = {i: FakeConnection(i) for i in ids}
    for connection in connections.values():
        session.handle(Connected(connection))
    return session, connections


# ---------------------------------------------------------------------------
# handle
# ---------------------------------------------------------------------------


def test_go_live_reaches_everyone_but_the_sender():
    session, conns = _session("a", "b", "c")
    session.handle(GoLive("a", {"title": "X"}))
    assert conns["a"].received == []
    assert conns["b"].received == [{"event": "startLivePage", "data": {"title": "X"}}]
    assert conns["c"].received == [{"event": "startLivePage", "data": {"title": "X"}}]


def test_go_live_is_visible_to_late_joiners():
    session, _ = _session("a", "b", "c")
    session.handle(GoLive("a", {"title": "X"}))
    late = FakeConnection("d")
    session.handle(Connected(late))
    assert late.received == []
    assert session.state.get_live() == {"title": "X"}


def test_quit_clears_state_and_reaches_the_sender():
    session, conns = _session("a", "b", "c")
    session.handle(GoLive("a", {"title": "X"}))
    session.handle(Quit("a"))
    assert session.state.get_live() is None
    for connection in conns.values():
        assert connection.received[-1] == {"event": "quitSession", "data": None}


def test_quit_when_idle_still_broadcasts():
    session, conns = _session("a")
    session.handle(Quit("a"))
    assert conns["a"].received == [{"event": "quitSession", "data": None}]


def test_later_go_live_wins():
    session, conns = _session("a", "b", "c")
    session.handle(GoLive("a", {"title": "X"}))
    session.handle(GoLive("b", {"title": "Y"}))
    assert session.state.get_live() == {"title": "Y"}
    assert conns["c"].received[-1]["data"] == {"title": "Y"}


def test_disconnected_client_receives_nothing():
    session, conns = _session("a", "b")
    session.handle(Disconnected("b"))
    session.handle(GoLive("a", {"title": "X"}))
    assert conns["b"].received == []
    assert len(session.registry) == 1


def test_unknown_event_rejected():
    session = LiveSession()
    with pytest.raises(TypeError):
        session.handle("startLivePage")


# ---------------------------------------------------------------------------
# run loop
# ---------------------------------------------------------------------------


def test_events_processed_in_submission_order():
    async def scenario():
        session = LiveSession()
        a, b = FakeConnection("a"), FakeConnection("b")
        await session.start()
        await session.submit(Connected(a))
        await session.submit(Connected(b))
        await session.submit(GoLive("a", {"title": "X"}))
        await session.submit(Quit("b"))
        await session.drain()
        await session.stop()
        return session, a, b

    session, a, b = asyncio.run(scenario())
    assert [m["event"] for m in a.received] == ["quitSession"]
    assert [m["event"] for m in b.received] == ["startLivePage", "quitSession"]
    assert session.state.get_live() is None


def test_run_loop_survives_a_bad_event():
    async def scenario():
        session = LiveSession()
        await session.start()
        await session.submit("garbage")
        await session.submit(GoLive("a", {"title": "X"}))
        await session.drain()
        await session.stop()
        return session

    session = asyncio.run(scenario())
    assert session.state.get_live() == {"title": "X"}


def test_stop_without_start_is_harmless():
    asyncio.run(LiveSession().stop())


# ---------------------------------------------------------------------------
# Fetched
# ---------------------------------------------------------------------------


def test_fetched_song_is_remembered_but_not_live():
    session = LiveSession()
    session.handle(Fetched({"songName": "wonderwall"}))
    assert session.state.last_fetched() == {"songName": "wonderwall"}
    assert session.state.get_live() is None


def test_fetched_song_marked_live():
    session = LiveSession()
    session.handle(Fetched({"songName": "wonderwall"}, mark_live=True))
    assert session.state.get_live() == {"songName": "wonderwall"}


def test_fetch_queued_after_go_live_wins():
    async def scenario():
        session = LiveSession()
        # Both events are queued before the actor runs; arrival order decides
        await session.submit(GoLive("a", {"title": "X"}))
        await session.submit(Fetched({"songName": "wonderwall"}, mark_live=True))
        await session.start()
        await session.drain()
        await session.stop()
        return session

    session = asyncio.run(scenario())
    assert session.state.get_live() == {"songName": "wonderwall"}


def test_go_live_queued_after_fetch_wins():
    async def scenario():
        session = LiveSession()
        await session.submit(Fetched({"songName": "wonderwall"}, mark_live=True))
        await session.submit(GoLive("a", {"title": "X"}))
        await session.start()
        await session.drain()
        await session.stop()
        return session

    session = asyncio.run(scenario())
    assert session.state.get_live() == {"title": "X"}
