import socket

import pytest

from tinyreactor.poller import Events, Poller


class FakeChannel:
    def __init__(self, sock, events):
        self.sock = sock
        self.events = events
        self.revents = Events.NONE
        self.in_poller = False

    def fileno(self):
        return self.sock.fileno()


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


@pytest.fixture
def poller():
    p = Poller()
    yield p
    p.close()


def test_update_marks_channel_in_poller(poller, pair):
    ch = FakeChannel(pair[0], Events.IN)
    poller.update_channel(ch)
    assert ch.in_poller is True


def test_poll_reports_readable_channel(poller, pair):
    a, b = pair
    ch = FakeChannel(a, Events.IN | Events.PRI)
    poller.update_channel(ch)
    b.sendall(b"ping")
    active = poller.poll(1.0)
    assert active == [ch]
    assert ch.revents & Events.IN


def test_poll_with_nothing_ready_returns_empty(poller, pair):
    ch = FakeChannel(pair[0], Events.IN)
    poller.update_channel(ch)
    assert poller.poll(0.01) == []


def test_poll_reports_writable_channel(poller, pair):
    ch = FakeChannel(pair[0], Events.OUT)
    poller.update_channel(ch)
    active = poller.poll(1.0)
    assert active == [ch]
    assert ch.revents & Events.OUT
    assert not ch.revents & Events.IN


def test_modify_changes_watched_events(poller, pair):
    a, b = pair
    ch = FakeChannel(a, Events.IN)
    poller.update_channel(ch)
    assert poller.poll(0.01) == []
    ch.events = Events.OUT
    poller.update_channel(ch)
    assert poller.poll(1.0) == [ch]
    assert ch.revents == Events.OUT


def test_channel_without_events_is_not_reported(poller, pair):
    a, b = pair
    ch = FakeChannel(a, Events.IN)
    poller.update_channel(ch)
    ch.events = Events.NONE
    poller.update_channel(ch)
    b.sendall(b"data")
    assert poller.poll(0.05) == []
    assert ch.in_poller is True


def test_remove_channel(poller, pair):
    a, b = pair
    ch = FakeChannel(a, Events.IN)
    poller.update_channel(ch)
    poller.remove_channel(ch)
    b.sendall(b"data")
    assert ch.in_poller is False
    assert poller.poll(0.05) == []


def test_remove_unknown_channel_raises(poller, pair):
    ch = FakeChannel(pair[0], Events.IN)
    with pytest.raises(ValueError):
        poller.remove_channel(ch)


def test_remove_twice_raises(poller, pair):
    ch = FakeChannel(pair[0], Events.IN)
    poller.update_channel(ch)
    poller.remove_channel(ch)
    with pytest.raises(ValueError):
        poller.remove_channel(ch)


def test_closed_poller_rejects_use(pair):
    p = Poller()
    p.close()
    ch = FakeChannel(pair[0], Events.IN)
    with pytest.raises(RuntimeError):
        p.update_channel(ch)
    with pytest.raises(RuntimeError):
        p.poll(0)